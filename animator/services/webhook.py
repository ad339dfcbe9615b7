"""
Completion webhooks.
"""
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


def notify_webhook(
    url: Optional[str],
    payload: Dict[str, Any],
    timeout: float = 10.0,
    client: Optional[httpx.Client] = None,
) -> bool:
    """POST the job payload to ``url``. Failures are logged, never raised."""
    if not url:
        return False

    http = client or httpx.Client(timeout=timeout)
    try:
        response = http.post(url, json=payload)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"[WEBHOOK] Notification to {url} failed: {e}")
        return False
    finally:
        if client is None:
            http.close()

    logger.info(f"[WEBHOOK] Notified {url} ({response.status_code})")
    return True
