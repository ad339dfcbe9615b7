"""
Streamed download of generated videos.
"""
import logging
from pathlib import Path
from typing import Optional

import httpx

from ..exceptions import ProviderError

logger = logging.getLogger(__name__)


def download_video(
    url: str,
    output_path: Path,
    timeout: float = 300.0,
    client: Optional[httpx.Client] = None,
) -> Path:
    """Download ``url`` to ``output_path``; a partial file is removed on failure."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        with http.stream("GET", url) as response:
            response.raise_for_status()
            with open(output_path, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)
    except httpx.HTTPError as e:
        output_path.unlink(missing_ok=True)
        raise ProviderError("download", f"Failed to download video: {e}") from e
    finally:
        if client is None:
            http.close()

    logger.info(f"[VIDEO] Downloaded {output_path.name} ({output_path.stat().st_size} bytes)")
    return output_path
