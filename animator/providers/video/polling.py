"""
Task polling state machine for submit-then-poll video APIs.

    SUBMITTED -> PROCESSING -> SUCCEEDED | FAILED | TIMED_OUT

Clock and sleep are injectable so the loop can be driven in tests without
real delays.
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from ..exceptions import MalformedResponse, ProviderError, ProviderTaskFailed, ProviderTimeout

logger = logging.getLogger(__name__)


class TaskState(str, Enum):
    SUBMITTED = "submitted"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.SUCCEEDED, TaskState.FAILED, TaskState.TIMED_OUT)


@dataclass
class TaskStatus:
    """One observation of a remote task."""
    state: TaskState
    result_url: Optional[str] = None
    failure_reason: Optional[str] = None


class TaskPoller:
    """
    Drives a remote task to a terminal state.

    Every poll call counts against ``max_attempts``. Poll errors (network,
    non-zero API codes) are retried separately, at most ``max_poll_errors``
    times in a row, with backoff ``min(interval * 1.5**errors, error_backoff_cap)``.
    """

    def __init__(
        self,
        provider: str,
        interval: float = 10.0,
        max_attempts: int = 60,
        max_poll_errors: int = 5,
        error_backoff_cap: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.interval = interval
        self.max_attempts = max_attempts
        self.max_poll_errors = max_poll_errors
        self.error_backoff_cap = error_backoff_cap
        self._sleep = sleep
        self._clock = clock

        self.state = TaskState.SUBMITTED
        self.history: List[TaskState] = [TaskState.SUBMITTED]

    def _transition(self, new_state: TaskState) -> None:
        if self.state.is_terminal:
            raise RuntimeError(f"Task already finished as {self.state.value}")
        if new_state == TaskState.SUBMITTED and self.state == TaskState.PROCESSING:
            # Providers occasionally report a stale status; never move backwards
            return
        if new_state != self.state:
            self.history.append(new_state)
        self.state = new_state

    def error_backoff(self, errors: int) -> float:
        return min(self.interval * (1.5 ** errors), self.error_backoff_cap)

    def wait(self, task_id: str, poll: Callable[[str], TaskStatus]) -> TaskStatus:
        """Poll ``task_id`` until it succeeds, fails or runs out of attempts."""
        started = self._clock()
        errors = 0

        for attempt in range(1, self.max_attempts + 1):
            try:
                status = poll(task_id)
            except ProviderError as e:
                errors += 1
                logger.warning(
                    f"[POLL] {self.provider} task {task_id} poll error "
                    f"{errors}/{self.max_poll_errors} (attempt {attempt}): {e}"
                )
                if errors > self.max_poll_errors:
                    self._transition(TaskState.FAILED)
                    raise ProviderError(self.provider, f"Polling failed for task {task_id}: {e.message}") from e
                if attempt < self.max_attempts:
                    self._sleep(self.error_backoff(errors))
                continue

            errors = 0
            self._transition(status.state)

            if status.state == TaskState.SUCCEEDED:
                if not status.result_url:
                    raise MalformedResponse(self.provider, f"Task {task_id} succeeded without a result URL")
                elapsed = self._clock() - started
                logger.info(f"[POLL] {self.provider} task {task_id} succeeded after {attempt} polls ({elapsed:.0f}s)")
                return status

            if status.state == TaskState.FAILED:
                raise ProviderTaskFailed(self.provider, status.failure_reason or "Unknown error")

            if attempt < self.max_attempts:
                self._sleep(self.interval)

        self._transition(TaskState.TIMED_OUT)
        raise ProviderTimeout(self.provider, self.max_attempts)
