"""
Poll-until-done loop for long-running generation jobs.
"""

from __future__ import annotations
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

from .config import VIDEO_POLL_INTERVAL_SECONDS
from .errors import PollTimeoutError
from .utils import get_logger

logger = get_logger("polling")

T = TypeVar("T")


@dataclass
class PollPolicy:
    """
    How often to poll and for how long.

    ``max_attempts=None`` polls until the job finishes. ``jitter`` adds up to
    that many seconds, drawn uniformly, to each wait.
    """
    interval: float = VIDEO_POLL_INTERVAL_SECONDS
    max_attempts: Optional[int] = None
    jitter: float = 0.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def delay(self) -> float:
        if self.jitter <= 0:
            return self.interval
        return self.interval + random.uniform(0, self.jitter)


def poll_until_done(
    state: T,
    fetch: Callable[[T], T],
    is_done: Callable[[T], bool],
    policy: PollPolicy,
    on_error: Optional[Callable[[Exception], None]] = None,
) -> T:
    """
    Refresh ``state`` with ``fetch`` until ``is_done`` holds.

    Waits one policy delay before every fetch. Errors from ``fetch`` go to
    ``on_error`` (which may raise a translated error) and are then re-raised;
    polling never continues past an error.

    Raises:
        PollTimeoutError: when ``policy.max_attempts`` fetches did not finish the job
    """
    attempts = 0
    while not is_done(state):
        if policy.max_attempts is not None and attempts >= policy.max_attempts:
            raise PollTimeoutError(f"Job did not finish after {attempts} polls")
        policy.sleep(policy.delay())
        attempts += 1
        try:
            state = fetch(state)
        except Exception as exc:
            if on_error is not None:
                on_error(exc)
            raise
        if attempts % 6 == 0:
            logger.info(f"Still processing... ({attempts} polls)")
    return state
