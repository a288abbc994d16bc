"""Fixed-interval polling of queued provider jobs."""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field
from tenacity import AsyncRetrying, RetryError, retry_if_result, stop_after_attempt, wait_fixed

from seedreamstudio.models.errors import GenerationFailed, PollTimeoutError
from seedreamstudio.models.responses import QueueState, QueueStatus

logger = logging.getLogger(__name__)

# 300 checks at 100ms intervals: a 30 second ceiling
DEFAULT_POLL_INTERVAL_SECONDS = 0.1
DEFAULT_MAX_POLL_ATTEMPTS = 300


class PollConfig(BaseModel):
    """Interval and hard attempt ceiling for a poll loop."""

    model_config = ConfigDict(frozen=True)

    interval_seconds: float = Field(DEFAULT_POLL_INTERVAL_SECONDS, ge=0)
    max_attempts: int = Field(DEFAULT_MAX_POLL_ATTEMPTS, ge=1)


class PollPhase(str, Enum):
    """States of a single poll loop. TIMED_OUT never comes from a provider."""

    QUEUED = "QUEUED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


TERMINAL_PHASES = {PollPhase.COMPLETED, PollPhase.FAILED, PollPhase.TIMED_OUT}


class JobTracker:
    """
    State machine for one job: QUEUED -> IN_PROGRESS -> {COMPLETED | FAILED},
    with TIMED_OUT as the exit taken when the attempt ceiling is reached.

    A tracker is created per poll call, so concurrent polls never share state.
    """

    def __init__(self, provider: str, request_id: str):
        self.provider = provider
        self.request_id = request_id
        self.phase = PollPhase.QUEUED
        self.attempts = 0
        self.last_status: QueueStatus | None = None

    @property
    def finished(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def observe(self, status: QueueStatus) -> PollPhase:
        """Record a status snapshot and advance the phase."""
        if self.finished:
            raise RuntimeError(f"Job {self.request_id} already finished as {self.phase.value}")

        self.attempts += 1
        self.last_status = status
        new_phase = PollPhase(status.status.value)
        # Providers sometimes report QUEUED again after IN_PROGRESS; never move backwards
        if new_phase == PollPhase.QUEUED and self.phase == PollPhase.IN_PROGRESS:
            new_phase = PollPhase.IN_PROGRESS

        if new_phase != self.phase:
            logger.debug(
                f"[{self.provider}] request {self.request_id}: {self.phase.value} -> {new_phase.value} "
                f"(check {self.attempts})"
            )
        self.phase = new_phase
        return self.phase

    def time_out(self) -> None:
        self.phase = PollPhase.TIMED_OUT


async def poll_until_complete(
    fetch_status: Callable[[str], Awaitable[QueueStatus]],
    request_id: str,
    *,
    provider: str,
    config: PollConfig | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> QueueStatus:
    """
    Check a job's status at a fixed interval until it completes, fails, or the
    attempt ceiling is reached.

    Args:
        fetch_status: Async callable returning the job's current QueueStatus
        request_id: Provider job identifier
        provider: Provider name, used in errors and logs
        config: Interval and attempt ceiling (defaults: 100ms x 300)
        sleep: Awaitable sleep used between checks

    Returns:
        The COMPLETED QueueStatus

    Raises:
        GenerationFailed: If the provider reports the job as FAILED
        PollTimeoutError: After exactly max_attempts checks without a terminal state
        Exception: Errors from fetch_status propagate immediately and are not retried
    """
    config = config or PollConfig()
    tracker = JobTracker(provider, request_id)

    async def _check() -> PollPhase:
        return tracker.observe(await fetch_status(request_id))

    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_fixed(config.interval_seconds),
        retry=retry_if_result(lambda phase: phase not in TERMINAL_PHASES),
        sleep=sleep,
    )

    try:
        phase = await retrying(_check)
    except RetryError:
        tracker.time_out()
        logger.error(f"[{provider}] request {request_id} timed out after {tracker.attempts} checks")
        raise PollTimeoutError(request_id, tracker.attempts, config.interval_seconds)

    if phase == PollPhase.FAILED:
        error = tracker.last_status.error if tracker.last_status else None
        raise GenerationFailed(provider, error, request_id=request_id)

    return tracker.last_status
