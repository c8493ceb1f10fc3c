"""Submit a prediction and drive it to a terminal state within a fixed time budget.

The loop is a small state machine::

    SUBMITTING -> POLLING -> SUCCEEDED | FAILED | TIMED_OUT

The timeout guard runs before every wait and every status fetch is bounded
by the time left, so the call returns at the deadline and no fetch is
issued once the budget is spent. The remote prediction is left running; it
is abandoned, not cancelled.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import urlparse

from video_agent.services.replicate_client import (
    PredictionJob,
    ProviderPollError,
    ProviderSubmissionError,
    ReplicateClient,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


class PollState(str, Enum):
    SUBMITTING = "submitting"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = frozenset({PollState.SUCCEEDED, PollState.FAILED, PollState.TIMED_OUT})


class FailureReason(str, Enum):
    SUBMISSION = "submission"
    PROVIDER = "provider"
    PAYLOAD_SHAPE = "payload_shape"
    TIMEOUT = "timeout"


class PayloadShapeError(ValueError):
    """A succeeded prediction carried no usable video URL."""


@dataclass(frozen=True)
class PollOutcome:
    state: PollState
    job: Optional[PredictionJob] = None
    video_url: Optional[str] = None
    reason: Optional[FailureReason] = None
    detail: Optional[str] = None

    @property
    def prediction_id(self) -> Optional[str]:
        return self.job.id if self.job and self.job.id else None


def _is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def extract_video_url(output: Any) -> str:
    """Return the first http(s) URL string in a prediction's output.

    Output may be a single value or a list of values.
    """
    candidates = output if isinstance(output, (list, tuple)) else [output]
    for candidate in candidates:
        if _is_url(candidate):
            return candidate
    raise PayloadShapeError(f"No video URL in prediction output of type {type(output).__name__}")


class PredictionPoller:
    def __init__(
        self,
        client: ReplicateClient,
        *,
        poll_interval: float,
        timeout: float,
        fetch_retries: int = 0,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.fetch_retries = fetch_retries
        self.clock = clock
        self.sleep = sleep
        self.state = PollState.SUBMITTING

    def _transition(self, state: PollState) -> None:
        logger.debug("Poller state %s -> %s", self.state.value, state.value)
        self.state = state

    def _finish(self, outcome: PollOutcome) -> PollOutcome:
        self._transition(outcome.state)
        return outcome

    async def run(self, prompt: str, num_frames: int) -> PollOutcome:
        if self.state is not PollState.SUBMITTING:
            raise RuntimeError("A poller can only run once")

        try:
            job = await self.client.create_prediction(prompt, num_frames)
        except ProviderSubmissionError as exc:
            return self._finish(
                PollOutcome(state=PollState.FAILED, reason=FailureReason.SUBMISSION, detail=exc.detail)
            )

        submitted_at = self.clock()
        self._transition(PollState.POLLING)

        while job.is_pending:
            remaining = self._remaining(submitted_at)
            if remaining < 0:
                return self._finish(self._timed_out(job, submitted_at))

            await self.sleep(min(self.poll_interval, remaining))

            try:
                refreshed = await self._refresh(job, submitted_at)
            except asyncio.TimeoutError:
                return self._finish(self._timed_out(job, submitted_at))
            if refreshed is None:
                break
            job = refreshed

        return self._finish(self._resolve(job))

    def _remaining(self, submitted_at: float) -> float:
        return self.timeout - (self.clock() - submitted_at)

    def _timed_out(self, job: PredictionJob, submitted_at: float) -> PollOutcome:
        elapsed = self.clock() - submitted_at
        logger.warning("Prediction %s still %s after %.1fs; giving up", job.id, job.status, elapsed)
        return PollOutcome(state=PollState.TIMED_OUT, job=job, reason=FailureReason.TIMEOUT)

    async def _refresh(self, job: PredictionJob, submitted_at: float) -> Optional[PredictionJob]:
        """Fetch the job again, bounded by whatever is left of the time budget.

        Raises ``asyncio.TimeoutError`` once the budget is spent.
        """
        for attempt in range(self.fetch_retries + 1):
            remaining = self._remaining(submitted_at)
            if remaining <= 0:
                raise asyncio.TimeoutError()
            try:
                return await asyncio.wait_for(self.client.get_prediction(job.id), timeout=remaining)
            except ProviderPollError:
                logger.warning(
                    "Status fetch for prediction %s failed (attempt %d of %d)",
                    job.id,
                    attempt + 1,
                    self.fetch_retries + 1,
                )
        return None

    def _resolve(self, job: PredictionJob) -> PollOutcome:
        if job.status != "succeeded":
            logger.info("Prediction %s ended with status %r", job.id, job.status)
            return PollOutcome(state=PollState.FAILED, job=job, reason=FailureReason.PROVIDER, detail=job.error)

        try:
            video_url = extract_video_url(job.output)
        except PayloadShapeError as exc:
            logger.error("Prediction %s succeeded without a usable output: %s", job.id, exc)
            return PollOutcome(state=PollState.FAILED, job=job, reason=FailureReason.PAYLOAD_SHAPE, detail=str(exc))

        logger.info("Prediction %s succeeded", job.id)
        return PollOutcome(state=PollState.SUCCEEDED, job=job, video_url=video_url)
