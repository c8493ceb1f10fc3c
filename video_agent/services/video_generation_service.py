import logging
import math
from typing import Callable

from video_agent.config import Settings
from video_agent.models.schemas import GenerationRequest, GenerationResult
from video_agent.services import result_normalizer
from video_agent.services.prediction_poller import PredictionPoller
from video_agent.services.replicate_client import ReplicateClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Settings], ReplicateClient]


def frame_count(duration: float, frames_per_second: int = 8, max_frames: int = 160) -> int:
    return min(math.floor(duration * frames_per_second), max_frames)


def compose_prompt(request: GenerationRequest) -> str:
    return f"{request.prompt} | style: {request.style} | aspect ratio: {request.aspect_ratio}"


async def generate_video(
    request: GenerationRequest,
    settings: Settings,
    client_factory: ClientFactory = ReplicateClient.from_settings,
    **poller_kwargs,
) -> GenerationResult:
    """Run one generation request end to end and return an in-band result.

    Never raises: every failure is reported as a ``failed`` result.
    """
    if settings.mock_mode:
        logger.info("No provider token configured; returning the sample video")
        return result_normalizer.mock_result(settings.fallback_video_url)

    num_frames = frame_count(request.duration, settings.frames_per_second, settings.max_frames)
    try:
        async with client_factory(settings) as client:
            poller = PredictionPoller(
                client,
                poll_interval=settings.poll_interval_seconds,
                timeout=settings.generation_timeout_seconds,
                fetch_retries=settings.poll_fetch_retries,
                **poller_kwargs,
            )
            outcome = await poller.run(compose_prompt(request), num_frames)
    except Exception as exc:
        logger.exception("Video generation failed unexpectedly")
        return result_normalizer.unexpected_failure(exc)

    return result_normalizer.normalize_outcome(outcome)
