from typing import List, Optional

from video_agent.models.schemas import FieldError, GenerationResult
from video_agent.services.prediction_poller import FailureReason, PollOutcome, PollState

MOCK_MESSAGE = (
    "Set the REPLICATE_API_TOKEN environment variable to generate bespoke footage. "
    "Showing a sample cinematic reel instead."
)
SUCCESS_MESSAGE = "Success! Video diffusion output is ready for review."
SUBMISSION_FAILED_MESSAGE = "Failed to create prediction with Replicate. Verify API token and prompt validity."
PROVIDER_FAILED_MESSAGE = "The video model did not finish successfully. Adjust your prompt or try again."
PAYLOAD_SHAPE_MESSAGE = "The diffusion model returned an unexpected output payload."
TIMEOUT_MESSAGE = "Video generation exceeded the allowable time window."
UNEXPECTED_ERROR_MESSAGE = "Unexpected error occurred."
VALIDATION_MESSAGE = "The generation request is invalid."
INVALID_BODY_MESSAGE = "Request body must be a JSON object."


def mock_result(video_url: str) -> GenerationResult:
    return GenerationResult(status="mock", video_url=video_url, message=MOCK_MESSAGE)


def validation_failure(errors: List[FieldError], message: str = VALIDATION_MESSAGE) -> GenerationResult:
    return GenerationResult(status="failed", message=message, errors=errors or None)


def unexpected_failure(exc: Optional[BaseException] = None) -> GenerationResult:
    message = str(exc) if exc is not None and str(exc) else UNEXPECTED_ERROR_MESSAGE
    return GenerationResult(status="failed", message=message)


def normalize_outcome(outcome: PollOutcome) -> GenerationResult:
    if outcome.state is PollState.SUCCEEDED:
        return GenerationResult(
            status="succeeded",
            video_url=outcome.video_url,
            prediction_id=outcome.prediction_id,
            message=SUCCESS_MESSAGE,
        )

    if outcome.state is PollState.TIMED_OUT:
        message = TIMEOUT_MESSAGE
    elif outcome.reason is FailureReason.SUBMISSION:
        message = outcome.detail or SUBMISSION_FAILED_MESSAGE
    elif outcome.reason is FailureReason.PAYLOAD_SHAPE:
        message = PAYLOAD_SHAPE_MESSAGE
    else:
        message = outcome.detail or PROVIDER_FAILED_MESSAGE

    return GenerationResult(status="failed", prediction_id=outcome.prediction_id, message=message)
