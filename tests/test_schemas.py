import pytest
from pydantic import ValidationError

from video_agent.models.schemas import GenerationRequest, GenerationResult, field_errors

VALID = {"prompt": "Waves crashing on a basalt shore", "style": "documentary", "aspectRatio": "16:9", "duration": 8}


def test_request_accepts_wire_names():
    request = GenerationRequest.model_validate(VALID)

    assert request.aspect_ratio == "16:9"
    assert request.duration == 8


def test_request_is_immutable():
    request = GenerationRequest.model_validate(VALID)

    with pytest.raises(ValidationError):
        request.prompt = "changed"


@pytest.mark.parametrize(
    "field, value",
    [
        ("prompt", "short"),
        ("style", "noir"),
        ("aspectRatio", "4:3"),
        ("duration", 3.9),
        ("duration", 24.5),
        ("duration", "12"),
    ],
)
def test_request_rejects_invalid_values(field, value):
    with pytest.raises(ValidationError) as excinfo:
        GenerationRequest.model_validate({**VALID, field: value})

    assert [error.field for error in field_errors(excinfo.value)] == [field]


def test_field_errors_for_non_object_body():
    with pytest.raises(ValidationError) as excinfo:
        GenerationRequest.model_validate(["not", "an", "object"])

    assert field_errors(excinfo.value)[0].field == "body"


def test_succeeded_result_requires_video_url():
    with pytest.raises(ValidationError):
        GenerationResult(status="succeeded", message="done")


def test_failed_result_cannot_carry_video_url():
    with pytest.raises(ValidationError):
        GenerationResult(status="failed", video_url="https://x/video.mp4")


def test_result_serializes_camel_case_without_empty_fields():
    result = GenerationResult(status="succeeded", video_url="https://x/video.mp4", prediction_id="p1")

    assert result.model_dump(by_alias=True, exclude_none=True) == {
        "status": "succeeded",
        "videoUrl": "https://x/video.mp4",
        "predictionId": "p1",
    }


@pytest.mark.parametrize("duration", [4, 12.5, 24])
def test_request_accepts_numeric_durations(duration):
    assert GenerationRequest.model_validate({**VALID, "duration": duration}).duration == duration
