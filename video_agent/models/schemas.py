from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

PROMPT_MIN_LENGTH = 8
DURATION_MIN_SECONDS = 4
DURATION_MAX_SECONDS = 24

VideoStyle = Literal["cinematic", "anime", "futuristic", "documentary", "surreal", "minimalist"]
AspectRatio = Literal["16:9", "9:16", "1:1"]
GenerationStatus = Literal["mock", "succeeded", "failed"]


class CamelModel(BaseModel):
    """Base for models exchanged with the browser, which speaks camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class GenerationRequest(CamelModel):
    prompt: str = Field(..., min_length=PROMPT_MIN_LENGTH, description="Creative brief for the video model")
    style: VideoStyle
    aspect_ratio: AspectRatio
    duration: float = Field(..., strict=True, ge=DURATION_MIN_SECONDS, le=DURATION_MAX_SECONDS, description="Seconds")


class FieldError(CamelModel):
    field: str
    message: str


class GenerationResult(CamelModel):
    status: GenerationStatus
    video_url: Optional[str] = None
    message: Optional[str] = None
    prediction_id: Optional[str] = None
    errors: Optional[List[FieldError]] = None

    @model_validator(mode="after")
    def check_video_url(self) -> "GenerationResult":
        if self.status == "failed" and self.video_url is not None:
            raise ValueError("A failed result cannot carry a video URL")
        if self.status in ("succeeded", "mock") and not self.video_url:
            raise ValueError(f"A {self.status} result must carry a video URL")
        return self


class AgentPlanRequest(CamelModel):
    prompt: str = ""
    style: VideoStyle = "cinematic"
    duration: float = Field(12, strict=True, ge=DURATION_MIN_SECONDS, le=DURATION_MAX_SECONDS)


class AgentPlan(CamelModel):
    theme: str
    mood: str
    keywords: List[str]
    narrative_beats: List[str]
    visual_directives: List[str]


def field_errors(exc: ValidationError) -> List[FieldError]:
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        errors.append(FieldError(field=location, message=error.get("msg", "Invalid value")))
    return errors
