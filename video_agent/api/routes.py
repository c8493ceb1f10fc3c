import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from video_agent.config import Settings, get_settings
from video_agent.models.schemas import (
    AgentPlan,
    AgentPlanRequest,
    GenerationRequest,
    GenerationResult,
    field_errors,
)
from video_agent.services import agent_plan_service, result_normalizer, video_generation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/generate-video", response_model=GenerationResult, response_model_exclude_none=True)
async def generate_video(request: Request, settings: Settings = Depends(get_settings)):
    # Failures are reported in the body with HTTP 200, so validation happens here
    # rather than in FastAPI's request parsing.
    try:
        raw = await request.json()
    except ValueError:
        logger.warning("Rejected generation request with a non-JSON body")
        return result_normalizer.validation_failure([], message=result_normalizer.INVALID_BODY_MESSAGE)

    try:
        payload = GenerationRequest.model_validate(raw)
    except ValidationError as exc:
        logger.info("Rejected invalid generation request: %s", exc.errors())
        return result_normalizer.validation_failure(field_errors(exc))

    return await video_generation_service.generate_video(payload, settings)


@router.post("/agent-plan", response_model=AgentPlan)
def agent_plan(payload: AgentPlanRequest):
    return agent_plan_service.derive_agent_plan(payload.prompt, payload.style, payload.duration)


@router.get("/health")
def health_check(settings: Settings = Depends(get_settings)):
    return {"status": "ok", "mode": "mock" if settings.mock_mode else "live"}
