import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from video_agent.config import Settings

logger = logging.getLogger(__name__)

PENDING_STATUSES = frozenset({"starting", "processing"})


class ReplicateClientError(RuntimeError):
    """Base class for failures talking to the prediction API."""

    def __init__(self, message: str, detail: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.detail = detail
        self.status_code = status_code


class ProviderSubmissionError(ReplicateClientError):
    """The provider refused to create the prediction."""


class ProviderPollError(ReplicateClientError):
    """Fetching the prediction status failed."""


@dataclass
class PredictionJob:
    """Snapshot of a remote prediction. Refresh it by fetching again by id."""

    id: str
    status: str
    output: Any = None
    error: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PredictionJob":
        error = payload.get("error")
        return cls(
            id=str(payload.get("id") or ""),
            status=str(payload.get("status") or "").lower(),
            output=payload.get("output"),
            error=str(error) if error else None,
        )

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_STATUSES


def _json_object(response: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _error_detail(response: httpx.Response) -> Optional[str]:
    payload = _json_object(response)
    if payload and payload.get("detail"):
        return str(payload["detail"])
    return None


class ReplicateClient:
    def __init__(
        self,
        api_token: str,
        *,
        base_url: str,
        model_version: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model_version = model_version
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_token}"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ReplicateClient":
        return cls(
            settings.replicate_api_token or "",
            base_url=settings.replicate_api_base_url,
            model_version=settings.replicate_model_version,
            timeout=settings.http_timeout_seconds,
            **kwargs,
        )

    async def __aenter__(self) -> "ReplicateClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def create_prediction(self, prompt: str, num_frames: int) -> PredictionJob:
        body = {
            "version": self.model_version,
            "input": {"prompt": prompt, "num_frames": num_frames},
        }
        try:
            response = await self._http.post("/predictions", json=body)
        except httpx.HTTPError as exc:
            logger.exception("Failed to reach the prediction API")
            raise ProviderSubmissionError("Unable to reach the prediction API.") from exc

        if not response.is_success:
            detail = _error_detail(response)
            logger.error("Prediction creation rejected with HTTP %s: %s", response.status_code, detail)
            raise ProviderSubmissionError(
                "Prediction creation was rejected.", detail=detail, status_code=response.status_code
            )

        payload = _json_object(response)
        if payload is None:
            raise ProviderSubmissionError("The prediction API returned an unreadable response.")

        job = PredictionJob.from_payload(payload)
        logger.info("Created prediction %s (status=%s)", job.id, job.status)
        return job

    async def get_prediction(self, prediction_id: str) -> PredictionJob:
        try:
            response = await self._http.get(f"/predictions/{prediction_id}")
        except httpx.HTTPError as exc:
            logger.warning("Status fetch for prediction %s failed: %s", prediction_id, exc)
            raise ProviderPollError("Unable to fetch prediction status.") from exc

        if not response.is_success:
            logger.warning("Status fetch for prediction %s returned HTTP %s", prediction_id, response.status_code)
            raise ProviderPollError(
                "Unable to fetch prediction status.",
                detail=_error_detail(response),
                status_code=response.status_code,
            )

        payload = _json_object(response)
        if payload is None:
            raise ProviderPollError("The prediction API returned an unreadable status response.")
        return PredictionJob.from_payload(payload)
