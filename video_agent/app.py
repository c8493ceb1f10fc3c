import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from video_agent.api.routes import router as api_router
from video_agent.config import settings
from video_agent.logging_config import configure_logging

logger = logging.getLogger(__name__)

configure_logging(settings.log_level)

app = FastAPI(title="Prompt-to-Video Agent", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(api_router)

frontend_path = Path(settings.frontend_dir)
frontend_path.mkdir(parents=True, exist_ok=True)

app.mount("/static", StaticFiles(directory=str(frontend_path)), name="static")


def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(error.get("loc", ())), "msg": error.get("msg", "")} for error in exc.errors()]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_errors(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/", include_in_schema=False)
async def serve_index():
    index_file = frontend_path / "index.html"
    if not index_file.exists():
        return JSONResponse(status_code=404, content={"detail": "Frontend not available"})
    return FileResponse(index_file)


def main() -> None:
    uvicorn.run("video_agent.app:app", host=settings.app_host, port=settings.app_port, log_config=None)


if __name__ == "__main__":
    main()
