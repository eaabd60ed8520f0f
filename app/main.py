import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables at the very beginning
load_dotenv()

from app.config import settings  # noqa: E402

# Set up logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

from app.api import detection, system  # noqa: E402
from app.core.errors import DetectionError  # noqa: E402
from app.integrations import http_client  # noqa: E402
from app.integrations.huggingface import build_classifier  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await http_client.initialize()

    # None when HUGGING_FACE_API_KEY is missing; /detect-ai then answers 503.
    app.state.classifier = build_classifier(settings)

    yield

    if app.state.classifier is not None:
        await app.state.classifier.close()
    await http_client.close()
    logger.info("[SHUTDOWN] Clients closed")


app = FastAPI(title="AI Image Detector API", lifespan=lifespan)


# ---- CORS ----
# Pre-flight requests are answered here with 204 and no body; every other
# response, errors included, gets the same permissive headers.
@app.middleware("http")
async def cors_headers(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=settings.cors_headers)
    response = await call_next(request)
    response.headers.update(settings.cors_headers)
    return response


def _error_response(status_code: int, error: str, details) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "details": details},
        headers=settings.cors_headers,
    )


@app.exception_handler(DetectionError)
async def detection_error_handler(request: Request, exc: DetectionError):
    logger.warning(f"[ERROR HANDLER] {exc.status_code} {type(exc).__name__}: {exc.message}")
    return _error_response(exc.status_code, exc.error, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    logger.info(f"[ERROR HANDLER] Returning {exc.status_code} to client: {exc.detail}")
    return _error_response(exc.status_code, error, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"[ERROR HANDLER] Unhandled error: {exc}")
    return _error_response(500, "Failed to analyze image", str(exc))


app.include_router(system.router)
app.include_router(detection.router)
