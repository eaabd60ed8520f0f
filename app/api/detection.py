"""
Detection route: /detect-ai

Accepts a JSON payload { "imageUrl": "https://..." | "data:image/...;base64,..." }
(whatever the declared content type, since browsers often send text/plain),
or form data with a 'file' upload or an 'imageUrl' field.

A missing classifier (no API key at startup) is reported as 503 before the
request body is read.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from app.core.dependencies import get_classifier
from app.core.errors import DetectionError
from app.integrations.huggingface import ImageClassifier
from app.schemas.detection import DetectionResponse, DetectRequest, ErrorResponse
from app.services.detection_service import analyze_image
from app.services.image_resolver import ResolvedImage, resolve_image, resolve_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Detection"])

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def _read_json_reference(request: Request) -> Optional[str]:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    try:
        return DetectRequest.model_validate(payload).image_url
    except ValidationError:
        raise HTTPException(status_code=400, detail="'imageUrl' must be a string")


async def _resolve_request_image(request: Request) -> ResolvedImage:
    content_type = request.headers.get("content-type", "")

    if any(ct in content_type for ct in FORM_CONTENT_TYPES):
        form = await request.form()
        file_obj = form.get("file")
        if isinstance(file_obj, UploadFile):
            content = await file_obj.read()
            logger.info(f"[ROUTE] Received upload {file_obj.filename} ({len(content)} bytes)")
            return resolve_upload(content, file_obj.content_type)
        image_url = form.get("imageUrl")
        if image_url is not None and not isinstance(image_url, str):
            raise HTTPException(status_code=400, detail="Invalid imageUrl field")

    else:
        image_url = await _read_json_reference(request)

    if not image_url:
        raise HTTPException(status_code=400, detail="Image URL is required")

    logger.info(f"[ROUTE] Processing request with image URL length: {len(image_url)}")
    return await resolve_image(image_url)


@router.post(
    "/detect-ai",
    response_model=DetectionResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def detect_ai(
    request: Request,
    classifier: ImageClassifier = Depends(get_classifier),
):
    """
    Classify an image as AI-generated or real.
    """
    try:
        image = await _resolve_request_image(request)
        result = await analyze_image(image, classifier)
    except (DetectionError, HTTPException):
        raise
    except Exception as e:
        logger.exception(f"[ROUTE] Error processing request: {e}")
        raise DetectionError(str(e))

    logger.info(f"[ROUTE] Final result: {result.model_dump_json(by_alias=True)}")
    return result
