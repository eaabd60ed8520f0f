"""
FastAPI dependencies shared by route handlers.

The classifier handle is built once in the lifespan and stored on
`app.state`; routes receive it through `get_classifier` instead of
importing a module-level client.
"""

import logging

from fastapi import Request

from app.core.errors import ServiceUnavailable
from app.integrations.huggingface import ImageClassifier

logger = logging.getLogger(__name__)


def get_classifier(request: Request) -> ImageClassifier:
    classifier = getattr(request.app.state, "classifier", None)
    if classifier is None:
        logger.error("[ROUTE] Hugging Face client is not initialized")
        raise ServiceUnavailable(
            "The AI detection service is not properly configured. "
            "Please check if HUGGING_FACE_API_KEY is set correctly."
        )
    return classifier
