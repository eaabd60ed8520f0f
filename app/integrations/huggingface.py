"""
Hugging Face Inference API integration.

`build_classifier()` is called once from the FastAPI lifespan. It returns
None when HUGGING_FACE_API_KEY is absent; the route dependency turns that
into a 503 for every request. The resulting handle lives on `app.state`
and is read-only afterwards.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from huggingface_hub import AsyncInferenceClient

from app.config import Settings, settings as default_settings
from app.core.retry import retry_with_backoff
from app.schemas.detection import ClassificationItem

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {408, 429}


def _status_code(error: Exception):
    # HfHubHTTPError carries the response; aiohttp's ClientResponseError only `.status`.
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    return status if isinstance(status, int) else None


def is_retryable(error: Exception) -> bool:
    """Client errors (bad token, unknown model) are permanent; everything else is retried."""
    status = _status_code(error)
    if status is None:
        return True
    return status in RETRYABLE_STATUS_CODES or status >= 500


class ImageClassifier:
    """Retrying wrapper around the hosted image-classification model."""

    def __init__(
        self,
        client: AsyncInferenceClient,
        model: str,
        retries: int = 3,
        initial_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.model = model
        self.retries = retries
        self.initial_delay = initial_delay
        self.sleep = sleep

    async def _classify_once(self, content: bytes) -> List[ClassificationItem]:
        logger.info(f"[CLASSIFY] Sending {len(content)} bytes to {self.model}")
        result = await self.client.image_classification(content, model=self.model)
        items = [ClassificationItem(label=r.label, score=r.score) for r in result]
        logger.info(f"[CLASSIFY] Received {len(items)} classifications: {[(i.label, round(i.score, 4)) for i in items[:5]]}")
        return items

    async def classify(self, content: bytes) -> List[ClassificationItem]:
        return await retry_with_backoff(
            lambda: self._classify_once(content),
            retries=self.retries,
            initial_delay=self.initial_delay,
            is_retryable=is_retryable,
            sleep=self.sleep,
        )

    async def close(self) -> None:
        await self.client.close()


def build_classifier(config: Settings = default_settings) -> Optional[ImageClassifier]:
    """Create the classifier, or return None when no API key is configured."""
    if not config.hugging_face_api_key:
        logger.error("[STARTUP] HUGGING_FACE_API_KEY is not set; detection will return 503")
        return None

    try:
        client = AsyncInferenceClient(
            token=config.hugging_face_api_key,
            provider=config.classifier_provider,
            timeout=config.classifier_timeout_sec,
        )
    except Exception as e:
        logger.error(f"[STARTUP] Failed to initialize Hugging Face client: {e}")
        return None

    logger.info(f"[STARTUP] Hugging Face client initialized (model={config.classifier_model})")
    return ImageClassifier(
        client,
        model=config.classifier_model,
        retries=config.classifier_max_retries,
        initial_delay=config.classifier_retry_initial_delay_sec,
    )
