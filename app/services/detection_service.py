"""
Detection orchestration: resolved image → classifier → verdict.
"""

import logging
import time

from app.integrations.huggingface import ImageClassifier
from app.schemas.detection import DetectionResponse
from app.services.image_resolver import ResolvedImage
from app.services.verdict import map_verdict

logger = logging.getLogger(__name__)


async def analyze_image(image: ResolvedImage, classifier: ImageClassifier) -> DetectionResponse:
    """Classify the image (with retries) and map the labels to a verdict."""
    start_time = time.time()
    logger.info(f"[DETECT] Starting image analysis ({image.mime_type}, {len(image.content)} bytes)")

    items = await classifier.classify(image.content)
    verdict = map_verdict(items)

    duration = time.time() - start_time
    logger.info(
        f"[DETECT] Finished in {duration:.2f}s: is_ai_generated={verdict.is_ai_generated}, "
        f"confidence={verdict.confidence:.2f}"
    )
    return verdict
