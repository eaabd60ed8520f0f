"""
Maps raw classifier output to an AI-generated verdict.

The classifier is a general-purpose image model, so "AI-generated" is
inferred from label text: the highest score among labels containing one of
the AI keywords becomes the confidence. When no label matches, the top
classification's score is used instead.
"""

import logging
from typing import Iterable, Sequence

from app.config import settings
from app.core.errors import ClassificationError
from app.schemas.detection import ClassificationItem, ClassificationSummary, DetectionResponse

logger = logging.getLogger(__name__)


def format_score(score: float) -> str:
    return f"{score * 100:.2f}%"


def is_ai_label(label: str, keywords: Iterable[str]) -> bool:
    lowered = label.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def compute_confidence(items: Sequence[ClassificationItem], keywords: Iterable[str]) -> float:
    """Confidence (0-100) that the image is AI-generated."""
    if not items:
        raise ClassificationError("Classifier returned no classifications")

    keywords = list(keywords)
    ai_scores = [item.score for item in items if is_ai_label(item.label, keywords)]
    if ai_scores:
        return max(ai_scores) * 100
    # Assumes the classifier orders results by descending score.
    return items[0].score * 100


def map_verdict(
    items: Sequence[ClassificationItem],
    keywords: Iterable[str] = None,
    threshold: float = None,
    top_n: int = None,
) -> DetectionResponse:
    keywords = settings.ai_label_keywords if keywords is None else keywords
    threshold = settings.ai_confidence_threshold if threshold is None else threshold
    top_n = settings.top_classifications if top_n is None else top_n

    confidence = compute_confidence(items, keywords)
    verdict = DetectionResponse(
        is_ai_generated=confidence > threshold,
        confidence=confidence,
        classifications=[
            ClassificationSummary(label=item.label, score=format_score(item.score))
            for item in items[:top_n]
        ],
    )
    logger.info(
        f"[VERDICT] confidence={confidence:.2f} threshold={threshold} "
        f"is_ai_generated={verdict.is_ai_generated}"
    )
    return verdict
