from app.schemas.detection import (
    DetectRequest,
    ClassificationItem,
    ClassificationSummary,
    DetectionResponse,
    ErrorResponse,
)

__all__ = [
    "DetectRequest",
    "ClassificationItem",
    "ClassificationSummary",
    "DetectionResponse",
    "ErrorResponse",
]
