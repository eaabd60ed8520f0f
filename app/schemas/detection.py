from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class DetectRequest(BaseModel):
    """JSON body of POST /detect-ai."""
    model_config = ConfigDict(populate_by_name=True)

    image_url: Optional[str] = Field(None, alias="imageUrl")  # http(s) URL or data:image/...;base64,...


class ClassificationItem(BaseModel):
    """One raw label/score pair as returned by the classifier."""
    label: str
    score: float = Field(ge=0.0, le=1.0)


class ClassificationSummary(BaseModel):
    label: str
    score: str      # formatted percentage, e.g. "90.00%"


class DetectionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_ai_generated: bool = Field(alias="isAiGenerated")
    confidence: float = Field(ge=0.0, le=100.0)
    classifications: List[ClassificationSummary]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
