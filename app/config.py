"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    CLASSIFIER_MODEL=google/vit-base-patch16-224 uvicorn app.main:app
    export AI_CONFIDENCE_THRESHOLD=75

A `.env` file at the project root is loaded automatically.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,   # HUGGING_FACE_API_KEY == hugging_face_api_key
        extra="ignore",         # silently drop unknown env vars
    )

    # ------------------------------------------------------------------ #
    # Logging                                                             #
    # ------------------------------------------------------------------ #
    log_level: str = Field(
        "INFO", description="Root logging level"
    )

    # ------------------------------------------------------------------ #
    # Classifier (Hugging Face Inference API)                             #
    # ------------------------------------------------------------------ #
    hugging_face_api_key: Optional[str] = Field(
        None, description="Inference API token. Missing → every request gets 503"
    )
    classifier_model: str = Field(
        "microsoft/resnet-50", description="Hosted image-classification model id"
    )
    classifier_provider: str = Field(
        "hf-inference", description="Inference provider serving the model"
    )
    classifier_timeout_sec: float = Field(
        30.0, description="Per-call timeout for the inference client"
    )
    classifier_max_retries: int = Field(
        3, description="Retries after the first failed attempt"
    )
    classifier_retry_initial_delay_ms: int = Field(
        1_000, description="First retry delay; doubled on every further retry"
    )

    # ------------------------------------------------------------------ #
    # Verdict mapping                                                     #
    # ------------------------------------------------------------------ #
    ai_label_keywords: list[str] = Field(
        ["artificial", "synthetic", "digital art", "computer generated"],
        description="Case-insensitive label substrings that indicate AI generation",
    )
    ai_confidence_threshold: float = Field(
        60.0, description="Confidence (0-100) strictly above this → AI-generated"
    )
    top_classifications: int = Field(
        3, description="Classifier labels echoed back in the response"
    )

    # ------------------------------------------------------------------ #
    # Image input                                                         #
    # ------------------------------------------------------------------ #
    max_image_download_mb: int = Field(
        10, description="Max MB for URL downloads, data URLs and uploads"
    )
    http_timeout_sec: int = Field(
        30, description="Total timeout for the shared aiohttp session"
    )
    http_pool_size: int = Field(
        100, description="Max simultaneous connections for image downloads"
    )
    http_user_agent: str = Field(
        "ai-image-detector/0.1", description="User-Agent sent when fetching remote images"
    )

    # ------------------------------------------------------------------ #
    # CORS                                                                #
    # ------------------------------------------------------------------ #
    cors_allow_origin: str = Field("*", description="Access-Control-Allow-Origin")
    cors_allow_headers: str = Field(
        "authorization, x-client-info, apikey, content-type",
        description="Access-Control-Allow-Headers",
    )
    cors_max_age_sec: int = Field(86_400, description="Pre-flight cache lifetime")

    # ------------------------------------------------------------------ #
    # Derived properties                                                  #
    # ------------------------------------------------------------------ #
    @property
    def max_image_download_bytes(self) -> int:
        return self.max_image_download_mb * 1024 * 1024

    @property
    def classifier_retry_initial_delay_sec(self) -> float:
        return self.classifier_retry_initial_delay_ms / 1000.0

    @property
    def cors_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": self.cors_allow_headers,
            "Access-Control-Max-Age": str(self.cors_max_age_sec),
        }


# Single shared instance — import this everywhere.
settings = Settings()
