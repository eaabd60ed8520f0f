"""
Domain exceptions for the detection flow.

Each exception carries the HTTP status and the public `error` title the
exception handler in app/main.py renders as `{"error": ..., "details": ...}`.
The message passed to the constructor becomes `details`.
"""


class DetectionError(Exception):
    """Base class. Unclassified failures are reported as 500."""

    status_code = 500
    error = "Failed to analyze image"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(DetectionError):
    """Malformed image reference or content that is not an image."""

    status_code = 400
    error = "Invalid image URL"


class FetchError(DetectionError):
    """The remote image could not be downloaded. Reported as a client error."""

    status_code = 400
    error = "Failed to fetch image"


class ServiceUnavailable(DetectionError):
    """The classifier was never configured. Permanent, never retried."""

    status_code = 503
    error = "Service configuration error"


class ClassificationError(DetectionError):
    """The classifier answered, but with nothing usable."""

    status_code = 500
    error = "Failed to analyze image"
