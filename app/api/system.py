"""
System / health routes.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["System"])


@router.get("/health")
async def health(request: Request):
    return {
        "status": "healthy",
        "classifier_configured": getattr(request.app.state, "classifier", None) is not None,
    }


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    return "User-agent: *\nDisallow: /"
