"""
Image resolution: turns an image reference (remote URL, data URL or uploaded
file) into raw bytes plus MIME type, rejecting anything that is not an image.
"""

import asyncio
import base64
import binascii
import logging
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

import aiohttp

from app.config import settings
from app.core.errors import FetchError, InvalidInput
from app.integrations import http_client as http_module

logger = logging.getLogger(__name__)


class ResolvedImage(NamedTuple):
    content: bytes
    mime_type: str


def _check_size(content: bytes, max_size: int) -> None:
    if len(content) > max_size:
        raise InvalidInput(f"Image too large (max {max_size // (1024 * 1024)}MB)")


def _image_mime(content_type: Optional[str]) -> Optional[str]:
    """Return the bare `image/*` MIME type from a header value, or None."""
    if not content_type:
        return None
    mime = content_type.split(";")[0].strip().lower()
    if not mime.startswith("image/") or mime == "image/":
        return None
    return mime


def decode_data_url(data_url: str, max_size: int = settings.max_image_download_bytes) -> ResolvedImage:
    """Decode a `data:image/<type>;base64,<payload>` URL."""
    logger.info(f"[RESOLVE] Converting data URL (length {len(data_url)})")

    header, _, payload = data_url.partition(",")
    if not header.lower().startswith("data:image/"):
        raise InvalidInput("Invalid data URL format - must be an image")

    mime = _image_mime(header[len("data:"):])
    if not mime:
        raise InvalidInput("Invalid data URL format - missing image MIME type")
    if ";base64" not in header.lower():
        raise InvalidInput("Only base64 data URLs are supported")

    # Browsers may wrap long payloads; whitespace is not part of the alphabet.
    payload = "".join(payload.split())
    if not payload:
        raise InvalidInput("Invalid data URL format - missing payload")

    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInput(f"Invalid data URL payload: {e}")

    _check_size(content, max_size)
    logger.info(f"[RESOLVE] Decoded data URL: {mime}, {len(content)} bytes")
    return ResolvedImage(content, mime)


def validate_remote_url(url: str) -> None:
    """Raise InvalidInput unless `url` is an absolute http(s) URL."""
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidInput(f"Malformed URL: {e}")
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        raise InvalidInput("Malformed URL: expected an absolute http(s) URL")


async def fetch_remote_image(url: str, max_size: int = settings.max_image_download_bytes) -> ResolvedImage:
    """Download an image over HTTP(S) through the shared session."""
    validate_remote_url(url)
    logger.info(f"[RESOLVE] Fetching image from URL: {url[:100]}")

    async with http_module.request_session() as session:
        try:
            async with session.get(url) as response:
                if response.status < 200 or response.status >= 300:
                    raise FetchError(
                        f"Failed to fetch image: {response.status} {response.reason or ''}".rstrip()
                    )

                mime = _image_mime(response.headers.get("Content-Type"))
                if not mime:
                    raise InvalidInput("URL does not point to a valid image")

                content = await response.read()
        except aiohttp.ClientError as e:
            raise FetchError(f"Error fetching image: {e}")
        except asyncio.TimeoutError:
            raise FetchError("Timed out fetching image")

    _check_size(content, max_size)
    logger.info(f"[RESOLVE] Fetched image: {mime}, {len(content)} bytes")
    return ResolvedImage(content, mime)


def resolve_upload(
    content: bytes,
    content_type: Optional[str],
    max_size: int = settings.max_image_download_bytes,
) -> ResolvedImage:
    """Validate a multipart upload."""
    mime = _image_mime(content_type)
    if not mime:
        raise InvalidInput("Uploaded file is not an image")
    if not content:
        raise InvalidInput("Uploaded file is empty")
    _check_size(content, max_size)
    return ResolvedImage(content, mime)


async def resolve_image(reference: str) -> ResolvedImage:
    """Resolve a data URL or remote URL to image bytes."""
    if reference.startswith("data:"):
        return decode_data_url(reference)
    return await fetch_remote_image(reference)
