"""
Outbound HTTP for image downloads.

The lifespan opens one pooled aiohttp session; `image_resolver` borrows it via
`request_session()`. Outside the lifespan (scripts, unit tests) a short-lived
session with the same settings is opened and closed around the call.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiohttp

from app.config import settings

logger = logging.getLogger(__name__)

# Set by initialize(); reference `http_client.session` at call time.
session: Optional[aiohttp.ClientSession] = None


def build_session() -> aiohttp.ClientSession:
    """Session tuned for fetching one image per request."""
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=settings.http_timeout_sec),
        connector=aiohttp.TCPConnector(limit=settings.http_pool_size),
        headers={
            "User-Agent": settings.http_user_agent,
            "Accept": "image/*",
        },
    )


async def initialize() -> None:
    global session
    session = build_session()
    logger.info(
        f"[STARTUP] Image download session ready "
        f"(pool={settings.http_pool_size}, timeout={settings.http_timeout_sec}s)"
    )


async def close() -> None:
    global session
    if session is not None and not session.closed:
        await session.close()
        logger.info("[SHUTDOWN] Image download session closed")
    session = None


@asynccontextmanager
async def request_session() -> AsyncIterator[aiohttp.ClientSession]:
    """Yield the lifespan session, or a temporary one that is closed afterwards."""
    if session is not None and not session.closed:
        yield session
        return

    tmp = build_session()
    try:
        yield tmp
    finally:
        await tmp.close()
