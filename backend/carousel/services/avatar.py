"""Avatar download and decoding. Failures degrade to "no avatar"."""

import logging
import time
from io import BytesIO
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError

from carousel.config import Settings, get_settings
from carousel.errors import ResourceUnavailable

logger = logging.getLogger(__name__)


async def _read_limited(response: httpx.Response, max_size: int) -> bytes:
    """Body bytes, aborting as soon as the size cap is passed."""
    declared = response.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_size:
        raise ResourceUnavailable(
            "Avatar image is too large",
            details={"size": int(declared), "maxSize": max_size},
        )

    buffer = BytesIO()
    async for chunk in response.aiter_bytes():
        buffer.write(chunk)
        if buffer.tell() > max_size:
            raise ResourceUnavailable(
                "Avatar image is too large",
                details={"size": buffer.tell(), "maxSize": max_size},
            )
    return buffer.getvalue()


async def fetch_avatar(url: str, settings: Optional[Settings] = None,
                       client: Optional[httpx.AsyncClient] = None) -> Image.Image:
    """Download and decode an avatar image. Raises ResourceUnavailable."""
    settings = settings or get_settings()
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.avatar_timeout, follow_redirects=True)

    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            content = await _read_limited(response, settings.max_avatar_size)
        image = Image.open(BytesIO(content))
        image.load()
        return image.convert("RGBA")
    except httpx.HTTPError as e:
        raise ResourceUnavailable(f"Avatar download failed: {e}", details={"url": url}) from e
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ResourceUnavailable(f"Avatar could not be decoded: {e}", details={"url": url}) from e
    finally:
        if owns_client:
            await client.aclose()


async def load_avatar(url: Optional[str], settings: Optional[Settings] = None,
                      client: Optional[httpx.AsyncClient] = None) -> Optional[Image.Image]:
    """Fetch the avatar, or return None and keep going without it."""
    if not url:
        return None
    start_time = time.perf_counter()
    logger.info(f"Loading avatar from {url}")
    try:
        image = await fetch_avatar(url, settings, client)
    except ResourceUnavailable as e:
        logger.warning(f"Avatar loading failed, continuing without avatar: {e.message}")
        return None
    elapsed = (time.perf_counter() - start_time) * 1000
    logger.info(f"Avatar loaded {image.width}x{image.height} ({elapsed:.0f}ms)")
    return image
