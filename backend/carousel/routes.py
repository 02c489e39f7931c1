"""
API routes for the carousel generator.
"""

import base64
import logging
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from carousel.config import get_settings
from carousel.errors import InvalidInput, TextTooLong
from carousel.models import Slide, slides_to_dicts
from carousel.services.avatar import load_avatar
from carousel.services.image_renderer import get_renderer
from carousel.services.markdown_slides import add_final_slide, markdown_to_slides
from carousel.services.validation import validate_input

logger = logging.getLogger(__name__)

router = APIRouter()

ENGINE = "carousel-renderer"
VERSION = "2.0.0"
FALLBACK_TITLE = "Your content"
FALLBACK_TEXT_LENGTH = 200


# Request Models

class FinalSlideSettings(BaseModel):
    enabled: bool = False
    type: Optional[str] = "cta"  # cta, contact, brand
    title: Optional[str] = None
    text: Optional[str] = None
    color: Optional[str] = None  # default or accent


class CarouselSettings(BaseModel):
    brand_color: Optional[str] = Field(None, alias="brandColor")
    author_username: Optional[str] = Field(None, alias="authorUsername")
    author_full_name: Optional[str] = Field(None, alias="authorFullName")
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")
    final_slide: Optional[FinalSlideSettings] = Field(None, alias="finalSlide")

    class Config:
        populate_by_name = True


class CarouselRequest(BaseModel):
    text: Any = None  # Checked by validate_input so errors come back as a list
    settings: CarouselSettings = Field(default_factory=CarouselSettings)


def _masked_settings(options: dict) -> dict:
    masked = dict(options)
    if masked.get("avatarUrl"):
        masked["avatarUrl"] = "[PROVIDED]"
    return masked


# Routes

@router.post("/generate-carousel")
async def generate_carousel(body: CarouselRequest, request: Request):
    """
    Generate a carousel from Markdown.

    - Validates text and settings
    - Loads the avatar (optional, failures are ignored)
    - Splits the Markdown into slides and appends the final slide
    - Renders every slide to a base64 PNG
    """
    settings = get_settings()
    request_id = getattr(request.state, "request_id", "unknown")
    request_start = time.perf_counter()
    deadline = time.monotonic() + settings.request_timeout
    options = body.settings.model_dump(by_alias=True, exclude_none=True)

    logger.info(
        f"[{request_id}] Carousel generation started "
        f"(text={len(body.text) if isinstance(body.text, str) else 0} chars, "
        f"brandColor={bool(body.settings.brand_color)}, avatar={bool(body.settings.avatar_url)})"
    )

    errors = validate_input(body.text, options, settings)
    if errors:
        raise InvalidInput(f"Validation errors: {', '.join(errors)}", errors=errors)

    avatar = await load_avatar(body.settings.avatar_url, settings)

    parse_start = time.perf_counter()
    slides = markdown_to_slides(body.text)
    slides = add_final_slide(slides, options.get("finalSlide"))

    if not slides:
        logger.warning(f"[{request_id}] No slides generated, creating fallback slide")
        slides = [Slide("text", title=FALLBACK_TITLE, text=body.text[:FALLBACK_TEXT_LENGTH], color="default")]

    if len(slides) > settings.max_slides:
        raise TextTooLong(
            f"Too many slides ({len(slides)}). Maximum: {settings.max_slides}",
            details={"slidesGenerated": len(slides), "maxAllowed": settings.max_slides},
        )
    parse_time = (time.perf_counter() - parse_start) * 1000

    slide_types = dict(Counter(slide.type for slide in slides))
    logger.info(f"[{request_id}] Slides parsed: {len(slides)} {slide_types} ({parse_time:.0f}ms)")

    renderer = get_renderer(
        brand_color=body.settings.brand_color,
        author_username=body.settings.author_username or "@username",
        author_full_name=body.settings.author_full_name or "Your Name",
    )

    render_start = time.perf_counter()
    pngs = await run_in_threadpool(renderer.render_carousel, slides, avatar, deadline)
    render_time = (time.perf_counter() - render_start) * 1000
    images = [base64.b64encode(png).decode("ascii") for png in pngs]

    total_time = (time.perf_counter() - request_start) * 1000
    avg_slide_size = round(sum(len(img) for img in images) / len(images) / 1024)
    slides_per_second = round(len(slides) / (total_time / 1000), 2) if total_time else 0.0
    performance = {
        "parseTime": round(parse_time),
        "renderTime": round(render_time),
        "avgSlideSize": avg_slide_size,
        "slidesPerSecond": slides_per_second,
    }

    logger.info(f"[{request_id}] Carousel generation completed: {len(slides)} slides in {total_time:.0f}ms")

    return {
        "slides": slides_to_dicts(slides),
        "images": images,
        "metadata": {
            "totalSlides": len(slides),
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "processingTime": round(total_time),
            "performance": performance,
            "settings": _masked_settings(options),
            "engine": ENGINE,
            "version": VERSION,
            "requestId": request_id,
        },
    }
