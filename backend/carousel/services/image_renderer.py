"""
Carousel slide renderer.

Draws one slide per canvas:
- Rounded background (brand color on accent slides)
- Header with optional round avatar, username and slide counter
- Type-specific content layout
- Footer with the author name and a "next" arrow
"""

import logging
import time
from typing import List, Optional

from PIL import Image

from carousel.config import Settings, get_settings
from carousel.design import (
    ARROW,
    AVATAR_SIZE,
    BORDER_RADIUS,
    HEADER_ALPHA,
    HEADER_FOOTER_PADDING,
    HEIGHT,
    PADDING,
    WIDTH,
    content_region,
    get_font_spec,
)
from carousel.errors import RenderFailed, RequestTimeout
from carousel.models import Slide
from carousel.services.canvas import PillowCanvas
from carousel.services.colors import get_contrast_color, is_hex_color
from carousel.services.fonts import FontCache
from carousel.services.layouts import render_intro, render_quote, render_text
from carousel.services.text_layout import FitStrategy

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 5


class CarouselRenderer:
    """Renders slides for one carousel with a fixed brand and author."""

    def __init__(
        self,
        brand_color: Optional[str] = None,
        author_username: str = "@username",
        author_full_name: str = "Your Name",
        settings: Optional[Settings] = None,
        fonts: Optional[FontCache] = None,
    ):
        self.settings = settings or get_settings()
        if brand_color and not is_hex_color(brand_color):
            logger.warning(f"Invalid brand color {brand_color!r}, using {self.settings.accent_fallback}")
            brand_color = None
        self.brand_color = brand_color or self.settings.accent_fallback
        self.author_username = author_username or "@username"
        self.author_full_name = author_full_name or "Your Name"
        self.fonts = fonts or FontCache(self.settings.font_family, self.settings.font_path)
        self.strategy = FitStrategy.parse(self.settings.fit_strategy)
        self.region = content_region(WIDTH, HEIGHT)

    def slide_colors(self, slide: Slide) -> tuple:
        """(background, text, accent) colors for a slide."""
        if slide.is_accent:
            text_color = get_contrast_color(self.brand_color)
            return self.brand_color, text_color, text_color
        return self.settings.default_background, self.settings.default_text_color, self.brand_color

    def _new_canvas(self, background: str) -> PillowCanvas:
        canvas = PillowCanvas.new_surface(WIDTH, HEIGHT, self.fonts)
        canvas.set_fill_color(background)
        canvas.fill_rounded_rect(0, 0, WIDTH, HEIGHT, BORDER_RADIUS)
        return canvas

    def _draw_header(self, canvas: PillowCanvas, number: int, total: int, avatar: Optional[Image.Image]):
        spec = get_font_spec("header_footer")
        canvas.set_font(spec.weight, spec.size)
        canvas.set_alpha(HEADER_ALPHA)

        if avatar is not None:
            avatar_y = HEADER_FOOTER_PADDING - AVATAR_SIZE / 2 - 9
            canvas.draw_circular_image(avatar, PADDING, avatar_y, AVATAR_SIZE)
            canvas.fill_text(self.author_username, PADDING + AVATAR_SIZE + 16, HEADER_FOOTER_PADDING)
        else:
            canvas.fill_text(self.author_username, PADDING, HEADER_FOOTER_PADDING)

        canvas.fill_text(f"{number}/{total}", WIDTH - PADDING, HEADER_FOOTER_PADDING, align="right")
        canvas.set_alpha(1.0)

    def _draw_footer(self, canvas: PillowCanvas, number: int, total: int):
        spec = get_font_spec("header_footer")
        canvas.set_font(spec.weight, spec.size)
        canvas.set_alpha(HEADER_ALPHA)
        footer_y = HEIGHT - HEADER_FOOTER_PADDING
        canvas.fill_text(self.author_full_name, PADDING, footer_y)
        if number < total:
            canvas.fill_text(ARROW, WIDTH - PADDING, footer_y, align="right")
        canvas.set_alpha(1.0)

    def _draw_content(self, canvas: PillowCanvas, slide: Slide, accent_color: str):
        if slide.type == "intro":
            render_intro(canvas, slide, self.region, self.strategy)
        elif slide.type == "text":
            render_text(canvas, slide, self.region, accent_color, self.strategy)
        elif slide.type == "quote":
            render_quote(canvas, slide, self.region, self.strategy)
        else:
            raise RenderFailed(f"Unsupported slide type: {slide.type}", slide_type=slide.type)

    def render_slide(self, slide: Slide, number: int, total: int,
                     avatar: Optional[Image.Image] = None) -> PillowCanvas:
        """Render slide `number` of `total` and return its canvas."""
        start_time = time.perf_counter()
        logger.info(f"Rendering slide {number}/{total} ({slide.type})")

        try:
            background, text_color, accent_color = self.slide_colors(slide)
            canvas = self._new_canvas(background)
            canvas.set_fill_color(text_color)

            self._draw_header(canvas, number, total, avatar)
            canvas.set_fill_color(text_color)
            self._draw_content(canvas, slide, accent_color)
            canvas.set_fill_color(text_color)
            self._draw_footer(canvas, number, total)
        except RenderFailed as e:
            e.slide_index = number
            e.details = {**(e.details or {}), "slideNumber": number, "slideType": slide.type}
            logger.error(f"Slide {number} rendering failed: {e.message}")
            raise
        except (ValueError, TypeError, OSError) as e:
            logger.exception(f"Slide {number} rendering failed")
            raise RenderFailed(
                f"Failed to render slide {number}",
                slide_type=slide.type,
                slide_index=number,
                details={"originalError": str(e)},
            ) from e

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.info(f"Slide {number} rendered ({elapsed:.0f}ms, avatar={avatar is not None})")
        return canvas

    def render_carousel(self, slides: List[Slide], avatar: Optional[Image.Image] = None,
                        deadline: Optional[float] = None) -> List[bytes]:
        """Render every slide in order and return PNG bytes per slide.

        Args:
            slides: Slides in carousel order
            avatar: Decoded avatar image, or None
            deadline: time.monotonic() value after which no further slide starts

        Returns:
            PNG-encoded images, one per slide
        """
        total = len(slides)
        images = []

        for index, slide in enumerate(slides, 1):
            if deadline is not None and time.monotonic() > deadline:
                raise RequestTimeout(
                    "Request timed out while rendering",
                    details={"completed": index - 1, "total": total},
                )

            canvas = self.render_slide(slide, index, total, avatar)
            images.append(canvas.encode_png())

            if total > 10 and index % PROGRESS_EVERY == 0:
                logger.info(f"Rendering progress: {index}/{total} ({round(index / total * 100)}%)")

        return images


def get_renderer(brand_color: Optional[str] = None, author_username: str = "@username",
                 author_full_name: str = "Your Name") -> CarouselRenderer:
    """Get renderer instance with specified settings."""
    return CarouselRenderer(brand_color, author_username, author_full_name)
