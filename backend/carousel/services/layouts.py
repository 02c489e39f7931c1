"""
Per-slide-type layouts.

Each layout draws into the content region of an already prepared canvas
(background, text color and header are set by the renderer) and returns the
vertical cursor after its last line.
"""

import logging
import re

from carousel.design import (
    ARROW,
    BULLET,
    BULLET_INDENT,
    INTRO_TITLE_SHARE,
    PARAGRAPH_SPACING,
    SMALL_QUOTE_SCALE,
    SUBTITLE_ALPHA,
    TEXT_TITLE_SHARE,
    TITLE_TO_BODY,
    ContentRegion,
    FontSpec,
    get_font_spec,
)
from carousel.errors import RenderFailed
from carousel.models import Slide
from carousel.services.canvas import Canvas
from carousel.services.rich_text import compose_rich_text
from carousel.services.text_layout import FitStrategy, select_font_size, wrap_text

logger = logging.getLogger(__name__)

BULLET_PREFIX = re.compile(rf"^{BULLET}\s*")


def _measure_at(canvas: Canvas, weight: str):
    def measure_at_size(size):
        canvas.set_font(weight, size)
        return canvas.measure_text
    return measure_at_size


def fit_size(canvas: Canvas, text: str, spec: FontSpec, max_width: float, max_height: float,
             strategy: FitStrategy, base_size: int = None) -> int:
    """Adaptive size for a text role, measured under the role's weight."""
    return select_font_size(
        text,
        max_width,
        max_height,
        base_size if base_size is not None else spec.size,
        spec.min_size,
        _measure_at(canvas, spec.weight),
        strategy=strategy,
        line_height_ratio=spec.line_height_ratio,
    )


def draw_wrapped(canvas: Canvas, text: str, spec: FontSpec, size: int, x: float, y: float,
                 max_width: float) -> float:
    """Wrap and draw plain text top-down, returns the cursor below it."""
    canvas.set_font(spec.weight, size)
    for line in wrap_text(text, max_width, canvas.measure_text):
        canvas.fill_text(line, x, y)
        y += spec.line_height(size)
    return y


def render_intro(canvas: Canvas, slide: Slide, region: ContentRegion,
                 strategy: FitStrategy = FitStrategy.ESTIMATE) -> float:
    """Big title, then the subtitle slightly faded."""
    try:
        y = region.y
        title = slide.title or ""
        if title.strip():
            title_spec = get_font_spec("title_intro")
            title_size = fit_size(canvas, title, title_spec, region.width,
                                  region.height * INTRO_TITLE_SHARE, strategy)
            y = draw_wrapped(canvas, title, title_spec, title_size, region.x, y, region.width)

        if slide.text and slide.text.strip():
            if y > region.y:
                y += TITLE_TO_BODY
            subtitle_spec = get_font_spec("subtitle_intro")
            remaining = region.height - (y - region.y)
            subtitle_size = fit_size(canvas, slide.text, subtitle_spec, region.width, remaining, strategy)
            canvas.set_alpha(SUBTITLE_ALPHA)
            try:
                y = draw_wrapped(canvas, slide.text, subtitle_spec, subtitle_size, region.x, y, region.width)
            finally:
                canvas.set_alpha(1.0)
        return y
    except (ValueError, TypeError, OSError) as e:
        logger.error(f"Intro slide rendering error: {e}")
        raise RenderFailed("Failed to render intro slide", slide_type="intro") from e


def render_text(canvas: Canvas, slide: Slide, region: ContentRegion, accent_color: str,
                strategy: FitStrategy = FitStrategy.ESTIMATE) -> float:
    """Optional title, then body paragraphs with bullets and inline styling."""
    try:
        y = region.y
        if slide.title and slide.title.strip():
            title_spec = get_font_spec("title_text")
            title_size = fit_size(canvas, slide.title, title_spec, region.width,
                                  region.height * TEXT_TITLE_SHARE, strategy)
            y = draw_wrapped(canvas, slide.title, title_spec, title_size, region.x, y, region.width)
            y += TITLE_TO_BODY

        paragraphs = [line.strip() for line in (slide.text or "").split("\n") if line.strip()]
        if not paragraphs:
            return y

        text_spec = get_font_spec("text")
        remaining = region.height - (y - region.y)
        text_size = fit_size(canvas, "\n".join(paragraphs), text_spec, region.width, remaining, strategy)
        base_color = canvas.fill_color

        for index, paragraph in enumerate(paragraphs):
            x = region.x
            max_width = region.width

            if paragraph.startswith(BULLET):
                canvas.set_font("bold", text_size)
                canvas.set_fill_color(base_color)
                canvas.fill_text(ARROW, x, y)
                indent = canvas.measure_text(f"{ARROW} ") + BULLET_INDENT
                x += indent
                max_width -= indent
                paragraph = BULLET_PREFIX.sub("", paragraph)

            lines_used = compose_rich_text(
                canvas, paragraph, x, y, max_width, text_size,
                base_color, accent_color, slide.is_accent,
                line_height_ratio=text_spec.line_height_ratio,
            )
            y += lines_used * text_spec.line_height(text_size)

            if index < len(paragraphs) - 1:
                y += PARAGRAPH_SPACING

        canvas.set_fill_color(base_color)
        return y
    except (ValueError, TypeError, OSError) as e:
        logger.error(f"Text slide rendering error: {e}")
        raise RenderFailed("Failed to render text slide", slide_type="text") from e


def render_quote(canvas: Canvas, slide: Slide, region: ContentRegion,
                 strategy: FitStrategy = FitStrategy.ESTIMATE) -> float:
    """Single block of quote text, centered vertically in the region."""
    try:
        text = slide.text or ""
        if not text.strip():
            return region.y

        spec = get_font_spec("quote")
        base_size = round(spec.size * SMALL_QUOTE_SCALE) if slide.size == "small" else spec.size
        size = fit_size(canvas, text, spec, region.width, region.height, strategy, base_size=base_size)

        canvas.set_font(spec.weight, size)
        lines = wrap_text(text, region.width, canvas.measure_text)
        line_height = spec.line_height(size)
        y = region.y + (region.height - len(lines) * line_height) / 2

        for line in lines:
            canvas.fill_text(line, region.x, y)
            y += line_height
        return y
    except (ValueError, TypeError, OSError) as e:
        logger.error(f"Quote slide rendering error: {e}")
        raise RenderFailed("Failed to render quote slide", slide_type="quote") from e
