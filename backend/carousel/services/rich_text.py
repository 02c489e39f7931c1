"""
Rich-text line composer.

Lays styled words out into lines, draws them and finishes with the underline
strokes for the whole block.
"""

import logging
from typing import List

from carousel.design import (
    ESTIMATE_LINE_FACTOR,
    UNDERLINE_MIN_WIDTH,
    UNDERLINE_OFFSET,
    UNDERLINE_THICKNESS,
)
from carousel.models import LaidOutLine, StyledSegment, UnderlineStroke
from carousel.services.canvas import Canvas
from carousel.services.inline_parser import parse_inline

logger = logging.getLogger(__name__)


def layout_segments(canvas: Canvas, segments: List[StyledSegment], max_width: float,
                    font_size: float) -> List[LaidOutLine]:
    """Pack 'word ' fragments into lines, measuring each under its own weight."""
    lines = []
    current = LaidOutLine()

    for segment in segments:
        for word in segment.text.split():
            fragment = StyledSegment(word + " ", segment.bold, segment.underline)
            canvas.set_font(fragment.weight, font_size)
            width = canvas.measure_text(fragment.text)

            if current.fragments and current.width + width > max_width:
                lines.append(current)
                current = LaidOutLine()
            current.append(fragment, width)

    if current.fragments:
        lines.append(current)
    return lines


def fragment_color(fragment: StyledSegment, base_color: str, accent_color: str, slide_is_accent: bool) -> str:
    """Accent only for underlined bold text, and never on an accent slide."""
    if fragment.underline and fragment.bold and not slide_is_accent:
        return accent_color
    return base_color


def draw_lines(canvas: Canvas, lines: List[LaidOutLine], x: float, y: float, font_size: float,
               base_color: str, accent_color: str, slide_is_accent: bool,
               line_height_ratio: float = ESTIMATE_LINE_FACTOR) -> List[UnderlineStroke]:
    """Draw laid out lines and return the underline strokes they need."""
    line_height = round(font_size * line_height_ratio)
    underlines = []
    current_y = y

    for line in lines:
        current_x = x
        for fragment in line.fragments:
            canvas.set_font(fragment.weight, font_size)
            color = fragment_color(fragment, base_color, accent_color, slide_is_accent)
            canvas.set_fill_color(color)
            canvas.fill_text(fragment.text, current_x, current_y)

            width = canvas.measure_text(fragment.text)
            if fragment.underline:
                underlines.append(UnderlineStroke(
                    x=current_x,
                    y=current_y + font_size * UNDERLINE_OFFSET,
                    width=width,
                    color=color,
                ))
            current_x += width
        current_y += line_height

    return underlines


def draw_underlines(canvas: Canvas, underlines: List[UnderlineStroke], font_size: float):
    canvas.set_line_width(max(UNDERLINE_MIN_WIDTH, font_size * UNDERLINE_THICKNESS))
    for stroke in underlines:
        canvas.set_stroke_color(stroke.color)
        canvas.stroke_line(stroke.x, stroke.y, stroke.x + stroke.width, stroke.y)


def compose_rich_text(
    canvas: Canvas,
    text: str,
    x: float,
    y: float,
    max_width: float,
    font_size: float,
    base_color: str,
    accent_color: str,
    slide_is_accent: bool,
    line_height_ratio: float = ESTIMATE_LINE_FACTOR,
) -> int:
    """
    Draw inline-marked text wrapped to max_width starting at baseline y.

    Returns the number of lines used so the caller can advance its cursor.
    If composing fails the raw text is drawn as one plain line instead.
    """
    try:
        segments = parse_inline(text)
        lines = layout_segments(canvas, segments, max_width, font_size)
        underlines = draw_lines(canvas, lines, x, y, font_size, base_color, accent_color,
                                slide_is_accent, line_height_ratio)
        draw_underlines(canvas, underlines, font_size)
        return max(1, len(lines))
    except (ValueError, TypeError, OSError) as e:
        logger.warning(f"Rich text rendering error, drawing plain text: {e}")
        canvas.set_font("normal", font_size)
        canvas.set_fill_color(base_color)
        canvas.fill_text(text, x, y)
        return 1
