"""
Text wrapping and adaptive font sizing.

Both work against a `measure(text) -> width` callable supplied by the
graphics backend for the currently active font, so they can be exercised
without any real fonts.
"""

import logging
from enum import Enum
from typing import Callable, List

from carousel.design import ESTIMATE_LINE_FACTOR, SIZE_STEP

logger = logging.getLogger(__name__)

Measure = Callable[[str], float]
MeasureAtSize = Callable[[int], Measure]

HYPHEN = "-"


class FitStrategy(str, Enum):
    """How the size selector estimates the height of wrapped text."""
    ESTIMATE = "estimate"  # lines * size * 1.4
    EXACT = "exact"  # sum of the rounded per-line advances the layout uses

    @classmethod
    def parse(cls, value) -> "FitStrategy":
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown fit strategy {value!r}, using estimate")
            return cls.ESTIMATE


def _split_word(word: str, max_width: float, measure: Measure) -> List[str]:
    """Break an oversized word into hyphenated chunks; the last chunk has no hyphen."""
    chunks = []
    chunk = ""
    for char in word:
        candidate = chunk + char
        if chunk and measure(candidate + HYPHEN) > max_width:
            chunks.append(chunk + HYPHEN)
            chunk = char
        else:
            chunk = candidate
    chunks.append(chunk)
    return chunks


def wrap_text(text: str, max_width: float, measure: Measure) -> List[str]:
    """Greedy word wrap so every line measures at most max_width."""
    if not text:
        return []
    lines = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if measure(candidate) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current)
        if measure(word) > max_width:
            chunks = _split_word(word, max_width, measure)
            lines.extend(chunks[:-1])
            current = chunks[-1]
        else:
            current = word

    if current:
        lines.append(current)
    return lines


def count_lines(text: str, max_width: float, measure: Measure) -> int:
    """Wrapped line count, each newline-separated paragraph wrapped on its own."""
    return sum(len(wrap_text(paragraph, max_width, measure)) for paragraph in text.split("\n"))


def estimate_height(line_count: int, size: int, strategy: FitStrategy = FitStrategy.ESTIMATE,
                    line_height_ratio: float = ESTIMATE_LINE_FACTOR) -> float:
    if strategy == FitStrategy.EXACT:
        return line_count * round(size * line_height_ratio)
    return line_count * size * ESTIMATE_LINE_FACTOR


def select_font_size(
    text: str,
    max_width: float,
    max_height: float,
    base_size: int,
    min_size: int,
    measure_at_size: MeasureAtSize,
    strategy: FitStrategy = FitStrategy.ESTIMATE,
    line_height_ratio: float = ESTIMATE_LINE_FACTOR,
    step: int = SIZE_STEP,
) -> int:
    """
    Largest size from base_size down (in `step` px) whose wrapped text fits
    max_height. Returns min_size when nothing fits.

    The height check is an approximation (see FitStrategy); width is always
    exact because the text is re-wrapped at every candidate size.
    """
    if base_size < min_size:
        logger.warning(f"Base font size {base_size} below minimum {min_size}, clamping")
        min_size = base_size
    if not text or not text.strip():
        return base_size

    size = base_size
    while size >= min_size:
        lines = count_lines(text, max_width, measure_at_size(size))
        if estimate_height(lines, size, strategy, line_height_ratio) <= max_height:
            return size
        size -= step

    logger.info(f"Text ({len(text)} chars) does not fit at minimum size {min_size}")
    return min_size
