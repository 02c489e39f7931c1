"""
Inline rich-text markers inside slide text.

Supported runs, longest match first:
    __**text**__   underline + bold
    __text__       underline
    **text**       bold
Anything else is plain text. Marker characters that do not close are kept
as literal text.
"""

import logging
import re
from typing import List

from carousel.models import StyledSegment

logger = logging.getLogger(__name__)

INLINE_PATTERN = re.compile(
    r"(?P<underline_bold>__\*\*.+?\*\*__)"
    r"|(?P<underline>__.+?__)"
    r"|(?P<bold>\*\*.+?\*\*)"
    r"|(?P<plain>[^*_]+)"
    r"|(?P<literal>[*_])"
)


def _segment(match: re.Match) -> StyledSegment:
    kind = match.lastgroup
    chunk = match.group(0)
    if kind == "underline_bold":
        return StyledSegment(chunk[4:-4], bold=True, underline=True)
    if kind == "underline":
        return StyledSegment(chunk[2:-2], underline=True)
    if kind == "bold":
        return StyledSegment(chunk[2:-2], bold=True)
    return StyledSegment(chunk)


def _tokenize(text: str) -> List[StyledSegment]:
    segments = []
    for match in INLINE_PATTERN.finditer(text):
        segment = _segment(match)
        if not segment.text:
            continue
        previous = segments[-1] if segments else None
        # Literal marker characters join the neighbouring plain run
        if (previous is not None and not previous.bold and not previous.underline
                and not segment.bold and not segment.underline):
            segments[-1] = StyledSegment(previous.text + segment.text)
        else:
            segments.append(segment)
    return segments


def parse_inline(text: str) -> List[StyledSegment]:
    """Split a text run into styled segments. Never raises."""
    if not text:
        return []
    try:
        return _tokenize(text)
    except (TypeError, re.error) as e:
        logger.warning(f"Inline parsing error: {e} ({str(text)[:100]!r})")
        return [StyledSegment(str(text))]
