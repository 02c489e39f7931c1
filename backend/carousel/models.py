from dataclasses import dataclass, field
from typing import Optional, List


SLIDE_TYPES = ("intro", "text", "quote")
SLIDE_COLORS = ("default", "accent")


@dataclass
class Slide:
    """One unit of content destined to become one rendered image."""
    type: str
    text: str = ""
    color: str = "default"
    title: Optional[str] = None
    size: Optional[str] = None  # small | large, quotes only

    @property
    def is_accent(self) -> bool:
        return self.color == "accent"

    def to_dict(self) -> dict:
        data = {"type": self.type}
        if self.title is not None:
            data["title"] = self.title
        data["text"] = self.text
        data["color"] = self.color
        if self.size is not None:
            data["size"] = self.size
        return data


@dataclass(frozen=True)
class StyledSegment:
    """A contiguous run of text sharing one inline style."""
    text: str
    bold: bool = False
    underline: bool = False

    @property
    def weight(self) -> str:
        return "bold" if self.bold else "normal"


@dataclass(frozen=True)
class UnderlineStroke:
    x: float
    y: float
    width: float
    color: str


@dataclass
class LaidOutLine:
    """Styled fragments that fit on one rendered line."""
    fragments: List[StyledSegment] = field(default_factory=list)
    width: float = 0.0

    def append(self, fragment: StyledSegment, width: float):
        self.fragments.append(fragment)
        self.width += width

    @property
    def text(self) -> str:
        return "".join(f.text for f in self.fragments)


def slides_to_dicts(slides: List[Slide]) -> list:
    return [s.to_dict() for s in slides]
