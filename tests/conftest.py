"""
Pytest configuration and fixtures
"""

import sys
from pathlib import Path

import pytest

# Add backend to path
BACKEND_ROOT = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(BACKEND_ROOT))

from carousel.config import Settings  # noqa: E402
from carousel.services.fonts import FontCache  # noqa: E402

CHAR_WIDTH = {"normal": 0.5, "bold": 0.6}


class RecordingCanvas:
    """
    Canvas double with deterministic metrics.

    A character is 0.5em wide in the normal weight and 0.6em in bold.
    Every text and line draw is recorded with the state it was drawn under.
    """

    def __init__(self, width: int = 1600, height: int = 2000):
        self.width = width
        self.height = height
        self.fill_color = "#000000"
        self.stroke_color = "#000000"
        self.line_width = 1.0
        self.alpha = 1.0
        self.weight = "normal"
        self.size = 64
        self.texts = []
        self.lines = []
        self.measure_calls = 0

    def set_font(self, weight, size):
        self.weight = weight
        self.size = size

    def measure_text(self, text):
        self.measure_calls += 1
        return len(text) * self.size * CHAR_WIDTH[self.weight]

    def set_fill_color(self, color):
        self.fill_color = color

    def set_stroke_color(self, color):
        self.stroke_color = color

    def set_line_width(self, width):
        self.line_width = width

    def set_alpha(self, alpha):
        self.alpha = alpha

    def fill_text(self, text, x, y, align="left"):
        self.texts.append({
            "text": text, "x": x, "y": y, "align": align,
            "weight": self.weight, "size": self.size,
            "color": self.fill_color, "alpha": self.alpha,
        })

    def stroke_line(self, x1, y1, x2, y2):
        self.lines.append({
            "x1": x1, "y1": y1, "x2": x2, "y2": y2,
            "color": self.stroke_color, "width": self.line_width,
        })

    def fill_rect(self, x, y, width, height):
        pass

    def fill_rounded_rect(self, x, y, width, height, radius):
        pass

    def draw_circular_image(self, image, x, y, size):
        pass

    def drawn(self):
        return [t["text"] for t in self.texts]


def char_measure(size, weight="normal"):
    """measure(text) for the RecordingCanvas metrics at a fixed size."""
    return lambda text: len(text) * size * CHAR_WIDTH[weight]


@pytest.fixture
def canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings that never touch the real font directory."""
    return Settings(font_path=str(tmp_path / "fonts"), fit_strategy="estimate")


@pytest.fixture
def fonts() -> FontCache:
    """Font cache without font files, always the Pillow default font."""
    return FontCache("Montserrat", font_dir=None)
