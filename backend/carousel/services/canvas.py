"""
Drawing surface used by the slide layouts.

`Canvas` is the capability set the layouts rely on; `PillowCanvas` implements
it on a Pillow image. Text is anchored on the alphabetic baseline, colors are
hex strings and the global alpha blends fills and strokes. Areas no fill has
covered stay transparent in the encoded PNG.
"""

from io import BytesIO
from typing import Optional, Protocol

from PIL import Image, ImageChops, ImageDraw

from carousel.services.colors import hex_to_rgb
from carousel.services.fonts import FontCache

ANCHORS = {
    "left": "ls",
    "right": "rs",
    "center": "ms",
}


class Canvas(Protocol):
    width: int
    height: int
    fill_color: str

    def set_font(self, weight: str, size: float) -> None: ...

    def measure_text(self, text: str) -> float: ...

    def set_fill_color(self, color: str) -> None: ...

    def set_stroke_color(self, color: str) -> None: ...

    def set_line_width(self, width: float) -> None: ...

    def set_alpha(self, alpha: float) -> None: ...

    def fill_text(self, text: str, x: float, y: float, align: str = "left") -> None: ...

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None: ...

    def fill_rounded_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None: ...

    def draw_circular_image(self, image, x: float, y: float, size: int) -> None: ...


class PillowCanvas:
    """Canvas backed by a Pillow RGB image with alpha-blended drawing.

    `coverage` is the opacity mask of everything filled so far; without a
    background the surface starts fully transparent.
    """

    def __init__(self, width: int, height: int, fonts: FontCache, background: Optional[str] = None):
        self.width = width
        self.height = height
        self.fonts = fonts
        self.image = Image.new("RGB", (width, height), hex_to_rgb(background) if background else (0, 0, 0))
        self.coverage = Image.new("L", (width, height), 255 if background else 0)
        self.draw = ImageDraw.Draw(self.image, "RGBA")
        self.fill_color = "#000000"
        self.stroke_color = "#000000"
        self.line_width = 1.0
        self.alpha = 1.0
        self.font = fonts.get_font("normal", 64)

    @classmethod
    def new_surface(cls, width: int, height: int, fonts: FontCache,
                    background: Optional[str] = None) -> "PillowCanvas":
        return cls(width, height, fonts, background)

    def _ink(self, color: str) -> tuple:
        return (*hex_to_rgb(color), int(round(255 * self.alpha)))

    def _cover(self, shape: str, box: list, **kwargs):
        """Raise coverage under a filled shape to the current alpha."""
        mask = Image.new("L", self.coverage.size, 0)
        getattr(ImageDraw.Draw(mask), shape)(box, fill=int(round(255 * self.alpha)), **kwargs)
        self.coverage = ImageChops.lighter(self.coverage, mask)

    def set_font(self, weight: str, size: float):
        self.font = self.fonts.get_font(weight, size)

    def measure_text(self, text: str) -> float:
        return self.font.getlength(text)

    def set_fill_color(self, color: str):
        self.fill_color = color

    def set_stroke_color(self, color: str):
        self.stroke_color = color

    def set_line_width(self, width: float):
        self.line_width = width

    def set_alpha(self, alpha: float):
        self.alpha = max(0.0, min(1.0, alpha))

    def fill_text(self, text: str, x: float, y: float, align: str = "left"):
        if not text:
            return
        self.draw.text((x, y), text, font=self.font, fill=self._ink(self.fill_color),
                       anchor=ANCHORS.get(align, "ls"))

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float):
        self.draw.line([(x1, y1), (x2, y2)], fill=self._ink(self.stroke_color),
                       width=max(1, int(round(self.line_width))))

    def fill_rect(self, x: float, y: float, width: float, height: float):
        box = [x, y, x + width - 1, y + height - 1]
        self.draw.rectangle(box, fill=self._ink(self.fill_color))
        self._cover("rectangle", box)

    def fill_rounded_rect(self, x: float, y: float, width: float, height: float, radius: float):
        box = [x, y, x + width - 1, y + height - 1]
        self.draw.rounded_rectangle(box, radius=radius, fill=self._ink(self.fill_color))
        self._cover("rounded_rectangle", box, radius=radius)

    def draw_circular_image(self, image: Image.Image, x: float, y: float, size: int):
        """Paste the image scaled to size x size and clipped to a circle."""
        avatar = image.convert("RGBA").resize((size, size), Image.Resampling.LANCZOS)
        mask = Image.new("L", (size, size), 0)
        ImageDraw.Draw(mask).ellipse([0, 0, size - 1, size - 1], fill=int(round(255 * self.alpha)))
        self.image.paste(avatar, (int(x), int(y)), mask)

    def to_image(self) -> Image.Image:
        """RGBA image with the coverage mask as alpha."""
        image = self.image.convert("RGBA")
        image.putalpha(self.coverage)
        return image

    def encode_png(self) -> bytes:
        buffer = BytesIO()
        self.to_image().save(buffer, "PNG")
        return buffer.getvalue()
