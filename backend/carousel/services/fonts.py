"""
Font key cache.

Maps (weight, size) to a font descriptor string and to the loaded Pillow font
for that descriptor. One cache belongs to one rendering session.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import ImageFont

logger = logging.getLogger(__name__)

WEIGHT_FILES = {
    "normal": "Regular",
    "bold": "Bold",
}
FALLBACK_KEY = "normal 64px"


def font_files(font_dir, family: str) -> Dict[str, Path]:
    """Weight -> TTF path for the family, missing weights fall back to Regular."""
    font_dir = Path(font_dir)
    files = {}
    for weight, style in WEIGHT_FILES.items():
        path = font_dir / f"{family}-{style}.ttf"
        if path.exists():
            files[weight] = path
    if "bold" not in files and "normal" in files:
        files["bold"] = files["normal"]
    if "normal" not in files and "bold" in files:
        files["normal"] = files["bold"]
    return files


class FontCache:
    """Memoized font descriptors and Pillow fonts for one family."""

    def __init__(self, family: str = "Montserrat", font_dir: Optional[str] = None):
        self.family = family
        self.files = font_files(font_dir, family) if font_dir else {}
        self._keys: Dict[Tuple[str, int], str] = {}
        self._fonts: Dict[str, ImageFont.FreeTypeFont] = {}
        if font_dir and not self.files:
            logger.warning(f"No {family} fonts in {font_dir}, using Pillow default font")

    def key(self, weight: str, size: float) -> str:
        """Descriptor string for a weight and size, e.g. 'bold 96px Montserrat'."""
        if weight not in WEIGHT_FILES:
            logger.warning(f"Unknown font weight {weight!r}, using normal")
            weight = "normal"
        size = int(round(size))
        if size <= 0:
            logger.warning(f"Invalid font size {size}, using fallback")
            return f"{FALLBACK_KEY} {self.family}"
        cache_key = (weight, size)
        if cache_key not in self._keys:
            self._keys[cache_key] = f"{weight} {size}px {self.family}"
        return self._keys[cache_key]

    def get_font(self, weight: str, size: float) -> ImageFont.FreeTypeFont:
        """Get font with specified weight and size."""
        descriptor = self.key(weight, size)
        font = self._fonts.get(descriptor)
        if font is None:
            font = self._load(descriptor)
            self._fonts[descriptor] = font
        return font

    def _load(self, descriptor: str):
        weight, size_px = descriptor.split(" ")[:2]
        size = int(size_px[:-2])
        path = self.files.get(weight)
        if path is not None:
            try:
                return ImageFont.truetype(str(path), size)
            except OSError as e:
                logger.warning(f"Font loading error for {path}: {e}")
        return ImageFont.load_default(size=size)

    def __len__(self):
        return len(self._keys)
