"""
Static design system for carousel slides.

Three groups of constants:
1. CANVAS - slide geometry and the content region derived from it
2. FONTS - one FontSpec per text role
3. FINAL SLIDE TEMPLATES - closing slides appended on request
"""

from dataclasses import dataclass

# Image dimensions
WIDTH = 1600
HEIGHT = 2000

PADDING = 144
BORDER_RADIUS = 64
HEADER_FOOTER_PADDING = 192
CONTENT_START_Y = 420

AVATAR_SIZE = 100
HEADER_ALPHA = 0.7
SUBTITLE_ALPHA = 0.9

# Vertical spacing
TITLE_TO_BODY = 80  # Title block to body / subtitle
PARAGRAPH_SPACING = 24  # Between body paragraphs
BULLET_INDENT = 32  # Extra indent after the arrow marker

BULLET = "•"
ARROW = "→"

# Adaptive sizing
SIZE_STEP = 4
ESTIMATE_LINE_FACTOR = 1.4
INTRO_TITLE_SHARE = 0.6
TEXT_TITLE_SHARE = 0.3
SMALL_QUOTE_SCALE = 0.7
SMALL_QUOTE_THRESHOLD = 100  # Quotes longer than this render small

# Underlines
UNDERLINE_OFFSET = 0.1
UNDERLINE_THICKNESS = 0.03
UNDERLINE_MIN_WIDTH = 2


@dataclass(frozen=True)
class FontSpec:
    weight: str
    size: int
    line_height_ratio: float
    min_size: int

    def line_height(self, size: float) -> int:
        return round(size * self.line_height_ratio)


@dataclass(frozen=True)
class ContentRegion:
    """Rectangle available for title/body/quote text."""
    x: float
    y: float
    width: float
    height: float


# ============================================
# FONTS
# ============================================
FONTS = {
    "title_intro": FontSpec("bold", 128, 1.1, 80),
    "subtitle_intro": FontSpec("normal", 64, 1.25, 40),
    "title_text": FontSpec("bold", 96, 1.2, 60),
    "text": FontSpec("normal", 64, 1.4, 40),
    "quote": FontSpec("bold", 96, 1.2, 60),
    "header_footer": FontSpec("normal", 48, 1.4, 48),
}


def get_font_spec(role: str) -> FontSpec:
    """Get the font spec for a text role."""
    return FONTS[role]


def content_region(width: int = WIDTH, height: int = HEIGHT) -> ContentRegion:
    """Content area between header and footer, inside the side padding."""
    return ContentRegion(
        x=PADDING,
        y=CONTENT_START_Y,
        width=width - PADDING * 2,
        height=height - CONTENT_START_Y - HEADER_FOOTER_PADDING,
    )


# ============================================
# FINAL SLIDE TEMPLATES
# ============================================
FINAL_SLIDE_TEMPLATES = {
    "cta": {
        "title": "Follow for more!",
        "text": "More content on my profile",
        "color": "accent",
    },
    "contact": {
        "title": "Get in touch:",
        "text": "email@example.com\n\nTelegram: @username",
        "color": "default",
    },
    "brand": {
        "title": "Thanks for reading!",
        "text": "Helping businesses grow",
        "color": "accent",
    },
}


def get_final_slide_template(template_id: str) -> dict:
    """Get a final slide template by ID, defaulting to the call to action."""
    return FINAL_SLIDE_TEMPLATES.get(template_id, FINAL_SLIDE_TEMPLATES["cta"])

