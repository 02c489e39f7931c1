"""
Tests for the carousel renderer with the Pillow canvas
"""

import time
from io import BytesIO

import pytest
from PIL import Image

from carousel.errors import RenderFailed, RequestTimeout
from carousel.models import Slide
from carousel.services.canvas import PillowCanvas
from carousel.services.image_renderer import CarouselRenderer

BRAND = "#6366F1"


@pytest.fixture
def renderer(settings, fonts) -> CarouselRenderer:
    return CarouselRenderer(BRAND, "@tester", "Test Author", settings=settings, fonts=fonts)


class TestFontCache:
    """Tests for font descriptors."""

    def test_key(self, fonts):
        assert fonts.key("bold", 96) == "bold 96px Montserrat"
        assert fonts.key("normal", 63.6) == "normal 64px Montserrat"

    def test_unknown_weight(self, fonts):
        assert fonts.key("heavy", 40) == "normal 40px Montserrat"

    def test_invalid_size_uses_fallback(self, fonts):
        assert fonts.key("bold", 0) == "normal 64px Montserrat"

    def test_keys_are_memoized(self, fonts):
        fonts.key("bold", 96)
        fonts.key("bold", 96)
        assert len(fonts) == 1

    def test_default_font_is_usable(self, fonts):
        font = fonts.get_font("bold", 48)
        assert font is fonts.get_font("bold", 48)
        assert font.getlength("abc") > 0


class TestPillowCanvas:
    """Tests for PillowCanvas."""

    def test_measure_grows_with_size(self, fonts):
        canvas = PillowCanvas(200, 200, fonts)
        canvas.set_font("normal", 20)
        small = canvas.measure_text("hello")
        canvas.set_font("normal", 40)
        assert canvas.measure_text("hello") > small

    def test_alpha_blends_fill(self, fonts):
        canvas = PillowCanvas(10, 10, fonts, background="#ffffff")
        canvas.set_fill_color("#000000")
        canvas.set_alpha(0.5)
        canvas.fill_rect(0, 0, 10, 10)
        r, g, b = canvas.image.getpixel((5, 5))
        assert 120 <= r <= 135

    def test_encode_png(self, fonts):
        data = PillowCanvas(10, 10, fonts).encode_png()
        assert data.startswith(b"\x89PNG")

    def test_transparent_until_filled(self, fonts):
        """Only filled areas are opaque in the encoded image."""
        canvas = PillowCanvas(20, 20, fonts)
        canvas.set_fill_color("#ff0000")
        canvas.fill_rect(0, 0, 10, 20)

        image = Image.open(BytesIO(canvas.encode_png()))
        assert image.mode == "RGBA"
        assert image.getpixel((5, 5)) == (255, 0, 0, 255)
        assert image.getpixel((15, 5))[3] == 0

    def test_background_is_opaque(self, fonts):
        canvas = PillowCanvas(10, 10, fonts, background="#ffffff")
        assert canvas.to_image().getpixel((0, 0)) == (255, 255, 255, 255)


class TestSlideColors:
    """Tests for CarouselRenderer.slide_colors."""

    def test_accent_slide(self, renderer):
        assert renderer.slide_colors(Slide("intro", color="accent")) == (BRAND, "#ffffff", "#ffffff")

    def test_default_slide(self, renderer):
        assert renderer.slide_colors(Slide("text")) == ("#ffffff", "#000000", BRAND)

    def test_light_brand_gets_dark_text(self, settings, fonts):
        renderer = CarouselRenderer("#FFEB3B", settings=settings, fonts=fonts)
        assert renderer.slide_colors(Slide("quote", color="accent"))[1] == "#000000"

    def test_invalid_brand_color(self, settings, fonts):
        renderer = CarouselRenderer("blue", settings=settings, fonts=fonts)
        assert renderer.brand_color == settings.accent_fallback


class TestRenderSlide:
    """Tests for rendering single slides."""

    def test_dimensions_and_background(self, renderer):
        canvas = renderer.render_slide(Slide("quote", text="Stay curious.", color="accent"), 1, 3)
        assert canvas.image.size == (1600, 2000)
        # inside the rounded corner area the brand color is painted
        image = canvas.to_image()
        assert image.getpixel((800, 300)) == (99, 102, 241, 255)
        # the very corner stays outside the rounded rectangle
        assert image.getpixel((0, 0))[3] == 0

    def test_deterministic(self, renderer):
        slide = Slide("text", title="Point", text="Body with **bold** and __underline__\n\n• item")
        first = renderer.render_slide(slide, 2, 3).encode_png()
        second = renderer.render_slide(slide, 2, 3).encode_png()
        assert first == second

    def test_avatar_is_drawn(self, renderer):
        avatar = Image.new("RGB", (200, 200), (255, 0, 0))
        canvas = renderer.render_slide(Slide("text", text="Body"), 1, 1, avatar=avatar)
        r, g, b = canvas.image.getpixel((144 + 50, 192 - 50 - 9 + 50))
        assert r > 200 and g < 150 and b < 150

    def test_unknown_type(self, renderer):
        with pytest.raises(RenderFailed) as exc_info:
            renderer.render_slide(Slide("video", text="x"), 4, 5)
        error = exc_info.value
        assert error.slide_index == 4
        assert error.details["slideNumber"] == 4
        assert error.details["slideType"] == "video"


class TestRenderCarousel:
    """Tests for rendering a whole carousel."""

    def test_one_png_per_slide(self, renderer):
        slides = [
            Slide("intro", title="Hello", text="World", color="accent"),
            Slide("text", title="Point", text="Body"),
        ]
        images = renderer.render_carousel(slides)

        assert len(images) == 2
        for data in images:
            assert Image.open(BytesIO(data)).size == (1600, 2000)

    def test_expired_deadline(self, renderer):
        with pytest.raises(RequestTimeout) as exc_info:
            renderer.render_carousel([Slide("text", text="x")], deadline=time.monotonic() - 1)
        assert exc_info.value.details == {"completed": 0, "total": 1}

    def test_empty(self, renderer):
        assert renderer.render_carousel([]) == []
