#!/usr/bin/env python3
"""
Setup script to download the carousel font family into the assets directory.
Run this before starting the server.
"""

from carousel.assets import ensure_fonts, missing_fonts
from carousel.config import get_settings
from carousel.logging_config import setup_logging


def main():
    settings = get_settings()
    setup_logging(settings.log_level)

    print("=" * 50)
    print("Carousel Renderer - Asset Setup")
    print("=" * 50)
    print()

    ready = ensure_fonts(settings)

    print()
    print("=" * 50)
    if ready:
        print("✓ All fonts ready! You can start the server.")
    else:
        missing = ", ".join(missing_fonts(settings.font_path, settings.font_family))
        print(f"⚠ Missing fonts: {missing}")
        print("  The server will still work with Pillow's default font.")
    print("=" * 50)


if __name__ == "__main__":
    main()
