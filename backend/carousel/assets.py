"""
Font assets for the single carousel font family.

The family is fetched as a Google Fonts archive; only the static Regular and
Bold TTF files are kept.
"""

import logging
import os
import urllib.request
import zipfile
from pathlib import Path
from typing import List, Optional

from carousel.config import Settings, get_settings
from carousel.services.fonts import WEIGHT_FILES, font_files

logger = logging.getLogger(__name__)


def required_fonts(family: str) -> List[str]:
    return [f"{family}-{style}.ttf" for style in WEIGHT_FILES.values()]


def missing_fonts(font_dir, family: str) -> List[str]:
    font_dir = Path(font_dir)
    return [name for name in required_fonts(family) if not (font_dir / name).exists()]


def extract_fonts(zip_path, font_dir, family: str) -> List[Path]:
    """Extract the static Regular/Bold TTFs of `family` from a font archive."""
    font_dir = Path(font_dir)
    font_dir.mkdir(parents=True, exist_ok=True)
    wanted = set(required_fonts(family))
    extracted = []

    with zipfile.ZipFile(zip_path, "r") as archive:
        for member in archive.namelist():
            font_name = os.path.basename(member)
            if font_name not in wanted:
                continue
            # Variable fonts live at the archive root, static ones under static/
            if "/" in member and "static" not in member:
                continue
            dest_path = font_dir / font_name
            dest_path.write_bytes(archive.read(member))
            extracted.append(dest_path)
            logger.info(f"Extracted: {font_name}")

    return extracted


def ensure_fonts(settings: Optional[Settings] = None) -> bool:
    """Download the font family if its files are missing. Returns True when ready."""
    settings = settings or get_settings()
    font_dir = Path(settings.font_path)
    if not missing_fonts(font_dir, settings.font_family):
        logger.info("Fonts already exist, skipping download")
        return True

    font_dir.mkdir(parents=True, exist_ok=True)
    zip_path = font_dir / f"{settings.font_family.lower()}.zip"
    logger.info(f"Downloading {settings.font_family} fonts...")
    try:
        urllib.request.urlretrieve(settings.font_archive_url, zip_path)
        extract_fonts(zip_path, font_dir, settings.font_family)
    except (OSError, zipfile.BadZipFile) as e:
        logger.error(f"Failed to download fonts: {e}")
        logger.error(f"Place {', '.join(required_fonts(settings.font_family))} in {font_dir} manually")
        return False
    finally:
        if zip_path.exists():
            zip_path.unlink()

    return bool(font_files(font_dir, settings.font_family)) and not missing_fonts(font_dir, settings.font_family)
