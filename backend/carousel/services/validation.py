"""Request validation. Collects every problem instead of stopping at the first."""

import re
from typing import List, Optional

from carousel.config import Settings, get_settings
from carousel.services.colors import is_hex_color

URL_PATTERN = re.compile(r"^https?://.+")

MAX_USERNAME_LENGTH = 50
MAX_FULL_NAME_LENGTH = 100


def validate_input(text, options: Optional[dict] = None, settings: Optional[Settings] = None) -> List[str]:
    """
    Validate carousel text and presentation options.

    Args:
        text: Markdown source, must be a non-empty string
        options: brandColor / authorUsername / authorFullName / avatarUrl
        settings: Limits; non-strict mode only checks that text is present

    Returns:
        Human-readable reasons, empty when the input is valid
    """
    settings = settings or get_settings()
    options = options or {}
    errors = []

    if not text or not isinstance(text, str):
        errors.append("Text is required and must be a string")
        return errors
    if not settings.strict_validation:
        return errors

    if not text.strip():
        errors.append("Text cannot be empty")
    elif len(text) > settings.max_text_length:
        errors.append(f"Text is too long (maximum {settings.max_text_length} characters)")

    brand_color = options.get("brandColor")
    if brand_color and not is_hex_color(brand_color):
        errors.append("brandColor must be in #RRGGBB format")

    username = options.get("authorUsername")
    if username and (not isinstance(username, str) or len(username) > MAX_USERNAME_LENGTH):
        errors.append(f"authorUsername must be a string of at most {MAX_USERNAME_LENGTH} characters")

    full_name = options.get("authorFullName")
    if full_name and (not isinstance(full_name, str) or len(full_name) > MAX_FULL_NAME_LENGTH):
        errors.append(f"authorFullName must be a string of at most {MAX_FULL_NAME_LENGTH} characters")

    avatar_url = options.get("avatarUrl")
    if avatar_url and not URL_PATTERN.match(str(avatar_url)):
        errors.append("avatarUrl must be a valid URL")

    return errors
