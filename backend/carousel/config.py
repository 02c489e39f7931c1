from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Fonts (a single family, regular + bold)
    font_path: str = "assets/fonts/Montserrat"
    font_family: str = "Montserrat"
    font_archive_url: str = "https://fonts.google.com/download?family=Montserrat"

    # Colors
    accent_fallback: str = "#6366F1"  # Used when brandColor is missing or malformed
    default_background: str = "#ffffff"
    default_text_color: str = "#000000"

    # Limits
    max_text_length: int = 50000
    max_slides: int = 25
    request_timeout: float = 30.0  # Seconds, checked between slides
    max_avatar_size: int = 5 * 1024 * 1024
    avatar_timeout: float = 10.0

    # Behaviour
    strict_validation: bool = True  # False = only require text
    fit_strategy: str = "estimate"  # estimate | exact

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3001

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "CAROUSEL_"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
