"""Emoticons filter configuration management."""

import logging

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional

logger = logging.getLogger("emoticons.config")


class EmoticonSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Resource hosting — URLs are built as
    # {static_path}images/mega/twemojis/2_v2/{glyph_size}/{icon}{extension}
    static_path: str = Field(default="/", description="Static base path prefix for emoji images")
    glyph_size: str = Field(default="72x72", description="Glyph size bucket (e.g. 72x72 or 72)")
    extension: str = Field(default=".png", description="Image resource extension")

    # Markup
    large_class: str = Field(default="big", description="Extra class for a message that is a single emoji")

    # Pipeline
    processed_marker: str = Field(
        default="emojiFltr",
        description="Key set in message.processed_by once the filter handled a message",
    )

    # Dataset
    dataset_path: Optional[str] = Field(default=None, description="Local JSON emoji dataset ([{n, u}, ...])")

    model_config = {"env_prefix": "EMOTICONS_", "env_file": ".env", "extra": "ignore"}


def load_settings() -> EmoticonSettings:
    """Load settings from environment."""
    settings = EmoticonSettings()

    # The path template is plain concatenation, so a missing slash silently
    # produces broken image URLs.
    if settings.static_path and not settings.static_path.endswith("/"):
        logger.warning(
            f"EMOTICONS_STATIC_PATH {settings.static_path!r} does not end with '/'; "
            "emoji image URLs will be joined without a separator."
        )

    return settings
