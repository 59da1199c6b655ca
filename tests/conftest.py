"""Pytest configuration and shared fixtures."""

import pytest

from emoticons.config import EmoticonSettings
from emoticons.dictionary import EmojiDictionary, EmojiEntry
from emoticons.engine import EmoticonEngine

STATIC = "https://static.example/"
IMG_BASE = STATIC + "images/mega/twemojis/2_v2/72x72/"


def _img(alt: str, icon: str, classes: str = "emoji") -> str:
    return f'<img class="{classes}" draggable="false" alt="{alt}" src="{IMG_BASE}{icon}.png"/>'


@pytest.fixture
def img():
    """Expected markup for one emoji image."""
    return _img


@pytest.fixture
def entries():
    return [
        EmojiEntry(name="smile", codepoint_sequence="😄"),
        EmojiEntry(name="thumbsup", codepoint_sequence="👍"),
        EmojiEntry(name="heart", codepoint_sequence="❤️"),
        EmojiEntry(name="Technologist", codepoint_sequence="👨‍💻"),
        # dataset entry shadowed by the reserved override
        EmojiEntry(name="tm", codepoint_sequence="🔣"),
    ]


@pytest.fixture
def dictionary(entries):
    return EmojiDictionary.from_entries(entries)


@pytest.fixture
def settings():
    return EmoticonSettings(static_path=STATIC)


@pytest.fixture
def engine(dictionary, settings):
    return EmoticonEngine(dictionary, settings)
