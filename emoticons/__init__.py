"""Emoticons filter — short codes, Unicode emoji and image markup in chat messages.

- Dictionary: name → emoji lookup with reserved overrides
- Literals: backtick fences protected from rewriting
- Short codes: :name: resolution for rendering and sending
- Render: Unicode emoji → <img> markup, single-emoji enlargement
- Reverse: Unicode emoji → :name:
- Filter: message pipeline hooks and dictionary-load deferral
"""

from .config import EmoticonSettings, load_settings
from .dataset import DatasetError, dictionary_future, load_dataset, load_dictionary, parse_entries
from .dictionary import RESERVED_OVERRIDES, EmojiDictionary, EmojiEntry
from .engine import EmoticonEngine
from .filter import EmoticonsFilter
from .literals import mask, split_literals, unmask
from .message import ChatMessage
from .render import TwemojiRenderer, UnicodeRenderer
from .reverse import to_short_code

__all__ = [
    # Config
    "EmoticonSettings",
    "load_settings",
    # Dictionary
    "RESERVED_OVERRIDES",
    "EmojiDictionary",
    "EmojiEntry",
    "DatasetError",
    "parse_entries",
    "load_dataset",
    "load_dictionary",
    "dictionary_future",
    # Transforms
    "EmoticonEngine",
    "mask",
    "unmask",
    "split_literals",
    "to_short_code",
    "TwemojiRenderer",
    "UnicodeRenderer",
    # Pipeline
    "ChatMessage",
    "EmoticonsFilter",
]
