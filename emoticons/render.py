"""Unicode → image markup conversion.

The renderer finds emoji sequences in text and replaces each with an <img>
element. Where the image lives is decided by a callback supplied by the
caller, so the hosting layout stays outside the renderer:

    callback(icon, size, ext) -> url

`icon` is the twemoji asset identifier: lowercase hex code points joined by
'-', with VS16 (U+FE0F) dropped unless the sequence is a ZWJ sequence.
"""

import re
from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

import emoji


IMG_CLASS = "emoji"
ZWJ = "\u200d"
VS16 = "\ufe0f"
VS15 = "\ufe0e"  # text presentation selector

# Kept bit-exact: existing image hosting uses this layout.
RESOURCE_PATH_TEMPLATE = "{static_path}images/mega/twemojis/2_v2/{size}/{icon}{ext}"

IconCallback = Callable[[str, str, str], Optional[str]]


def to_code_point(sequence: str, sep: str = "-") -> str:
    """Hex code points of a sequence, e.g. '👍🏽' → '1f44d-1f3fd'."""
    return sep.join(f"{ord(char):x}" for char in sequence)


def icon_id(raw: str) -> str:
    """Twemoji asset name for an emoji sequence as it appeared in text."""
    if ZWJ not in raw:
        raw = raw.replace(VS16, "")
    return to_code_point(raw)


def to_size_squared(size: Union[int, str]) -> str:
    """Normalize a size bucket: 72 or '72' → '72x72'; '72x72' is kept."""
    size = str(size)
    if size.isdigit():
        return f"{size}x{size}"
    return size


def resource_path(static_path: str, size: str, icon: str, ext: str) -> str:
    return RESOURCE_PATH_TEMPLATE.format(static_path=static_path, size=size, icon=icon, ext=ext)


def image_tag(alt: str, src: str, class_name: str = IMG_CLASS) -> str:
    return f'<img class="{class_name}" draggable="false" alt="{alt}" src="{src}"/>'


# ============================================================
# RENDERERS
# ============================================================

class UnicodeRenderer(ABC):
    """Pluggable Unicode-to-image converter."""

    class_name: str = IMG_CLASS  # class attribute of every emitted <img>

    @abstractmethod
    def parse(self, text: str, callback: IconCallback, size: Union[int, str] = 72, ext: str = ".png") -> str:
        """Replace every emoji sequence in text with an image element.

        Sequences for which the callback returns a falsy URL are left as-is.
        """
        ...


class TwemojiRenderer(UnicodeRenderer):
    """Twemoji-style markup, using the `emoji` package to find sequences."""

    def __init__(self, class_name: str = IMG_CLASS):
        self.class_name = class_name

    def parse(self, text: str, callback: IconCallback, size: Union[int, str] = 72, ext: str = ".png") -> str:
        if not text:
            return text

        size = to_size_squared(size)
        parts = []
        last_end = 0
        for found in emoji.emoji_list(text):
            start, end = found["match_start"], found["match_end"]
            raw = found["emoji"]
            if text[end:end + 1] == VS15:
                continue  # explicitly requested as text, not as an image
            src = callback(icon_id(raw), size, ext)
            parts.append(text[last_end:start])
            parts.append(image_tag(raw, src, self.class_name) if src else raw)
            last_end = end
        parts.append(text[last_end:])
        return "".join(parts)


# ============================================================
# SINGLE-EMOJI ENLARGEMENT
# ============================================================

def is_single_image(html: str) -> bool:
    """True when the whole string is exactly one <img> element."""
    return html.startswith("<img") and html.endswith(">") and html.find("<img", 1) == -1


def enlarge(html: str, large_class: str = "big", class_name: str = IMG_CLASS) -> str:
    """Add the large marker class when the message is a single emoji image."""
    if not is_single_image(html):
        return html
    return html.replace(f'class="{class_name}"', f'class="{class_name} {large_class}"', 1)


_IMG_ALT_RE = re.compile(r'<img class="[^"]*" draggable="false" alt="([^"]*)" src="[^"]*"/>')


def strip_images(html: str) -> str:
    """Replace rendered emoji images with their alt text (the raw emoji)."""
    return _IMG_ALT_RE.sub(lambda m: m.group(1), html)
