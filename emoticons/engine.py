"""Emoticon transform engine — pure string transforms over a loaded dictionary.

Incoming pipeline order:
1. Protect fenced literals (split into spans)
2. Resolve :short_codes: (reserved codes render to images directly)
3. Convert Unicode emoji to <img> markup
4. Enlarge a message that is exactly one emoji
5. Restore literal fences

Outgoing text only gets short codes replaced by literal Unicode.

Note: callers of `process_html` must track whether a message was already
processed (double processing produces broken markup) and remain
responsible for XSS sanitisation.
"""

import logging
from typing import Optional

from .config import EmoticonSettings
from .dictionary import EmojiDictionary
from .literals import MARKUP, TEXT, Span, join_spans, split_literals
from .render import (
    TwemojiRenderer,
    UnicodeRenderer,
    enlarge,
    image_tag,
    is_single_image,
    resource_path,
    strip_images,
    to_code_point,
    to_size_squared,
)
from .reverse import to_short_code
from .shortcodes import outgoing_scan, resolve_short_codes

logger = logging.getLogger("emoticons.engine")


class EmoticonEngine:
    """Converts between short codes, Unicode emoji and image markup."""

    def __init__(
        self,
        dictionary: EmojiDictionary,
        settings: Optional[EmoticonSettings] = None,
        renderer: Optional[UnicodeRenderer] = None,
    ):
        self.dictionary = dictionary
        self.settings = settings or EmoticonSettings()
        self.renderer = renderer or TwemojiRenderer()
        self._size = to_size_squared(self.settings.glyph_size)
        logger.debug(f"Emoticon engine ready: {len(dictionary)} names, size {self._size}")

    def icon_url(self, icon: str, size: Optional[str] = None, ext: Optional[str] = None) -> str:
        """Resource locator for a twemoji icon identifier."""
        return resource_path(
            self.settings.static_path,
            size or self._size,
            icon,
            ext or self.settings.extension,
        )

    def reserved_markup(self, char: str) -> str:
        return image_tag(char, self.icon_url(to_code_point(char)), self.renderer.class_name)

    # ============================================================
    # INCOMING
    # ============================================================

    def _convert(self, spans: list[Span]) -> list[Span]:
        converted = []
        for span in spans:
            if span.kind == TEXT:
                html = self.renderer.parse(span.text, self.icon_url, self._size, self.settings.extension)
                converted.append(Span(html, MARKUP))
            else:
                converted.append(span)
        return converted

    def _enlarge(self, spans: list[Span]) -> list[Span]:
        # Checked on the final string, so text or a literal next to the image
        # disqualifies it.
        whole = join_spans(spans)
        if not is_single_image(whole):
            return spans

        class_name = self.renderer.class_name
        marker = f'class="{class_name}"'
        for i, span in enumerate(spans):
            if span.kind == MARKUP and marker in span.text:
                spans = list(spans)
                spans[i] = Span(enlarge(span.text, self.settings.large_class, class_name), MARKUP)
                break
        return spans

    def process_html(self, contents: Optional[str]) -> Optional[str]:
        """Convert message text or HTML into HTML with inline emoji images.

        Args:
            contents: Message text or previously rendered HTML

        Returns:
            Converted HTML, or the input unchanged when it is empty
        """
        if not contents:
            return contents  # system message or composing notification

        spans = split_literals(contents)
        spans = resolve_short_codes(spans, self.dictionary, self.reserved_markup)
        spans = self._convert(spans)
        spans = self._enlarge(spans)
        return join_spans(spans)

    # ============================================================
    # OUTGOING
    # ============================================================

    def process_outgoing_text(self, contents: Optional[str]) -> Optional[str]:
        """Replace known short codes with literal Unicode before sending."""
        return outgoing_scan(contents, self.dictionary)

    # ============================================================
    # REVERSE
    # ============================================================

    def from_utf_to_short(self, text: Optional[str]) -> Optional[str]:
        """Replace Unicode emoji runs with their :short_code:."""
        return to_short_code(text, self.dictionary)

    def from_html_to_short(self, html: Optional[str]) -> Optional[str]:
        """Like `from_utf_to_short`, for output of `process_html`.

        Emoji images are first turned back into the emoji in their alt text.
        """
        if not html:
            return html
        return to_short_code(strip_images(html), self.dictionary)
