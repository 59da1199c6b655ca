"""Short-code scanning — `:name:` tokens in chat text.

A token is ':' + one or more of [A-Za-z0-9_-] + ':' followed by whitespace or
the end of the text. Matching is case-insensitive. Tokens are only looked for
in plain spans; fenced literals are never touched.

Unresolved tokens are always left exactly as the user typed them.
"""

import re
from typing import Callable

from .dictionary import EmojiDictionary
from .literals import MARKUP, TEXT, Span, join_spans, split_literals


SHORT_CODE_RE = re.compile(r':([a-z0-9_-]+):(?=\s|$)', re.IGNORECASE)


# ============================================================
# INCOMING (render)
# ============================================================

def resolve_short_codes(
    spans: list[Span],
    dictionary: EmojiDictionary,
    reserved_markup: Callable[[str], str],
) -> list[Span]:
    """Resolve short codes in plain spans for display.

    Ordinary codes become their Unicode sequence inside the plain span, to be
    converted to images later. Reserved codes are rendered straight away by
    `reserved_markup` into a markup span that later steps do not rescan.
    """
    result = []
    for span in spans:
        if span.kind != TEXT:
            result.append(span)
            continue

        pending = []
        last_end = 0
        for match in SHORT_CODE_RE.finditer(span.text):
            slug = match.group(1)
            utf = dictionary.resolve(slug)
            if utf is None:
                continue

            if dictionary.is_reserved(slug):
                pending.append(span.text[last_end:match.start()])
                before = "".join(pending)
                if before:
                    result.append(Span(before))
                pending = []
                result.append(Span(reserved_markup(utf), MARKUP))
                last_end = match.end()
                continue

            pending.append(span.text[last_end:match.start()])
            pending.append(utf)
            last_end = match.end()

        pending.append(span.text[last_end:])
        text = "".join(pending)
        if text:
            result.append(Span(text))
    return result


def short_code_scan(
    text: str,
    dictionary: EmojiDictionary,
    reserved_markup: Callable[[str], str],
) -> str:
    """String form of `resolve_short_codes`, with literals protected."""
    return join_spans(resolve_short_codes(split_literals(text), dictionary, reserved_markup))


# ============================================================
# OUTGOING (send)
# ============================================================

def substitute_short_codes(spans: list[Span], dictionary: EmojiDictionary) -> list[Span]:
    """Replace known short codes with literal Unicode for sending.

    Only the NameIndex is consulted: reserved codes such as `:tm:` stay as
    typed, because receiving clients render them themselves.
    """
    def _replace(match: re.Match) -> str:
        slug = match.group(1)
        if dictionary.is_reserved(slug):
            return match.group(0)
        utf = dictionary.lookup(slug)
        return utf if utf is not None else match.group(0)

    return [
        Span(SHORT_CODE_RE.sub(_replace, span.text)) if span.kind == TEXT else span
        for span in spans
    ]


def outgoing_scan(text: str, dictionary: EmojiDictionary) -> str:
    """Mask literals, substitute short codes, unmask."""
    if not text:
        return text
    return join_spans(substitute_short_codes(split_literals(text), dictionary))
