"""Reverse mapping — Unicode emoji back to `:name:` short codes.

Used for exports and manual conversions, not on the hot path. Each call
starts with an empty lookup; nothing is remembered between calls.
"""

import re
from typing import Optional

from .dictionary import EmojiDictionary


NON_ASCII_RUN_RE = re.compile(r'[^\x00-\x7F]+')


class ReverseLookup:
    """Value → name lookup filled lazily while walking the NameIndex.

    Every value passed on the way to a match is remembered, so later runs in
    the same call are answered without rescanning. The first name (in dataset
    order) carrying a value wins. Reserved names are skipped entirely.
    """

    def __init__(self, dictionary: EmojiDictionary):
        self._pending = (
            (name, utf) for name, utf in dictionary.items()
            if not dictionary.is_reserved(name)
        )
        self._seen: dict[str, str] = {}

    def find(self, value: str) -> Optional[str]:
        if value in self._seen:
            return self._seen[value]
        for name, utf in self._pending:
            self._seen.setdefault(utf, name)
            if utf == value:
                return name
        return None


def to_short_code(text: str, dictionary: EmojiDictionary) -> str:
    """Replace maximal non-ASCII runs that exactly match a dictionary value.

    Runs with no matching entry are left unchanged.
    """
    if not text:
        return text

    lookup = ReverseLookup(dictionary)

    def _replace(match: re.Match) -> str:
        name = lookup.find(match.group(0))
        return f":{name}:" if name else match.group(0)

    return NON_ASCII_RUN_RE.sub(_replace, text)
