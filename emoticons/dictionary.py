"""Emoji name dictionary — NameIndex plus reserved-symbol overrides.

The dictionary is built once, after the dataset has loaded, and is
read-only afterwards. Names are case-insensitive: every key is stored
lowercase and every lookup lowercases its input first.
"""

from typing import Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field


# Fixed symbols that always win over dataset entries of the same name.
# They are never produced by the reverse (Unicode → short code) mapping
# and are never substituted into outgoing text.
RESERVED_OVERRIDES = {
    "tm": "\u2122",
}


class EmojiEntry(BaseModel):
    """One dataset record. Accepts the compact ``{"n": ..., "u": ...}`` form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="n", min_length=1)
    codepoint_sequence: str = Field(alias="u", min_length=1)


class EmojiDictionary:
    """Immutable name → emoji mapping with reserved overrides."""

    def __init__(self, index: dict[str, str], reserved: Optional[dict[str, str]] = None):
        self._index = {name.lower(): value for name, value in index.items()}
        if reserved is None:
            reserved = RESERVED_OVERRIDES
        self._reserved = {name.lower(): value for name, value in reserved.items()}

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[EmojiEntry],
        reserved: Optional[dict[str, str]] = None,
    ) -> "EmojiDictionary":
        """Build the NameIndex from an ordered collection of entries.

        Duplicate names (after lowercasing) keep the last value seen.
        """
        index: dict[str, str] = {}
        for entry in entries:
            index[entry.name.lower()] = entry.codepoint_sequence
        return cls(index, reserved)

    def resolve(self, name: str) -> Optional[str]:
        """Resolve a short-code name for rendering.

        Reserved overrides are checked first, then the NameIndex.

        Returns:
            The emoji sequence or reserved character, or None if unknown.
        """
        slug = name.lower()
        if slug in self._reserved:
            return self._reserved[slug]
        return self._index.get(slug)

    def lookup(self, name: str) -> Optional[str]:
        """Resolve against the NameIndex only (no reserved overrides)."""
        return self._index.get(name.lower())

    def is_reserved(self, name: str) -> bool:
        return name.lower() in self._reserved

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate NameIndex (name, value) pairs in dataset order."""
        return iter(self._index.items())

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index
