"""Dictionary provider helpers — turn dataset records into an EmojiDictionary.

The dataset itself is owned by the caller (bundled file, CDN, database).
These helpers only parse and validate records and wrap the asynchronous
load into the future the filter waits on.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Awaitable, Iterable, Optional, Union

from pydantic import ValidationError

from .dictionary import EmojiDictionary, EmojiEntry

logger = logging.getLogger("emoticons.dataset")


class DatasetError(ValueError):
    """Emoji dataset is malformed."""
    pass


def parse_entries(records: Iterable) -> list[EmojiEntry]:
    """Validate raw dataset records.

    Args:
        records: Iterable of dicts ({"n": name, "u": sequence} or
            {"name": ..., "codepoint_sequence": ...}) or EmojiEntry objects

    Returns:
        Entries in dataset order

    Raises:
        DatasetError: If a record is missing a name or sequence
    """
    entries = []
    for i, record in enumerate(records):
        if isinstance(record, EmojiEntry):
            entries.append(record)
            continue
        try:
            entries.append(EmojiEntry.model_validate(record))
        except ValidationError as e:
            raise DatasetError(f"Invalid emoji record #{i}: {e}") from e
    return entries


def _read_json(path: Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


async def load_dataset(path: Union[str, Path]) -> list[EmojiEntry]:
    """Read a local JSON dataset (a list of records) without blocking the loop."""
    path = Path(path)
    try:
        raw = await asyncio.to_thread(_read_json, path)
    except json.JSONDecodeError as e:
        raise DatasetError(f"Emoji dataset {path} is not valid JSON: {e}") from e

    if not isinstance(raw, list):
        raise DatasetError(f"Emoji dataset {path} must be a JSON list, got {type(raw).__name__}")

    entries = parse_entries(raw)
    logger.info(f"Loaded {len(entries)} emoji records from {path}")
    return entries


async def load_dictionary(
    source: Awaitable[Iterable],
    reserved: Optional[dict[str, str]] = None,
) -> EmojiDictionary:
    """Await a dataset source and build the dictionary from it."""
    records = await source
    return EmojiDictionary.from_entries(parse_entries(records), reserved)


def dictionary_future(
    source: Awaitable[Iterable],
    reserved: Optional[dict[str, str]] = None,
) -> "asyncio.Future[EmojiDictionary]":
    """Schedule the dictionary build; must be called with a running loop."""
    return asyncio.ensure_future(load_dictionary(source, reserved))
