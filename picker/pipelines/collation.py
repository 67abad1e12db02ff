"""Hebrew collation and alphabet indexing for picker lists.

Strings are compared on their normalized form: Hebrew base letters in
canonical Alef..Tav order first, every other character after them in
code-point order. Final letter forms never appear as separate letters.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Mapping, TypeVar

from .normalization import normalize

logger = logging.getLogger(__name__)

T = TypeVar("T")
NameSelector = Callable[[Any], object]

HEBREW_LETTERS: tuple[str, ...] = tuple("אבגדהוזחטיכלמנסעפצקרשת")
NON_HEBREW_GROUP = "#"

_LETTER_POSITION = {letter: index for index, letter in enumerate(HEBREW_LETTERS)}


def item_name(item: Any) -> object:
    """Default name selector: ``item.name``, ``item["name"]`` or the item itself."""
    if isinstance(item, Mapping):
        return item.get("name", "")
    return getattr(item, "name", item)


def letter_position(letter: object) -> int | None:
    """Canonical position of a letter (final forms resolve to their base)."""
    return _LETTER_POSITION.get(normalize(letter))


def _char_key(ch: str) -> tuple[int, int]:
    position = _LETTER_POSITION.get(ch)
    if position is not None:
        return (0, position)
    return (1, ord(ch))


def hebrew_sort_key(text: object) -> tuple[bool, tuple[tuple[int, int], ...]]:
    """Sort key implementing ``compare_hebrew``. Empty names sort last."""
    normalized = normalize(text)
    return (not normalized, tuple(_char_key(ch) for ch in normalized))


def compare_hebrew(a: object, b: object) -> int:
    """Three-way comparison of two strings in Hebrew alphabet order.

    Returns:
        -1, 0 or 1
    """
    key_a = hebrew_sort_key(a)
    key_b = hebrew_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_hebrew(items: Iterable[T], name_selector: NameSelector = item_name) -> list[T]:
    """Stable sort of items by their name in Hebrew alphabet order."""
    return sorted(items, key=lambda item: hebrew_sort_key(name_selector(item)))


def get_first_hebrew_letter(text: object) -> str | None:
    """First letter of the normalized text if it is a Hebrew base letter."""
    normalized = normalize(text)
    if normalized and normalized[0] in _LETTER_POSITION:
        return normalized[0]
    return None


def get_available_hebrew_letters(
    items: Iterable[T],
    name_selector: NameSelector = item_name,
) -> list[str]:
    """Hebrew letters that start at least one item name, in canonical order."""
    present = {get_first_hebrew_letter(name_selector(item)) for item in items}
    return [letter for letter in HEBREW_LETTERS if letter in present]


def filter_by_letters(
    items: Iterable[T],
    letters: Iterable[str],
    name_selector: NameSelector = item_name,
) -> list[T]:
    """Keep items whose name starts with any of the selected letters.

    An empty selection keeps every item.
    """
    items = list(items)
    letters = list(letters)
    if not letters:
        return items

    selected = {normalize(letter) for letter in letters}
    return [
        item for item in items
        if get_first_hebrew_letter(name_selector(item)) in selected
    ]


def filter_by_letter_range(
    items: Iterable[T],
    start: str,
    end: str,
    name_selector: NameSelector = item_name,
) -> list[T]:
    """Keep items whose first letter lies in ``[start, end]`` (inclusive).

    Unknown bounds or a reversed range leave the list unfiltered.
    """
    items = list(items)
    start_pos = letter_position(start)
    end_pos = letter_position(end)

    if start_pos is None or end_pos is None:
        logger.warning(f"Invalid Hebrew letters for range filter: {start!r}-{end!r}")
        return items
    if start_pos > end_pos:
        logger.warning(f"Reversed Hebrew letter range {start!r}-{end!r}, not filtering")
        return items

    filtered = []
    for item in items:
        letter = get_first_hebrew_letter(name_selector(item))
        if letter is not None and start_pos <= _LETTER_POSITION[letter] <= end_pos:
            filtered.append(item)
    return filtered


def group_by_hebrew_letter(
    items: Iterable[T],
    name_selector: NameSelector = item_name,
) -> dict[str, list[T]]:
    """Group items by first Hebrew letter.

    Groups come in canonical letter order, followed by a ``"#"`` group for
    names that do not start with a Hebrew letter. Each group is collated.
    """
    buckets: dict[str, list[T]] = {}
    for item in items:
        key = get_first_hebrew_letter(name_selector(item)) or NON_HEBREW_GROUP
        buckets.setdefault(key, []).append(item)

    ordered: dict[str, list[T]] = {}
    for key in (*HEBREW_LETTERS, NON_HEBREW_GROUP):
        if key in buckets:
            ordered[key] = sort_hebrew(buckets[key], name_selector)
    return ordered


@dataclass
class LetterStat(Generic[T]):
    """Item count for one alphabet group."""
    letter: str
    count: int
    items: list[T] = field(default_factory=list)


def get_letter_stats(
    items: Iterable[T],
    name_selector: NameSelector = item_name,
) -> list[LetterStat[T]]:
    """Per-letter counts in canonical order (``"#"`` last)."""
    groups = group_by_hebrew_letter(items, name_selector)
    return [
        LetterStat(letter=letter, count=len(group), items=group)
        for letter, group in groups.items()
    ]
