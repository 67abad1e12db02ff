"""Text normalization for Hebrew/Latin picker names.

Handles case folding, Hebrew niqqud and cantillation marks, final letter
forms, and whitespace. Each normalized character remembers the index of
the character it came from, so spans computed on normalized text can be
mapped back onto the display string.
"""
from __future__ import annotations

import logging
import unicodedata
from typing import Iterable

from ..schemas import MatchSpan

logger = logging.getLogger(__name__)

# Sofit -> base letter
HEBREW_FINAL_FORMS = {
    "ך": "כ",
    "ם": "מ",
    "ן": "נ",
    "ף": "פ",
    "ץ": "צ",
}

# LRM, RLM, ALM and the embedding/isolate controls
BIDI_CONTROLS = frozenset("\u200e\u200f\u061c\u202a\u202b\u202c\u202d\u202e\u2066\u2067\u2068\u2069")


def is_hebrew_mark(ch: str) -> bool:
    """True for niqqud, cantillation and other combining Hebrew points."""
    code = ord(ch)
    if not (0x0591 <= code <= 0x05C7 or code == 0xFB1E):
        return False
    return unicodedata.category(ch) == "Mn"


def _is_presentation_form(ch: str) -> bool:
    return 0xFB1D <= ord(ch) <= 0xFB4F


def fold_char(ch: str) -> str:
    """Fold a single character.

    Returns an empty string for characters that are stripped, and may
    return more than one character when Unicode case folding expands
    (``ß`` -> ``ss``) or a presentation form decomposes (``ﭏ`` -> ``אל``).
    """
    if ch in BIDI_CONTROLS or is_hebrew_mark(ch):
        return ""

    if _is_presentation_form(ch):
        decomposed = unicodedata.normalize("NFKD", ch)
        if decomposed != ch:
            return "".join(fold_char(c) for c in decomposed)

    folded = ch.casefold()
    return "".join(HEBREW_FINAL_FORMS.get(c, c) for c in folded)


def normalize_with_offsets(text: object) -> tuple[str, list[int]]:
    """Normalize text and keep, per output character, its source index.

    Pipeline: trim, case fold, strip Hebrew marks, unify final letters,
    collapse whitespace runs to one space. Non-string input is treated
    as the empty string.

    Args:
        text: Input text

    Returns:
        Tuple of (normalized text, offsets) where ``offsets[i]`` is the
        index in ``text`` of the character that produced output char ``i``
    """
    if not isinstance(text, str) or not text:
        return "", []

    chars: list[str] = []
    offsets: list[int] = []
    pending_space: int | None = None

    for index, ch in enumerate(text):
        if ch.isspace():
            if chars and pending_space is None:
                pending_space = index
            continue

        folded = fold_char(ch)
        if not folded:
            continue

        if pending_space is not None:
            chars.append(" ")
            offsets.append(pending_space)
            pending_space = None

        for c in folded:
            chars.append(c)
            offsets.append(index)

    return "".join(chars), offsets


def normalize(text: object) -> str:
    """Normalize text for matching and collation."""
    return normalize_with_offsets(text)[0]


def tokenize(text: object) -> list[str]:
    """Split normalized text into whitespace-separated tokens."""
    normalized = normalize(text)
    return normalized.split(" ") if normalized else []


def map_spans_to_original(text: str, spans: Iterable[MatchSpan]) -> list[MatchSpan]:
    """Map spans over ``normalize(text)`` onto ``text`` itself.

    A span ending on a letter is extended over the niqqud that follows
    it, so highlighting never splits a letter from its points. When case
    folding expanded a character, any part of its expansion selects the
    whole source character. Overlapping results are merged.
    """
    if not isinstance(text, str):
        return []

    _, offsets = normalize_with_offsets(text)
    mapped: list[MatchSpan] = []

    for span in sorted(spans):
        start = max(0, span.start)
        end = min(span.end, len(offsets))
        if start >= end:
            continue

        orig_start = offsets[start]
        orig_end = offsets[end - 1] + 1
        while orig_end < len(text) and is_hebrew_mark(text[orig_end]):
            orig_end += 1

        if mapped and orig_start <= mapped[-1].end:
            last = mapped.pop()
            mapped.append(MatchSpan(last.start, max(last.end, orig_end)))
        else:
            mapped.append(MatchSpan(orig_start, orig_end))

    return mapped
