"""Fuzzy matcher: scores one query against one candidate name.

Rules, evaluated on normalized text, most specific first:

1. Exact: query equals name -> 100, whole name highlighted.
2. Prefix: name starts with query -> ``prefix`` (90).
3. Tokens: every query token must hit some word of the name, as a word
   prefix (80), a substring of the word (60) or, for multi-word queries,
   a subsequence of the word (scaled below 60). The score is the mean of
   the per-token best scores, plus ``order_bonus`` when a multi-word
   query hits words left to right.
4. Subsequence: single-token queries with no word hit are aligned
   greedily over the whole name; tighter alignments score higher, always
   below the strong-match threshold.

Spans are reported in the normalized name's coordinates.
"""
from __future__ import annotations

import logging

from rapidfuzz.distance import LCSseq

from ..rules import EXACT_SCORE, MatchKind, ScoringRules, default_rules
from ..schemas import MatchResult, MatchSpan
from .normalization import normalize

logger = logging.getLogger(__name__)

# Penalty weights inside the subsequence ceiling
SPREAD_PENALTY = 0.25
GAP_PENALTY = 0.5


def merge_spans(spans: list[MatchSpan]) -> tuple[MatchSpan, ...]:
    """Sort spans and merge overlapping or touching ones."""
    merged: list[MatchSpan] = []
    for span in sorted(spans):
        if span.start >= span.end:
            continue
        if merged and span.start <= merged[-1].end:
            last = merged.pop()
            merged.append(MatchSpan(last.start, max(last.end, span.end)))
        else:
            merged.append(span)
    return tuple(merged)


def positions_to_spans(positions: list[int], offset: int = 0) -> list[MatchSpan]:
    """Collapse sorted character positions into runs."""
    spans: list[MatchSpan] = []
    for pos in positions:
        pos += offset
        if spans and spans[-1].end == pos:
            spans[-1] = MatchSpan(spans[-1].start, pos + 1)
        else:
            spans.append(MatchSpan(pos, pos + 1))
    return spans


def subsequence_positions(query: str, target: str) -> list[int] | None:
    """Greedy earliest alignment of ``query`` characters inside ``target``.

    Returns:
        Matched indices in ``target``, or None if ``query`` is not a
        subsequence of ``target``
    """
    if not query or len(query) > len(target):
        return None
    # Fast reject: the bit-parallel LCS length equals len(query) exactly
    # when query is a subsequence, so names that cannot match skip the
    # per-character scan below. score_cutoff lets rapidfuzz stop early.
    if LCSseq.similarity(query, target, score_cutoff=len(query)) < len(query):
        return None

    positions: list[int] = []
    start = 0
    for ch in query:
        index = target.find(ch, start)
        if index == -1:
            return None
        positions.append(index)
        start = index + 1
    return positions


def subsequence_score(positions: list[int], target_len: int, ceiling: float) -> float:
    """Score an alignment; wide and gappy alignments score lower.

    The result lies in ``(0.375 * ceiling, ceiling)``: the spread factor
    is in ``[0.75, 1)`` and the gap factor in ``(0.5, 1]``. Since the
    ceiling sits below ``word_substring``, a subsequence hit never
    outranks a word hit or crosses the strong threshold.
    """
    width = positions[-1] - positions[0] + 1
    gaps = width - len(positions)
    spread = width / max(target_len, 1)
    score = ceiling * (1 - SPREAD_PENALTY * spread) * (1 - GAP_PENALTY * gaps / width)
    return round(score, 2)


def split_words(normalized: str) -> list[tuple[int, str]]:
    """Words of a normalized string with their start offsets."""
    words: list[tuple[int, str]] = []
    offset = 0
    for word in normalized.split(" "):
        words.append((offset, word))
        offset += len(word) + 1
    return words


def _match_token(
    token: str,
    word: str,
    rules: ScoringRules,
    allow_subsequence: bool,
) -> tuple[float, list[MatchSpan]] | None:
    if word.startswith(token):
        return rules.word_prefix, [MatchSpan(0, len(token))]

    index = word.find(token)
    if index != -1:
        return rules.word_substring, [MatchSpan(index, index + len(token))]

    if allow_subsequence:
        positions = subsequence_positions(token, word)
        if positions is not None:
            return subsequence_score(positions, len(word), rules.subsequence), positions_to_spans(positions)

    return None


def _match_tokens(
    tokens: list[str],
    words: list[tuple[int, str]],
    rules: ScoringRules,
    allow_subsequence: bool,
) -> MatchResult | None:
    scores: list[float] = []
    spans: list[MatchSpan] = []
    chosen: list[int] = []

    for token in tokens:
        hits = []
        for word_index, (offset, word) in enumerate(words):
            hit = _match_token(token, word, rules, allow_subsequence)
            if hit is not None:
                hits.append((word_index, offset, hit))

        if not hits:
            # AND semantics: one unmatched token fails the whole query
            return None

        best = max(hit[0] for _, _, hit in hits)
        top = [h for h in hits if h[2][0] == best]
        previous = chosen[-1] if chosen else -1
        word_index, offset, (score, relative) = next(
            (h for h in top if h[0] > previous),
            top[0],
        )

        chosen.append(word_index)
        scores.append(score)
        spans.extend(MatchSpan(offset + s.start, offset + s.end) for s in relative)

    total = sum(scores) / len(scores)

    if len(tokens) > 1:
        in_order = all(a < b for a, b in zip(chosen, chosen[1:]))
        if in_order:
            total += rules.order_bonus
        kind = MatchKind.TOKENS
    elif scores[0] == rules.word_prefix:
        kind = MatchKind.WORD_PREFIX
    else:
        kind = MatchKind.WORD_SUBSTRING

    return MatchResult(score=round(rules.cap(total), 2), spans=merge_spans(spans), kind=kind)


def match_normalized(query: str, name: str, rules: ScoringRules) -> MatchResult | None:
    """Run the matching rules on already-normalized strings."""
    if not query or not name:
        return None

    if query == name:
        return MatchResult(score=EXACT_SCORE, spans=(MatchSpan(0, len(name)),), kind=MatchKind.EXACT)

    if name.startswith(query):
        return MatchResult(score=rules.prefix, spans=(MatchSpan(0, len(query)),), kind=MatchKind.PREFIX)

    tokens = query.split(" ")
    words = split_words(name)

    if len(tokens) > 1:
        return _match_tokens(tokens, words, rules, allow_subsequence=True)

    result = _match_tokens(tokens, words, rules, allow_subsequence=False)
    if result is not None:
        return result

    positions = subsequence_positions(query, name)
    if positions is None:
        return None

    return MatchResult(
        score=subsequence_score(positions, len(name), rules.subsequence),
        spans=merge_spans(positions_to_spans(positions)),
        kind=MatchKind.SUBSEQUENCE,
    )


def fuzzy_match(query: object, name: object, rules: ScoringRules | None = None) -> MatchResult | None:
    """Score ``query`` against ``name``.

    Args:
        query: Free-text query
        name: Candidate display name
        rules: Weight table (defaults to the configured one)

    Returns:
        MatchResult, or None when no rule matches
    """
    return match_normalized(normalize(query), normalize(name), rules or default_rules())
