"""Suggestion ranking: matcher + recency over a candidate list.

Typeahead workflow:
1. Normalize the query; an empty query browses every item
2. Score each item with the fuzzy matcher, drop non-matches
3. Apply ``min_score``
4. Boost recently selected items
5. Sort deterministically and apply ``limit``
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from ..rules import ScoringRules, default_rules
from ..schemas import CandidateItem, RankingOptions, SuggestionMatch
from .collation import (
    NameSelector,
    filter_by_letter_range,
    filter_by_letters,
    hebrew_sort_key,
    item_name,
)
from .matching import match_normalized
from .normalization import normalize, tokenize

logger = logging.getLogger(__name__)


def _recent_ranks(recent_ids: Iterable[str]) -> dict[str, int]:
    ranks: dict[str, int] = {}
    for rank, item_id in enumerate(recent_ids):
        ranks.setdefault(item_id, rank)
    return ranks


def get_suggestions(
    query: object,
    items: Iterable[CandidateItem[Any]],
    recent_ids: Sequence[str] | None = (),
    options: RankingOptions | None = None,
    *,
    rules: ScoringRules | None = None,
) -> list[SuggestionMatch[Any]]:
    """Rank ``items`` against ``query``.

    With an empty query every item is returned (score 0); recently
    selected items come first in recency order, the rest in Hebrew
    alphabet order. With a query, items are ordered by score, then
    recent-before-other, then name.

    Args:
        query: Raw text from the search box
        items: Candidate list
        recent_ids: Most-recent-first selected ids (None is treated as empty)
        options: Limit / recency / score floor (defaults from settings)
        rules: Weight table (defaults from settings)

    Returns:
        Ordered list of SuggestionMatch
    """
    options = options or RankingOptions()
    rules = rules or default_rules()
    ranks = _recent_ranks(recent_ids or ()) if options.include_recent else {}
    normalized_query = normalize(query)

    matches: list[SuggestionMatch[Any]] = []

    if not normalized_query:
        for item in items:
            matches.append(SuggestionMatch(item=item, score=0.0, is_recent=item.id in ranks))
        matches.sort(key=lambda m: (ranks.get(m.item.id, len(ranks)), hebrew_sort_key(m.item.name)))
    else:
        for item in items:
            result = match_normalized(normalized_query, normalize(item.name), rules)
            if result is None or result.score < options.min_score:
                continue

            is_recent = item.id in ranks
            score = rules.cap(result.score + rules.recent_bonus) if is_recent else result.score
            matches.append(SuggestionMatch(
                item=item,
                score=score,
                spans=result.spans,
                kind=result.kind,
                is_recent=is_recent,
                is_strong=rules.is_strong(score),
            ))
        matches.sort(key=lambda m: (-m.score, not m.is_recent, hebrew_sort_key(m.item.name)))

    if options.limit:
        matches = matches[:options.limit]

    logger.debug(
        f"Ranked {len(matches)} suggestions (limit={options.limit}, recent={len(ranks)})",
        extra={"query": normalized_query},
    )
    return matches


def _field_value(item: CandidateItem[Any], field_name: str) -> object:
    if field_name == "name":
        return item.name
    if field_name == "id":
        return item.id
    payload = item.payload
    if isinstance(payload, dict):
        return payload.get(field_name)
    return getattr(payload, field_name, None)


def fuzzy_search(
    query: object,
    items: Iterable[CandidateItem[Any]],
    *,
    limit: int = 10,
    min_score: float = 5.0,
    search_fields: Sequence[str] = ("name",),
    rules: ScoringRules | None = None,
) -> list[SuggestionMatch[Any]]:
    """Search several fields of each item and keep the best-scoring one.

    Spans are only reported when the ``name`` field won, since they index
    into the name. Ties in score go to the shorter name. A ``limit`` of
    0 or less means no cap.
    """
    limit = max(0, limit)
    rules = rules or default_rules()
    items = list(items)
    normalized_query = normalize(query)

    if not normalized_query:
        browse = items[:limit] if limit else items
        return [SuggestionMatch(item=item, score=0.0) for item in browse]

    matches: list[SuggestionMatch[Any]] = []
    for item in items:
        best: SuggestionMatch[Any] | None = None
        for field_name in search_fields:
            value = _field_value(item, field_name)
            if not isinstance(value, str):
                continue
            result = match_normalized(normalized_query, normalize(value), rules)
            if result is None or (best is not None and result.score <= best.score):
                continue
            best = SuggestionMatch(
                item=item,
                score=result.score,
                spans=result.spans if field_name == "name" else (),
                kind=result.kind,
                is_strong=rules.is_strong(result.score),
                matched_field=field_name,
            )

        if best is not None and best.score >= min_score:
            matches.append(best)

    matches.sort(key=lambda m: (-m.score, len(m.item.name)))
    return matches[:limit] if limit else matches


def search_by_substring(
    items: Iterable[Any],
    term: object,
    name_selector: NameSelector = item_name,
) -> list[Any]:
    """Keep items whose normalized name contains every token of ``term``."""
    items = list(items)
    tokens = tokenize(term)
    if not tokens:
        return items

    kept = []
    for item in items:
        name = normalize(name_selector(item))
        if all(token in name for token in tokens):
            kept.append(item)
    return kept


def filter_candidates(
    items: Iterable[Any],
    *,
    search_term: str | None = None,
    letters: Sequence[str] | None = None,
    letter_range: tuple[str, str] | None = None,
    name_selector: NameSelector = item_name,
) -> list[Any]:
    """Apply search, letter-set and letter-range filters in that order."""
    filtered = list(items)

    if search_term:
        filtered = search_by_substring(filtered, search_term, name_selector)

    if letters:
        filtered = filter_by_letters(filtered, letters, name_selector)

    if letter_range and letter_range[0] and letter_range[1]:
        filtered = filter_by_letter_range(filtered, letter_range[0], letter_range[1], name_selector)

    return filtered

