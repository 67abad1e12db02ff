"""Data types shared by the matcher, ranker and filters."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .config import settings
from .rules import MatchKind

T = TypeVar("T")


@dataclass(frozen=True)
class CandidateItem(Generic[T]):
    """A pickable entry. Identity is the ``id``; ``name`` is display text."""
    id: str
    name: str = field(compare=False)
    payload: T | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, order=True)
class MatchSpan:
    """Half-open ``[start, end)`` range into the normalized name."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one query against one name."""
    score: float
    spans: tuple[MatchSpan, ...]
    kind: MatchKind


@dataclass
class SuggestionMatch(Generic[T]):
    """A ranked suggestion.

    ``is_strong`` is set by the ranker from the rules it scored with.
    """
    item: CandidateItem[T]
    score: float
    spans: tuple[MatchSpan, ...] = ()
    kind: MatchKind = MatchKind.BROWSE
    is_recent: bool = False
    is_strong: bool = False
    matched_field: str = "name"


@dataclass
class RankingOptions:
    """Options for ``get_suggestions``. ``limit == 0`` means no cap."""
    limit: int = field(default_factory=lambda: settings.ranking.limit)
    include_recent: bool = field(default_factory=lambda: settings.ranking.include_recent)
    min_score: float = field(default_factory=lambda: settings.ranking.min_score)

    def __post_init__(self) -> None:
        # Negative limits are treated like 0 (no cap)
        self.limit = max(0, int(self.limit))
