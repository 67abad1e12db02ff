"""Scoring rules for the fuzzy matcher and suggestion ranker.

The weights are tunable through ``MatchingSettings``/``RankingSettings``;
only their relative order matters to callers (exact > prefix > word
prefix > strong threshold >= word substring > subsequence).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .config import Settings, settings

EXACT_SCORE = 100.0


class MatchKind(str, Enum):
    """Which rule produced a match."""
    EXACT = "exact"
    PREFIX = "prefix"
    WORD_PREFIX = "word_prefix"
    WORD_SUBSTRING = "word_substring"
    TOKENS = "tokens"
    SUBSEQUENCE = "subsequence"
    BROWSE = "browse"


@dataclass(frozen=True)
class ScoringRules:
    """Weight table used by ``fuzzy_match`` and ``get_suggestions``."""
    prefix: float = 90.0
    word_prefix: float = 80.0
    word_substring: float = 60.0
    subsequence: float = 50.0
    order_bonus: float = 10.0
    recent_bonus: float = 5.0
    strong_threshold: float = 70.0

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> ScoringRules:
        cfg = cfg or settings
        return cls(
            prefix=cfg.matching.prefix_score,
            word_prefix=cfg.matching.word_prefix_score,
            word_substring=cfg.matching.word_substring_score,
            subsequence=cfg.matching.subsequence_score,
            order_bonus=cfg.matching.order_bonus,
            recent_bonus=cfg.ranking.recent_bonus,
            strong_threshold=cfg.matching.strong_threshold,
        )

    def is_strong(self, score: float) -> bool:
        return score > self.strong_threshold

    @staticmethod
    def cap(score: float) -> float:
        return min(EXACT_SCORE, max(0.0, score))


def default_rules() -> ScoringRules:
    """Rules built from the active settings."""
    return ScoringRules.from_settings()
