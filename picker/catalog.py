"""Localized candidate lists built from the breed catalog."""
from __future__ import annotations

import logging
from typing import Any, Literal, Mapping

from config.breed_catalog import BREED_CATALOG

from .pipelines.collation import sort_hebrew
from .schemas import CandidateItem

logger = logging.getLogger(__name__)

Locale = Literal["en", "he"]
FALLBACK_PET_TYPE = "other"


def get_breeds_for_type(pet_type: str) -> list[Mapping[str, Any]]:
    """Raw catalog entries; unknown pet types get the ``other`` list."""
    if pet_type not in BREED_CATALOG:
        logger.debug(f"Unknown pet type {pet_type!r}, using {FALLBACK_PET_TYPE!r} breeds")
    return list(BREED_CATALOG.get(pet_type, BREED_CATALOG[FALLBACK_PET_TYPE]))


def get_localized_breed_name(breed: Mapping[str, Any], locale: Locale = "en") -> str:
    """Hebrew name when requested and available, else English."""
    if locale == "he" and breed.get("he"):
        return breed["he"]
    return breed["en"]


def get_localized_breeds(pet_type: str, locale: Locale = "en") -> list[CandidateItem[Mapping[str, Any]]]:
    """Candidate items for a picker; Hebrew lists come collated."""
    items = [
        CandidateItem(id=breed["id"], name=get_localized_breed_name(breed, locale), payload=breed)
        for breed in get_breeds_for_type(pet_type)
    ]
    if locale == "he":
        items = sort_hebrew(items)
    return items
