"""Mindset tag taxonomy and validation.

Each self-reported tag belongs to exactly one category. Constructive tags
pull the mindset score up and detrimental tags pull it down; neutral tags
only dilute the other two. Intensity scales a tag's contribution:

    Intensity   Weight
    ──────────────────
    LOW           1
    MEDIUM        2
    HIGH          3
"""

from __future__ import annotations

from typing import Iterable, Sequence

from trading_journal.core.enums import Intensity, MindsetCategory, MindsetTagType
from trading_journal.core.models import MindsetTag, ValidationResult

MAX_TAGS_PER_TRADE = 5

ERR_DUPLICATE_TAGS = "Duplicate mindset tags are not allowed"
ERR_TOO_MANY_TAGS = f"Maximum of {MAX_TAGS_PER_TRADE} mindset tags allowed per trade"

INTENSITY_WEIGHT: dict[Intensity, int] = {
    Intensity.LOW: 1,
    Intensity.MEDIUM: 2,
    Intensity.HIGH: 3,
}

CONSTRUCTIVE_TAGS: frozenset[MindsetTagType] = frozenset({
    MindsetTagType.DISCIPLINED,
    MindsetTagType.PATIENT,
    MindsetTagType.CONFIDENT,
    MindsetTagType.FOCUSED,
    MindsetTagType.CALM,
    MindsetTagType.ANALYTICAL,
})

DETRIMENTAL_TAGS: frozenset[MindsetTagType] = frozenset({
    MindsetTagType.ANXIOUS,
    MindsetTagType.UNCERTAIN,
    MindsetTagType.FOMO,
    MindsetTagType.GREEDY,
    MindsetTagType.FEARFUL,
    MindsetTagType.IMPULSIVE,
    MindsetTagType.REVENGE_TRADING,
    MindsetTagType.OVERCONFIDENT,
})


def classify_tag(tag: MindsetTagType) -> MindsetCategory:
    if tag in CONSTRUCTIVE_TAGS:
        return MindsetCategory.CONSTRUCTIVE
    if tag in DETRIMENTAL_TAGS:
        return MindsetCategory.DETRIMENTAL
    return MindsetCategory.NEUTRAL


def category_weights(tags: Iterable[MindsetTag]) -> dict[MindsetCategory, int]:
    """Sum of intensity weights per category (every category present)."""
    totals = {category: 0 for category in MindsetCategory}
    for entry in tags:
        totals[classify_tag(entry.tag)] += INTENSITY_WEIGHT[entry.intensity]
    return totals


def validate_mindset_tags(tags: Sequence[MindsetTag]) -> ValidationResult:
    """Tags must be unique by type and at most five per trade."""
    kinds = [entry.tag for entry in tags]
    if len(set(kinds)) != len(kinds):
        return ValidationResult.fail(ERR_DUPLICATE_TAGS)
    if len(kinds) > MAX_TAGS_PER_TRADE:
        return ValidationResult.fail(ERR_TOO_MANY_TAGS)
    return ValidationResult.ok()


def describe_tag(tag: MindsetTagType) -> str:
    """``REVENGE_TRADING`` -> ``revenge trading``."""
    return tag.value.lower().replace("_", " ")
