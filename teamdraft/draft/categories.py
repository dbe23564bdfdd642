from __future__ import annotations

from teamdraft.draft.constants import DRAFT_CATEGORY_ORDER


def next_category(current: str | None) -> str | None:
    """Tier drafted after ``current``; ``None`` once the last tier is exhausted."""
    if current not in DRAFT_CATEGORY_ORDER:
        return None
    index = DRAFT_CATEGORY_ORDER.index(current)
    if index + 1 >= len(DRAFT_CATEGORY_ORDER):
        return None
    return DRAFT_CATEGORY_ORDER[index + 1]
