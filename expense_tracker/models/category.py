"""
Category Table

Fixed list of spending categories with their display metadata.

DESIGN DECISION: Expenses store the category id as a plain string,
not as a strict reference into this table. An id that is not listed
here is kept as-is in storage and only rendered as the fallback
category, so old or hand-edited data never fails to load.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Sentinel accepted by the category filter meaning "no filtering"
ALL_CATEGORIES = "all"

# Category used to display ids that are not in the table
FALLBACK_CATEGORY_ID = "misc"


class Category(BaseModel):
    """A spending bucket and how it is shown."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Identifier stored on expenses")
    name: str = Field(..., description="Display name")
    emoji: str = Field(..., description="Icon shown next to the name")
    color: str = Field(
        ...,
        pattern="^#[0-9a-fA-F]{6}$",
        description="Chart/badge colour as #rrggbb"
    )


CATEGORIES: tuple[Category, ...] = (
    Category(id="food", name="Food & Dining", emoji="🍽️", color="#ef4444"),
    Category(id="transport", name="Transport", emoji="🚗", color="#3b82f6"),
    Category(id="shopping", name="Shopping", emoji="🛍️", color="#ec4899"),
    Category(id="bills", name="Bills & Utilities", emoji="⚡", color="#eab308"),
    Category(id="entertainment", name="Entertainment", emoji="🎬", color="#8b5cf6"),
    Category(id="health", name="Health & Fitness", emoji="🏥", color="#10b981"),
    Category(id="education", name="Education", emoji="📚", color="#6366f1"),
    Category(id="travel", name="Travel", emoji="✈️", color="#06b6d4"),
    Category(id="misc", name="Miscellaneous", emoji="📦", color="#6b7280"),
)

_CATEGORIES_BY_ID: dict[str, Category] = {c.id: c for c in CATEGORIES}


def find_category(category_id: str) -> Optional[Category]:
    """Look up a category, returning None for unknown ids."""
    return _CATEGORIES_BY_ID.get(category_id)


def get_category(category_id: str) -> Category:
    """Look up a category for display, falling back to Miscellaneous."""
    return _CATEGORIES_BY_ID.get(category_id, _CATEGORIES_BY_ID[FALLBACK_CATEGORY_ID])


def category_ids() -> list[str]:
    """All known category ids in display order."""
    return [c.id for c in CATEGORIES]
