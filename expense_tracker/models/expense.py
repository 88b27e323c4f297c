"""
Core Data Models for the Expense Tracker

These models define the schemas for everything the stores hold
and everything written to storage. They are designed to:
1. Enforce the record invariants at construction time
2. Serialize to exactly the persisted field names
3. Reject corrupt snapshots when they are loaded back

DESIGN DECISION: Records are immutable. The stores replace a record
with a freshly validated copy instead of mutating it, so a caller
holding a reference never sees it change underneath them.
"""

import datetime as dt
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer


# Exact arithmetic in memory, plain JSON numbers in storage
Money = Annotated[
    Decimal,
    Field(allow_inf_nan=False),
    PlainSerializer(float, return_type=float, when_used="json"),
]


# =============================================================================
# EXPENSE
# =============================================================================

class Expense(BaseModel):
    """
    One recorded spending event.

    `date` is the user-facing calendar day and may differ from
    `created_at`, which only orders records by insertion.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier, assigned at creation"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Amount spent in the display currency"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category id (see models.category)"
    )
    description: str = Field(
        ...,
        min_length=2,
        description="What the money was spent on"
    )
    date: dt.date = Field(
        ...,
        description="Calendar day of the expense"
    )
    created_at: dt.datetime = Field(
        ...,
        alias="createdAt",
        description="When the record was created"
    )

    def to_snapshot_dict(self) -> dict:
        """Serialize with the persisted field names (createdAt)."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# BUDGET
# =============================================================================

NonNegativeAmount = Annotated[Money, Field(ge=0)]


class Budget(BaseModel):
    """
    Monthly spending limits.

    A category missing from `categories` has no limit set, which is
    shown differently from an explicit limit of zero.
    """
    model_config = ConfigDict(frozen=True)

    total: NonNegativeAmount = Field(
        default=Decimal("50000"),
        description="Overall monthly limit"
    )
    categories: dict[str, NonNegativeAmount] = Field(
        default_factory=dict,
        description="Per-category monthly limits"
    )

    def limit_for(self, category_id: str) -> Optional[Decimal]:
        """Limit for a category, or None if none was set."""
        return self.categories.get(category_id)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ExpenseDraft(BaseModel):
    """User input for an expense after conversion, before it becomes a record."""
    model_config = ConfigDict(frozen=True)

    amount: Money
    category: str
    description: str
    date: dt.date


class ValidationIssue(BaseModel):
    """A single problem found in user input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating raw form input for an expense.

    `draft` is only set when the input is valid.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    draft: Optional[ExpenseDraft] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]
