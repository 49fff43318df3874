"""
Core Data Models for the Ledger

These models define the strict schemas for every record and derived view
flowing through the engine. They are designed to:
1. Reject malformed records at construction rather than at use
2. Be immutable, so a snapshot can be shared between computations
3. Hold no back-reference to source records beyond copied fields

DESIGN DECISION: Amounts are Decimal end to end. Floating arithmetic drifts
when summing currency, and every view here is a sum.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    computed_field,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class TypeFilter(str, Enum):
    """Type filter accepted by the query engine."""
    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"


class SortField(str, Enum):
    """Key the query engine sorts by."""
    DATE = "date"
    AMOUNT = "amount"


class SortOrder(str, Enum):
    """Sort direction."""
    ASC = "asc"
    DESC = "desc"


ALL_CATEGORIES = "all"


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class NewTransaction(BaseModel):
    """
    A transaction before the store has assigned it an id.

    This is what the entry form produces and what the store consumes.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    amount: Decimal = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Amount in the ledger's single implicit currency"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Free-text label"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category label appropriate to the type"
    )
    type: TransactionType
    date: datetime = Field(
        ...,
        description="When the event happened"
    )


class Transaction(NewTransaction):
    """
    A stored transaction.

    CRITICAL: Transactions are immutable. The engine only reads them and
    builds new derived objects; the id is assigned once by the store.
    """

    id: UUID = Field(
        ...,
        description="Opaque identifier assigned by the store"
    )

    @classmethod
    def from_new(cls, new: NewTransaction, transaction_id: UUID) -> "Transaction":
        """Attach an id to a pending transaction."""
        return cls(id=transaction_id, **new.model_dump())

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class Summary(BaseModel):
    """Totals over a snapshot."""
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    @computed_field
    @property
    def balance(self) -> Decimal:
        """Net balance; negative when spending exceeds income."""
        return self.total_income - self.total_expense


class CategorySlice(BaseModel):
    """One expense category's share of total spending."""
    model_config = ConfigDict(frozen=True)

    category: str
    amount: Decimal = Field(..., ge=0)
    percentage: Decimal = Field(
        ...,
        ge=0,
        le=100,
        description="Share of total expense, 0-100, unrounded"
    )


class MonthPoint(BaseModel):
    """
    Income and expense for one calendar month of the trend window.

    year/month identify the bucket losslessly; label is for display only.
    """
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1)
    month: int = Field(..., ge=1, le=12)
    label: str
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @computed_field
    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    @property
    def key(self) -> str:
        """Sortable "YYYY-MM" identifier."""
        return f"{self.year:04d}-{self.month:02d}"


# =============================================================================
# QUERY MODELS
# =============================================================================

class QueryOptions(BaseModel):
    """
    Filter and sort configuration for the transaction list.

    DESIGN DECISION: Every field is an explicit enum (or a sentinel-checked
    string) and unknown keys are forbidden, so a bad configuration is
    rejected when it is built, not when it is used.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    search_term: str = Field(
        default="",
        description="Case-insensitive substring of description or category"
    )
    type_filter: TypeFilter = TypeFilter.ALL
    category_filter: str = Field(
        default=ALL_CATEGORIES,
        min_length=1,
        description='Exact category, or "all"'
    )
    sort_by: SortField = SortField.DATE
    sort_order: SortOrder = SortOrder.DESC


class QueryResult(BaseModel):
    """
    Filtered and sorted transactions.

    total_count is the size of the snapshot the query ran against, so the
    list can show "N of M transactions".
    """
    model_config = ConfigDict(frozen=True)

    transactions: tuple[Transaction, ...] = ()
    total_count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def match_count(self) -> int:
        return len(self.transactions)

    @property
    def data_found(self) -> bool:
        return bool(self.transactions)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in form data."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of the two-stage form validation.

    Stage 1: Schema validation (presence, types, ranges)
    Stage 2: Semantic validation (category set, dates, amounts)
    """

    schema_valid: bool
    semantic_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    transaction: Optional[NewTransaction] = Field(
        default=None,
        description="The accepted transaction, set only when valid"
    )

    @property
    def is_valid(self) -> bool:
        return self.schema_valid and self.semantic_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]

    @field_validator("issues")
    @classmethod
    def sort_errors_first(cls, v: list[ValidationIssue]) -> list[ValidationIssue]:
        """Errors are shown before warnings."""
        return sorted(v, key=lambda issue: issue.severity != "error")
