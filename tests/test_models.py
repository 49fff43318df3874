"""
Tests for the Ledger models

Test strategy:
1. Unit tests for individual components (models, engine, validator)
2. Integration tests for the dashboard flows (in-memory storage)
3. No network or filesystem access in tests
"""

import pytest
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from ledger.models.transaction import (
    CategorySlice,
    MonthPoint,
    NewTransaction,
    QueryOptions,
    QueryResult,
    SortField,
    SortOrder,
    Summary,
    Transaction,
    TransactionType,
    TypeFilter,
    ValidationIssue,
    ValidationResult,
)


class TestTransactionModels:
    """Tests for transaction records."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = Transaction(
            id=uuid4(),
            amount=Decimal("3500"),
            description="Monthly Salary",
            category="Salary",
            type="income",
            date=datetime(2024, 1, 1),
        )
        assert transaction.type is TransactionType.INCOME
        assert transaction.is_income is True
        assert transaction.is_expense is False

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        transaction = NewTransaction(
            amount=Decimal("10"),
            description="  Coffee  ",
            category=" Food ",
            type="expense",
            date=datetime(2024, 1, 1),
        )
        assert transaction.description == "Coffee"
        assert transaction.category == "Food"

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            NewTransaction(
                amount=Decimal("-1"),
                description="Test",
                category="Food",
                type="expense",
                date=datetime(2024, 1, 1),
            )

    @pytest.mark.parametrize("amount", [Decimal("NaN"), Decimal("Infinity"), float("inf")])
    def test_transaction_rejects_non_finite_amount(self, amount):
        """Test that NaN and infinity are rejected."""
        with pytest.raises(ValidationError):
            NewTransaction(
                amount=amount,
                description="Test",
                category="Food",
                type="expense",
                date=datetime(2024, 1, 1),
            )

    def test_transaction_rejects_unknown_type(self):
        """Test that type must be income or expense."""
        with pytest.raises(ValidationError):
            NewTransaction(
                amount=Decimal("1"),
                description="Test",
                category="Food",
                type="transfer",
                date=datetime(2024, 1, 1),
            )

    def test_transaction_rejects_blank_description(self):
        """Test that a whitespace-only description is rejected."""
        with pytest.raises(ValidationError):
            NewTransaction(
                amount=Decimal("1"),
                description="   ",
                category="Food",
                type="expense",
                date=datetime(2024, 1, 1),
            )

    def test_transaction_is_immutable(self, txn):
        """Test that stored transactions cannot be changed."""
        transaction = txn(10)
        with pytest.raises(ValidationError):
            transaction.amount = Decimal("20")

    def test_from_new_attaches_id(self):
        """Test Transaction.from_new copies every field and adds the id."""
        new = NewTransaction(
            amount=Decimal("80"),
            description="Gas Station",
            category="Transportation",
            type="expense",
            date=datetime(2024, 1, 5),
        )
        transaction_id = uuid4()
        transaction = Transaction.from_new(new, transaction_id)
        assert transaction.id == transaction_id
        assert transaction.description == "Gas Station"
        assert transaction.amount == Decimal("80")


class TestDerivedModels:
    """Tests for summary, slice and month point views."""

    def test_summary_balance(self):
        """Test balance is income minus expense, and may be negative."""
        summary = Summary(total_income=Decimal("100"), total_expense=Decimal("250"))
        assert summary.balance == Decimal("-150")

    def test_summary_serializes_balance(self):
        """Test balance appears in the dumped summary."""
        dumped = Summary(total_income=Decimal("5"), total_expense=Decimal("2")).model_dump()
        assert dumped["balance"] == Decimal("3")

    def test_category_slice_percentage_bounds(self):
        """Test percentage must be between 0 and 100."""
        with pytest.raises(ValidationError):
            CategorySlice(category="Food", amount=Decimal("1"), percentage=Decimal("101"))

    def test_month_point_key_and_net(self):
        """Test month identity and net."""
        point = MonthPoint(
            year=2024,
            month=3,
            label="Mar 2024",
            income=Decimal("10"),
            expense=Decimal("4"),
        )
        assert point.key == "2024-03"
        assert point.net == Decimal("6")

    def test_month_point_rejects_bad_month(self):
        """Test month must be 1-12."""
        with pytest.raises(ValidationError):
            MonthPoint(year=2024, month=13, label="?")


class TestQueryOptions:
    """Tests for the query configuration."""

    def test_defaults(self):
        """Test defaults match the list view's initial state."""
        options = QueryOptions()
        assert options.search_term == ""
        assert options.type_filter is TypeFilter.ALL
        assert options.category_filter == "all"
        assert options.sort_by is SortField.DATE
        assert options.sort_order is SortOrder.DESC

    def test_accepts_string_values(self):
        """Test enum fields accept their string values."""
        options = QueryOptions(type_filter="expense", sort_by="amount", sort_order="asc")
        assert options.type_filter is TypeFilter.EXPENSE
        assert options.sort_by is SortField.AMOUNT
        assert options.sort_order is SortOrder.ASC

    @pytest.mark.parametrize("field,value", [
        ("type_filter", "transfer"),
        ("sort_by", "description"),
        ("sort_order", "up"),
        ("category_filter", ""),
    ])
    def test_rejects_out_of_range_values(self, field, value):
        """Test out-of-range values are rejected when options are built."""
        with pytest.raises(ValidationError):
            QueryOptions(**{field: value})

    def test_rejects_unknown_keys(self):
        """Test unknown configuration keys are rejected."""
        with pytest.raises(ValidationError):
            QueryOptions(limit=10)

    def test_query_result_counts(self, txn):
        """Test match_count follows the transactions held."""
        result = QueryResult(transactions=(txn(1), txn(2)), total_count=5)
        assert result.match_count == 2
        assert result.data_found is True
        assert QueryResult().data_found is False


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            schema_valid=False,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.is_valid is False

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.warnings == ["Date in future"]

    def test_errors_listed_before_warnings(self):
        """Test issues are ordered errors first."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=False,
            issues=[
                ValidationIssue(field="a", issue_type="x", message="w", severity="warning"),
                ValidationIssue(field="b", issue_type="y", message="e", severity="error"),
            ],
        )
        assert [i.severity for i in result.issues] == ["error", "warning"]

    def test_issue_severity_pattern(self):
        """Test severity must be error or warning."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="a", issue_type="x", message="m", severity="info")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
