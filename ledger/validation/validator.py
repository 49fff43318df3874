"""
Two-Stage Validation Pipeline

Form data for a new transaction is checked before it reaches the store.
The engine assumes well-formed records; this is where they are made so.

STAGE 1 - SCHEMA VALIDATION:
- Required field presence (amount, description, category)
- Amount parses as a finite, positive number
- Type is income or expense
- Description length

STAGE 2 - SEMANTIC VALIDATION:
- Category belongs to the set offered for the type
- Future date detection
- Unusually large amount detection

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to correct.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ledger.config import get_settings
from ledger.config.settings import CategorySettings, ValidationSettings
from ledger.models.transaction import (
    NewTransaction,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


class TransactionValidator:
    """
    Validates transaction form data through a two-stage pipeline.

    Stage 2 only runs when stage 1 produced a usable amount, type and date.
    """

    def __init__(
        self,
        validation_settings: Optional[ValidationSettings] = None,
        category_settings: Optional[CategorySettings] = None,
    ):
        settings = get_settings()
        self._settings = validation_settings or settings.validation
        self._categories = category_settings or settings.categories

    def validate(
        self,
        form_data: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """
        Run both stages over raw form data.

        Args:
            form_data: amount, description, category, type and optional date
            now: reference instant for date checks and the default date
        """
        now = now or datetime.now()
        parsed, schema_issues = self._validate_schema(form_data, now)
        schema_valid = not any(issue.severity == "error" for issue in schema_issues)

        if not schema_valid:
            return ValidationResult(
                schema_valid=False,
                semantic_valid=False,
                issues=schema_issues,
            )

        semantic_issues = self._validate_semantic(parsed, now)
        semantic_valid = not any(issue.severity == "error" for issue in semantic_issues)

        transaction = None
        if semantic_valid:
            transaction = NewTransaction(**parsed)

        return ValidationResult(
            schema_valid=True,
            semantic_valid=semantic_valid,
            issues=schema_issues + semantic_issues,
            transaction=transaction,
        )

    def _validate_schema(
        self,
        form_data: Mapping[str, Any],
        now: datetime,
    ) -> tuple[dict, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (parsed_fields, list_of_issues)
        """
        issues = []
        parsed: dict[str, Any] = {}

        # Amount
        raw_amount = form_data.get("amount")
        if raw_amount is None or (isinstance(raw_amount, str) and not raw_amount.strip()):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        else:
            amount = self._parse_amount(raw_amount)
            if amount is None:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_format",
                    message=f"Amount ({raw_amount!r}) is not a number",
                    severity="error",
                    suggested_fix="Enter a number such as 12.50",
                ))
            elif amount <= 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                    severity="error",
                ))
            else:
                parsed["amount"] = amount

        # Description
        description = str(form_data.get("description") or "").strip()
        if not description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
            ))
        elif len(description) > self._settings.max_description_length:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message=(
                    f"Description is longer than "
                    f"{self._settings.max_description_length} characters"
                ),
                severity="error",
            ))
        else:
            parsed["description"] = description

        # Category
        category = str(form_data.get("category") or "").strip()
        if not category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))
        else:
            parsed["category"] = category

        # Type
        raw_type = form_data.get("type", TransactionType.EXPENSE)
        try:
            parsed["type"] = TransactionType(raw_type)
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Type must be 'income' or 'expense', got {raw_type!r}",
                severity="error",
            ))

        # Date defaults to now, the way the form pre-fills it
        raw_date = form_data.get("date")
        if raw_date is None:
            parsed["date"] = now
        elif isinstance(raw_date, datetime):
            parsed["date"] = raw_date
        else:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must be a date and time",
                severity="error",
            ))

        return parsed, issues

    def _validate_semantic(
        self,
        parsed: dict,
        now: datetime,
    ) -> list[ValidationIssue]:
        """
        Stage 2: Semantic validation.

        Returns: list_of_issues
        """
        issues = []

        allowed = self._categories.for_type(parsed["type"])
        if parsed["category"] not in allowed:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=(
                    f"'{parsed['category']}' is not a {parsed['type'].value} category"
                ),
                severity="error",
                suggested_fix=f"Choose one of: {', '.join(allowed)}",
            ))

        # Future date check (with tolerance)
        max_future = timedelta(days=self._settings.future_date_tolerance_days)
        transaction_date = parsed["date"]
        if (transaction_date.tzinfo is None) == (now.tzinfo is None):
            if transaction_date > now + max_future:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message=f"Date ({transaction_date:%Y-%m-%d}) is in the future",
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))

        # Absurd amount check
        max_amount = Decimal(str(self._settings.max_transaction_amount))
        if parsed["amount"] > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({parsed['amount']:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        return issues

    @staticmethod
    def _parse_amount(raw: Any) -> Optional[Decimal]:
        if isinstance(raw, bool):
            return None
        try:
            amount = Decimal(str(raw).strip())
        except InvalidOperation:
            return None
        if not amount.is_finite():
            return None
        return amount
