"""Form validation package."""

from ledger.validation.validator import TransactionValidator

__all__ = ["TransactionValidator"]
