"""
Configuration Management for the Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The analytics engine itself never reads settings; the orchestrator passes
the few values it needs (label format) in as arguments, so every view stays
a pure function of its inputs.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ledger.models.transaction import TransactionType


DEFAULT_INCOME_CATEGORIES = "Salary,Freelance,Investment,Business,Gift,Other Income"
DEFAULT_EXPENSE_CATEGORIES = (
    "Housing,Food,Transportation,Healthcare,Entertainment,"
    "Shopping,Utilities,Education,Other Expense"
)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class CategorySettings(BaseSettings):
    """Category sets offered by the entry form, per transaction type."""

    model_config = SettingsConfigDict(
        env_prefix="CATEGORIES_",
        extra="ignore"
    )

    income: str = Field(
        default=DEFAULT_INCOME_CATEGORIES,
        description="Comma-separated list of income categories"
    )
    expense: str = Field(
        default=DEFAULT_EXPENSE_CATEGORIES,
        description="Comma-separated list of expense categories"
    )

    @field_validator("income", "expense")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not _split_csv(v):
            raise ValueError("At least one category is required")
        return v

    @property
    def income_list(self) -> list[str]:
        return _split_csv(self.income)

    @property
    def expense_list(self) -> list[str]:
        return _split_csv(self.expense)

    def for_type(self, transaction_type: TransactionType) -> list[str]:
        """Categories the form offers for a given type."""
        if transaction_type is TransactionType.INCOME:
            return self.income_list
        return self.expense_list


class ValidationSettings(BaseSettings):
    """Thresholds for the transaction form validator."""

    model_config = SettingsConfigDict(
        env_prefix="VALIDATION_",
        extra="ignore"
    )

    max_transaction_amount: float = Field(
        default=1000000.0,
        gt=0,
        description="Amounts above this are flagged for review"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be"
    )
    max_description_length: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Maximum description length"
    )


class DisplaySettings(BaseSettings):
    """Presentation hints passed to the engine by the orchestrator."""

    model_config = SettingsConfigDict(
        env_prefix="DISPLAY_",
        extra="ignore"
    )

    month_label_format: str = Field(
        default="%b %Y",
        description="strftime format for trend month labels"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Standard library log level"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False renders for a console)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def categories(self) -> CategorySettings:
        return CategorySettings()

    @property
    def validation(self) -> ValidationSettings:
        return ValidationSettings()

    @property
    def display(self) -> DisplaySettings:
        return DisplaySettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for each failure. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("app", "categories", "validation", "display"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
