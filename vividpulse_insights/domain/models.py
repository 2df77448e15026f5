"""Domain models - pure Python dataclasses representing the insight pipeline"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from vividpulse_insights.domain.exceptions import FailureKind, InvalidTransactionError


class TransactionKind(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class InsightSource(str, Enum):
    """Where the final insight fields came from"""

    LOCAL = "LOCAL"
    REMOTE = "REMOTE"
    REMOTE_DEGRADED = "REMOTE_DEGRADED"


INCOME_SOURCES = ("Salary", "Freelance", "Business", "Allowance", "Other")
EXPENSE_CATEGORIES = ("Food", "Rent", "Utilities", "Transport", "Entertainment", "Other")

CATEGORIES_BY_KIND = {
    TransactionKind.INCOME: INCOME_SOURCES,
    TransactionKind.EXPENSE: EXPENSE_CATEGORIES,
}


@dataclass(frozen=True)
class TransactionRecord:
    """Income or expense entry owned by the persistence layer"""

    id: str
    kind: TransactionKind
    amount: Decimal
    category: str
    occurred_on: date
    note: Optional[str] = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "kind", TransactionKind(self.kind))
        except ValueError as e:
            raise InvalidTransactionError(f"Transaction {self.id}: unknown kind {self.kind!r}") from e
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if self.amount <= 0:
            raise InvalidTransactionError(f"Transaction {self.id}: amount must be positive, got {self.amount}")
        if self.category not in CATEGORIES_BY_KIND[self.kind]:
            raise InvalidTransactionError(
                f"Transaction {self.id}: '{self.category}' is not a valid {self.kind.value.lower()} category"
            )


@dataclass(frozen=True)
class MetricsSummary:
    """Numeric summary of a transaction snapshot"""

    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    savings_rate: Decimal  # 0 when there is no income
    category_totals: Tuple[Tuple[str, Decimal], ...]  # expense only, largest first
    transaction_count: int
    as_of: date
    # Month of `as_of`, up to and including `as_of`
    period_income: Decimal
    period_expense: Decimal

    @property
    def expense_ratio(self) -> Decimal:
        if self.total_income == 0:
            return Decimal("0")
        return self.total_expense / self.total_income

    @property
    def top_category(self) -> Optional[str]:
        return self.category_totals[0][0] if self.category_totals else None

    @property
    def top_category_share(self) -> Decimal:
        """Largest category's share of total expense"""
        if not self.category_totals or self.total_expense == 0:
            return Decimal("0")
        return self.category_totals[0][1] / self.total_expense


@dataclass(frozen=True)
class Insight:
    """Advisory output of the pipeline; every field is always populated"""

    health_score: int
    analysis: str
    forecast: str
    recommendations: Tuple[str, ...]
    savings_potential: str
    tier: str
    source: InsightSource
    degradation_reason: Optional[str] = None
    failure: Optional[FailureKind] = None

    @property
    def retryable(self) -> bool:
        """True when the remote step failed for a reason a later retry may fix"""
        return self.failure is not None and self.failure.retryable


@dataclass(frozen=True)
class RemoteInsight:
    """Remote reply after validation; rejected fields are None"""

    health_score: Optional[int] = None
    analysis: Optional[str] = None
    forecast: Optional[str] = None
    recommendations: Optional[Tuple[str, ...]] = None
    savings_potential: Optional[str] = None
    invalid_fields: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def fully_valid(self) -> bool:
        return not self.invalid_fields
