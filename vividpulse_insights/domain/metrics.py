"""Metrics aggregation - turns a transaction snapshot into numeric totals"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable
from vividpulse_insights.domain.models import MetricsSummary, TransactionKind, TransactionRecord


def aggregate(transactions: Iterable[TransactionRecord], as_of: date | None = None) -> MetricsSummary:
    """
    Summarize income, expense and per-category spend in a single pass.

    Requirements:
    - savings_rate is 0 when no income is logged (no division by zero)
    - category_totals only lists categories with at least one expense,
      largest first (ties ordered by name so output is deterministic)
    - period totals only count records in the month of `as_of` dated on or
      before `as_of`; they drive the month-end forecast
    - Empty input yields an all-zero summary

    Args:
        transactions: Snapshot to summarize; never mutated
        as_of: Reference day for the forecast period (default: today)
    """
    as_of = as_of or date.today()
    period_start = as_of.replace(day=1)

    total_income = Decimal("0")
    total_expense = Decimal("0")
    period_income = Decimal("0")
    period_expense = Decimal("0")
    by_category: Dict[str, Decimal] = {}
    count = 0

    for txn in transactions:
        count += 1
        in_period = period_start <= txn.occurred_on <= as_of
        if txn.kind == TransactionKind.INCOME:
            total_income += txn.amount
            if in_period:
                period_income += txn.amount
        else:
            total_expense += txn.amount
            by_category[txn.category] = by_category.get(txn.category, Decimal("0")) + txn.amount
            if in_period:
                period_expense += txn.amount

    net_balance = total_income - total_expense
    savings_rate = net_balance / total_income if total_income > 0 else Decimal("0")

    category_totals = tuple(sorted(by_category.items(), key=lambda item: (-item[1], item[0])))

    return MetricsSummary(
        total_income=total_income,
        total_expense=total_expense,
        net_balance=net_balance,
        savings_rate=savings_rate,
        category_totals=category_totals,
        transaction_count=count,
        as_of=as_of,
        period_income=period_income,
        period_expense=period_expense,
    )
