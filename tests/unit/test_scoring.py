"""Unit tests for heuristic scoring logic"""

import pytest
from datetime import date
from decimal import Decimal
from vividpulse_insights.domain.metrics import aggregate
from vividpulse_insights.domain.models import InsightSource, MetricsSummary, TransactionKind, TransactionRecord
from vividpulse_insights.domain.scoring import (
    GENERIC_RECOMMENDATIONS,
    build_analysis,
    build_forecast,
    build_recommendations,
    calculate_health_score,
    classify_tier,
    estimate_savings_potential,
    format_currency,
    score,
    static_insight,
)


def make_summary(income: str, expense: str, categories=(), as_of: date = date(2026, 3, 15)) -> MetricsSummary:
    total_income = Decimal(income)
    total_expense = Decimal(expense)
    net = total_income - total_expense
    return MetricsSummary(
        total_income=total_income,
        total_expense=total_expense,
        net_balance=net,
        savings_rate=net / total_income if total_income > 0 else Decimal("0"),
        category_totals=tuple((name, Decimal(amount)) for name, amount in categories),
        transaction_count=len(categories) + 1,
        as_of=as_of,
        period_income=total_income,
        period_expense=total_expense,
    )


def test_score_salary_and_two_expenses(sample_transactions, as_of):
    """Test full local insight for a 50% savings month"""
    insight = score(aggregate(sample_transactions, as_of))

    # round(0.5 * 100) + 20
    assert insight.health_score == 70
    assert insight.tier == "STABLE"
    assert insight.source == InsightSource.LOCAL
    assert insight.degradation_reason is None
    assert insight.analysis.startswith("Exceptional savings rate of 50%")
    # Food 20000 * 0.10 + Entertainment 5000 * 0.25
    assert insight.savings_potential == "₱3,250.00"
    assert len(insight.recommendations) == 3
    assert insight.recommendations[0] == "Set a monthly cap on Food; it takes 80% of your spending."


def test_score_expense_without_income(txn, as_of):
    """Test zero-income penalty and overspend analysis"""
    insight = score(aggregate([txn("1", TransactionKind.EXPENSE, 1000, "Food", 3)], as_of))

    assert insight.health_score == 20
    assert insight.tier == "CRITICAL"
    assert insight.analysis == (
        "Your expenses exceed your income by ₱1,000.00. Immediate budget adjustment recommended."
    )
    assert insight.recommendations == (
        "Set a monthly cap on Food; it takes 100% of your spending.",
        "Log your income sources so your savings rate can be tracked.",
        GENERIC_RECOMMENDATIONS[0],
    )


def test_score_empty_snapshot(as_of):
    """Test empty data is neutral: full score, stable analysis"""
    insight = score(aggregate([], as_of))

    assert insight.health_score == 100
    assert insight.tier == "ELITE"
    assert insight.analysis == "Your spending is currently stable relative to your income."
    assert insight.savings_potential == "₱0.00"
    assert len(insight.recommendations) == 3


def test_score_is_deterministic(sample_transactions, as_of):
    """Test repeated scoring of the same summary is identical"""
    summary = aggregate(sample_transactions, as_of)

    assert score(summary) == score(summary)
    assert repr(score(summary)) == repr(score(summary))


@pytest.mark.parametrize(
    "income,expense,expected",
    [
        ("800", "700", 33),  # 12.5% rounds half up to 13
        ("100", "0", 100),  # 120 clamped
        ("100", "500", 0),  # -380 clamped
        ("1000", "1000", 20),
        ("0", "50", 20),
        ("0", "0", 100),
    ],
)
def test_calculate_health_score(income, expense, expected):
    assert calculate_health_score(make_summary(income, expense)) == expected


def test_classify_tier_boundaries():
    """Test lower bounds are exclusive"""
    assert classify_tier(100) == "ELITE"
    assert classify_tier(81) == "ELITE"
    assert classify_tier(80) == "STABLE"
    assert classify_tier(51) == "STABLE"
    assert classify_tier(50) == "CRITICAL"
    assert classify_tier(0) == "CRITICAL"


def test_estimate_savings_potential_only_flexible_categories():
    summary = make_summary(
        "10000",
        "6000",
        [("Rent", "3000"), ("Entertainment", "1000"), ("Other", "1000"), ("Food", "1000")],
    )

    # 1000 * 0.25 + 1000 * 0.15 + 1000 * 0.10
    assert estimate_savings_potential(summary) == Decimal("500.00")


def test_analysis_category_concentration():
    """Test concentration rule applies when balance is positive and savings modest"""
    summary = make_summary("10000", "8000", [("Rent", "5000"), ("Food", "3000")])

    assert build_analysis(summary) == (
        "Rent accounts for 63% of your spending. It is the biggest lever for improving your budget."
    )


def test_analysis_default_stable():
    summary = make_summary("10000", "8000", [("Rent", "3000"), ("Food", "3000"), ("Transport", "2000")])

    assert build_analysis(summary) == "Your spending is currently stable relative to your income."


def test_analysis_overspend_takes_priority():
    """Test overspend rule wins over concentration"""
    summary = make_summary("1000", "1500", [("Food", "1500")])

    assert build_analysis(summary).startswith("Your expenses exceed your income by ₱500.00.")


def test_forecast_projects_month_end():
    """Test linear burn-rate projection over a 31-day month"""
    summary = make_summary("50000", "25000", [("Food", "25000")], as_of=date(2026, 3, 15))

    assert build_forecast(summary) == (
        "At ₱1,666.67 per day, spending is projected to reach ₱51,666.67 by month end, "
        "leaving a balance of -₱1,666.67."
    )


def test_forecast_without_spending():
    summary = make_summary("3000", "0", as_of=date(2026, 2, 10))

    assert build_forecast(summary) == (
        "No spending logged so far this month, so you are on track to keep ₱3,000.00 by month end."
    )


def year_of_rent_and_salary(year: int) -> list[TransactionRecord]:
    records = []
    for month in range(1, 13):
        records.append(TransactionRecord(f"inc_{month}", TransactionKind.INCOME, Decimal("30000"), "Salary", date(year, month, 1)))
        records.append(TransactionRecord(f"rent_{month}", TransactionKind.EXPENSE, Decimal("20000"), "Rent", date(year, month, 2)))
    return records


def test_forecast_ignores_previous_months():
    """Test burn rate only counts spending from the current month"""
    history = year_of_rent_and_salary(2025)

    summary = aggregate(history, as_of=date(2026, 3, 1))

    assert build_forecast(summary) == (
        "No spending logged so far this month, so you are on track to keep ₱0.00 by month end."
    )


def test_forecast_ignores_history_and_future_records():
    transactions = year_of_rent_and_salary(2025) + [
        TransactionRecord("inc_now", TransactionKind.INCOME, Decimal("30000"), "Salary", date(2026, 3, 1)),
        TransactionRecord("food_now", TransactionKind.EXPENSE, Decimal("1000"), "Food", date(2026, 3, 5)),
        TransactionRecord("rent_later", TransactionKind.EXPENSE, Decimal("20000"), "Rent", date(2026, 3, 20)),
    ]

    summary = aggregate(transactions, as_of=date(2026, 3, 10))

    # 1000 over 10 days, projected across 31
    assert build_forecast(summary) == (
        "At ₱100.00 per day, spending is projected to reach ₱3,100.00 by month end, "
        "leaving a balance of ₱26,900.00."
    )


def test_recommendations_savings_rate_tip():
    summary = make_summary("10000", "9000", [("Rent", "3000"), ("Food", "3000"), ("Utilities", "3000")])

    recommendations = build_recommendations(summary)

    assert recommendations[0] == "Your savings rate is 10%; aim for at least 20% by trimming flexible spending."
    assert recommendations[1:] == GENERIC_RECOMMENDATIONS[:2]


def test_recommendations_padded_to_three():
    summary = make_summary("10000", "5000", [("Rent", "2000"), ("Food", "2000"), ("Transport", "1000")])

    assert build_recommendations(summary) == GENERIC_RECOMMENDATIONS


def test_format_currency():
    assert format_currency(Decimal("1234.5")) == "₱1,234.50"
    assert format_currency(Decimal("-0.005")) == "-₱0.01"
    assert format_currency(Decimal("12"), "$") == "$12.00"


def test_static_insight_is_complete():
    insight = static_insight("local analysis unavailable")

    assert 0 <= insight.health_score <= 100
    assert len(insight.recommendations) == 3
    assert insight.degradation_reason == "local analysis unavailable"
    assert insight.source == InsightSource.LOCAL
