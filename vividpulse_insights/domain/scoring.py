"""Heuristic scoring engine - deterministic insight used as default and fallback"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple
from vividpulse_insights.domain.models import Insight, InsightSource, MetricsSummary
from vividpulse_insights.utils.date_utils import days_in_month, elapsed_days_in_month

DEFAULT_CURRENCY_SYMBOL = "₱"

# Score assigned when expenses exist but no income has been logged
NO_INCOME_SCORE = 20
# Score assigned to an empty snapshot (no data is neutral, not failing)
EMPTY_SNAPSHOT_SCORE = 100
SAVINGS_RATE_BONUS = 20

# Share of each discretionary category considered recoverable
FLEXIBLE_RECOVERY: Dict[str, Decimal] = {
    "Entertainment": Decimal("0.25"),
    "Other": Decimal("0.15"),
    "Food": Decimal("0.10"),
}

HIGH_SAVINGS_RATE = Decimal("0.30")
TARGET_SAVINGS_RATE = Decimal("0.20")
CONCENTRATION_SHARE = Decimal("0.40")

GENERIC_RECOMMENDATIONS = (
    "Build an emergency fund covering 3-6 months of basic needs.",
    "Automate a 15% transfer to savings on every payday.",
    "Review annual insurance and utility plans for cheaper alternatives.",
)

RECOMMENDATION_COUNT = 3

_CENT = Decimal("0.01")


def format_currency(amount: Decimal, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format an amount as e.g. ₱1,234.50 (sign placed before the symbol)"""
    quantized = Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    return f"{sign}{symbol}{abs(quantized):,.2f}"


def _percent(ratio: Decimal) -> int:
    return int((ratio * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_health_score(summary: MetricsSummary) -> int:
    """
    Health score from 0 (critical) to 100 (excellent).

    Rules:
    - Income logged: savings rate in percent plus a 20 point bonus, clamped
    - Expenses but no income: flat 20
    - No data at all: 100
    """
    if summary.total_income > 0:
        score = _percent(summary.savings_rate) + SAVINGS_RATE_BONUS
        return max(0, min(100, score))
    if summary.total_expense > 0:
        return NO_INCOME_SCORE
    return EMPTY_SNAPSHOT_SCORE


def classify_tier(score: int) -> str:
    """
    Map health score to a tier label.

    Lower bounds are exclusive: exactly 80 is STABLE, exactly 50 is CRITICAL.
    """
    if score > 80:
        return "ELITE"
    elif score > 50:
        return "STABLE"
    else:
        return "CRITICAL"


def estimate_savings_potential(summary: MetricsSummary) -> Decimal:
    """Recoverable amount from discretionary categories at fixed fractions"""
    potential = sum(
        (amount * FLEXIBLE_RECOVERY[category] for category, amount in summary.category_totals if category in FLEXIBLE_RECOVERY),
        Decimal("0"),
    )
    return potential.quantize(_CENT, rounding=ROUND_HALF_UP)


def build_analysis(summary: MetricsSummary, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Pick the analysis sentence; first matching rule wins"""
    if summary.total_expense > summary.total_income:
        overspend = format_currency(summary.total_expense - summary.total_income, symbol)
        return f"Your expenses exceed your income by {overspend}. Immediate budget adjustment recommended."

    if summary.savings_rate > HIGH_SAVINGS_RATE:
        return (
            f"Exceptional savings rate of {_percent(summary.savings_rate)}%. "
            "You are in the top tier of financial discipline."
        )

    if summary.top_category_share > CONCENTRATION_SHARE:
        return (
            f"{summary.top_category} accounts for {_percent(summary.top_category_share)}% of your spending. "
            "It is the biggest lever for improving your budget."
        )

    return "Your spending is currently stable relative to your income."


def build_forecast(summary: MetricsSummary, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Linear month-end projection.

    Daily burn rate = expense logged this month / days elapsed in the month
    of `as_of`, extrapolated to the full month length. Older history and
    records dated after `as_of` do not count.
    """
    if summary.period_expense == 0:
        balance = format_currency(summary.period_income, symbol)
        return f"No spending logged so far this month, so you are on track to keep {balance} by month end."

    daily_burn = summary.period_expense / elapsed_days_in_month(summary.as_of)
    projected_expense = daily_burn * days_in_month(summary.as_of)
    projected_balance = summary.period_income - projected_expense

    return (
        f"At {format_currency(daily_burn, symbol)} per day, spending is projected to reach "
        f"{format_currency(projected_expense, symbol)} by month end, "
        f"leaving a balance of {format_currency(projected_balance, symbol)}."
    )


def build_recommendations(summary: MetricsSummary) -> Tuple[str, ...]:
    """Exactly three tips in priority order, padded with generic advice"""
    recommendations: List[str] = []

    if summary.top_category_share > CONCENTRATION_SHARE:
        recommendations.append(
            f"Set a monthly cap on {summary.top_category}; it takes "
            f"{_percent(summary.top_category_share)}% of your spending."
        )

    if summary.total_income > 0 and summary.savings_rate < TARGET_SAVINGS_RATE:
        recommendations.append(
            f"Your savings rate is {_percent(summary.savings_rate)}%; "
            "aim for at least 20% by trimming flexible spending."
        )

    if summary.total_income == 0:
        recommendations.append("Log your income sources so your savings rate can be tracked.")

    for tip in GENERIC_RECOMMENDATIONS:
        if len(recommendations) >= RECOMMENDATION_COUNT:
            break
        if tip not in recommendations:
            recommendations.append(tip)

    return tuple(recommendations[:RECOMMENDATION_COUNT])


def score(summary: MetricsSummary, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> Insight:
    """
    Main entry point: build the deterministic LOCAL insight for a summary.

    Pure function of `summary`; repeated calls return equal results.
    """
    health_score = calculate_health_score(summary)

    return Insight(
        health_score=health_score,
        analysis=build_analysis(summary, currency_symbol),
        forecast=build_forecast(summary, currency_symbol),
        recommendations=build_recommendations(summary),
        savings_potential=format_currency(estimate_savings_potential(summary), currency_symbol),
        tier=classify_tier(health_score),
        source=InsightSource.LOCAL,
    )


def static_insight(reason: str, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> Insight:
    """Last-resort constant insight, used only if local scoring itself fails"""
    return Insight(
        health_score=EMPTY_SNAPSHOT_SCORE,
        analysis="Detailed analysis is unavailable right now. Your records are safe.",
        forecast="Projections will return once your data can be processed.",
        recommendations=(
            "Track expenses daily.",
            "Maintain a 20% savings buffer.",
            "Review categories monthly.",
        ),
        savings_potential=format_currency(Decimal("0"), currency_symbol),
        tier=classify_tier(EMPTY_SNAPSHOT_SCORE),
        source=InsightSource.LOCAL,
        degradation_reason=reason,
    )
