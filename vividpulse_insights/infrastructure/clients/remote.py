"""Remote augmentation client - one bounded request to an insight provider"""

import asyncio
from typing import Any, Dict, List, Sequence
from vividpulse_insights.config import settings
from vividpulse_insights.domain.exceptions import CredentialMissingError, RemoteTimeoutError
from vividpulse_insights.domain.models import MetricsSummary, RemoteInsight, TransactionRecord
from vividpulse_insights.domain.validation import REMOTE_SCHEMA, parse_remote_insight
from vividpulse_insights.infrastructure.clients.base import InsightProvider
from vividpulse_insights.infrastructure.clients.gemini import GeminiProvider
from vividpulse_insights.infrastructure.clients.openai import OpenAIProvider
from vividpulse_insights.infrastructure.credentials import Credential
from vividpulse_insights.infrastructure.observability.metrics import remote_latency_histogram

INSTRUCTION = (
    "You are a personal finance analyst. Review the user's recent transactions and "
    "summary totals (amounts in {currency}). Reply with a JSON object containing: "
    "'analysis' (1-2 sentences on spending behaviour), 'forecast' (1 sentence month-end "
    "projection), 'recommendations' (exactly 3 short actionable tips), 'healthScore' "
    "(integer 0-100, higher is healthier) and 'savingsPotential' (formatted amount the "
    "user could realistically save, e.g. {currency}1,250.00). Do not add other keys."
)

PROVIDERS = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
}


def build_provider(name: str | None = None) -> InsightProvider:
    """Instantiate the configured provider adapter"""
    return PROVIDERS[name or settings.ai_provider]()


def shape_payload(
    transactions: Sequence[TransactionRecord],
    summary: MetricsSummary,
    max_transactions: int,
    currency_symbol: str = "₱",
) -> Dict[str, Any]:
    """
    Reduce the snapshot to what the provider needs.

    Keeps the most recent `max_transactions` records (later input position
    wins on equal dates) with date, kind, category and amount only. Ids and
    notes are never sent.
    """
    ordered = sorted(enumerate(transactions), key=lambda pair: (pair[1].occurred_on, pair[0]), reverse=True)
    recent: List[Dict[str, Any]] = [
        {
            "date": txn.occurred_on.isoformat(),
            "kind": txn.kind.value,
            "category": txn.category,
            "amount": float(txn.amount),
        }
        for _, txn in ordered[:max_transactions]
    ]

    return {
        "currency": currency_symbol,
        "summary": {
            "totalIncome": float(summary.total_income),
            "totalExpense": float(summary.total_expense),
            "netBalance": float(summary.net_balance),
            "savingsRatePercent": round(float(summary.savings_rate) * 100, 1),
            "expenseRatioPercent": round(float(summary.expense_ratio) * 100, 1),
            "monthToDateIncome": float(summary.period_income),
            "monthToDateExpense": float(summary.period_expense),
            "categoryTotals": {category: float(amount) for category, amount in summary.category_totals},
            "asOf": summary.as_of.isoformat(),
        },
        "transactions": recent,
    }


class RemoteAugmentationClient:
    """Send a shaped snapshot to a provider and validate the reply. No retries."""

    def __init__(
        self,
        provider: InsightProvider | None = None,
        timeout: float | None = None,
        max_transactions: int | None = None,
        currency_symbol: str | None = None,
    ):
        self.provider = provider or build_provider()
        self.timeout = timeout or settings.remote_timeout_seconds
        self.max_transactions = max_transactions or settings.max_remote_transactions
        self.currency_symbol = currency_symbol or settings.currency_symbol

    async def augment(
        self,
        transactions: Sequence[TransactionRecord],
        credential: Credential | None,
        summary: MetricsSummary,
    ) -> RemoteInsight:
        """
        Request a remote insight for the snapshot.

        The whole exchange is bounded by `timeout`; on expiry the request is
        cancelled (closing its connection) and no partial reply is used.

        Raises:
            CredentialMissingError: No credential supplied
            RemoteTimeoutError: Deadline exceeded
            RemoteInsightError: Any other tagged provider or contract failure
        """
        if credential is None:
            raise CredentialMissingError()

        payload = shape_payload(transactions, summary, self.max_transactions, self.currency_symbol)
        instruction = INSTRUCTION.format(currency=self.currency_symbol)

        with remote_latency_histogram.labels(provider=self.provider.name).time():
            try:
                raw = await asyncio.wait_for(
                    self.provider.generate(instruction, payload, REMOTE_SCHEMA, credential),
                    timeout=self.timeout,
                )
            except asyncio.TimeoutError as e:
                raise RemoteTimeoutError(f"{self.provider.name} gave no reply within {self.timeout}s") from e

        return parse_remote_insight(raw)
