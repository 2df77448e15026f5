"""Insight orchestration - local scoring, optional remote augmentation, degradation"""

import logging
import time
from dataclasses import replace
from datetime import date
from typing import Iterable, Tuple
from vividpulse_insights.config import settings
from vividpulse_insights.domain.exceptions import FailureKind, RemoteInsightError
from vividpulse_insights.domain.metrics import aggregate
from vividpulse_insights.domain.models import Insight, MetricsSummary, TransactionRecord
from vividpulse_insights.domain.scoring import score, static_insight
from vividpulse_insights.domain.validation import merge_insight
from vividpulse_insights.infrastructure.clients.remote import RemoteAugmentationClient
from vividpulse_insights.infrastructure.credentials import CredentialResolver
from vividpulse_insights.infrastructure.observability.logging import log_insight
from vividpulse_insights.infrastructure.observability.metrics import record_insight

logger = logging.getLogger(__name__)

# Caller-presentable degradation reasons per failure tag
FAILURE_MESSAGES = {
    FailureKind.CREDENTIAL_MISSING: "no credential",
    FailureKind.CREDENTIAL_INVALID: "AI credential was rejected; check or reconnect your API key",
    FailureKind.RATE_LIMITED: "AI service is busy; try again shortly",
    FailureKind.TIMEOUT: "AI service timed out; try again shortly",
    FailureKind.EMPTY_RESPONSE: "AI service returned an empty reply",
    FailureKind.MALFORMED_RESPONSE: "AI service returned an unreadable reply",
    FailureKind.PROVIDER_UNAVAILABLE: "AI service is unavailable right now",
}

UNEXPECTED_FAILURE_MESSAGE = "AI analysis failed unexpectedly"
LOCAL_FAILURE_MESSAGE = "local analysis unavailable"


def degrade(local: Insight, failure: FailureKind, reason: str | None = None) -> Insight:
    """Local insight tagged with the failure that prevented augmentation"""
    return replace(local, degradation_reason=reason or FAILURE_MESSAGES[failure], failure=failure)


class InsightOrchestrator:
    """
    Compose metrics, heuristic scoring and remote augmentation.

    Flow per request:
    1. Aggregate and score locally (retained as the guaranteed fallback)
    2. Resolve the credential; none -> LOCAL result, "no credential"
    3. One remote attempt, no automatic retry
    4. Valid reply -> REMOTE, partially valid -> REMOTE_DEGRADED
    5. Any failure -> LOCAL result with a reason derived from the failure tag

    `generate` never raises, except for cancellation by the caller, which
    is propagated so the outstanding remote request is released.
    """

    def __init__(
        self,
        client: RemoteAugmentationClient | None = None,
        resolver: CredentialResolver | None = None,
        currency_symbol: str | None = None,
    ):
        self.client = client or RemoteAugmentationClient()
        self.resolver = resolver or CredentialResolver()
        self.currency_symbol = currency_symbol or settings.currency_symbol

    async def generate(
        self,
        transactions: Iterable[TransactionRecord],
        as_of: date | None = None,
        request_id: str = "unknown",
    ) -> Insight:
        start_time = time.time()
        snapshot = list(transactions)

        insight = await self._generate(snapshot, as_of)

        duration_ms = (time.time() - start_time) * 1000
        failure = insight.failure.value if insight.failure else None
        record_insight(insight.source.value, insight.health_score, failure)
        log_insight(request_id, insight.source.value, insight.health_score, len(snapshot), duration_ms, failure)

        return insight

    def _compute_local(self, snapshot: list, as_of: date | None) -> Tuple[MetricsSummary | None, Insight]:
        try:
            summary = aggregate(snapshot, as_of)
            return summary, score(summary, self.currency_symbol)
        except Exception as e:
            logger.error(f"Local scoring failed: {e}")
            return None, static_insight(LOCAL_FAILURE_MESSAGE, self.currency_symbol)

    async def _generate(self, snapshot: list, as_of: date | None) -> Insight:
        summary, local = self._compute_local(snapshot, as_of)
        if summary is None:
            return local

        credential = self.resolver.resolve()
        if credential is None:
            return degrade(local, FailureKind.CREDENTIAL_MISSING)

        try:
            remote = await self.client.augment(snapshot, credential, summary)

        except RemoteInsightError as e:
            logger.warning(f"Remote augmentation failed ({e.failure.value}): {e}")
            return degrade(local, e.failure)

        except Exception as e:
            logger.error(f"Unexpected remote augmentation error: {e.__class__.__name__}: {e}")
            return degrade(local, FailureKind.PROVIDER_UNAVAILABLE, UNEXPECTED_FAILURE_MESSAGE)

        if not remote.fully_valid:
            logger.warning("Remote insight partially invalid: " + "; ".join(remote.errors))
        return merge_insight(local, remote)
