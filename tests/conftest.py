"""Pytest fixtures for testing"""

import asyncio
import json
import pytest
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, List
from fastapi.testclient import TestClient
from vividpulse_insights.api.dependencies import get_insight_orchestrator
from vividpulse_insights.api.main import create_app
from vividpulse_insights.domain.models import TransactionKind, TransactionRecord
from vividpulse_insights.infrastructure.clients.base import InsightProvider
from vividpulse_insights.infrastructure.clients.remote import RemoteAugmentationClient
from vividpulse_insights.infrastructure.credentials import Credential, CredentialResolver
from vividpulse_insights.services.insights import InsightOrchestrator

AS_OF = date(2026, 3, 15)
TEST_KEY_VAR = "VIVIDPULSE_TEST_API_KEY"


class StubProvider(InsightProvider):
    """Provider double returning a canned reply, raising, or stalling"""

    name = "stub"

    def __init__(self, reply: str | None = None, error: Exception | None = None, delay: float = 0.0):
        super().__init__(timeout=1.0)
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []
        self.cancelled = False

    async def generate(self, instruction: str, data: Dict[str, Any], schema: Dict[str, Any], credential: Credential) -> str:
        self.calls.append({"instruction": instruction, "data": data, "schema": schema, "credential": credential})
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return self.reply


def make_transaction(
    txn_id: str,
    kind: TransactionKind,
    amount: str | int,
    category: str,
    day: int,
    note: str | None = None,
) -> TransactionRecord:
    return TransactionRecord(
        id=txn_id,
        kind=kind,
        amount=Decimal(str(amount)),
        category=category,
        occurred_on=date(AS_OF.year, AS_OF.month, day),
        note=note,
    )


@pytest.fixture
def as_of() -> date:
    """Reference day for forecasts (15 of a 31-day month)"""
    return AS_OF


@pytest.fixture
def txn() -> Callable[..., TransactionRecord]:
    return make_transaction


@pytest.fixture
def sample_transactions() -> list[TransactionRecord]:
    """Salary plus two expenses in March 2026"""
    return [
        make_transaction("inc_1", TransactionKind.INCOME, 50000, "Salary", 1),
        make_transaction("exp_1", TransactionKind.EXPENSE, 20000, "Food", 5, note="Groceries"),
        make_transaction("exp_2", TransactionKind.EXPENSE, 5000, "Entertainment", 10),
    ]


@pytest.fixture
def valid_reply() -> str:
    """Provider reply matching the insight schema in every field"""
    return json.dumps(
        {
            "analysis": "You saved half of your income this month.",
            "forecast": "You are on track to end the month with a surplus.",
            "recommendations": [
                "Move the surplus into a high-yield account.",
                "Cap dining out at a weekly amount.",
                "Review subscriptions before renewal.",
            ],
            "healthScore": 85,
            "savingsPotential": "₱4,000.00",
        }
    )


@pytest.fixture
def stub_provider() -> Callable[..., StubProvider]:
    return StubProvider


@pytest.fixture
def credential_resolver() -> CredentialResolver:
    """Resolver that finds a test key"""
    return CredentialResolver(env_vars=[TEST_KEY_VAR], environ={TEST_KEY_VAR: "test-secret"})


@pytest.fixture
def empty_resolver() -> CredentialResolver:
    """Resolver with no credential available"""
    return CredentialResolver(env_vars=[TEST_KEY_VAR], environ={})


@pytest.fixture
def make_orchestrator() -> Callable[..., InsightOrchestrator]:
    def _make(provider: InsightProvider, resolver: CredentialResolver, timeout: float = 1.0) -> InsightOrchestrator:
        return InsightOrchestrator(
            client=RemoteAugmentationClient(provider=provider, timeout=timeout, max_transactions=50, currency_symbol="₱"),
            resolver=resolver,
            currency_symbol="₱",
        )

    return _make


@pytest.fixture
def client_factory(make_orchestrator) -> Callable[..., TestClient]:
    """FastAPI test client wired to a stub provider"""

    def _make(provider: InsightProvider, resolver: CredentialResolver) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_insight_orchestrator] = lambda: make_orchestrator(provider, resolver)
        return TestClient(app)

    return _make
