"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from vividpulse_insights.domain.exceptions import FailureKind
from vividpulse_insights.domain.models import Insight, InsightSource, TransactionKind, TransactionRecord


class TransactionSchema(BaseModel):
    """Single transaction in an insight request"""

    id: str = Field(..., min_length=1)
    kind: TransactionKind
    amount: Decimal = Field(..., gt=0, description="Amount in major units")
    category: str
    occurred_on: date = Field(..., alias="occurredOn")
    note: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    def to_domain(self) -> TransactionRecord:
        return TransactionRecord(
            id=self.id,
            kind=self.kind,
            amount=self.amount,
            category=self.category,
            occurred_on=self.occurred_on,
            note=self.note,
        )


class InsightRequest(BaseModel):
    """Request body for POST /v1/insights"""

    transactions: List[TransactionSchema] = Field(default_factory=list)
    as_of: Optional[date] = Field(None, alias="asOf", description="Reference day for the forecast (default: today)")

    model_config = ConfigDict(populate_by_name=True)


class InsightResponse(BaseModel):
    """Response for POST /v1/insights"""

    health_score: int = Field(..., ge=0, le=100, alias="healthScore")
    analysis: str
    forecast: str
    recommendations: List[str] = Field(..., min_length=3, max_length=3)
    savings_potential: str = Field(..., alias="savingsPotential")
    tier: str
    source: InsightSource
    degradation_reason: Optional[str] = Field(None, alias="degradationReason")
    failure: Optional[FailureKind] = None
    retryable: bool = False

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_insight(cls, insight: Insight) -> "InsightResponse":
        return cls(
            health_score=insight.health_score,
            analysis=insight.analysis,
            forecast=insight.forecast,
            recommendations=list(insight.recommendations),
            savings_potential=insight.savings_potential,
            tier=insight.tier,
            source=insight.source,
            degradation_reason=insight.degradation_reason,
            failure=insight.failure,
            retryable=insight.retryable,
        )
