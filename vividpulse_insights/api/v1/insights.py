"""POST /v1/insights - financial insight for a transaction snapshot"""

from fastapi import APIRouter, Depends, Request

from vividpulse_insights.api.v1.schemas import InsightRequest, InsightResponse
from vividpulse_insights.api.dependencies import get_insight_orchestrator, get_request_id
from vividpulse_insights.services.insights import InsightOrchestrator

router = APIRouter()


@router.post("/insights", response_model=InsightResponse)
async def create_insight(
    request_body: InsightRequest,
    request: Request,
    orchestrator: InsightOrchestrator = Depends(get_insight_orchestrator),
):
    """
    Generate a financial insight for the supplied transactions.

    Flow:
    1. Convert request records to domain transactions (an invalid category
       raises InvalidTransactionError, answered with 422 by the app handler)
    2. Run the insight pipeline (local scoring, optional AI augmentation)
    3. Return the insight; AI failures are reported in `source` and
       `degradationReason`, never as an error status
    """
    transactions = [txn.to_domain() for txn in request_body.transactions]

    insight = await orchestrator.generate(
        transactions,
        as_of=request_body.as_of,
        request_id=get_request_id(request),
    )

    return InsightResponse.from_insight(insight)
