"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from vividpulse_insights.infrastructure.clients.remote import RemoteAugmentationClient
from vividpulse_insights.infrastructure.credentials import CredentialResolver
from vividpulse_insights.services.insights import InsightOrchestrator


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_credential_resolver() -> CredentialResolver:
    return CredentialResolver()


def get_insight_orchestrator(resolver: CredentialResolver = Depends(get_credential_resolver)) -> InsightOrchestrator:
    """Provide insight orchestrator; the credential is re-read on every request"""
    return InsightOrchestrator(
        client=RemoteAugmentationClient(),
        resolver=resolver,
    )
