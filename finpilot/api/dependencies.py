"""Dependency injection for FastAPI endpoints"""

from typing import Optional

from fastapi import Request
from finpilot.config import settings
from finpilot.domain.summary import SummaryProvider
from finpilot.infrastructure.clients.summary import SummaryClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_summary_provider() -> Optional[SummaryProvider]:
    """Provide the remote summary client, or None when no API key is configured"""
    if not settings.summary_api_key:
        return None
    return SummaryClient()
