"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from rmc_recalc.infrastructure.clients.rates import RateClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_rate_client() -> RateClient:
    """Provide rate series API client instance"""
    return RateClient()
