"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache

from fastapi import Request

from payout_gateway.infrastructure.cache import TTLCache
from payout_gateway.infrastructure.clients.payos import PayOSClient
from payout_gateway.infrastructure.clients.public import BankListingClient, PublicIPClient
from payout_gateway.services.bank_directory import BankDirectoryResolver, BankListingResolver
from payout_gateway.services.gateway import GatewayClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache
def get_gateway_client() -> GatewayClient:
    """
    Provide the process-wide gateway client.

    Built once so each resolver keeps its own cache for the life of the
    process; tests swap it through `app.dependency_overrides`.
    """
    payos = PayOSClient()
    return GatewayClient(
        payos=payos,
        bank_directory=BankDirectoryResolver(client=payos, cache=TTLCache()),
        bank_listing=BankListingResolver(client=BankListingClient(), cache=TTLCache()),
        ip_client=PublicIPClient(),
    )
