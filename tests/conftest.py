"""Pytest fixtures for testing"""

import json
import pytest
import httpx
from pathlib import Path
from typing import Callable
from fastapi.testclient import TestClient

from payout_gateway.api.main import create_app
from payout_gateway.api.dependencies import get_gateway_client
from payout_gateway.infrastructure.cache import TTLCache
from payout_gateway.infrastructure.clients.payos import PayOSClient
from payout_gateway.infrastructure.clients.public import BankListingClient, PublicIPClient
from payout_gateway.services.bank_directory import BankDirectoryResolver, BankListingResolver
from payout_gateway.services.gateway import GatewayClient
from tests.helpers import CHECKSUM_KEY, IP_URL, LISTING_URL, PAYOS_URL, FakeClock, Handler, not_found


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fallback_file(tmp_path: Path) -> Path:
    path = tmp_path / "bankcodes.json"
    path.write_text(
        json.dumps(
            [
                {"shortName": "VCB", "name": "Vietcombank", "bin": "970436", "logo": "https://cdn.test/VCB.png"},
                {"shortName": "acb", "name": "ACB", "bin": "970416"},
                {"name": "", "bin": "000000"},
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def payos_client() -> Callable[[Handler], PayOSClient]:
    def factory(handler: Handler) -> PayOSClient:
        return PayOSClient(
            base_url=PAYOS_URL,
            client_id="client-id",
            api_key="api-key",
            transport=httpx.MockTransport(handler),
        )

    return factory


@pytest.fixture
def make_gateway(payos_client, fallback_file: Path, clock: FakeClock):
    """Build a GatewayClient whose upstreams are all served by MockTransport handlers"""

    def factory(
        payos_handler: Handler = not_found,
        listing_handler: Handler = not_found,
        ip_handler: Handler = not_found,
        fallback_path: Path | None = None,
    ) -> GatewayClient:
        payos = payos_client(payos_handler)
        return GatewayClient(
            payos=payos,
            bank_directory=BankDirectoryResolver(
                client=payos,
                cache=TTLCache(clock=clock),
                fallback_path=fallback_path or fallback_file,
                ttl=300,
            ),
            bank_listing=BankListingResolver(
                client=BankListingClient(url=LISTING_URL, transport=httpx.MockTransport(listing_handler)),
                cache=TTLCache(clock=clock),
                ttl=6 * 60 * 60,
            ),
            ip_client=PublicIPClient(url=IP_URL, transport=httpx.MockTransport(ip_handler)),
            checksum_key=CHECKSUM_KEY,
        )

    return factory


@pytest.fixture
def client_for():
    """Create a FastAPI test client backed by the given gateway"""

    def factory(gateway: GatewayClient) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_gateway_client] = lambda: gateway
        return TestClient(app)

    return factory
