"""Integration tests for API endpoints"""

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from payout_gateway.domain.exceptions import DirectoryUnavailable
from payout_gateway.services.gateway import GatewayClient
from tests.helpers import Recorder

pytestmark = pytest.mark.integration

PAYOUT = {"referenceId": "r1", "amount": 50000, "toBin": "970436", "toAccountNumber": "0011002233"}


def test_health_endpoint(make_gateway, client_for):
    """Test health check endpoint"""
    response = client_for(make_gateway()).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(make_gateway, client_for):
    """Test Prometheus metrics endpoint"""
    client = client_for(make_gateway())
    client.get("/api/bankcodes")

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "bank_directory_resolutions_total" in response.text


def test_request_id_header(make_gateway, client_for):
    client = client_for(make_gateway())

    assert client.get("/health").headers["X-Request-ID"]
    assert client.get("/health", headers={"X-Request-ID": "abc"}).headers["X-Request-ID"] == "abc"


def test_payout_success(make_gateway, client_for):
    """POST /api/payouts returns the key, signature and untouched payOS body"""
    upstream = {"code": "00", "data": {"transactions": [{"state": "SUCCEEDED"}]}}
    recorder = Recorder(lambda request: httpx.Response(200, json=upstream))
    client = client_for(make_gateway(payos_handler=recorder))

    response = client.post("/api/payouts", json=PAYOUT)

    assert response.status_code == 200
    data = response.json()
    assert data["payosResponse"] == upstream
    assert data["idempotencyKey"] == recorder.requests[0].headers["x-idempotency-key"]
    assert data["signature"] == recorder.requests[0].headers["x-signature"]


def test_payout_validation_error(make_gateway, client_for):
    """Empty referenceId is rejected with 400 and payOS is never called"""
    recorder = Recorder(lambda request: httpx.Response(200, json={}))
    client = client_for(make_gateway(payos_handler=recorder))

    response = client.post(
        "/api/payouts",
        json={"referenceId": "", "amount": 1000, "toBin": "970436", "toAccountNumber": "123"},
    )

    assert response.status_code == 400
    assert response.json()["error"] is True
    assert "referenceId" in response.json()["message"]
    assert recorder.requests == []


def test_payout_without_body(make_gateway, client_for):
    response = client_for(make_gateway()).post("/api/payouts")

    assert response.status_code == 400
    assert response.json()["error"] is True


def test_payout_upstream_error_keeps_status(make_gateway, client_for):
    client = client_for(
        make_gateway(payos_handler=lambda request: httpx.Response(403, json={"code": "403", "desc": "IP not allowed"}))
    )

    response = client.post("/api/payouts", json=PAYOUT)

    assert response.status_code == 403
    assert response.json() == {"error": True, "message": {"code": "403", "desc": "IP not allowed"}}


def test_payout_transport_error_is_500(make_gateway, client_for):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    response = client_for(make_gateway(payos_handler=handler)).post("/api/payouts", json=PAYOUT)

    assert response.status_code == 500
    assert response.json()["error"] is True


def test_bankcodes_from_fallback(make_gateway, client_for):
    """Every candidate 404s, so the bundled snapshot is served"""
    response = client_for(make_gateway()).get("/api/bankcodes")

    assert response.status_code == 200
    assert response.json() == {
        "total": 2,
        "page": 1,
        "limit": 10,
        "totalPages": 1,
        "data": [
            {"shortName": "acb", "logo": None, "bins": ["970416"]},
            {"shortName": "VCB", "logo": "https://cdn.test/VCB.png", "bins": ["970436"]},
        ],
    }


def test_bankcodes_pagination_params(make_gateway, client_for):
    response = client_for(make_gateway()).get("/api/bankcodes?page=2&limit=1")

    data = response.json()
    assert (data["page"], data["limit"], data["totalPages"]) == (2, 1, 2)
    assert [b["shortName"] for b in data["data"]] == ["VCB"]


def test_bankcodes_limit_is_capped(make_gateway, client_for):
    response = client_for(make_gateway()).get("/api/bankcodes?page=0&limit=1000")

    assert (response.json()["page"], response.json()["limit"]) == (1, 100)


@patch.object(GatewayClient, "list_bank_codes", new_callable=AsyncMock)
def test_bankcodes_unavailable(mock_list: AsyncMock, make_gateway, client_for):
    mock_list.side_effect = DirectoryUnavailable("Could not load bank codes from payOS or the fallback file")

    response = client_for(make_gateway()).get("/api/bankcodes")

    assert response.status_code == 500
    assert response.json() == {
        "error": True,
        "message": "Could not load bank codes from payOS or the fallback file",
    }


def test_vietqr_banks_remote_then_cache(make_gateway, client_for):
    listing = {"code": "00", "data": [{"shortName": "Vietcombank", "bin": "970436", "logo": "vcb.png"}]}
    client = client_for(make_gateway(listing_handler=lambda request: httpx.Response(200, json=listing)))

    first = client.get("/api/vietqr-banks").json()
    second = client.get("/api/vietqr-banks").json()

    assert first == {"source": "remote", "data": [{"shortName": "Vietcombank", "logo": "vcb.png", "bins": ["970436"]}]}
    assert second["source"] == "cache"
    assert second["data"] == first["data"]


def test_vietqr_banks_failure(make_gateway, client_for):
    client = client_for(make_gateway(listing_handler=lambda request: httpx.Response(503, json={"desc": "down"})))

    response = client.get("/api/vietqr-banks")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] is True
    assert body["detail"] == {"desc": "down"}


def test_balance_passthrough(make_gateway, client_for):
    balance = {"code": "00", "data": {"balance": "1000000"}}
    client = client_for(make_gateway(payos_handler=lambda request: httpx.Response(200, json=balance)))

    response = client.get("/api/balance")

    assert response.status_code == 200
    assert response.json() == balance


def test_balance_error(make_gateway, client_for):
    response = client_for(make_gateway()).get("/api/balance")

    assert response.status_code == 404
    assert response.json() == {"error": True, "message": {"code": "404", "desc": "Not found"}}


def test_history_forwards_query(make_gateway, client_for):
    history = {"code": "00", "data": {"payouts": [{"referenceId": "r1"}]}}
    recorder = Recorder(lambda request: httpx.Response(200, json=history))
    client = client_for(make_gateway(payos_handler=recorder))

    response = client.get("/api/history?page=1&limit=20&referenceId=r1")

    assert response.status_code == 200
    assert response.json() == history
    sent = recorder.requests[0]
    assert sent.url.path == "/v1/payouts"
    assert list(sent.url.params.multi_items()) == [("page", "1"), ("limit", "20"), ("referenceId", "r1")]


def test_my_ip(make_gateway, client_for):
    client = client_for(make_gateway(ip_handler=lambda request: httpx.Response(200, json={"ip": "203.0.113.7"})))

    assert client.get("/api/my-ip").json() == {"ip": "203.0.113.7"}


def test_my_ip_failure(make_gateway, client_for):
    response = client_for(make_gateway(ip_handler=lambda request: httpx.Response(500))).get("/api/my-ip")

    assert response.status_code == 500
    assert response.json()["error"] is True


def test_payout_array_body_is_rejected(make_gateway, client_for):
    recorder = Recorder(lambda request: httpx.Response(200, json={}))
    client = client_for(make_gateway(payos_handler=recorder))

    response = client.post("/api/payouts", json=["referenceId"])

    assert response.status_code == 400
    assert response.json()["error"] is True
    assert response.json()["message"].startswith("Invalid request")
    assert recorder.requests == []


def test_payout_malformed_json_is_rejected(make_gateway, client_for):
    response = client_for(make_gateway()).post(
        "/api/payouts", content=b'{"referenceId": ', headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["error"] is True


@pytest.mark.parametrize("query", ["page=abc", "limit=ten"])
def test_bankcodes_non_integer_paging_is_rejected(make_gateway, client_for, query):
    response = client_for(make_gateway()).get(f"/api/bankcodes?{query}")

    assert response.status_code == 400
    body = response.json()
    assert body["error"] is True
    assert "query" in body["message"]
