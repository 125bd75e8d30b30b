"""payOS HTTP client for balance, payouts, payout history and bank codes"""

from typing import Any, Dict, Optional, Sequence, Tuple

import httpx

from payout_gateway.config import settings
from payout_gateway.domain.exceptions import UpstreamError
from payout_gateway.domain.models import EndpointCandidate

QueryParams = Sequence[Tuple[str, str]]


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class PayOSClient:
    """Client for the payOS merchant API"""

    def __init__(
        self,
        base_url: str | None = None,
        client_id: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        payout_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.payos_api_url).rstrip("/")
        self.client_id = client_id if client_id is not None else settings.payos_client_id
        self.api_key = api_key if api_key is not None else settings.payos_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.payout_timeout = payout_timeout or settings.payout_timeout_seconds
        self.transport = transport

    def auth_headers(self) -> Dict[str, str]:
        return {
            "x-client-id": self.client_id,
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[QueryParams] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Send one authenticated request and decode the JSON body.

        Raises:
            UpstreamError: On timeout, transport failure, non-2xx status or a non-JSON body
        """
        timeout = timeout or self.timeout
        request_headers = {**self.auth_headers(), **(headers or {})}

        async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
            try:
                response = await client.request(
                    method.upper(),
                    f"{self.base_url}{path}",
                    params=params,
                    json=json,
                    headers=request_headers,
                )
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise UpstreamError(f"payOS timeout after {timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise UpstreamError(
                    f"payOS error: {e.response.status_code}",
                    status_code=e.response.status_code,
                    detail=_error_detail(e.response),
                ) from e
            except httpx.RequestError as e:
                raise UpstreamError(f"payOS unreachable: {e}") from e
            except ValueError as e:
                raise UpstreamError(f"Invalid JSON from payOS: {e}") from e

    async def get_balance(self) -> Any:
        return await self.request("GET", "/v1/payouts-account/balance")

    async def create_payout(self, payload: Dict[str, Any], idempotency_key: str, signature: str) -> Any:
        """POST /v1/payouts with the exact payload that was signed"""
        return await self.request(
            "POST",
            "/v1/payouts",
            json=payload,
            headers={"x-idempotency-key": idempotency_key, "x-signature": signature},
            timeout=self.payout_timeout,
        )

    async def list_payouts(self, params: Optional[QueryParams] = None) -> Any:
        return await self.request("GET", "/v1/payouts", params=params or None, timeout=self.payout_timeout)

    async def fetch_bank_codes(self, candidate: EndpointCandidate) -> Any:
        return await self.request(candidate.method, candidate.path)
