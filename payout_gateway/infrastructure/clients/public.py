"""Clients for unauthenticated public services (bank listing, IP echo)"""

from typing import Any

import httpx

from payout_gateway.config import settings
from payout_gateway.domain.exceptions import SecondaryDirectoryError, UpstreamError


class BankListingClient:
    """Client for the public VietQR bank listing"""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.bank_listing_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def fetch(self) -> Any:
        """
        Fetch the raw bank listing body.

        Raises:
            SecondaryDirectoryError: On timeout, HTTP errors, or invalid JSON
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(self.url)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise SecondaryDirectoryError(
                    "Bank listing timeout", detail=f"timeout after {self.timeout}s"
                ) from e
            except httpx.HTTPStatusError as e:
                try:
                    detail = e.response.json()
                except ValueError:
                    detail = e.response.text
                raise SecondaryDirectoryError(
                    f"Bank listing error: {e.response.status_code}", detail=detail
                ) from e
            except httpx.RequestError as e:
                raise SecondaryDirectoryError("Bank listing unreachable", detail=str(e)) from e
            except ValueError as e:
                raise SecondaryDirectoryError("Invalid bank listing data", detail=str(e)) from e


class PublicIPClient:
    """Client for an IP echo service; reports the address payOS sees us calling from"""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.public_ip_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_ip(self) -> str:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(self.url)
                response.raise_for_status()
                return response.json()["ip"]

            except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
                raise UpstreamError(f"Could not determine public IP: {e}") from e
