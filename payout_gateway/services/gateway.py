"""Gateway client composing payOS calls, signing, idempotency and bank directories"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from payout_gateway.config import settings
from payout_gateway.domain import idempotency
from payout_gateway.domain.models import BankDirectoryEntry, DirectoryPage, PayoutRequest, PayoutResult
from payout_gateway.domain.normalization import paginate_directory
from payout_gateway.domain.signing import sign
from payout_gateway.infrastructure.clients.payos import PayOSClient, QueryParams
from payout_gateway.infrastructure.clients.public import PublicIPClient
from payout_gateway.services.bank_directory import BankDirectoryResolver, BankListingResolver

logger = logging.getLogger(__name__)


class GatewayClient:
    """Operations the HTTP layer exposes to the browser"""

    def __init__(
        self,
        payos: PayOSClient,
        bank_directory: BankDirectoryResolver,
        bank_listing: BankListingResolver,
        ip_client: PublicIPClient | None = None,
        checksum_key: str | None = None,
    ):
        self.payos = payos
        self.bank_directory = bank_directory
        self.bank_listing = bank_listing
        self.ip_client = ip_client or PublicIPClient()
        self.checksum_key = checksum_key if checksum_key is not None else settings.payos_checksum_key

    async def get_balance(self) -> Any:
        return await self.payos.get_balance()

    async def submit_payout(self, payload: Dict[str, Any]) -> PayoutResult:
        """
        Validate, sign and submit a payout.

        Flow:
        1. Validate required fields (no network call on failure)
        2. Issue a fresh idempotency key
        3. Sign the payload exactly as received
        4. POST it to payOS with both values as headers

        Raises:
            ValidationError: On missing or malformed fields
            UpstreamError: If payOS rejects the payout or is unreachable
        """
        request = PayoutRequest.from_payload(payload)

        idempotency_key = idempotency.issue()
        signature = sign(request.payload, self.checksum_key)

        logger.info(
            "Submitting payout",
            extra={"reference_id": request.reference_id, "idempotency_key": idempotency_key},
        )
        response = await self.payos.create_payout(request.payload, idempotency_key, signature)

        return PayoutResult(idempotency_key=idempotency_key, signature=signature, payos_response=response)

    async def query_history(self, filters: Optional[QueryParams] = None) -> Any:
        """Forward filters to payOS verbatim; the body comes back unmodified"""
        return await self.payos.list_payouts(filters)

    async def list_bank_codes(self, page: Optional[int] = None, limit: Optional[int] = None) -> DirectoryPage:
        entries = await self.bank_directory.resolve()
        return paginate_directory(entries, page, limit)

    async def list_banks(self) -> Tuple[str, List[BankDirectoryEntry]]:
        return await self.bank_listing.resolve()

    async def get_public_ip(self) -> str:
        return await self.ip_client.get_ip()
