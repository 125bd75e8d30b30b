"""Bank directory endpoints: payOS bank codes and the public VietQR listing"""

import logging
from fastapi import APIRouter, Depends, Query, Request

from payout_gateway.api.dependencies import get_gateway_client, get_request_id
from payout_gateway.api.schemas import BankCodesResponse, BankEntrySchema, BankListingResponse
from payout_gateway.domain.exceptions import DirectoryUnavailable, SecondaryDirectoryError
from payout_gateway.domain.normalization import DEFAULT_LIMIT, DEFAULT_PAGE
from payout_gateway.infrastructure.observability.metrics import upstream_error_counter
from payout_gateway.services.gateway import GatewayClient

router = APIRouter()


@router.get("/bankcodes", response_model=BankCodesResponse)
async def list_bank_codes(
    request: Request,
    page: int = Query(DEFAULT_PAGE, description="1-based page number"),
    limit: int = Query(DEFAULT_LIMIT, description="Page size, capped at 100"),
    gateway: GatewayClient = Depends(get_gateway_client),
):
    """
    Bank codes sorted by short name, one page at a time.

    Served from payOS when any candidate endpoint answers, otherwise from
    the bundled snapshot.
    """
    try:
        directory_page = await gateway.list_bank_codes(page, limit)
    except DirectoryUnavailable as e:
        logging.error(f"Bankcodes route error: {e}", extra={"request_id": get_request_id(request)})
        raise

    return BankCodesResponse.from_page(directory_page)


@router.get("/vietqr-banks", response_model=BankListingResponse)
async def list_vietqr_banks(
    request: Request,
    gateway: GatewayClient = Depends(get_gateway_client),
):
    """Public bank listing used for the bank picker, cached for six hours"""
    try:
        source, entries = await gateway.list_banks()
    except SecondaryDirectoryError as e:
        upstream_error_counter.labels(operation="bank_listing").inc()
        logging.error(f"vietqr fetch error: {e}", extra={"request_id": get_request_id(request), "detail": e.detail})
        raise

    return BankListingResponse(source=source, data=[BankEntrySchema.from_entry(e) for e in entries])
