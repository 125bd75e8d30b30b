"""Account endpoints: payout balance and outbound IP"""

import logging
from fastapi import APIRouter, Depends, Request

from payout_gateway.api.dependencies import get_gateway_client, get_request_id
from payout_gateway.api.schemas import PublicIPResponse
from payout_gateway.domain.exceptions import UpstreamError
from payout_gateway.infrastructure.observability.metrics import upstream_error_counter
from payout_gateway.services.gateway import GatewayClient

router = APIRouter()


@router.get("/balance")
async def get_balance(
    request: Request,
    gateway: GatewayClient = Depends(get_gateway_client),
):
    """Payout account balance, passed through from payOS"""
    try:
        return await gateway.get_balance()
    except UpstreamError as e:
        upstream_error_counter.labels(operation="balance").inc()
        logging.error(f"Balance error: {e}", extra={"request_id": get_request_id(request), "detail": e.detail})
        raise


# payOS only accepts payout calls from allow-listed IPs
@router.get("/my-ip", response_model=PublicIPResponse)
async def get_public_ip(
    request: Request,
    gateway: GatewayClient = Depends(get_gateway_client),
):
    try:
        return PublicIPResponse(ip=await gateway.get_public_ip())
    except UpstreamError as e:
        upstream_error_counter.labels(operation="public_ip").inc()
        logging.error(f"Public IP error: {e}", extra={"request_id": get_request_id(request)})
        raise
