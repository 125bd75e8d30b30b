"""GET /api/history - Proxy payout history from payOS"""

import logging
from fastapi import APIRouter, Depends, Request

from payout_gateway.api.dependencies import get_gateway_client, get_request_id
from payout_gateway.domain.exceptions import UpstreamError
from payout_gateway.infrastructure.observability.metrics import upstream_error_counter
from payout_gateway.services.gateway import GatewayClient

router = APIRouter()


@router.get("/history")
async def get_payout_history(
    request: Request,
    gateway: GatewayClient = Depends(get_gateway_client),
):
    """
    Forward the caller's query parameters to GET /v1/payouts.

    Returns:
        The payOS body unmodified; its shape varies between integrations
    """
    try:
        return await gateway.query_history(list(request.query_params.multi_items()))
    except UpstreamError as e:
        upstream_error_counter.labels(operation="history").inc()
        logging.error(f"History error: {e}", extra={"request_id": get_request_id(request), "detail": e.detail})
        raise
