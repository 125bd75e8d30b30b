"""POST /api/payouts - Signed payout submission to payOS"""

import time
import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Request

from payout_gateway.api.dependencies import get_gateway_client, get_request_id
from payout_gateway.api.schemas import PayoutResponse
from payout_gateway.domain.exceptions import UpstreamError, ValidationError
from payout_gateway.domain.normalization import payout_succeeded
from payout_gateway.infrastructure.observability.logging import log_payout_submitted
from payout_gateway.infrastructure.observability.metrics import payout_counter, record_payout, upstream_error_counter
from payout_gateway.services.gateway import GatewayClient

router = APIRouter()


@router.post("/payouts", response_model=PayoutResponse)
async def create_payout(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    gateway: GatewayClient = Depends(get_gateway_client),
):
    """
    Submit a payout exactly as the browser sent it.

    The body is signed and forwarded without modification, so unknown keys
    travel to payOS too. The generated idempotency key and signature are
    echoed back next to the payOS response.
    """
    payload = payload or {}
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = await gateway.submit_payout(payload)

    except ValidationError as e:
        payout_counter.labels(outcome="rejected").inc()
        logging.warning(f"Payout rejected: {e}", extra={"request_id": request_id})
        raise

    except UpstreamError as e:
        upstream_error_counter.labels(operation="payout").inc()
        logging.error(
            f"Payout error: {e}",
            extra={"request_id": request_id, "reference_id": payload.get("referenceId"), "detail": e.detail},
        )
        raise

    succeeded = payout_succeeded(result.payos_response)
    record_payout(succeeded)
    log_payout_submitted(
        request_id,
        str(payload.get("referenceId")),
        result.idempotency_key,
        succeeded,
        (time.time() - start_time) * 1000,
    )

    return PayoutResponse.from_result(result)
