"""Idempotency key issuance for payout submissions"""

import uuid


def issue() -> str:
    """Fresh random UUID4, one per submission attempt; never derived from the payload"""
    return str(uuid.uuid4())
