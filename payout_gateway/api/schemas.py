"""Pydantic schemas for API responses"""

from pydantic import BaseModel
from typing import Any, List, Literal, Optional

from payout_gateway.domain.models import BankDirectoryEntry, DirectoryPage, PayoutResult


class BankEntrySchema(BaseModel):
    """Normalized bank record as the browser sees it"""

    shortName: str
    logo: Optional[str] = None
    bins: List[str] = []

    @classmethod
    def from_entry(cls, entry: BankDirectoryEntry) -> "BankEntrySchema":
        return cls(shortName=entry.short_name, logo=entry.logo, bins=entry.bins)


class BankCodesResponse(BaseModel):
    """Response for GET /api/bankcodes"""

    total: int
    page: int
    limit: int
    totalPages: int
    data: List[BankEntrySchema]

    @classmethod
    def from_page(cls, page: DirectoryPage) -> "BankCodesResponse":
        return cls(
            total=page.total,
            page=page.page,
            limit=page.limit,
            totalPages=page.total_pages,
            data=[BankEntrySchema.from_entry(e) for e in page.data],
        )


class BankListingResponse(BaseModel):
    """Response for GET /api/vietqr-banks"""

    source: Literal["cache", "remote"]
    data: List[BankEntrySchema]


class PayoutResponse(BaseModel):
    """Response for POST /api/payouts"""

    idempotencyKey: str
    signature: str
    payosResponse: Any

    @classmethod
    def from_result(cls, result: PayoutResult) -> "PayoutResponse":
        return cls(
            idempotencyKey=result.idempotency_key,
            signature=result.signature,
            payosResponse=result.payos_response,
        )


class PublicIPResponse(BaseModel):
    """Response for GET /api/my-ip"""

    ip: str


class ErrorResponse(BaseModel):
    """Error body shared by every /api route"""

    error: bool = True
    message: Any
    detail: Any = None
