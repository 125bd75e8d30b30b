"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Optional

from payout_gateway.domain.exceptions import ValidationError

REQUIRED_PAYOUT_FIELDS = ("referenceId", "amount", "toBin", "toAccountNumber")


@dataclass
class PayoutRequest:
    """Payout submission as received from the browser"""

    reference_id: str
    amount: float
    to_bin: str
    to_account_number: str
    description: Optional[str] = None
    category: List[str] = field(default_factory=list)
    # Exact mapping the caller sent; signed and forwarded unmodified
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PayoutRequest":
        """
        Validate a raw payout payload.

        Raises:
            ValidationError: If a required field is missing, empty or malformed
        """
        if not isinstance(payload, dict):
            raise ValidationError("Payout payload must be a JSON object")

        missing = [name for name in REQUIRED_PAYOUT_FIELDS if _is_blank(payload.get(name))]
        if missing:
            raise ValidationError(
                "referenceId, amount, toBin, toAccountNumber are required "
                f"(missing: {', '.join(missing)})"
            )

        amount = payload["amount"]
        if isinstance(amount, bool) or not isinstance(amount, Real) or amount <= 0:
            raise ValidationError("amount must be a positive number")

        category = payload.get("category") or []
        if not isinstance(category, list) or not all(isinstance(c, str) for c in category):
            raise ValidationError("category must be a list of strings")

        return cls(
            reference_id=str(payload["referenceId"]),
            amount=amount,
            to_bin=str(payload["toBin"]),
            to_account_number=str(payload["toAccountNumber"]),
            description=payload.get("description"),
            category=category,
            payload=payload,
        )


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


@dataclass
class BankDirectoryEntry:
    """Normalized bank record shared by both directory sources"""

    short_name: str
    logo: Optional[str] = None
    bins: List[str] = field(default_factory=list)


@dataclass
class CacheEntry:
    """Cached payload with its storage time and time-to-live"""

    stored_at: float
    ttl: float
    payload: Any

    def is_fresh(self, now: float) -> bool:
        return now - self.stored_at <= self.ttl


@dataclass(frozen=True)
class EndpointCandidate:
    """One method + path pair tried while probing for bank codes"""

    method: str
    path: str

    def describe(self) -> str:
        return f"{self.method.upper()} {self.path}"


@dataclass
class PayoutResult:
    """Outcome of a payout submission, kept for caller-side auditing"""

    idempotency_key: str
    signature: str
    payos_response: Any


@dataclass
class DirectoryPage:
    """One page of the sorted bank-code directory"""

    total: int
    page: int
    limit: int
    total_pages: int
    data: List[BankDirectoryEntry]
