"""Normalization of upstream bank listings and payout responses"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

from payout_gateway.domain.models import BankDirectoryEntry, DirectoryPage

SHORT_NAME_KEYS = ("short_name", "shortName", "shortNameEN", "name", "short")
LOGO_KEYS = ("logo", "icon", "image")
BIN_KEYS = ("bin", "bins", "BIN", "bic")
BIN_FALLBACK_KEY = "banks"

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class ShapeMatch:
    """Result of shape detection: the rule that matched and its items, or no match"""

    rule: Optional[str]
    items: Optional[List[Any]]

    @property
    def matched(self) -> bool:
        return self.items is not None


def _bare_array(body: Any) -> Optional[List[Any]]:
    return body if isinstance(body, list) else None


def _wrapped_under(key: str) -> Callable[[Any], Optional[List[Any]]]:
    def rule(body: Any) -> Optional[List[Any]]:
        if isinstance(body, dict) and isinstance(body.get(key), list):
            return body[key]
        return None

    return rule


def _single_record(body: Any) -> Optional[List[Any]]:
    if isinstance(body, dict) and any(body.get(k) for k in ("shortName", "short_name", "bin")):
        return [body]
    return None


def _nested_array(body: Any) -> Optional[List[Any]]:
    if isinstance(body, dict):
        for value in body.values():
            if isinstance(value, list):
                return value
    return None


# Evaluated top to bottom; first rule returning a list wins
SHAPE_RULES: Tuple[Tuple[str, Callable[[Any], Optional[List[Any]]]], ...] = (
    ("bare_array", _bare_array),
    ("data_array", _wrapped_under("data")),
    ("result_array", _wrapped_under("result")),
    ("single_record", _single_record),
    ("nested_array", _nested_array),
)


def extract_listing(body: Any) -> ShapeMatch:
    """Find the listing array inside an upstream response body"""
    for name, rule in SHAPE_RULES:
        items = rule(body)
        if items is not None:
            return ShapeMatch(rule=name, items=items)
    return ShapeMatch(rule=None, items=None)


def _first_present(raw: dict, keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def _coerce_bins(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(value)]


def normalize_entry(raw: Any) -> Optional[BankDirectoryEntry]:
    """Map one upstream record to a BankDirectoryEntry; None when it has no short name"""
    if not isinstance(raw, dict):
        return None

    short_name = _first_present(raw, SHORT_NAME_KEYS)
    if short_name is None or not str(short_name).strip():
        return None

    logo = _first_present(raw, LOGO_KEYS)
    bins = _first_present(raw, BIN_KEYS)
    if bins is None:
        bins = raw.get(BIN_FALLBACK_KEY)

    return BankDirectoryEntry(
        short_name=str(short_name),
        logo=str(logo) if logo is not None else None,
        bins=_coerce_bins(bins),
    )


def normalize_entries(items: Iterable[Any]) -> List[BankDirectoryEntry]:
    """Normalize a listing, dropping unusable records and keeping source order"""
    entries = []
    for raw in items:
        entry = normalize_entry(raw)
        if entry is not None:
            entries.append(entry)
    return entries


def paginate_directory(
    entries: List[BankDirectoryEntry],
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> DirectoryPage:
    """
    Sort entries case-insensitively by short name and cut one page.

    page is 1-based and floored at 1; limit is clamped to [1, MAX_LIMIT].
    """
    page = max(1, page if page is not None else DEFAULT_PAGE)
    limit = max(1, min(MAX_LIMIT, limit if limit is not None else DEFAULT_LIMIT))

    ordered = sorted(entries, key=lambda e: e.short_name.lower())
    start = (page - 1) * limit

    return DirectoryPage(
        total=len(ordered),
        page=page,
        limit=limit,
        total_pages=math.ceil(len(ordered) / limit),
        data=ordered[start:start + limit],
    )


def payout_succeeded(payos_response: Any) -> bool:
    """
    Interpret a payOS payout response the way the browser form does.

    Succeeded when the response code is "00", any transaction reached
    SUCCEEDED, or the approval state is COMPLETED.
    """
    if not isinstance(payos_response, dict):
        return False
    if str(payos_response.get("code")) == "00":
        return True

    data = payos_response.get("data")
    if not isinstance(data, dict):
        return False

    transactions = data.get("transactions")
    if isinstance(transactions, list) and any(
        isinstance(t, dict) and t.get("state") == "SUCCEEDED" for t in transactions
    ):
        return True

    return data.get("approvalState") == "COMPLETED"
