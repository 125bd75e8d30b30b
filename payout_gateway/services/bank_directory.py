"""Bank directory resolution: payOS bank codes and the public bank listing"""

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from payout_gateway.config import settings
from payout_gateway.domain.exceptions import DirectoryUnavailable, SecondaryDirectoryError, UpstreamError
from payout_gateway.domain.models import BankDirectoryEntry, EndpointCandidate
from payout_gateway.domain.normalization import extract_listing, normalize_entries
from payout_gateway.infrastructure.cache import TTLCache
from payout_gateway.infrastructure.clients.payos import PayOSClient
from payout_gateway.infrastructure.clients.public import BankListingClient
from payout_gateway.infrastructure.observability.metrics import (
    bank_candidate_failure_counter,
    record_directory_source,
)

logger = logging.getLogger(__name__)

# Most specific API version first, oldest/most generic last
BANKCODE_CANDIDATES: Tuple[EndpointCandidate, ...] = (
    EndpointCandidate("get", "/v2/gateway/api/bankcodes"),
    EndpointCandidate("post", "/v2/gateway/api/bankcodes"),
    EndpointCandidate("get", "/v1/gateway/api/bankcodes"),
    EndpointCandidate("post", "/v1/gateway/api/bankcodes"),
    EndpointCandidate("get", "/gateway/api/bankcodes"),
    EndpointCandidate("post", "/gateway/api/bankcodes"),
)

BANKCODES_CACHE_KEY = "bankcodes"
BANK_LISTING_CACHE_KEY = "bank-listing"


class BankDirectoryResolver:
    """
    Resolves the payOS bank-code directory.

    Tries each candidate endpoint once, in order, and keeps the first
    usable listing. When every candidate fails the bundled fallback file is
    used. Results are cached for `ttl` seconds; concurrent misses share one
    in-flight resolution.
    """

    def __init__(
        self,
        client: PayOSClient,
        cache: TTLCache,
        candidates: Sequence[EndpointCandidate] = BANKCODE_CANDIDATES,
        fallback_path: str | Path | None = None,
        ttl: float | None = None,
    ):
        self.client = client
        self.cache = cache
        self.candidates = tuple(candidates)
        self.fallback_path = Path(fallback_path or settings.bankcodes_fallback_path)
        self.ttl = ttl if ttl is not None else settings.bank_directory_ttl_seconds
        self._lock = asyncio.Lock()

    async def resolve(self) -> List[BankDirectoryEntry]:
        """
        Return the normalized bank directory.

        Raises:
            DirectoryUnavailable: If all candidates and the fallback file fail
        """
        cached, hit = self.cache.get(BANKCODES_CACHE_KEY)
        if hit:
            record_directory_source("bankcodes", "cache")
            return cached

        async with self._lock:
            cached, hit = self.cache.get(BANKCODES_CACHE_KEY)
            if hit:
                record_directory_source("bankcodes", "cache")
                return cached

            items = await self.try_candidates()
            source = "remote"
            if items is None:
                items = self.load_fallback()
                source = "fallback"

            entries = normalize_entries(items)
            self.cache.set(BANKCODES_CACHE_KEY, entries, self.ttl)
            record_directory_source("bankcodes", source)
            return entries

    async def try_candidates(self) -> Optional[list]:
        """Raw listing from the first candidate that yields one, or None"""
        for candidate in self.candidates:
            try:
                body = await self.client.fetch_bank_codes(candidate)
            except UpstreamError as e:
                bank_candidate_failure_counter.labels(candidate=candidate.describe()).inc()
                logger.warning(
                    f"Bankcodes candidate {candidate.describe()} failed: {e}",
                    extra={"candidate": candidate.describe(), "upstream_status": e.status_code},
                )
                continue

            match = extract_listing(body)
            if not match.items:
                bank_candidate_failure_counter.labels(candidate=candidate.describe()).inc()
                logger.warning(
                    f"Bankcodes candidate {candidate.describe()} returned no usable listing",
                    extra={"candidate": candidate.describe()},
                )
                continue

            logger.info(
                f"Bankcodes resolved via {candidate.describe()}",
                extra={"candidate": candidate.describe(), "shape": match.rule, "items": len(match.items)},
            )
            return match.items

        return None

    def load_fallback(self) -> list:
        """
        Read the bundled bank-code snapshot.

        Raises:
            DirectoryUnavailable: If the file is missing, unreadable or not a JSON array
        """
        try:
            items = json.loads(self.fallback_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Fallback bankcodes read error: {e}", extra={"path": str(self.fallback_path)})
            raise DirectoryUnavailable(
                "Could not load bank codes from payOS or the fallback file"
            ) from e

        if not isinstance(items, list):
            logger.error("Fallback bankcodes file is not a JSON array", extra={"path": str(self.fallback_path)})
            raise DirectoryUnavailable("Could not load bank codes from payOS or the fallback file")

        logger.info(f"Bankcodes: using local fallback file ({len(items)} items)")
        return items


class BankListingResolver:
    """Resolves the public bank listing; no fallback, failures surface to the caller"""

    def __init__(self, client: BankListingClient, cache: TTLCache, ttl: float | None = None):
        self.client = client
        self.cache = cache
        self.ttl = ttl if ttl is not None else settings.bank_listing_ttl_seconds
        self._lock = asyncio.Lock()

    async def resolve(self) -> Tuple[str, List[BankDirectoryEntry]]:
        """
        Return ("cache" | "remote", entries).

        Raises:
            SecondaryDirectoryError: If the listing cannot be fetched or has no recognisable shape
        """
        cached, hit = self.cache.get(BANK_LISTING_CACHE_KEY)
        if hit:
            record_directory_source("listing", "cache")
            return "cache", cached

        async with self._lock:
            cached, hit = self.cache.get(BANK_LISTING_CACHE_KEY)
            if hit:
                record_directory_source("listing", "cache")
                return "cache", cached

            body = await self.client.fetch()
            match = extract_listing(body)
            if not match.matched:
                raise SecondaryDirectoryError("Invalid bank listing data", detail=body)

            entries = normalize_entries(match.items)

            self.cache.set(BANK_LISTING_CACHE_KEY, entries, self.ttl)
            record_directory_source("listing", "remote")
            return "remote", entries
