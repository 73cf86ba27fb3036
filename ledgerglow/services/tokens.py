"""
Token aggregation service.

Turns xrpl.to payloads into the shapes served by the gateway. Every public
method absorbs upstream and storage failures and answers with a documented
fallback, so callers never see an exception:

- fetch_token_page -> the two FALLBACK_TOKENS
- fetch_description -> TokenDetail() ("N/A" and zeros)
- fetch_rich_list -> RichList() (no holders)
- fetch_offers -> OrderBook() (no offers)

Detail lookups are cached for the life of the process and deduplicated
while in flight. Token pages are not cached, only the logos inside them.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable, List, Mapping, Optional, TypeVar

from ..cache import (
    ResponseCache,
    SingleFlight,
    cache_key_description,
    cache_key_offers,
    cache_key_richlist,
)
from ..errors import UpstreamError
from ..providers.base import TokenDataProvider
from ..types import FALLBACK_TOKENS, OrderBook, RichList, TokenDetail, TokenSummary
from .fingerprint import fingerprint_for
from .logos import LogoResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")

RICH_LIST_SIZE = 3


def to_number(value: Any, default: float = 0.0) -> float:
    """Parse numbers xrpl.to sends as JSON numbers or numeric strings."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def to_count(value: Any) -> int:
    return max(int(to_number(value)), 0)


class TokenAggregator:
    def __init__(
        self,
        provider: TokenDataProvider,
        logos: LogoResolver,
        cache: ResponseCache,
        single_flight: Optional[SingleFlight] = None,
        logo_concurrency: int = 8,
    ):
        self._provider = provider
        self._logos = logos
        self._cache = cache
        self._flight = single_flight or SingleFlight()
        self._logo_concurrency = max(logo_concurrency, 1)

    # ------------------------------------------------------------------
    # Token pages
    # ------------------------------------------------------------------

    async def fetch_token_page(self, start: int, limit: int) -> List[TokenSummary]:
        """Catalog window ``[start, start + limit)`` by descending 24h volume."""
        try:
            rows = await self._provider.get_tokens(start, limit)
            return await self._summarize(rows)
        except UpstreamError as exc:
            logger.warning("Token catalog unavailable, serving fallback tokens: %s", exc)
        except Exception:  # noqa: BLE001
            logger.exception("Token page start=%s limit=%s failed, serving fallback tokens", start, limit)
        return list(FALLBACK_TOKENS)

    async def _summarize(self, rows: List[Any]) -> List[TokenSummary]:
        semaphore = asyncio.Semaphore(self._logo_concurrency)

        async def summarize(row: Mapping[str, Any]) -> TokenSummary:
            fingerprint = fingerprint_for(row)
            async with semaphore:
                logo = await self._logos.resolve(fingerprint)
            return self._to_summary(row, fingerprint, logo)

        tokens = [row for row in rows if isinstance(row, Mapping)]
        if len(tokens) != len(rows):
            logger.warning("Skipped %s catalog rows that are not objects", len(rows) - len(tokens))

        # gather keeps catalog order whatever order the logos resolve in
        summaries = await asyncio.gather(*(summarize(row) for row in tokens))
        logger.info("Built %s token summaries", len(summaries))
        return list(summaries)

    @staticmethod
    def _to_summary(row: Mapping[str, Any], fingerprint: str, logo: str) -> TokenSummary:
        return TokenSummary(
            name=str(row.get("currency") or "Unknown"),
            volume=max(to_number(row.get("vol24hxrp")), 0.0),
            market_cap=max(to_number(row.get("marketcap")), 0.0),
            holders=to_count(row.get("trustlines")),
            issuer=str(row.get("issuer") or ""),
            fingerprint=fingerprint,
            logo=logo,
        )

    # ------------------------------------------------------------------
    # Card details
    # ------------------------------------------------------------------

    async def fetch_description(self, issuer: str, currency: str) -> TokenDetail:
        async def load() -> TokenDetail:
            token = await self._provider.get_token(issuer, currency)
            logger.debug("Token detail for %s_%s: %s", issuer, currency, token)
            return TokenDetail(
                description=str(token.get("description") or "N/A"),
                total_supply=to_number(token.get("amount")),
                circulating_supply=to_number(token.get("supply")),
                price=to_number(token.get("usd")),
            )

        return await self._cached(cache_key_description(issuer, currency), load, TokenDetail())

    async def fetch_rich_list(self, fingerprint: str) -> RichList:
        async def load() -> RichList:
            holders = await self._provider.get_rich_list(fingerprint, limit=RICH_LIST_SIZE)
            return RichList(top_holders=holders)

        return await self._cached(cache_key_richlist(fingerprint), load, RichList())

    async def fetch_offers(self, account: str) -> OrderBook:
        async def load() -> OrderBook:
            offers = await self._provider.get_offers(account)
            return OrderBook(order_book=offers)

        return await self._cached(cache_key_offers(account), load, OrderBook())

    async def _cached(self, key: str, load: Callable[[], Awaitable[T]], fallback: T) -> T:
        """Check-then-populate ``key``; failures return ``fallback`` uncached."""
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        async def load_and_store() -> T:
            value = await load()
            await self._cache.set(key, value)
            return value

        try:
            return await self._flight.do(key, load_and_store)
        except UpstreamError as exc:
            logger.warning("Lookup %s failed: %s", key, exc)
        except Exception:  # noqa: BLE001
            logger.exception("Lookup %s failed", key)
        return fallback
