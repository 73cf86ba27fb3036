"""
Client side of the gateway.

LedgerGlowClient wraps the four JSON routes with the same fallbacks the
browser grid uses. TokenFeed is the infinite-scroll pager: it asks for
``start``/``limit`` windows, moves ``start`` forward by ``limit`` after each
successful page, keeps everything it has received, and refuses to start a
second page while one is loading.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import httpx

from .types import OrderBook, RichList, TokenDetail, TokenSummary

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:3000"
SCROLL_THRESHOLD_PX = 100


class LedgerGlowClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout_s)
        self._owns_client = client is None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "LedgerGlowClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        response = await self._client.get(f"{self.base_url}{path}", params=params)
        response.raise_for_status()
        return response.json()

    async def get_token_page(self, start: int, limit: int) -> List[TokenSummary]:
        """One window of tokens. Raises on transport errors and bad bodies."""
        data = await self._get_json("/api/tokens", params={"start": start, "limit": limit})
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of tokens, got {type(data).__name__}")
        return [TokenSummary.model_validate(item) for item in data]

    async def fetch_tokens(self, start: int, limit: int) -> List[TokenSummary]:
        try:
            return await self.get_token_page(start, limit)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error fetching tokens start=%s limit=%s: %s", start, limit, exc)
            return []

    async def fetch_description(self, issuer: str, currency: str) -> TokenDetail:
        try:
            return TokenDetail.model_validate(await self._get_json(f"/api/description/{issuer}/{currency}"))
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error fetching description %s_%s: %s", issuer, currency, exc)
            return TokenDetail()

    async def fetch_rich_list(self, fingerprint: str) -> RichList:
        try:
            return RichList.model_validate(await self._get_json(f"/api/richlist/{fingerprint}"))
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error fetching richlist %s: %s", fingerprint, exc)
            return RichList()

    async def fetch_offers(self, account: str) -> OrderBook:
        try:
            return OrderBook.model_validate(await self._get_json(f"/api/offers/{account}"))
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error fetching offers %s: %s", account, exc)
            return OrderBook()


class TokenFeed:
    def __init__(self, client: LedgerGlowClient, limit: int = 100):
        self._client = client
        self.limit = limit
        self.start = 0
        self.loading = False
        self.tokens: List[TokenSummary] = []

    async def load_more(self) -> List[TokenSummary]:
        """Fetch the next window; a no-op while another one is loading."""
        if self.loading:
            return []
        self.loading = True
        try:
            page = await self._client.get_token_page(self.start, self.limit)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Page at start=%s failed, will retry it: %s", self.start, exc)
            return []
        finally:
            self.loading = False

        self.tokens.extend(page)
        self.start += self.limit
        logger.info("Total tokens loaded: %s", len(self.tokens))
        return page

    def should_load_more(self, scroll_bottom: float, document_height: float) -> bool:
        """Scroll trigger: within SCROLL_THRESHOLD_PX of the bottom and idle."""
        return not self.loading and scroll_bottom >= document_height - SCROLL_THRESHOLD_PX

    def heat_scores(self) -> List[float]:
        return heat_scores(self.tokens)


def heat_scores(tokens: Sequence[TokenSummary]) -> List[float]:
    """Average of volume, market cap and holders, each relative to the page max."""
    if not tokens:
        return []
    max_volume = max(max(t.volume for t in tokens), 1)
    max_cap = max(max(t.market_cap for t in tokens), 1)
    max_holders = max(max(t.holders for t in tokens), 1)
    return [
        (t.volume / max_volume + t.market_cap / max_cap + t.holders / max_holders) / 3
        for t in tokens
    ]


def heat_color(score: float, max_score: float = 1.0) -> str:
    """Green for cold cards through red for the hottest."""
    t = min(score / max_score, 1.0) if max_score > 0 else 0.0
    return f"rgb({round(255 * t)}, {round(255 * (1 - t))}, 0)"
