"""
Token API Endpoints

Paged token summaries for the card grid and the detail lookups made when a
card is flipped. These routes always answer 200: upstream failures come back
as fallback payloads.
"""

import logging
import re
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends

from ..config import Settings
from ..services import TokenAggregator
from ..types import OrderBook, RichList, TokenDetail, TokenSummary
from .deps import get_aggregator, get_settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def _parse_int(raw: Optional[str]) -> Optional[int]:
    """Leading integer of ``raw``, so "5.5" reads as 5 and "10abc" as 10."""
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    return int(match.group()) if match else None


def page_window(start: Optional[str], limit: Optional[str], config: Settings) -> Tuple[int, int]:
    """Lenient ``start``/``limit`` parsing; bad values fall back to defaults."""
    start_value = max(_parse_int(start) or 0, 0)
    limit_value = _parse_int(limit) or 0
    if limit_value <= 0:
        limit_value = config.default_page_limit
    return start_value, min(limit_value, config.max_page_limit)


@router.get("/tokens", response_model=List[TokenSummary])
async def get_tokens(
    start: Optional[str] = None,
    limit: Optional[str] = None,
    aggregator: TokenAggregator = Depends(get_aggregator),
    config: Settings = Depends(get_settings),
):
    """Token summaries for the window ``[start, start + limit)``."""
    start_value, limit_value = page_window(start, limit, config)
    logger.info("Fetching tokens: start=%s, limit=%s", start_value, limit_value)
    return await aggregator.fetch_token_page(start_value, limit_value)


@router.get("/description/{issuer}/{currency}", response_model=TokenDetail)
async def get_description(
    issuer: str,
    currency: str,
    aggregator: TokenAggregator = Depends(get_aggregator),
):
    return await aggregator.fetch_description(issuer, currency)


@router.get("/richlist/{md5}", response_model=RichList)
async def get_rich_list(md5: str, aggregator: TokenAggregator = Depends(get_aggregator)):
    return await aggregator.fetch_rich_list(md5)


@router.get("/offers/{account}", response_model=OrderBook)
async def get_offers(account: str, aggregator: TokenAggregator = Depends(get_aggregator)):
    return await aggregator.fetch_offers(account)
