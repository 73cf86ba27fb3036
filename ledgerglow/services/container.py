"""Explicitly wired service graph, created once per process."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..cache import ResponseCache, SingleFlight
from ..config import Settings, settings as default_settings
from ..providers.base import LogoProvider, TokenDataProvider
from ..providers.xrpl_to import XrplLogoProvider, XrplToProvider
from .logo_store import LogoStore
from .logos import LogoResolver
from .tokens import TokenAggregator

logger = logging.getLogger(__name__)


@dataclass
class Services:
    cache: ResponseCache
    logo_store: LogoStore
    token_provider: TokenDataProvider
    logo_provider: LogoProvider
    logos: LogoResolver
    aggregator: TokenAggregator

    async def aclose(self) -> None:
        """Flush unsaved logos and close upstream connections."""
        await self.logo_store.flush()
        await self.token_provider.close()
        await self.logo_provider.close()
        logger.info("Services closed, %s cached responses dropped", self.cache.size())


def build_services(
    config: Optional[Settings] = None,
    *,
    token_provider: Optional[TokenDataProvider] = None,
    logo_provider: Optional[LogoProvider] = None,
) -> Services:
    config = config or default_settings

    cache = ResponseCache(
        default_ttl=config.response_cache_ttl_seconds,
        max_size=config.response_cache_max_size,
    )
    logo_store = LogoStore(config.logo_store_path)
    token_provider = token_provider or XrplToProvider(
        base_url=config.xrpl_api_base_url,
        timeout_s=config.request_timeout_seconds,
    )
    logo_provider = logo_provider or XrplLogoProvider(
        base_url=config.logo_base_url,
        timeout_s=config.logo_timeout_seconds,
    )
    flight = SingleFlight()
    logos = LogoResolver(cache, logo_store, logo_provider, single_flight=flight)
    aggregator = TokenAggregator(
        token_provider,
        logos,
        cache,
        single_flight=flight,
        logo_concurrency=config.logo_concurrency,
    )

    logger.info(
        "Services ready: api=%s logos=%s store=%s",
        config.xrpl_api_base_url, config.logo_base_url, config.logo_store_path,
    )
    return Services(
        cache=cache,
        logo_store=logo_store,
        token_provider=token_provider,
        logo_provider=logo_provider,
        logos=logos,
        aggregator=aggregator,
    )
