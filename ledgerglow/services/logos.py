import base64
import logging
from typing import Optional

from ..cache import ResponseCache, SingleFlight, cache_key_logo
from ..errors import UpstreamError
from ..providers.base import LogoProvider
from .logo_store import LogoStore

logger = logging.getLogger(__name__)


def to_data_uri(content: bytes, content_type: str = "image/webp") -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


class LogoResolver:
    """Resolve a token fingerprint to a self-contained logo data URI.

    Lookup order: response cache, durable logo store, image host. Only a
    successful download is written to the store and the cache; a failure
    yields "" and the next request for the fingerprint tries the host again.
    """

    def __init__(
        self,
        cache: ResponseCache,
        store: LogoStore,
        provider: LogoProvider,
        single_flight: Optional[SingleFlight] = None,
    ):
        self._cache = cache
        self._store = store
        self._provider = provider
        self._flight = single_flight or SingleFlight()

    async def resolve(self, fingerprint: str) -> str:
        key = cache_key_logo(fingerprint)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        stored = await self._store.get(fingerprint)
        if stored:
            logger.debug("Logo %s served from store: %s...", fingerprint, stored[:30])
            await self._cache.set(key, stored)
            return stored

        return await self._flight.do(key, lambda: self._download(fingerprint))

    async def _download(self, fingerprint: str) -> str:
        try:
            content, content_type = await self._provider.get_logo(fingerprint)
            data_uri = to_data_uri(content, content_type)
            if not await self._store.add(fingerprint, data_uri):
                # Another download got there first; the stored payload wins
                data_uri = await self._store.get(fingerprint) or data_uri
        except UpstreamError as exc:
            logger.warning("Logo %s unavailable: %s", fingerprint, exc)
            return ""
        except Exception:
            logger.exception("Logo %s could not be resolved", fingerprint)
            return ""

        await self._cache.set(cache_key_logo(fingerprint), data_uri)
        return data_uri
