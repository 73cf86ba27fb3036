"""
xrpl.to data sources

- XrplToProvider: token catalog, token detail, rich list and account offers
  from the public analytics API.
- XrplLogoProvider: raw logo images from the xrpl.to image host.

Both raise UpstreamError for transport failures, non-2xx answers and
bodies that do not have the expected shape.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..config import settings
from ..errors import UpstreamError
from .base import LogoProvider, TokenDataProvider

logger = logging.getLogger(__name__)

DEFAULT_LOGO_CONTENT_TYPE = "image/webp"


class _HttpxSource:
    """Lazily created ``httpx.AsyncClient`` shared by all calls of a source.

    A client passed in by the caller is used as is and left open on close().
    """

    name: str
    timeout_s: float

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        client = await self._get_client()
        try:
            response = await client.get(url, params=params, timeout=self.timeout_s)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"{self.name} answered with an error",
                url=url,
                status_code=exc.response.status_code,
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UpstreamError(f"{self.name} request failed: {exc!r}", url=url) from exc
        return response


class XrplToProvider(_HttpxSource, TokenDataProvider):
    """xrpl.to token analytics API"""

    name = "xrpl.to"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client)
        self.base_url = (base_url or settings.xrpl_api_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.request_timeout_seconds

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        response = await self._get(url, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError("xrpl.to returned a body that is not JSON", url=url) from exc

    async def health_check(self) -> Dict[str, Any]:
        started = time.perf_counter()
        try:
            await self.get_tokens(0, 1)
        except UpstreamError as e:
            return {"status": "error", "reason": str(e)}
        return {"status": "healthy", "latency_ms": int((time.perf_counter() - started) * 1000)}

    async def get_tokens(self, start: int, limit: int) -> List[Dict[str, Any]]:
        params = {
            "start": start,
            "limit": limit,
            "sortBy": "vol24hxrp",
            "sortType": "desc",
            "filter": "",
        }
        data = await self._get_json("/api/tokens", params=params)

        # The catalog answers either {"tokens": [...], "total": n} or a bare list
        tokens = data.get("tokens", data) if isinstance(data, dict) else data
        if not isinstance(tokens, list):
            raise UpstreamError(f"Token catalog is not a list (got {type(tokens).__name__})")

        total = data.get("total") if isinstance(data, dict) else None
        logger.info(
            "Fetched token window start=%s limit=%s count=%s total=%s",
            start, limit, len(tokens), total if total is not None else "unknown",
        )
        return tokens

    async def get_token(self, issuer: str, currency: str) -> Dict[str, Any]:
        data = await self._get_json(f"/api/token/{issuer}_{currency}", params={"desc": "yes"})
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, dict) else {}

    async def get_rich_list(self, fingerprint: str, limit: int = 3) -> List[Any]:
        data = await self._get_json(f"/api/richlist/{fingerprint}", params={"start": 0, "limit": limit})
        rich_list = data.get("richList") if isinstance(data, dict) else None
        return rich_list if isinstance(rich_list, list) else []

    async def get_offers(self, account: str) -> List[Any]:
        data = await self._get_json(f"/api/account/offers/{account}")
        offers = data.get("offers") if isinstance(data, dict) else None
        return offers if isinstance(offers, list) else []


class XrplLogoProvider(_HttpxSource, LogoProvider):
    """xrpl.to logo image host, addressed by token fingerprint"""

    name = "s1.xrpl.to"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client)
        self.base_url = (base_url or settings.logo_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.logo_timeout_seconds

    async def health_check(self) -> Dict[str, Any]:
        return {"status": "configured", "base_url": self.base_url, "timeout_ms": int(self.timeout_s * 1000)}

    async def get_logo(self, fingerprint: str) -> Tuple[bytes, str]:
        url = f"{self.base_url}/token/{fingerprint}"
        started = time.perf_counter()
        response = await self._get(url)

        content = response.content
        if not content:
            raise UpstreamError("Logo host returned an empty body", url=url, status_code=response.status_code)

        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        if not content_type.startswith("image/"):
            content_type = DEFAULT_LOGO_CONTENT_TYPE

        logger.debug(
            "Logo %s fetched: %s bytes, %s, %sms",
            fingerprint, len(content), content_type, int((time.perf_counter() - started) * 1000),
        )
        return content, content_type
