from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: float = 10

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release network resources"""
        pass


class TokenDataProvider(Provider):
    """Provider for token catalog and per-token detail data"""

    @abstractmethod
    async def get_tokens(self, start: int, limit: int) -> List[Dict[str, Any]]:
        """Get a window of the catalog sorted by 24h volume, descending"""
        pass

    @abstractmethod
    async def get_token(self, issuer: str, currency: str) -> Dict[str, Any]:
        """Get the detail record of one token, description included"""
        pass

    @abstractmethod
    async def get_rich_list(self, fingerprint: str, limit: int = 3) -> List[Any]:
        """Get the top holders of a token"""
        pass

    @abstractmethod
    async def get_offers(self, account: str) -> List[Any]:
        """Get the open DEX offers of an account"""
        pass


class LogoProvider(Provider):
    """Provider for token logo images"""

    @abstractmethod
    async def get_logo(self, fingerprint: str) -> Tuple[bytes, str]:
        """Get the raw image bytes and their content type"""
        pass
