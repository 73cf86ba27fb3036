from .base import LogoProvider, Provider, TokenDataProvider
from .xrpl_to import XrplLogoProvider, XrplToProvider

__all__ = [
    "LogoProvider",
    "Provider",
    "TokenDataProvider",
    "XrplLogoProvider",
    "XrplToProvider",
]
