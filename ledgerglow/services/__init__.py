"""Service layer: logo store, logo resolution and token aggregation"""

from .container import Services, build_services
from .fingerprint import fingerprint_for, token_fingerprint
from .logo_store import LogoStore
from .logos import LogoResolver, to_data_uri
from .tokens import TokenAggregator

__all__ = [
    "LogoResolver",
    "LogoStore",
    "Services",
    "TokenAggregator",
    "build_services",
    "fingerprint_for",
    "to_data_uri",
    "token_fingerprint",
]
