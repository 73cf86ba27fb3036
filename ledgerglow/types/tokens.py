from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class TokenSummary(BaseModel):
    """One card of the token grid."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(default="Unknown", description="Currency code of the token")
    volume: float = Field(default=0.0, ge=0, description="24h volume in XRP")
    market_cap: float = Field(default=0.0, ge=0, alias="marketCap", description="Market capitalisation in XRP")
    holders: int = Field(default=0, ge=0, description="Number of trustlines")
    issuer: str = Field(default="", description="Issuing account, may be empty")
    fingerprint: str = Field(alias="md5", description="MD5 of issuer_currency")
    logo: str = Field(default="", description="Logo as a data URI, empty when unavailable")


class TokenDetail(BaseModel):
    """Fields loaded when a card is expanded."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    description: str = Field(default="N/A", description="Token description")
    total_supply: float = Field(default=0.0, alias="totalSupply", description="Total issued amount")
    circulating_supply: float = Field(default=0.0, alias="circulatingSupply", description="Circulating supply")
    price: float = Field(default=0.0, description="Price in USD")


class RichList(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    top_holders: List[Any] = Field(default_factory=list, alias="topHolders", description="Largest holders, passed through")


class OrderBook(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    order_book: List[Any] = Field(default_factory=list, alias="orderBook", description="Open offers, passed through")


# Served when the catalog cannot be reached so the grid is never empty
FALLBACK_TOKENS: List[TokenSummary] = [
    TokenSummary(
        name="RLUSD",
        volume=1_000_000,
        market_cap=50_000_000,
        holders=5000,
        issuer="rhub8VRN55s94qWKDv6jmDy1pUykJzF3wq",
        fingerprint="0413ca7cfc258dfaf698c02fe304e607",
        logo="",
    ),
    TokenSummary(
        name="SGB",
        volume=500_000,
        market_cap=20_000_000,
        holders=3000,
        issuer="rHgbFyS72N3r6hGE1r4gdkRZoSwZ49MZuf",
        fingerprint="mock2",
        logo="",
    ),
]
