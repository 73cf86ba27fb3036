from .tokens import FALLBACK_TOKENS, OrderBook, RichList, TokenDetail, TokenSummary

__all__ = [
    "FALLBACK_TOKENS",
    "OrderBook",
    "RichList",
    "TokenDetail",
    "TokenSummary",
]
