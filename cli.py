#!/usr/bin/env python3
"""Simple CLI for browsing a running LedgerGlow server"""

import argparse
import asyncio
from typing import Optional

from ledgerglow.client import DEFAULT_BASE_URL, LedgerGlowClient, TokenFeed, heat_scores
from ledgerglow.types import OrderBook, RichList, TokenDetail


def _number_or_na(value: float, fmt: str = "{:,.2f}") -> str:
    return fmt.format(value) if value else "N/A"


def print_tokens(feed: TokenFeed):
    """Pretty print the accumulated token grid"""
    if not feed.tokens:
        print("❌ No tokens available")
        return

    scores = heat_scores(feed.tokens)
    max_score = max(max(scores), 1)

    print(f"\n🪙 Tokens by 24h volume ({len(feed.tokens)} loaded)")
    print("=" * 78)
    print(f"{'#':>4} {'Name':<12} {'Volume':>16} {'Market Cap':>18} {'Holders':>9} {'Heat':>5} Logo")
    print("-" * 78)
    for i, (token, score) in enumerate(zip(feed.tokens, scores), 1):
        logo = "🖼" if token.logo else "📄"
        print(
            f"{i:4d} {token.name[:12]:<12} {token.volume:>16,.2f} {token.market_cap:>18,.2f} "
            f"{token.holders:>9,} {score / max_score:>5.2f} {logo}"
        )


def print_detail(issuer: str, currency: str, detail: TokenDetail, rich_list: RichList, offers: OrderBook):
    """Pretty print the back of a token card"""
    holders = [
        f"{str(entry.get('account', ''))[:6]}..." for entry in rich_list.top_holders if isinstance(entry, dict)
    ]

    print(f"\n🔎 {currency}")
    print("=" * 50)
    print(f"Issuer: {issuer or 'N/A'}")
    print(f"Price: {'$' + format(detail.price, '.6f') if detail.price else 'N/A'}")
    print(f"Total Supply: {_number_or_na(detail.total_supply)}")
    print(f"Circulating Supply: {_number_or_na(detail.circulating_supply)}")
    print(f"Description: {detail.description or 'N/A'}")
    print(f"Top Holders: {', '.join(holders) if holders else 'N/A'}")
    print(f"Order Book: {'Bids/Asks: ' + str(len(offers.order_book)) if offers.order_book else 'N/A'}")


async def cli_tokens(base_url: str, pages: int, limit: int):
    """CLI command to page through the token grid"""
    async with LedgerGlowClient(base_url) as client:
        feed = TokenFeed(client, limit=limit)
        for _ in range(pages):
            page = await feed.load_more()
            print(f"🔄 Loaded {len(page)} tokens (next start={feed.start})")
            if not page:
                break
        print_tokens(feed)


async def cli_detail(base_url: str, issuer: str, currency: str, md5: Optional[str]):
    """CLI command to expand a single token card"""
    async with LedgerGlowClient(base_url) as client:
        detail = await client.fetch_description(issuer, currency)
        rich_list = await client.fetch_rich_list(md5) if md5 else RichList()
        offers = await client.fetch_offers(issuer)
    print_detail(issuer, currency, detail, rich_list, offers)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LedgerGlow CLI")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help=f"Server URL (default: {DEFAULT_BASE_URL})")
    subparsers = parser.add_subparsers(dest="command")

    tokens_parser = subparsers.add_parser("tokens", help="List tokens page by page")
    tokens_parser.add_argument("--pages", type=int, default=1, help="Number of pages to load")
    tokens_parser.add_argument("--limit", type=int, default=100, help="Tokens per page")

    detail_parser = subparsers.add_parser("detail", help="Show the details of one token")
    detail_parser.add_argument("issuer", help="Issuer account")
    detail_parser.add_argument("currency", help="Currency code")
    detail_parser.add_argument("md5", nargs="?", help="Token fingerprint, enables the rich list")

    subparsers.add_parser("serve", help="Run the API server")

    return parser


async def main(args: argparse.Namespace, parser: argparse.ArgumentParser):
    if args.command == "tokens":
        if args.pages <= 0 or args.limit <= 0:
            raise ValueError("--pages and --limit must be positive")
        await cli_tokens(args.base_url, args.pages, args.limit)

    elif args.command == "detail":
        await cli_detail(args.base_url, args.issuer, args.currency, args.md5)

    else:
        parser.print_help()


if __name__ == "__main__":
    parser = build_parser()
    args = parser.parse_args()
    if args.command == "serve":
        from ledgerglow.main import run

        run()
    else:
        asyncio.run(main(args, parser))
