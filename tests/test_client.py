import asyncio

import httpx
import pytest
import pytest_asyncio

from fakes import FakeLogoProvider, FakeTokenProvider, catalog_row
from ledgerglow.client import LedgerGlowClient, TokenFeed, heat_color, heat_scores
from ledgerglow.config import Settings
from ledgerglow.main import create_app
from ledgerglow.services import build_services
from ledgerglow.types import TokenSummary


@pytest.fixture
def token_provider():
    return FakeTokenProvider(tokens=[catalog_row(f"T{i}", "rIssuer", md5=f"fp{i}") for i in range(150)])


@pytest_asyncio.fixture
async def gateway_client(tmp_path, token_provider):
    config = Settings(logo_store_path=tmp_path / "logos.json", static_dir=tmp_path / "missing")
    app = create_app(config)
    # ASGITransport does not run the lifespan, so wire the services directly
    app.state.services = build_services(config, token_provider=token_provider, logo_provider=FakeLogoProvider())
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://gateway")
    yield LedgerGlowClient("http://gateway", client=http)
    await http.aclose()


def summary(name: str, volume: float, market_cap: float, holders: int) -> TokenSummary:
    return TokenSummary(name=name, volume=volume, market_cap=market_cap, holders=holders, fingerprint=name)


class TestTokenFeed:
    @pytest.mark.asyncio
    async def test_windows_do_not_overlap(self, gateway_client, token_provider):
        feed = TokenFeed(gateway_client, limit=100)

        first = await feed.load_more()
        second = await feed.load_more()

        assert token_provider.calls == [("tokens", (0, 100)), ("tokens", (100, 100))]
        assert len(feed.tokens) == len(first) + len(second) == 150
        assert [t.name for t in feed.tokens] == [f"T{i}" for i in range(150)]
        assert feed.start == 200

    @pytest.mark.asyncio
    async def test_ignores_calls_while_loading(self):
        release = asyncio.Event()

        class SlowClient:
            calls = 0

            async def get_token_page(self, start, limit):
                SlowClient.calls += 1
                await release.wait()
                return [summary("A", 1, 1, 1)]

        feed = TokenFeed(SlowClient(), limit=10)
        pending = asyncio.create_task(feed.load_more())
        await asyncio.sleep(0)

        assert feed.loading
        assert not feed.should_load_more(scroll_bottom=1000, document_height=1000)
        assert await feed.load_more() == []

        release.set()
        assert len(await pending) == 1
        assert SlowClient.calls == 1
        assert feed.start == 10
        assert not feed.loading

    @pytest.mark.asyncio
    async def test_failed_page_does_not_advance(self):
        class BrokenClient:
            async def get_token_page(self, start, limit):
                raise httpx.ConnectError("down")

        feed = TokenFeed(BrokenClient(), limit=100)

        assert await feed.load_more() == []
        assert feed.start == 0
        assert feed.tokens == []
        assert not feed.loading

    def test_scroll_trigger_threshold(self):
        feed = TokenFeed(client=None, limit=100)
        assert feed.should_load_more(scroll_bottom=900, document_height=1000)
        assert not feed.should_load_more(scroll_bottom=899, document_height=1000)


class TestLedgerGlowClient:
    @pytest.mark.asyncio
    async def test_detail_calls(self, gateway_client, token_provider):
        token_provider.details[("rIssuer", "T0")] = {"usd": "0.5"}
        token_provider.rich_lists["fp0"] = [{"account": "rWhale"}]

        detail = await gateway_client.fetch_description("rIssuer", "T0")
        rich_list = await gateway_client.fetch_rich_list("fp0")
        offers = await gateway_client.fetch_offers("rIssuer")

        assert detail.price == 0.5
        assert rich_list.top_holders == [{"account": "rWhale"}]
        assert offers.order_book == []

    @pytest.mark.asyncio
    async def test_unreachable_server_falls_back(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = LedgerGlowClient("http://nowhere", client=http)

        assert await client.fetch_tokens(0, 100) == []
        assert (await client.fetch_description("rA", "USD")).description == "N/A"
        assert (await client.fetch_rich_list("fp")).top_holders == []
        assert (await client.fetch_offers("rA")).order_book == []
        await http.aclose()

    @pytest.mark.asyncio
    async def test_non_list_page_is_rejected(self):
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"error": "x"})))
        client = LedgerGlowClient("http://gateway", client=http)

        with pytest.raises(ValueError):
            await client.get_token_page(0, 100)
        assert await client.fetch_tokens(0, 100) == []
        await http.aclose()


class TestHeat:
    def test_scores_relative_to_page_max(self):
        tokens = [summary("A", 100, 1000, 10), summary("B", 50, 500, 5), summary("C", 0, 0, 0)]
        assert heat_scores(tokens) == pytest.approx([1.0, 0.5, 0.0])

    def test_empty(self):
        assert heat_scores([]) == []

    def test_colors(self):
        assert heat_color(0.0) == "rgb(0, 255, 0)"
        assert heat_color(1.0) == "rgb(255, 0, 0)"
        assert heat_color(5.0, max_score=1.0) == "rgb(255, 0, 0)"
