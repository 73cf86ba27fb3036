import pytest

from fakes import FakeLogoProvider, FakeTokenProvider
from ledgerglow.cache import ResponseCache
from ledgerglow.services.logo_store import LogoStore
from ledgerglow.services.logos import LogoResolver
from ledgerglow.services.tokens import TokenAggregator


@pytest.fixture
def response_cache():
    return ResponseCache()


@pytest.fixture
def logo_store(tmp_path):
    return LogoStore(tmp_path / "logos.json")


@pytest.fixture
def token_provider():
    return FakeTokenProvider()


@pytest.fixture
def logo_provider():
    return FakeLogoProvider()


@pytest.fixture
def resolver(response_cache, logo_store, logo_provider):
    return LogoResolver(response_cache, logo_store, logo_provider)


@pytest.fixture
def aggregator(token_provider, resolver, response_cache):
    return TokenAggregator(token_provider, resolver, response_cache, logo_concurrency=4)
