"""Shared test fixtures."""
import pytest
from fx_tagger.config import Settings
from fx_tagger.dom.document import LiveDocument
from fx_tagger.dom.engine import RetaggingEngine
from fx_tagger.international.price_scanner import PriceScanner
from fx_tagger.rates.provider import InMemoryRateProvider


@pytest.fixture
def test_settings():
    """Settings with a short coalescing window for async tests."""
    return Settings(coalesce_interval=0.05)


@pytest.fixture
def scanner():
    return PriceScanner()


@pytest.fixture
def rate_provider():
    return InMemoryRateProvider({"EUR": 25.0, "USD": 23.0, "GBP": 29.0})


@pytest.fixture
def make_engine(test_settings, rate_provider):
    """Build an engine over an HTML string."""
    def _make(html: str, rates=None) -> RetaggingEngine:
        document = LiveDocument.from_html(html)
        return RetaggingEngine(document, rates or rate_provider, test_settings)
    return _make
