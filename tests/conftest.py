"""
Shared test configuration and fixtures.
"""
import pytest

from tests.helpers import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


# Test data sets for parametrized tests
CURRENCY_PAIRS = [
    ("USD", "EUR"),
    ("EUR", "USD"),
    ("GBP", "JPY"),
    ("CAD", "AUD"),
]


@pytest.fixture(params=CURRENCY_PAIRS)
def currency_pair(request):
    """Parametrized currency pairs for testing"""
    return request.param
