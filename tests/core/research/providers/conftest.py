"""Shared test fixtures for research provider tests."""

import pytest

from provider_fakes import FACTORY_MAP, PROVIDERS


@pytest.fixture(params=PROVIDERS)
def provider(request):
    """Parametrized fixture yielding each provider instance."""
    return FACTORY_MAP[request.param]()
