"""Shared test fixtures."""

import pytest

from discount_sorter.config import Settings


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        shop="test-store.myshopify.com",
        admin_token="shpat_test",
        shared_secret="",
        allowed_origins="",
        position_base=1,
        products_page_size=2,
    )
