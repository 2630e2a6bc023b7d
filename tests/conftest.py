import pytest

from pwcheck import pwned


@pytest.fixture(autouse=True)
def _fresh_range_cache():
    pwned.clear_cache()
    yield
    pwned.clear_cache()
