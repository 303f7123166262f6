import os

# config.py refuses to import without API keys
os.environ.setdefault("ASSEMBLYAI_API_KEY", "test-assemblyai-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

import pytest

from services.rate_limit import generous_rate_limit, moderate_rate_limit, strict_rate_limit


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """TestClient requests all come from the peer address "testclient"."""
    for limiter in (strict_rate_limit, moderate_rate_limit, generous_rate_limit):
        limiter.reset("testclient")
    yield
