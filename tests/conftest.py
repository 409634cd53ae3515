from __future__ import annotations

import sys
from pathlib import Path

import httpx
import openai
import pytest

# Allow tests to import project modules and tests.fixtures when pytest runs from tests/.
ROOT_DIR = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT_DIR)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from icpc_coach.codeforces import set_codeforces_client  # noqa: E402
from icpc_coach.tools import register_all_tools  # noqa: E402
from tests.fixtures import FakeCodeforcesClient  # noqa: E402


@pytest.fixture
def fake_client():
    """A fake Codeforces client installed as the shared client."""
    client = FakeCodeforcesClient()
    set_codeforces_client(client)
    yield client
    set_codeforces_client(None)


@pytest.fixture(scope="session")
def registry():
    return register_all_tools()


def _provider_response(status: int) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))


@pytest.fixture
def rate_limit_error():
    def make():
        return openai.RateLimitError("Rate limit reached", response=_provider_response(429), body=None)
    return make


@pytest.fixture
def server_error():
    def make():
        return openai.InternalServerError("upstream exploded", response=_provider_response(500), body=None)
    return make
