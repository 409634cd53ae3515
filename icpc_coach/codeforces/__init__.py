"""
Codeforces Data Access
======================

The rate-limited client every tool and the gym resolver talk through.

This module provides:
- CodeforcesClient: one async method per API method
- CodeforcesAPIError: raised when the API reports a failure
- RateGate: the process-wide call spacing primitive
- get_codeforces_client / set_codeforces_client: the shared instance
"""

from icpc_coach.codeforces.client import (
    CodeforcesAPIError,
    CodeforcesClient,
    RateGate,
    get_shared_gate,
)
from icpc_coach.utils.config import get_config

# Shared client (built from config on first use, or injected by main/tests)
_client: CodeforcesClient | None = None


def set_codeforces_client(client: CodeforcesClient | None) -> None:
    """Set the client the tools use. Pass None to rebuild from config."""
    global _client
    _client = client


def get_codeforces_client() -> CodeforcesClient:
    """Get the shared client, building it from configuration if needed."""
    global _client
    if _client is None:
        config = get_config().codeforces
        _client = CodeforcesClient(
            api_key=config.api_key,
            api_secret=config.api_secret,
            base_url=config.base_url,
            gate=get_shared_gate(config.min_interval_seconds),
            timeout_seconds=config.timeout_seconds,
        )
    return _client


__all__ = [
    "CodeforcesAPIError",
    "CodeforcesClient",
    "RateGate",
    "get_codeforces_client",
    "set_codeforces_client",
]
