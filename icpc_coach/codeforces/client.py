"""
Codeforces API Client
=====================

Async client for https://codeforces.com/apiHelp.

Every call goes through a single process-wide RateGate, so no matter how
many tools run concurrently the API sees at most one request per interval.

API Notes:
- Responses are wrapped as {"status": "OK" | "FAILED", "comment": ..., "result": ...}
- A FAILED status comes back with HTTP 400 and a human-readable comment
- Methods such as user.friends need a signature (apiKey, time, apiSig)
"""

import asyncio
import hashlib
import random
import time
from typing import Any

import httpx

from icpc_coach.utils.logger import Logger

logger = Logger("Codeforces")

CODEFORCES_API = "https://codeforces.com/api"


class CodeforcesAPIError(Exception):
    """The Codeforces API reported a failure for a method call."""

    def __init__(self, method: str, comment: str):
        self.method = method
        self.comment = comment
        super().__init__(f"Codeforces API error: {comment}")


class RateGate:
    """
    Serializes outbound calls with a minimum spacing between them.

    Example:
        gate = RateGate(0.5)
        await gate.acquire()   # returns immediately
        await gate.acquire()   # waits until 0.5s after the previous call
    """

    def __init__(self, min_interval_seconds: float = 0.5):
        self.min_interval_seconds = min_interval_seconds
        self._lock = asyncio.Lock()
        self._last_call: float | None = None

    async def acquire(self) -> None:
        """Wait until the next call is allowed, then claim the slot."""
        async with self._lock:
            if self._last_call is not None:
                wait = self.min_interval_seconds - (time.monotonic() - self._last_call)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_call = time.monotonic()


# Shared by every client in the process
_shared_gate: RateGate | None = None


def get_shared_gate(min_interval_seconds: float = 0.5) -> RateGate:
    """Get the process-wide gate, creating it on first use."""
    global _shared_gate
    if _shared_gate is None:
        _shared_gate = RateGate(min_interval_seconds)
    return _shared_gate


def _join(values: list[str] | tuple[str, ...]) -> str:
    return ";".join(values)


def _flag(value: bool) -> str:
    return "true" if value else "false"


class CodeforcesClient:
    """
    Typed access to the Codeforces API methods the coach uses.

    Example:
        client = CodeforcesClient()
        users = await client.get_user_info(["tourist"])
        subs = await client.get_user_submissions("tourist", count=100)
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        base_url: str = CODEFORCES_API,
        gate: RateGate | None = None,
        timeout_seconds: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Key for signed methods (optional)
            api_secret: Secret for signed methods (optional)
            base_url: API root, without a trailing slash
            gate: Rate gate to use; defaults to the process-wide one
            timeout_seconds: Per-request timeout
            transport: Custom httpx transport (used by tests)
        """
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.gate = gate or get_shared_gate()
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def sign(self, method: str, params: dict[str, str]) -> dict[str, str]:
        """
        Add apiKey, time and apiSig to a parameter set.

        The signature is rand + sha512("rand/method?k1=v1&k2=v2#secret")
        with parameters sorted by key, then value.
        """
        if not self.api_key or not self.api_secret:
            raise CodeforcesAPIError(
                method,
                "Codeforces API key is not configured. Set CODEFORCES_API_KEY and CODEFORCES_API_SECRET in .env"
            )

        rand = str(random.randint(100000, 999999))
        signed = {**params, "apiKey": self.api_key, "time": str(int(time.time()))}
        query = "&".join(f"{k}={v}" for k, v in sorted(signed.items()))
        digest = hashlib.sha512(f"{rand}/{method}?{query}#{self.api_secret}".encode()).hexdigest()
        signed["apiSig"] = rand + digest
        return signed

    async def call(self, method: str, params: dict[str, str] | None = None, auth: bool = False) -> Any:
        """
        Call an API method and return its `result` payload.

        Raises:
            CodeforcesAPIError: If the API reports a failure
        """
        params = dict(params or {})
        if auth:
            params = self.sign(method, params)

        await self.gate.acquire()
        logger.debug(f"GET {method}", {k: v for k, v in params.items() if k != "apiSig"})

        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.get(f"{self.base_url}/{method}", params=params)

        try:
            payload = response.json()
        except ValueError:
            logger.error(f"Non-JSON response from {method}: HTTP {response.status_code}")
            raise CodeforcesAPIError(method, f"HTTP {response.status_code}")

        if payload.get("status") != "OK":
            comment = payload.get("comment") or "Unknown error"
            logger.warning(f"{method} failed", {"comment": comment})
            raise CodeforcesAPIError(method, comment)

        return payload.get("result")

    # ==========================================================================
    # API methods
    # ==========================================================================

    async def get_user_info(self, handles: list[str]) -> list[dict]:
        return await self.call("user.info", {"handles": _join(handles)})

    async def get_user_rating(self, handle: str) -> list[dict]:
        return await self.call("user.rating", {"handle": handle})

    async def get_user_submissions(self, handle: str, count: int = 20, from_: int = 1) -> list[dict]:
        return await self.call("user.status", {"handle": handle, "count": str(count), "from": str(from_)})

    async def get_contest_list(self, gym: bool = False) -> list[dict]:
        return await self.call("contest.list", {"gym": _flag(gym)})

    async def get_contest_standings(
        self,
        contest_id: int,
        from_: int = 1,
        count: int = 10,
        handles: list[str] | None = None,
        show_unofficial: bool = False,
    ) -> dict:
        params = {
            "contestId": str(contest_id),
            "from": str(from_),
            "count": str(count),
            "showUnofficial": _flag(show_unofficial),
        }
        if handles:
            params["handles"] = _join(handles)
        return await self.call("contest.standings", params)

    async def get_contest_status(self, contest_id: int, handle: str = "", count: int = 20) -> list[dict]:
        params = {"contestId": str(contest_id), "count": str(count)}
        if handle:
            params["handle"] = handle
        return await self.call("contest.status", params)

    async def get_contest_rating_changes(self, contest_id: int) -> list[dict]:
        return await self.call("contest.ratingChanges", {"contestId": str(contest_id)})

    async def get_problems(self, tags: list[str] | None = None, problemset_name: str = "") -> dict:
        params = {}
        if tags:
            params["tags"] = _join(tags)
        if problemset_name:
            params["problemsetName"] = problemset_name
        return await self.call("problemset.problems", params)

    async def get_recent_actions(self, max_count: int = 20) -> list[dict]:
        return await self.call("recentActions", {"maxCount": str(min(max_count, 100))})

    async def get_rated_list(self, active_only: bool = True) -> list[dict]:
        return await self.call("user.ratedList", {"activeOnly": _flag(active_only)})

    async def get_user_friends(self, only_online: bool = False) -> list[str]:
        return await self.call("user.friends", {"onlyOnline": _flag(only_online)}, auth=True)
