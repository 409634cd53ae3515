"""
Shared fixture data and fakes.

Submission and standings data is modelled on a real team's simulation of
The 2025 ICPC Latin America Championship (gym 105789).
"""

import copy
from datetime import datetime, timezone
from types import SimpleNamespace

from openai.types.chat import ChatCompletionChunk

# 2026-02-22 22:06 UTC
T1 = int(datetime(2026, 2, 22, 22, 6, tzinfo=timezone.utc).timestamp())
# A second session one week earlier
T2 = T1 - 7 * 24 * 3600

TEAM = [{"handle": "automac"}, {"handle": "elpepe123"}, {"handle": "juancs"}]


def make_submission(contest_id, participant_type="VIRTUAL", start=T1, created=None, members=None, team_name=None):
    author = {
        "participantType": participant_type,
        "startTimeSeconds": start,
        "members": members if members is not None else [{"handle": "someone"}],
    }
    if team_name is not None:
        author["teamName"] = team_name
    return {
        "contestId": contest_id,
        "creationTimeSeconds": created if created is not None else start + 100,
        "author": author,
    }


SUBS_ONE_SIM = [
    # Two submissions from the same simulation
    make_submission(105789, start=T1, created=T1 + 100, members=list(reversed(TEAM)), team_name="Que bendición"),
    make_submission(105789, start=T1, created=T1 + 200, members=TEAM, team_name="Que bendición"),
    # Upsolving afterwards
    make_submission(105789, "PRACTICE", start=T1 + 9999, created=T1 + 9999, members=[{"handle": "automac"}]),
    # Regular round done virtually
    make_submission(2172, start=T1 + 1000, members=[{"handle": "automac"}]),
]

SUBS_TWO_SIMS = [
    make_submission(105789, start=T1, members=TEAM, team_name="Que bendición"),
    make_submission(106193, start=T2, members=TEAM, team_name="Que bendición"),
]

GYM_LIST = [
    {"id": 105789, "name": "The 2025 ICPC Latin America Championship", "durationSeconds": 18000, "difficulty": 3},
    {"id": 106193, "name": "2025-2026 ICPC NERC (NEERC), Northern Subregionals", "durationSeconds": 18000, "difficulty": 2},
    {"id": 104000, "name": "Unrelated gym", "durationSeconds": 10800},
]


def _results(solved, total=12):
    return [{"points": 1 if i < solved else 0} for i in range(total)]


PROBLEMS_12 = [{"index": chr(65 + i)} for i in range(12)]

# "Fast and Fourier" started in the same second as the team and ranks higher
STANDINGS_105789 = {
    "problems": PROBLEMS_12,
    "rows": [
        {"rank": 120, "party": {"startTimeSeconds": T1, "members": [{"handle": "user_x"}, {"handle": "user_y"}]},
         "problemResults": _results(7)},
        {"rank": 177, "party": {"startTimeSeconds": T1, "members": TEAM},
         "problemResults": _results(6)},
        {"rank": 350, "party": {"startTimeSeconds": T1 - 999, "members": [{"handle": "last_team"}]},
         "problemResults": []},
    ],
}

STANDINGS_106193 = {
    "problems": PROBLEMS_12,
    "rows": [
        {"rank": 183, "party": {"startTimeSeconds": T2, "members": TEAM}, "problemResults": _results(5)},
        {"rank": 400, "party": {"startTimeSeconds": T2 - 100, "members": [{"handle": "other"}]},
         "problemResults": []},
    ],
}


class FakeCodeforcesClient:
    """
    In-memory stand-in for CodeforcesClient.

    submissions: handle -> list (paged like user.status), or one list for any handle
    standings: contest id -> standings dict, or an Exception to raise
    responses: canned results for the pass-through methods
    """

    def __init__(self, submissions=None, gyms=None, standings=None, responses=None):
        self.submissions = submissions if submissions is not None else []
        self.gyms = gyms if gyms is not None else []
        self.standings = standings or {}
        self.responses = responses or {}
        self.calls = []

    def calls_to(self, method):
        return [args for name, args in self.calls if name == method]

    async def get_user_submissions(self, handle, count=20, from_=1):
        self.calls.append(("get_user_submissions", (handle, count, from_)))
        if "get_user_submissions" in self.responses:
            return self.responses["get_user_submissions"]
        subs = self.submissions.get(handle, []) if isinstance(self.submissions, dict) else self.submissions
        return subs[from_ - 1:from_ - 1 + count]

    async def get_contest_list(self, gym=False):
        self.calls.append(("get_contest_list", (gym,)))
        return self.responses.get("get_contest_list", self.gyms)

    async def get_contest_standings(self, contest_id, from_=1, count=10, handles=None, show_unofficial=False):
        self.calls.append(("get_contest_standings", (contest_id, from_, count, handles, show_unofficial)))
        if "get_contest_standings" in self.responses:
            return self.responses["get_contest_standings"]
        value = self.standings.get(contest_id, {"rows": [], "problems": []})
        if isinstance(value, Exception):
            raise value
        return value

    async def _canned(self, method, *args):
        self.calls.append((method, args))
        return self.responses.get(method, [])

    async def get_user_info(self, handles):
        return await self._canned("get_user_info", handles)

    async def get_user_rating(self, handle):
        return await self._canned("get_user_rating", handle)

    async def get_contest_status(self, contest_id, handle="", count=20):
        return await self._canned("get_contest_status", contest_id, handle, count)

    async def get_contest_rating_changes(self, contest_id):
        return await self._canned("get_contest_rating_changes", contest_id)

    async def get_problems(self, tags=None, problemset_name=""):
        return await self._canned("get_problems", tags, problemset_name)

    async def get_recent_actions(self, max_count=20):
        return await self._canned("get_recent_actions", max_count)

    async def get_rated_list(self, active_only=True):
        return await self._canned("get_rated_list", active_only)

    async def get_user_friends(self, only_online=False):
        return await self._canned("get_user_friends", only_online)


# ==============================================================================
# Model provider fakes
# ==============================================================================

def chunk(content=None, tool_calls=None, finish_reason=None):
    """Build a real ChatCompletionChunk with a single choice."""
    delta = {}
    if content is not None:
        delta["content"] = content
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    return ChatCompletionChunk.model_validate({
        "id": "chatcmpl-test",
        "object": "chat.completion.chunk",
        "created": 0,
        "model": "test-model",
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    })


def tool_fragment(index, call_id=None, name=None, arguments=None):
    """One entry of delta.tool_calls."""
    fragment = {"index": index}
    if call_id is not None:
        fragment["id"] = call_id
        fragment["type"] = "function"
    function = {}
    if name is not None:
        function["name"] = name
    if arguments is not None:
        function["arguments"] = arguments
    if function:
        fragment["function"] = function
    return fragment


def tool_call_chunks(index, call_id, name, *argument_parts):
    """Chunks that open a tool call and stream its arguments in parts."""
    chunks = [chunk(tool_calls=[tool_fragment(index, call_id, name, "")])]
    chunks.extend(chunk(tool_calls=[tool_fragment(index, arguments=part)]) for part in argument_parts)
    return chunks


class FakeStream:
    def __init__(self, items):
        self._items = items

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self._items:
            if isinstance(item, Exception):
                raise item
            yield item


class FakeCompletions:
    """
    Scripted chat.completions: each create() call consumes the next turn,
    which is a list of chunks (an Exception inside raises mid-stream) or
    an Exception raised when the stream is opened.
    """

    def __init__(self, turns):
        self.turns = list(turns)
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(copy.deepcopy(kwargs))
        outcome = self.turns.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return FakeStream(outcome)


class FakeOpenAI:
    def __init__(self, turns):
        self.completions = FakeCompletions(turns)
        self.chat = SimpleNamespace(completions=self.completions)
