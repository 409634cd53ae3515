"""
Codeforces Tools
================

Thin tools that forward to one Codeforces API method each.

Large payloads are trimmed before they reach the model:
- submissions: at most 200, summary fields only
- contests: at most 300, summary fields only
- rated users: at most 100, summary fields only
- problems: at most 300, with solved counts merged in
"""

from pydantic import BaseModel, ConfigDict, Field

from icpc_coach.codeforces import get_codeforces_client
from icpc_coach.tools import Tool, tool_registry
from icpc_coach.utils.logger import Logger

logger = Logger("CodeforcesTools")

MAX_SUBMISSIONS = 200
MAX_CONTESTS = 300
MAX_RATED_USERS = 100
MAX_PROBLEMS = 300


class _Args(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ==============================================================================
# Result trimming
# ==============================================================================

def trim_submissions(submissions: list[dict], limit: int = MAX_SUBMISSIONS) -> list[dict]:
    trimmed = []
    for s in submissions[:limit]:
        problem = s.get("problem") or {}
        trimmed.append({
            "id": s.get("id"),
            "contestId": s.get("contestId"),
            "creationTimeSeconds": s.get("creationTimeSeconds"),
            "verdict": s.get("verdict"),
            "programmingLanguage": s.get("programmingLanguage"),
            "problem": {
                "contestId": problem.get("contestId"),
                "index": problem.get("index"),
                "name": problem.get("name"),
                "rating": problem.get("rating"),
            },
            "author": {"participantType": (s.get("author") or {}).get("participantType")},
        })
    return trimmed


def trim_contest_list(contests: list[dict], limit: int = MAX_CONTESTS) -> list[dict]:
    fields = ("id", "name", "type", "phase", "startTimeSeconds", "durationSeconds")
    return [{f: c.get(f) for f in fields} for c in contests[:limit]]


def trim_rated_list(users: list[dict], limit: int = MAX_RATED_USERS) -> list[dict]:
    fields = ("handle", "rating", "maxRating", "rank", "country")
    return [{f: u.get(f) for f in fields} for u in users[:limit]]


def trim_problems(data: dict, limit: int = MAX_PROBLEMS) -> list[dict]:
    solved = {
        (s.get("contestId"), s.get("index")): s.get("solvedCount")
        for s in data.get("problemStatistics") or []
    }
    return [
        {
            "contestId": p.get("contestId"),
            "index": p.get("index"),
            "name": p.get("name"),
            "rating": p.get("rating"),
            "tags": p.get("tags"),
            "solvedCount": solved.get((p.get("contestId"), p.get("index"))),
        }
        for p in (data.get("problems") or [])[:limit]
    ]


# ==============================================================================
# Users
# ==============================================================================

class UserInfoArgs(_Args):
    handles: list[str] = Field(min_length=1, description="List of Codeforces user handles (up to 10000)")


async def _user_info(args: UserInfoArgs) -> list[dict]:
    return await get_codeforces_client().get_user_info(args.handles)


class HandleArgs(_Args):
    handle: str = Field(min_length=1, description="Codeforces user handle")


async def _user_rating(args: HandleArgs) -> list[dict]:
    return await get_codeforces_client().get_user_rating(args.handle)


class UserSubmissionsArgs(_Args):
    handle: str = Field(min_length=1, description="Codeforces user handle")
    count: int = Field(200, ge=1, le=1000, description="Number of submissions to fetch (default 200, max 1000)")
    from_: int = Field(1, ge=1, alias="from", description="1-based index of the first submission to return (default 1)")


async def _user_submissions(args: UserSubmissionsArgs) -> list[dict]:
    submissions = await get_codeforces_client().get_user_submissions(args.handle, args.count, args.from_)
    return trim_submissions(submissions)


class RatedListArgs(_Args):
    activeOnly: bool = Field(True, description="If true (default), only users active in the last 6 months")


async def _rated_list(args: RatedListArgs) -> list[dict]:
    return trim_rated_list(await get_codeforces_client().get_rated_list(args.activeOnly))


class FriendsArgs(_Args):
    onlyOnline: bool = Field(False, description="If true, only friends currently online")


async def _user_friends(args: FriendsArgs) -> list[str]:
    return await get_codeforces_client().get_user_friends(args.onlyOnline)


# ==============================================================================
# Contests
# ==============================================================================

class ContestListArgs(_Args):
    gym: bool = Field(False, description="If true, returns gym contests. If false (default), regular contests.")


async def _contest_list(args: ContestListArgs) -> list[dict]:
    return trim_contest_list(await get_codeforces_client().get_contest_list(args.gym))


class ContestStandingsArgs(_Args):
    contestId: int = Field(description="The contest ID")
    from_: int = Field(1, ge=1, alias="from", description="Start rank (1-based, default 1)")
    count: int = Field(10, ge=1, le=1000, description="Number of rows to return (default 10)")
    handles: list[str] = Field(default_factory=list, description="If provided, show standings only for these handles")


async def _contest_standings(args: ContestStandingsArgs) -> dict:
    return await get_codeforces_client().get_contest_standings(
        args.contestId, args.from_, args.count, args.handles
    )


class ContestStatusArgs(_Args):
    contestId: int = Field(description="The contest ID")
    handle: str = Field("", description="Filter by this user handle (optional)")
    count: int = Field(20, ge=1, le=1000, description="Number of submissions to return (default 20)")


async def _contest_status(args: ContestStatusArgs) -> list[dict]:
    return await get_codeforces_client().get_contest_status(args.contestId, args.handle, args.count)


class ContestIdArgs(_Args):
    contestId: int = Field(description="The contest ID")


async def _contest_rating_changes(args: ContestIdArgs) -> list[dict]:
    return await get_codeforces_client().get_contest_rating_changes(args.contestId)


# ==============================================================================
# Problems and activity
# ==============================================================================

class ProblemsArgs(_Args):
    tags: list[str] = Field(default_factory=list, description='Filter by problem tags (e.g., ["dp", "graphs"])')
    problemsetName: str = Field("", description="Specific problemset name (optional)")


async def _problems(args: ProblemsArgs) -> list[dict]:
    return trim_problems(await get_codeforces_client().get_problems(args.tags, args.problemsetName))


class RecentActionsArgs(_Args):
    maxCount: int = Field(20, ge=1, description="Maximum number of recent actions (max 100, default 20)")


async def _recent_actions(args: RecentActionsArgs) -> list[dict]:
    return await get_codeforces_client().get_recent_actions(min(args.maxCount, 100))


CODEFORCES_TOOLS = [
    Tool(
        name="get_user_info",
        description="Get profile information for one or more Codeforces users (rating, rank, country, etc.)",
        args_model=UserInfoArgs,
        execute=_user_info,
    ),
    Tool(
        name="get_user_rating",
        description="Get the full rating history of a Codeforces user: every rated contest with its rating change",
        args_model=HandleArgs,
        execute=_user_rating,
    ),
    Tool(
        name="get_user_submissions",
        description=(
            "Get recent submissions from a Codeforces user, including gym and practice submissions. "
            "For gym simulation history use get_gym_simulations instead."
        ),
        args_model=UserSubmissionsArgs,
        execute=_user_submissions,
    ),
    Tool(
        name="get_contest_list",
        description="Get a list of available contests or gyms on Codeforces",
        args_model=ContestListArgs,
        execute=_contest_list,
    ),
    Tool(
        name="get_contest_standings",
        description="Get the standings (leaderboard) for a specific contest",
        args_model=ContestStandingsArgs,
        execute=_contest_standings,
    ),
    Tool(
        name="get_contest_status",
        description="Get submissions for a specific contest, optionally filtered by user handle",
        args_model=ContestStatusArgs,
        execute=_contest_status,
    ),
    Tool(
        name="get_contest_rating_changes",
        description="Get rating changes for all participants after a contest ended",
        args_model=ContestIdArgs,
        execute=_contest_rating_changes,
    ),
    Tool(
        name="get_problems",
        description="Get problems from the Codeforces problemset, optionally filtered by tags",
        args_model=ProblemsArgs,
        execute=_problems,
    ),
    Tool(
        name="get_recent_actions",
        description="Get recent actions on the Codeforces platform (blog posts, comments, etc.)",
        args_model=RecentActionsArgs,
        execute=_recent_actions,
    ),
    Tool(
        name="get_rated_list",
        description="Get the list of rated Codeforces users sorted by rating",
        args_model=RatedListArgs,
        execute=_rated_list,
    ),
    Tool(
        name="get_user_friends",
        description="Get the handles of the API key owner's friends (requires configured API credentials)",
        args_model=FriendsArgs,
        execute=_user_friends,
    ),
]


def register_codeforces_tools():
    """Register all Codeforces tools with the registry."""
    for tool in CODEFORCES_TOOLS:
        tool_registry.register(tool)
    logger.debug("Registered Codeforces tools")


# Auto-register on import
register_codeforces_tools()
