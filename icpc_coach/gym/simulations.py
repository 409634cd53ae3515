"""
Gym Simulation Resolver
=======================

Turns a user's raw submission history into the list of gym contests they
simulated, with the contest name, team, rank and solved count.

Pipeline:
    Submissions (pages of 100, newest first)
         │
         ▼
    Discovery: keep VIRTUAL submissions to gym contests,
               stop once limit × 3 sessions are banked
         │
         ▼
    Deduplication: one session per (contestId, startTimeSeconds)
         │
         ▼
    Selection: newest first, keep `limit`
         │
         ▼
    Catalog lookup (one contest.list call)
         │
         ▼
    Standings per session (failures isolated per session)
         │
         ▼
    GymResult rows

Standings join:
    Several parties can start a virtual contest in the same second and rows
    are ordered by rank, so matching on start time alone can bind to the
    wrong party. A row matches when its start time equals the session's AND
    one of its members belongs to the session. If no row passes both, any
    row sharing a member is accepted.
"""

import asyncio
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from icpc_coach.gym.catalog import GYM_URL, GymContest, format_utc, load_gym_catalog
from icpc_coach.gym.discovery import (
    is_gym_simulation,
    iter_submission_pages,
    member_handles,
    session_start,
)
from icpc_coach.utils.logger import Logger

if TYPE_CHECKING:
    from icpc_coach.codeforces import CodeforcesClient

logger = Logger("GymSimulations")

# Sessions banked per requested result before discovery stops
CANDIDATE_FACTOR = 3

# Standings rows fetched per contest
STANDINGS_SCAN_CAP = 3000


@dataclass(frozen=True)
class SimulationSession:
    """
    One full-simulation attempt at a gym contest.

    Identity is (contest_id, start_time_seconds).
    """
    contest_id: int
    start_time_seconds: int
    team_name: str | None
    members: tuple[str, ...]

    @property
    def key(self) -> tuple[int, int]:
        return (self.contest_id, self.start_time_seconds)


@dataclass
class StandingsMatch:
    """
    The standings row found for a session.

    Attributes:
        rank: The party's rank
        total_participants: Last row's rank, or None past the scan cap
        solved: Problems with a positive score
        total_problems: Problems in the contest
    """
    rank: int
    total_participants: int | None
    solved: int
    total_problems: int


@dataclass
class GymResult:
    """A fully resolved simulation, as returned to the model."""
    name: str
    link: str
    difficulty: str | None
    durationHours: int | None
    simulatedAt: str
    teamName: str | None
    members: list[str]
    rank: str | None
    participants: int | None
    solved: str | None
    standingsStatus: str  # resolved | unmatched | unavailable

    def to_dict(self) -> dict:
        return asdict(self)


def collect_sessions(submissions: list[dict], sessions: dict[tuple[int, int], SimulationSession]) -> None:
    """
    Fold a page of submissions into the session map.

    The first submission seen for a key supplies the team name and members.
    """
    for submission in submissions:
        if not is_gym_simulation(submission):
            continue
        start = session_start(submission)
        key = (submission["contestId"], start)
        if key in sessions:
            continue
        author = submission.get("author") or {}
        sessions[key] = SimulationSession(
            contest_id=submission["contestId"],
            start_time_seconds=start,
            team_name=author.get("teamName"),
            members=member_handles(submission),
        )


def find_session_row(rows: list[dict], session: SimulationSession) -> dict | None:
    """Locate a session's standings row using start time plus a shared member."""
    members = set(session.members)

    def shares_member(row: dict) -> bool:
        party = row.get("party") or {}
        return any(m.get("handle") in members for m in party.get("members") or [])

    for row in rows:
        party = row.get("party") or {}
        if party.get("startTimeSeconds") == session.start_time_seconds and shares_member(row):
            return row

    for row in rows:
        if shares_member(row):
            return row

    return None


def build_standings_match(standings: dict, row: dict, scan_cap: int = STANDINGS_SCAN_CAP) -> StandingsMatch | None:
    """
    Compute rank, solved count and participant count for a matched row.

    Returns None when the row carries no rank.
    """
    if row.get("rank") is None:
        return None
    rows = standings.get("rows") or []
    solved = sum(1 for result in row.get("problemResults") or [] if (result.get("points") or 0) > 0)

    total = None
    if len(rows) < scan_cap:
        total = rows[-1].get("rank", len(rows)) if rows else 0

    return StandingsMatch(
        rank=row["rank"],
        total_participants=total,
        solved=solved,
        total_problems=len(standings.get("problems") or []),
    )


class GymSimulationResolver:
    """
    Resolves a handle's most recent gym simulations.

    Example:
        resolver = GymSimulationResolver(get_codeforces_client())
        result = await resolver.resolve("automac", limit=5)
        for session in result["sessions"]:
            print(session["name"], session["rank"], session["solved"])
    """

    def __init__(self, client: "CodeforcesClient", scan_cap: int = STANDINGS_SCAN_CAP):
        self.client = client
        self.scan_cap = scan_cap

    async def discover(self, handle: str, limit: int) -> list[SimulationSession]:
        """Scan submissions until enough distinct sessions are found."""
        sessions: dict[tuple[int, int], SimulationSession] = {}
        wanted = limit * CANDIDATE_FACTOR

        async for page in iter_submission_pages(self.client, handle):
            collect_sessions(page, sessions)
            if len(sessions) >= wanted:
                break

        logger.debug(f"Found {len(sessions)} simulation sessions for {handle}")
        return list(sessions.values())

    async def match_standings(self, session: SimulationSession) -> tuple[str, StandingsMatch | None]:
        """
        Find a session's standings row.

        Returns a (status, match) pair; status is resolved, unmatched or
        unavailable. Never raises: a failed fetch or a malformed payload
        only degrades this session.
        """
        try:
            standings = await self.client.get_contest_standings(
                session.contest_id,
                from_=1,
                count=self.scan_cap,
                show_unofficial=True,
            )
            row = find_session_row(standings.get("rows") or [], session)
            match = build_standings_match(standings, row, self.scan_cap) if row is not None else None
        except Exception as e:
            logger.warning(
                f"Standings unavailable for gym {session.contest_id}",
                {"error": str(e), "start": session.start_time_seconds},
            )
            return "unavailable", None

        if match is None:
            logger.debug(f"No ranked standings row for session {session.key}")
            return "unmatched", None

        return "resolved", match

    async def resolve(self, handle: str, limit: int = 10) -> dict:
        """
        Resolve the `limit` most recent simulations of a handle.

        Returns:
            {"handle": handle, "sessions": [GymResult dicts, newest first]}
        """
        logger.info(f"Resolving gym simulations for {handle}", {"limit": limit})

        sessions = await self.discover(handle, limit)
        if not sessions:
            return {"handle": handle, "sessions": []}

        selected = sorted(sessions, key=lambda s: s.start_time_seconds, reverse=True)[:limit]

        catalog = await load_gym_catalog(self.client, {s.contest_id for s in selected})
        matches = await asyncio.gather(*(self.match_standings(s) for s in selected))

        results = [
            self._shape(handle, session, catalog.get(session.contest_id), status, match)
            for session, (status, match) in zip(selected, matches)
        ]
        return {"handle": handle, "sessions": [r.to_dict() for r in results]}

    def _shape(
        self,
        handle: str,
        session: SimulationSession,
        gym: GymContest | None,
        status: str,
        match: StandingsMatch | None,
    ) -> GymResult:
        gym = gym or GymContest.placeholder(session.contest_id)
        return GymResult(
            name=gym.name,
            link=f"{GYM_URL}/{session.contest_id}/standings",
            difficulty=gym.stars,
            durationHours=gym.duration_hours,
            simulatedAt=format_utc(session.start_time_seconds),
            teamName=session.team_name,
            members=list(session.members) or [handle],
            rank=str(match.rank) if match else None,
            participants=match.total_participants if match else None,
            solved=f"{match.solved}/{match.total_problems}" if match else None,
            standingsStatus=status,
        )
