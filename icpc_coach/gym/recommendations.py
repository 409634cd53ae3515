"""
Gym Recommendations
===================

Suggests gyms a team has not simulated yet, ranked by how many competitor
teams simulated them recently.

Each competitor handle stands for one team, so a handle that simulated the
same gym twice still counts once. Gyms any of the requesting team's
handles ever simulated are excluded, however old the simulation is.
"""

import time
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from icpc_coach.gym.catalog import GYM_URL, GymContest, load_gym_catalog
from icpc_coach.gym.discovery import is_gym_simulation, iter_submission_pages, session_start
from icpc_coach.utils.logger import Logger

if TYPE_CHECKING:
    from icpc_coach.codeforces import CodeforcesClient

logger = Logger("GymRecommendations")

SECONDS_PER_MONTH = 30 * 24 * 3600


@dataclass
class GymRecommendation:
    name: str
    link: str
    difficulty: str | None
    durationHours: int | None
    teamsSimulated: int
    totalCompetitorTeams: int


class GymRecommender:
    """
    Ranks unsolved gyms by competitor popularity.

    Example:
        recommender = GymRecommender(get_codeforces_client())
        result = await recommender.recommend(["me"], ["rivalA", "rivalB"], limit=3)
    """

    def __init__(self, client: "CodeforcesClient"):
        self.client = client

    async def simulated_gyms(self, handle: str, since: int | None = None) -> set[int]:
        """
        Gym ids a handle simulated, optionally only those started after `since`.

        Submissions come newest first, so scanning stops at the first page
        that reaches back past `since`.
        """
        gyms: set[int] = set()
        async for page in iter_submission_pages(self.client, handle):
            for submission in page:
                if not is_gym_simulation(submission):
                    continue
                if since is not None and session_start(submission) < since:
                    continue
                gyms.add(submission["contestId"])

            oldest = min((s.get("creationTimeSeconds") or 0) for s in page)
            if since is not None and oldest < since:
                break
        return gyms

    async def recommend(
        self,
        my_handles: list[str],
        competitor_handles: list[str],
        limit: int = 5,
        months: int = 6,
        now: float | None = None,
    ) -> dict:
        """
        Rank gyms simulated by competitors but not yet by the team.

        Returns:
            {"myHandles", "competitorHandles", "windowMonths", "recommendations"}
        """
        since = int((now if now is not None else time.time()) - months * SECONDS_PER_MONTH)
        competitors = list(dict.fromkeys(competitor_handles))

        done: set[int] = set()
        for handle in dict.fromkeys(my_handles):
            done |= await self.simulated_gyms(handle)

        counts: dict[int, int] = {}
        for handle in competitors:
            for contest_id in await self.simulated_gyms(handle, since=since):
                if contest_id not in done:
                    counts[contest_id] = counts.get(contest_id, 0) + 1

        ranked = sorted(counts.items(), key=lambda item: (-item[1], -item[0]))[:limit]
        logger.info(
            f"Ranked {len(counts)} candidate gyms",
            {"excluded": len(done), "returned": len(ranked)},
        )

        catalog = await load_gym_catalog(self.client, {contest_id for contest_id, _ in ranked})

        recommendations = []
        for contest_id, teams in ranked:
            gym = catalog.get(contest_id) or GymContest.placeholder(contest_id)
            recommendations.append(asdict(GymRecommendation(
                name=gym.name,
                link=f"{GYM_URL}/{contest_id}",
                difficulty=gym.stars,
                durationHours=gym.duration_hours,
                teamsSimulated=teams,
                totalCompetitorTeams=len(competitors),
            )))

        return {
            "myHandles": list(my_handles),
            "competitorHandles": competitors,
            "windowMonths": months,
            "recommendations": recommendations,
        }
