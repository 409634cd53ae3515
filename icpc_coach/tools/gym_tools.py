"""
Gym Tools
=========

Tools backed by the server-side gym analysis rather than a single API call:
- get_gym_simulations: a handle's recent full gym simulations, resolved
- get_gym_recommendations: unsimulated gyms popular with competitors
"""

from pydantic import BaseModel, ConfigDict, Field

from icpc_coach.codeforces import get_codeforces_client
from icpc_coach.gym import GymRecommender, GymSimulationResolver
from icpc_coach.tools import Tool, tool_registry


class GymSimulationsArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    handle: str = Field(min_length=1, description="Codeforces user handle")
    limit: int = Field(10, ge=1, le=50, description="Number of gym simulations to return (default 10)")


async def _gym_simulations(args: GymSimulationsArgs) -> dict:
    resolver = GymSimulationResolver(get_codeforces_client())
    return await resolver.resolve(args.handle, args.limit)


class GymRecommendationsArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    myHandles: list[str] = Field(default_factory=list, description="Handles of the team asking for recommendations")
    competitorHandles: list[str] = Field(min_length=1, description="Handles of competitor teams (one handle per team)")
    limit: int = Field(5, ge=1, le=50, description="Number of gyms to recommend (default 5)")
    months: int = Field(6, ge=1, le=60, description="Only count competitor simulations from the last N months (default 6)")


async def _gym_recommendations(args: GymRecommendationsArgs) -> dict:
    recommender = GymRecommender(get_codeforces_client())
    return await recommender.recommend(args.myHandles, args.competitorHandles, args.limit, args.months)


gym_simulations_tool = Tool(
    name="get_gym_simulations",
    description=(
        "Get gym contests that a user has done as a full virtual simulation (participantType=VIRTUAL). "
        "Excludes upsolving/practice. Each result is a unique simulation session with start time, "
        "team, contest name, rank and solved count."
    ),
    args_model=GymSimulationsArgs,
    execute=_gym_simulations,
)

gym_recommendations_tool = Tool(
    name="get_gym_recommendations",
    description=(
        "Recommend gyms for a team to simulate next: gyms that competitor teams simulated recently "
        "and the team has not, ranked by how many competitor teams did them."
    ),
    args_model=GymRecommendationsArgs,
    execute=_gym_recommendations,
)


def register_gym_tools():
    """Register the gym tools with the registry."""
    tool_registry.register(gym_simulations_tool)
    tool_registry.register(gym_recommendations_tool)


# Auto-register on import
register_gym_tools()
