"""
Gym Analysis
============

Server-side cross-referencing of submissions, the gym catalog and
standings, so the model gets a handful of resolved rows instead of
thousands of raw submissions.

This module provides:
- GymSimulationResolver: a handle's most recent full simulations
- GymRecommender: unsimulated gyms ranked by competitor popularity
"""

from icpc_coach.gym.catalog import GymContest, load_gym_catalog
from icpc_coach.gym.recommendations import GymRecommender
from icpc_coach.gym.simulations import (
    GymResult,
    GymSimulationResolver,
    SimulationSession,
    StandingsMatch,
)

__all__ = [
    "GymContest",
    "GymRecommender",
    "GymResult",
    "GymSimulationResolver",
    "SimulationSession",
    "StandingsMatch",
    "load_gym_catalog",
]
