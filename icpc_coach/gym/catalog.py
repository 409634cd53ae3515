"""
Gym Catalog
===========

Metadata for gym contests (name, length, difficulty) and the shared
formatting used when gyms are shown to the model.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from icpc_coach.codeforces import CodeforcesClient

GYM_URL = "https://codeforces.com/gym"


@dataclass
class GymContest:
    """
    One entry of the gym catalog.

    Attributes:
        id: Contest id (always above the gym boundary)
        name: Contest name
        duration_seconds: Contest length, if known
        difficulty: Difficulty from 1 to 5, if the gym declares one
    """
    id: int
    name: str
    duration_seconds: int | None = None
    difficulty: int | None = None

    @classmethod
    def from_api(cls, data: dict) -> "GymContest":
        return cls(
            id=data["id"],
            name=data.get("name") or f"Gym #{data['id']}",
            duration_seconds=data.get("durationSeconds"),
            difficulty=data.get("difficulty"),
        )

    @classmethod
    def placeholder(cls, contest_id: int) -> "GymContest":
        """Stand-in for a gym that is missing from the catalog."""
        return cls(id=contest_id, name=f"Gym #{contest_id}")

    @property
    def stars(self) -> str | None:
        return difficulty_stars(self.difficulty)

    @property
    def duration_hours(self) -> int | None:
        return duration_hours(self.duration_seconds)


def difficulty_stars(difficulty: int | None) -> str | None:
    """Render difficulty 1-5 as a five glyph scale, e.g. 3 -> ★★★☆☆."""
    if not difficulty:
        return None
    filled = max(1, min(5, int(difficulty)))
    return "★" * filled + "☆" * (5 - filled)


def duration_hours(seconds: int | None) -> int | None:
    """Whole hours, halves rounded up."""
    if not seconds:
        return None
    return math.floor(seconds / 3600 + 0.5)


def format_utc(timestamp: int) -> str:
    """Fixed-width UTC timestamp, e.g. 2026-02-22 22:06 UTC."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


async def load_gym_catalog(client: "CodeforcesClient", contest_ids: set[int]) -> dict[int, GymContest]:
    """
    Fetch the gym list once and keep only the requested ids.

    Ids the catalog does not know are simply absent from the result.
    """
    if not contest_ids:
        return {}

    gyms = await client.get_contest_list(gym=True)
    return {
        gym["id"]: GymContest.from_api(gym)
        for gym in gyms or []
        if gym.get("id") in contest_ids
    }
