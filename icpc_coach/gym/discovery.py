"""
Simulation Discovery
====================

Pages through a user's submissions and picks out the ones made during a
full virtual simulation of a gym contest.

A submission counts only if:
- its contest id is above GYM_CONTEST_ID_BOUNDARY (regular rounds are below)
- the author's participantType is VIRTUAL (PRACTICE means upsolving, which
  carries a different start time and solved count and must not be mixed in)
"""

from typing import TYPE_CHECKING, AsyncIterator

if TYPE_CHECKING:
    from icpc_coach.codeforces import CodeforcesClient

GYM_CONTEST_ID_BOUNDARY = 100000
SIMULATION_PARTICIPANT_TYPE = "VIRTUAL"

PAGE_SIZE = 100
MAX_PAGES = 20  # at most 2000 submissions per handle


def is_gym_simulation(submission: dict) -> bool:
    """Check whether a submission was made during a full gym simulation."""
    contest_id = submission.get("contestId") or 0
    author = submission.get("author") or {}
    return (
        contest_id > GYM_CONTEST_ID_BOUNDARY
        and author.get("participantType") == SIMULATION_PARTICIPANT_TYPE
    )


def session_start(submission: dict) -> int:
    """Start of the party's session, falling back to the submission time."""
    author = submission.get("author") or {}
    return author.get("startTimeSeconds") or submission.get("creationTimeSeconds") or 0


def member_handles(submission: dict) -> tuple[str, ...]:
    """Sorted handles of the submitting party."""
    author = submission.get("author") or {}
    return tuple(sorted(m["handle"] for m in author.get("members") or [] if m.get("handle")))


async def iter_submission_pages(
    client: "CodeforcesClient",
    handle: str,
    page_size: int = PAGE_SIZE,
    max_pages: int = MAX_PAGES,
) -> AsyncIterator[list[dict]]:
    """
    Yield a handle's submissions page by page, newest first.

    Stops after a short page or after max_pages. Callers can stop earlier
    by breaking out of the loop, which saves the remaining API calls.
    """
    offset = 1
    for _ in range(max_pages):
        page = await client.get_user_submissions(handle, count=page_size, from_=offset)
        if not page:
            return
        yield page
        if len(page) < page_size:
            return
        offset += page_size
