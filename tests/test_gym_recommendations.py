import asyncio
from datetime import datetime, timezone

from icpc_coach.gym import GymRecommender
from icpc_coach.gym.recommendations import SECONDS_PER_MONTH
from tests.fixtures import FakeCodeforcesClient, make_submission

NOW = int(datetime(2026, 3, 1, tzinfo=timezone.utc).timestamp())
OLD = int(datetime(2024, 7, 1, tzinfo=timezone.utc).timestamp())

# Gym ids must be above 100000
GYM_A = 200001  # simulated by both competitors
GYM_B = 200002  # simulated by compB and already by my team
GYM_C = 200003  # simulated by compB only

GYM_LIST = [
    {"id": GYM_A, "name": "Gym Alpha", "durationSeconds": 18000, "difficulty": 3},
    {"id": GYM_B, "name": "Gym Beta", "durationSeconds": 14400, "difficulty": 2},
    {"id": GYM_C, "name": "Gym Gamma", "durationSeconds": 18000},
]


def sub(contest_id, participant_type="VIRTUAL", at=NOW - 3600):
    return make_submission(contest_id, participant_type, start=at, created=at)


STANDARD_SUBS = {
    "myuser": [sub(GYM_B)],
    "compA": [sub(GYM_A)],
    "compB": [sub(GYM_A), sub(GYM_B), sub(GYM_C)],
}


def _recommend(submissions, my_handles=("myuser",), competitors=("compA", "compB"), gyms=None, **kwargs):
    client = FakeCodeforcesClient(submissions=submissions, gyms=GYM_LIST if gyms is None else gyms)
    recommender = GymRecommender(client)
    kwargs.setdefault("now", NOW)
    return asyncio.run(recommender.recommend(list(my_handles), list(competitors), **kwargs))


def _find(recommendations, contest_id):
    return next((r for r in recommendations if str(contest_id) in r["link"]), None)


class TestShape:
    def test_echoes_inputs(self):
        result = _recommend(STANDARD_SUBS)
        assert result["myHandles"] == ["myuser"]
        assert result["competitorHandles"] == ["compA", "compB"]
        assert result["windowMonths"] == 6
        assert isinstance(result["recommendations"], list)

    def test_catalog_fields(self):
        alpha = _find(_recommend(STANDARD_SUBS)["recommendations"], GYM_A)
        assert alpha["name"] == "Gym Alpha"
        assert alpha["link"] == f"https://codeforces.com/gym/{GYM_A}"
        assert alpha["difficulty"] == "★★★☆☆"
        assert alpha["durationHours"] == 5
        assert alpha["totalCompetitorTeams"] == 2

    def test_placeholder_name_when_not_in_catalog(self):
        recommendations = _recommend(STANDARD_SUBS, gyms=[])["recommendations"]
        assert recommendations
        assert all(r["name"].startswith("Gym #") for r in recommendations)

    def test_missing_difficulty_is_none(self):
        gamma = _find(_recommend(STANDARD_SUBS)["recommendations"], GYM_C)
        assert gamma["difficulty"] is None


class TestFiltering:
    def test_excludes_gyms_the_team_already_simulated(self):
        assert _find(_recommend(STANDARD_SUBS)["recommendations"], GYM_B) is None

    def test_team_exclusion_ignores_the_window(self):
        submissions = {"myuser": [sub(GYM_A, at=OLD)], "compA": [sub(GYM_A)]}
        assert _recommend(submissions, competitors=["compA"])["recommendations"] == []

    def test_upsolving_does_not_count(self):
        submissions = {"compA": [sub(GYM_A, "PRACTICE")]}
        assert _recommend(submissions, competitors=["compA"])["recommendations"] == []

    def test_regular_contests_do_not_count(self):
        submissions = {"compA": [sub(99999)]}
        assert _recommend(submissions, competitors=["compA"])["recommendations"] == []

    def test_old_simulations_fall_outside_default_window(self):
        submissions = {"compA": [sub(GYM_A, at=OLD)]}
        assert _recommend(submissions, competitors=["compA"])["recommendations"] == []

    def test_custom_window(self):
        ten_months_ago = NOW - 10 * SECONDS_PER_MONTH
        submissions = {"compA": [sub(GYM_A, at=ten_months_ago)]}
        default = _recommend(submissions, competitors=["compA"], months=6)
        extended = _recommend(submissions, competitors=["compA"], months=12)
        assert default["recommendations"] == []
        assert len(extended["recommendations"]) == 1
        assert extended["windowMonths"] == 12


class TestCounting:
    def test_two_competitors(self):
        alpha = _find(_recommend(STANDARD_SUBS)["recommendations"], GYM_A)
        assert alpha["teamsSimulated"] == 2

    def test_one_competitor(self):
        gamma = _find(_recommend(STANDARD_SUBS)["recommendations"], GYM_C)
        assert gamma["teamsSimulated"] == 1

    def test_repeat_simulations_count_once_per_handle(self):
        submissions = {"compA": [sub(GYM_A), sub(GYM_A, at=NOW - 7200)]}
        alpha = _find(_recommend(submissions, competitors=["compA"])["recommendations"], GYM_A)
        assert alpha["teamsSimulated"] == 1

    def test_duplicate_competitor_handles_count_once(self):
        result = _recommend(STANDARD_SUBS, competitors=["compA", "compA", "compB"])
        assert result["competitorHandles"] == ["compA", "compB"]
        assert _find(result["recommendations"], GYM_A)["teamsSimulated"] == 2


class TestOrderingAndLimit:
    def test_most_popular_first(self):
        recommendations = _recommend(STANDARD_SUBS)["recommendations"]
        assert str(GYM_A) in recommendations[0]["link"]
        assert str(GYM_C) in recommendations[1]["link"]

    def test_limit(self):
        recommendations = _recommend(STANDARD_SUBS, limit=1)["recommendations"]
        assert len(recommendations) == 1
        assert str(GYM_A) in recommendations[0]["link"]


class TestEdgeCases:
    def test_no_competitor_simulations(self):
        assert _recommend({})["recommendations"] == []

    def test_everything_already_done(self):
        assert _recommend([sub(GYM_A)], competitors=["compA"])["recommendations"] == []

    def test_empty_team_means_no_exclusions(self):
        result = _recommend({"compA": [sub(GYM_A)]}, my_handles=[], competitors=["compA"])
        assert _find(result["recommendations"], GYM_A) is not None

    def test_catalog_not_fetched_without_candidates(self):
        client = FakeCodeforcesClient(submissions={}, gyms=GYM_LIST)
        asyncio.run(GymRecommender(client).recommend(["myuser"], ["compA"], now=NOW))
        assert client.calls_to("get_contest_list") == []
