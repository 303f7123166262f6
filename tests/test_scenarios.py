import datetime
import random

import pytest

from services.scenarios import SCENARIOS, basic_scenario, generate_scenario, get_daily_challenge, get_scenario_by_id


class TestCatalogue:

    def test_ids_are_unique(self):
        ids = [s.id for s in SCENARIOS]
        assert len(ids) == len(set(ids))

    def test_every_goal_and_context_is_covered(self):
        assert {s.goal for s in SCENARIOS} == {"clarity", "confidence", "persuasion", "fillers", "quick_thinking"}
        assert {s.context for s in SCENARIOS} == {"work", "social", "everyday"}

    def test_lookup_by_id(self):
        scenario = get_scenario_by_id("work-clarity-01")
        assert scenario.goal == "clarity"
        assert scenario.context == "work"

    def test_unknown_id(self):
        assert get_scenario_by_id("does-not-exist") is None

    def test_basic_scenario_keeps_requested_id(self):
        scenario = basic_scenario("custom-42")
        assert scenario.id == "custom-42"
        assert scenario.prompt_text == "General communication practice"


class TestGenerateScenario:

    @pytest.mark.parametrize("goal", ["clarity", "confidence", "persuasion", "fillers", "quick_thinking"])
    def test_filters_by_goal(self, goal):
        assert generate_scenario(goal=goal, rng=random.Random(0)).goal == goal

    def test_filters_combine(self):
        scenario = generate_scenario(goal="fillers", context="social", rng=random.Random(1))
        assert scenario.id == "social-fillers-01"

    def test_no_match_falls_back_to_catalogue(self):
        scenario = generate_scenario(goal="fillers", context="work", difficulty="hard", rng=random.Random(0))
        assert scenario in SCENARIOS

    def test_no_filters(self):
        assert generate_scenario() in SCENARIOS


class TestDailyChallenge:

    def test_same_day_same_scenario(self):
        day = datetime.date(2026, 3, 14)
        assert get_daily_challenge(today=day) == get_daily_challenge(today=day)

    def test_indexed_by_day_of_year(self):
        assert get_daily_challenge(today=datetime.date(2026, 1, 1)) == SCENARIOS[1]
        assert get_daily_challenge(today=datetime.date(2026, 1, 2)) == SCENARIOS[2]

    def test_goal_filter(self):
        scenario = get_daily_challenge(goal="fillers", today=datetime.date(2026, 1, 1))
        assert scenario.id == "social-fillers-01"

    def test_rotates_through_goal_candidates(self):
        days = [datetime.date(2026, 1, 1) + datetime.timedelta(days=n) for n in range(3)]
        ids = {get_daily_challenge(goal="fillers", today=day).id for day in days}
        assert ids == {"work-fillers-01", "social-fillers-01", "everyday-fillers-01"}
