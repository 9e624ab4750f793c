"""Tests for prioritizing, merging and tracking recommendations."""

from plan_wolf.memory import RecommendationRecord, RunRecord
from plan_wolf.phases import Phase
from plan_wolf.recommendations import (
    build_recommendations,
    deduplicate,
    enrich,
    merge_stored,
    track_follow_through,
    trend_recommendations,
)
from plan_wolf.recommendations.engine import TREND_TEXT


def _runs(*scores):
    return [RunRecord(date=f"d{i}", score=s, confidence="LOW") for i, s in enumerate(scores)]


class TestEnrich:
    def test_medium_when_phase_healthy(self):
        rec = enrich("Dead Code", "1 dead export(s): x (a.js)", 9, 10, created_at="now")
        assert rec.priority == "MEDIUM"
        assert rec.source == "Dead Code"
        assert rec.text == "1 dead export(s): x (a.js)"
        assert rec.created_at == "now"
        assert not rec.followed

    def test_high_when_phase_below_half(self):
        assert enrich("Dead Code", "1 dead export(s): x", 4, 10).priority == "HIGH"

    def test_forced_high(self):
        assert enrich("Build", "Build FAIL: production build does not compile", 15, 15).is_high


class TestBuildRecommendations:
    def test_one_per_detail(self):
        phases = [
            Phase("Dead Code", 9, 10, details=["1 dead export(s): x (a.js)"]),
            Phase("Links", 10, 10),
            Phase("Dependencies", 8, 10, details=["Import cycle: a -> b -> a"]),
        ]
        recs = build_recommendations(phases, created_at="now")
        assert [r.source for r in recs] == ["Dead Code", "Dependencies"]


class TestDeduplicate:
    def test_groups_by_title(self):
        recs = [
            RecommendationRecord("Links", "Duplicate handler a defined in: x, y", "Same handler"),
            RecommendationRecord("Links", "Duplicate handler b defined in: x, z", "Same handler", priority="HIGH"),
            RecommendationRecord("Build", "Build FAIL", "Build broken"),
        ]
        merged = deduplicate(recs)
        assert [r.title for r in merged] == ["Same handler", "Build broken"]
        assert merged[0].occurrences == 2
        assert merged[0].priority == "HIGH"
        assert merged[0].text == "Duplicate handler a defined in: x, y"

    def test_does_not_mutate_input(self):
        original = RecommendationRecord("s", "t", "T")
        deduplicate([original, RecommendationRecord("s", "u", "T")])
        assert original.occurrences == 1


class TestTrackFollowThrough:
    def test_marks_missing_details_followed(self):
        stored = [RecommendationRecord("s", "gone", "T"), RecommendationRecord("s", "still here", "U")]
        newly, still_open = track_follow_through(stored, ["still here"], followed_at="later")
        assert (newly, still_open) == (1, 1)
        assert stored[0].followed and stored[0].followed_at == "later"
        assert not stored[1].followed

    def test_already_followed_not_counted_again(self):
        stored = [RecommendationRecord("s", "gone", "T", followed=True, followed_at="before")]
        assert track_follow_through(stored, []) == (0, 0)
        assert stored[0].followed_at == "before"

    def test_reported_title_stays_open(self):
        stored = [RecommendationRecord("s", "Dangling handler foo() referenced in: a.html", "T")]
        newly, still_open = track_follow_through(stored, ["other text"], open_titles=["T"])
        assert (newly, still_open) == (0, 1)
        assert not stored[0].followed


class TestMergeStored:
    def test_known_title_is_updated_in_place(self):
        stored = [RecommendationRecord("s", "old text", "T", occurrences=2)]
        fresh = merge_stored(stored, [RecommendationRecord("s", "new text", "T", priority="HIGH")])
        assert fresh == []
        assert len(stored) == 1
        assert stored[0].text == "new text"
        assert stored[0].occurrences == 3
        assert stored[0].is_high

    def test_followed_title_is_reopened(self):
        stored = [RecommendationRecord("s", "t", "T", followed=True, followed_at="before")]
        merge_stored(stored, [RecommendationRecord("s", "t", "T")])
        assert not stored[0].followed
        assert stored[0].followed_at is None

    def test_new_titles_are_appended(self):
        stored = [RecommendationRecord("s", "t", "T")]
        current = RecommendationRecord("s", "u", "U")
        fresh = merge_stored(stored, [current])
        assert [r.title for r in stored] == ["T", "U"]
        assert fresh == [current]
        assert fresh[0] is not current


class TestTrendRecommendations:
    def test_declining_scores(self):
        (rec,) = trend_recommendations(_runs(80, 75, 75))
        assert rec.text == TREND_TEXT
        assert rec.is_high

    def test_stable_scores_do_not_fire(self):
        assert trend_recommendations(_runs(70, 70, 70)) == []

    def test_recovering_scores_do_not_fire(self):
        assert trend_recommendations(_runs(80, 70, 75)) == []

    def test_needs_three_runs(self):
        assert trend_recommendations(_runs(90, 80)) == []

    def test_only_last_three_count(self):
        assert trend_recommendations(_runs(50, 90, 85, 80)) != []
