"""Tests for timeplan.core.review — review-due and daily snapshot decisions."""

from datetime import date, datetime, timezone

from timeplan.core.action_state import transition_action
from timeplan.core.review import build_daily_snapshot, is_review_due, most_recent_review_day
from timeplan.data.models import ActionState, ReviewDay

THURSDAY_NOON = datetime(2026, 3, 12, 12, 0, tzinfo=timezone.utc)


def _at(moment):
    return lambda: moment


class TestMostRecentReviewDay:
    def test_same_day(self):
        assert most_recent_review_day("thursday", date(2026, 3, 12)) == date(2026, 3, 12)

    def test_earlier_in_week(self):
        assert most_recent_review_day(ReviewDay.SUNDAY, date(2026, 3, 12)) == date(2026, 3, 8)

    def test_later_weekday_goes_back_a_week(self):
        assert most_recent_review_day("friday", date(2026, 3, 12)) == date(2026, 3, 6)


class TestIsReviewDue:
    def test_never_completed_on_or_after_review_day(self):
        assert is_review_due("tuesday", None, clock=_at(THURSDAY_NOON)) is True
        assert is_review_due("thursday", None, clock=_at(THURSDAY_NOON)) is True

    def test_never_completed_before_review_day(self):
        assert is_review_due("friday", None, clock=_at(THURSDAY_NOON)) is False

    def test_completed_since_review_day(self):
        last = datetime(2026, 3, 9, 18, 0, tzinfo=timezone.utc)   # Monday
        assert is_review_due("sunday", last, clock=_at(THURSDAY_NOON)) is False

    def test_completed_before_review_day(self):
        last = datetime(2026, 3, 7, 18, 0, tzinfo=timezone.utc)   # previous Saturday
        assert is_review_due("sunday", last, clock=_at(THURSDAY_NOON)) is True

    def test_completed_earlier_on_review_day_counts(self):
        last = datetime(2026, 3, 12, 0, 30, tzinfo=timezone.utc)
        assert is_review_due("thursday", last, clock=_at(THURSDAY_NOON)) is False

    def test_naive_completion_time(self):
        last = datetime(2026, 3, 1, 10, 0)
        assert is_review_due("sunday", last, clock=_at(THURSDAY_NOON)) is True


class TestBuildDailySnapshot:
    def test_captures_owned_actions(self, make_action, clock, id_factory, fixed_now):
        mine = make_action(id="a-1")
        theirs = make_action(id="a-2", user_id="other-user")

        snapshot = build_daily_snapshot(
            "test-user-id", "2026-03-12", [mine, theirs], clock=clock, id_factory=id_factory,
        )

        assert snapshot.id == "id-1"
        assert snapshot.day == date(2026, 3, 12)
        assert [a.id for a in snapshot.actions] == ["a-1"]
        assert snapshot.created_at == fixed_now
        assert snapshot.model_dump(by_alias=True, mode="json")["date"] == "2026-03-12"

    def test_later_transitions_do_not_change_snapshot(self, make_action, clock, id_factory):
        action = make_action(state=ActionState.PLANNED)
        snapshot = build_daily_snapshot(
            "test-user-id", date(2026, 3, 12), [action], clock=clock, id_factory=id_factory,
        )

        transition_action(action, ActionState.IN_PROGRESS, clock=clock)

        assert snapshot.actions[0].state is ActionState.PLANNED
