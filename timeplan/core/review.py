"""
Timeplan — Weekly review and daily snapshot decisions.

What a "review is due" answer and a daily snapshot look like, given the
inputs. When these run (the weekly prompt, the end-of-day job) is decided
by whoever schedules them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from timeplan.core.recurrence import DateLike, as_date, weekday_number
from timeplan.data.models import Action, DailySnapshot, ReviewDay
from timeplan.ports.clock import Clock, IdFactory, new_id, utc_now

logger = logging.getLogger(__name__)


def most_recent_review_day(review_day: ReviewDay | str, today: DateLike) -> date:
    """The latest date on or before ``today`` that falls on ``review_day``."""
    day = as_date(today)
    days_since = (weekday_number(day) - ReviewDay(review_day).weekday) % 7
    return day - timedelta(days=days_since)


def is_review_due(
    review_day: ReviewDay | str,
    last_completed_at: datetime | None,
    *,
    clock: Clock = utc_now,
) -> bool:
    """Whether the weekly review should be prompted now.

    A user who never reviewed is due from the review day through Saturday.
    Otherwise the review is due when the last completion happened before
    the start of the most recent review day.
    """
    now = clock()
    target = ReviewDay(review_day)

    if last_completed_at is None:
        return weekday_number(now.date()) >= target.weekday

    cutoff = datetime.combine(most_recent_review_day(target, now), time.min, tzinfo=now.tzinfo)
    # naive timestamps are taken to be in the clock's zone
    if last_completed_at.tzinfo is None and cutoff.tzinfo is not None:
        last_completed_at = last_completed_at.replace(tzinfo=cutoff.tzinfo)
    elif last_completed_at.tzinfo is not None and cutoff.tzinfo is None:
        cutoff = cutoff.replace(tzinfo=last_completed_at.tzinfo)
    return last_completed_at < cutoff


def build_daily_snapshot(
    user_id: str,
    day: DateLike,
    actions: Iterable[Action],
    *,
    clock: Clock = utc_now,
    id_factory: IdFactory = new_id,
) -> DailySnapshot:
    """Freeze ``actions`` as they stood on ``day``.

    Only actions owned by ``user_id`` are captured. Actions are frozen
    models, so later transitions produce new objects and leave the snapshot
    untouched.
    """
    owned = [a for a in actions if a.user_id == user_id]
    snapshot = DailySnapshot(
        id=id_factory(),
        user_id=user_id,
        day=as_date(day),
        actions=owned,
        created_at=clock(),
    )
    logger.debug("Snapshot %s for %s on %s: %d actions", snapshot.id, user_id, snapshot.day, len(owned))
    return snapshot
