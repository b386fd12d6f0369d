"""
Timeplan — Recurrence Engine.

Date arithmetic for habitual actions. Two questions are answered separately:
"when is this due next?" (planning ahead, UI previews) and "should an
instance be materialized on this day?" (the daily job). Both share the same
frequency semantics.

Weekday numbers run 0 = Sunday … 6 = Saturday. Monthly dates that do not
exist in a shorter month are clamped to its last day, so a pattern on the
31st fires on Feb 28/29, Apr 30, and so on.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any, Union

from pydantic import ValidationError

from timeplan.core.action_state import transition_action
from timeplan.core.errors import RecurrencePatternError
from timeplan.data.models import (
    Action,
    ActionState,
    RecurrenceFrequency,
    RecurrencePattern,
    RolloverResult,
)
from timeplan.ports.clock import Clock, IdFactory, new_id, utc_now

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


def as_date(value: DateLike) -> date:
    """Reduce a date, datetime or ISO string to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value).date()
    raise TypeError(f"Expected a date, datetime or ISO string, got {type(value).__name__}")


def weekday_number(day: date) -> int:
    """Sunday-first weekday number (0 = Sunday)."""
    return day.isoweekday() % 7


def _days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _following_month(day: date) -> tuple[int, int]:
    if day.month == 12:
        return day.year + 1, 1
    return day.year, day.month + 1


def _clamped(year: int, month: int, day_of_month: int) -> date:
    return date(year, month, min(day_of_month, _days_in_month(year, month)))


def _coerce(pattern: RecurrencePattern | Mapping[str, Any]) -> RecurrencePattern:
    if isinstance(pattern, RecurrencePattern):
        return pattern
    return validate_recurrence_pattern(pattern)


# ---------------------------------------------------------------------------
# Next due date
# ---------------------------------------------------------------------------


def _next_weekly(start: date, weekdays: list[int] | None) -> date | None:
    if weekdays is None:
        return start + timedelta(days=7)

    current = weekday_number(start)
    for offset in range(1, 8):
        if (current + offset) % 7 in weekdays:
            return start + timedelta(days=offset)
    logger.warning("Weekly pattern has no usable weekday in %r", weekdays)
    return None


def _next_monthly(start: date, day_of_month: int | None) -> date:
    if day_of_month is None:
        year, month = _following_month(start)
        return _clamped(year, month, start.day)

    this_month = _clamped(start.year, start.month, day_of_month)
    if start < this_month:
        return this_month
    year, month = _following_month(start)
    return _clamped(year, month, day_of_month)


def get_next_occurrence(
    pattern: RecurrencePattern | Mapping[str, Any],
    from_date: DateLike,
) -> date | None:
    """Return the first date after ``from_date`` on which the pattern fires.

    Returns None when the recurrence has ended: either ``from_date`` is on or
    after the end date, or the computed date would fall after it.
    """
    pattern = _coerce(pattern)
    start = as_date(from_date)
    end = pattern.end_date

    if end is not None and start >= end:
        return None

    if pattern.frequency is RecurrenceFrequency.DAILY:
        candidate = start + timedelta(days=1)
    elif pattern.frequency is RecurrenceFrequency.WEEKLY:
        candidate = _next_weekly(start, pattern.weekdays)
    else:
        candidate = _next_monthly(start, pattern.day_of_month)

    if candidate is None or (end is not None and candidate > end):
        return None

    logger.debug("Next %s occurrence after %s: %s", pattern.frequency.value, start, candidate)
    return candidate


# ---------------------------------------------------------------------------
# Instance materialization
# ---------------------------------------------------------------------------


def should_create_instance(
    pattern: RecurrencePattern | Mapping[str, Any],
    check_date: DateLike,
    last_occurrence: DateLike,
) -> bool:
    """Decide whether a new instance of a recurring action is due on ``check_date``.

    Never true on the same calendar day as ``last_occurrence``, nor after the
    pattern's end date.
    """
    pattern = _coerce(pattern)
    check = as_date(check_date)
    last = as_date(last_occurrence)

    if pattern.end_date is not None and check > pattern.end_date:
        return False
    if check == last:
        return False

    if pattern.frequency is RecurrenceFrequency.DAILY:
        return True

    if pattern.frequency is RecurrenceFrequency.WEEKLY:
        weekdays = pattern.weekdays
        if weekdays is not None:
            return weekday_number(check) in weekdays
        return check.weekday() == last.weekday()

    target = pattern.day_of_month
    if target is None:
        target = last.day
    return check.day == min(target, _days_in_month(check.year, check.month))


def materialize_next_instance(
    action: Action,
    *,
    check_date: DateLike,
    last_occurrence: DateLike,
    clock: Clock = utc_now,
    id_factory: IdFactory = new_id,
) -> RolloverResult | None:
    """Spawn the next instance of a completed recurring action, if one is due.

    The original moves to ``rolled-over`` and a fresh ``planned`` copy with a
    new id is returned alongside it. Returns None for non-recurring actions,
    actions that are not completed, or days on which nothing is due.
    """
    if action.recurrence_pattern is None or action.state is not ActionState.COMPLETED:
        return None
    if not should_create_instance(action.recurrence_pattern, check_date, last_occurrence):
        return None

    now = clock()
    rolled_over = transition_action(action, ActionState.ROLLED_OVER, clock=lambda: now)
    new_instance = action.model_copy(update={
        "id": id_factory(),
        "state": ActionState.PLANNED,
        "created_at": now,
        "updated_at": now,
    })
    logger.info("Rolled over action %s into %s", action.id, new_instance.id)
    return RolloverResult(rolled_over=rolled_over, new_instance=new_instance)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_recurrence_pattern(
    pattern: RecurrencePattern | Mapping[str, Any],
    *,
    clock: Clock | None = None,
) -> RecurrencePattern:
    """Check a pattern's invariants and return it as a typed value.

    Raises RecurrencePatternError naming the first broken constraint: an
    empty weekly day set, a monthly day outside 1-31, or (when a clock is
    given) an end date before today.
    """
    if isinstance(pattern, RecurrencePattern):
        pattern = pattern.model_dump()

    context = {"today": as_date(clock())} if clock is not None else None
    try:
        return RecurrencePattern.model_validate(pattern, context=context)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise RecurrencePatternError(first["msg"], constraint=first["type"]) from exc
