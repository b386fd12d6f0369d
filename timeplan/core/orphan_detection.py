"""
Timeplan — Orphan Detection.

Keeps the Driver → Milestone → Action hierarchy honest:
- Milestones must link to an existing Driver
- Actions must link to an existing Milestone
- Drivers without Milestones are reported, not forbidden

Scans over existing data return reports and never raise; the
validate_*_not_orphaned guards are the hard checks used at creation time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from timeplan.core.errors import ReferentialIntegrityError
from timeplan.data.models import Action, DeleteImpact, Driver, Milestone, OrphanReport

logger = logging.getLogger(__name__)


def detect_orphans(
    drivers: Iterable[Driver],
    milestones: Iterable[Milestone],
    actions: Iterable[Action],
) -> OrphanReport:
    """Report every entity whose hierarchy link is broken.

    The three checks are independent: an orphaned milestone still counts as
    a valid parent for its actions, and still gives its driver a child.
    """
    drivers, milestones, actions = list(drivers), list(milestones), list(actions)

    driver_ids = {d.id for d in drivers}
    milestone_ids = {m.id for m in milestones}
    referenced_drivers = {m.driver_id for m in milestones}

    report = OrphanReport(
        orphaned_actions=[a for a in actions if a.milestone_id not in milestone_ids],
        orphaned_milestones=[m for m in milestones if m.driver_id not in driver_ids],
        orphaned_drivers=[d for d in drivers if d.id not in referenced_drivers],
    )
    if report.has_orphans:
        logger.info(
            "Orphans found: %d actions, %d milestones, %d drivers",
            len(report.orphaned_actions),
            len(report.orphaned_milestones),
            len(report.orphaned_drivers),
        )
    return report


def would_action_be_orphaned(
    milestone_id: str,
    milestones: Iterable[Milestone],
    *,
    user_id: str | None = None,
) -> bool:
    """True when no milestone with ``milestone_id`` exists (for ``user_id``, if given)."""
    return not any(
        m.id == milestone_id and (user_id is None or m.user_id == user_id)
        for m in milestones
    )


def would_milestone_be_orphaned(
    driver_id: str,
    drivers: Iterable[Driver],
    *,
    user_id: str | None = None,
) -> bool:
    """True when no driver with ``driver_id`` exists (for ``user_id``, if given)."""
    return not any(
        d.id == driver_id and (user_id is None or d.user_id == user_id)
        for d in drivers
    )


def validate_action_not_orphaned(
    milestone_id: str,
    milestones: Iterable[Milestone],
    *,
    user_id: str | None = None,
) -> None:
    if would_action_be_orphaned(milestone_id, milestones, user_id=user_id):
        raise ReferentialIntegrityError("Actions must be linked to a milestone", milestone_id)


def validate_milestone_not_orphaned(
    driver_id: str,
    drivers: Iterable[Driver],
    *,
    user_id: str | None = None,
) -> None:
    if would_milestone_be_orphaned(driver_id, drivers, user_id=user_id):
        raise ReferentialIntegrityError("Milestones must be linked to a driver", driver_id)


def get_delete_driver_impact(
    driver_id: str,
    milestones: Iterable[Milestone],
    actions: Iterable[Action],
) -> DeleteImpact:
    """Count what deleting a driver would cascade into, without deleting anything."""
    affected_ids = {m.id for m in milestones if m.driver_id == driver_id}
    affected_actions = sum(1 for a in actions if a.milestone_id in affected_ids)
    return DeleteImpact(
        affected_milestones=len(affected_ids),
        affected_actions=affected_actions,
    )


def get_delete_milestone_impact(milestone_id: str, actions: Iterable[Action]) -> int:
    """Number of actions directly under ``milestone_id``."""
    return sum(1 for a in actions if a.milestone_id == milestone_id)
