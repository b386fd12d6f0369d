"""
Timeplan — Onboarding Generator.

Turns a versioned onboarding document into a fresh Driver → Milestone →
Action graph for one user, plus the status record marking them onboarded.

Every entity in a batch shares one timestamp and links only to parents
minted in the same batch, so the result can be written as a single
transaction. Whether the user was already onboarded, and the write itself,
are the caller's business (see timeplan.core.onboarding_service).

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from timeplan.core.errors import ValidationFailure
from timeplan.core.schemas import (
    validate_action,
    validate_driver,
    validate_milestone,
    validate_onboarding_config,
)
from timeplan.data.models import (
    Action,
    Driver,
    Milestone,
    OnboardingConfig,
    OnboardingResult,
    OnboardingStatus,
)
from timeplan.ports.clock import Clock, IdFactory, new_id, utc_now

logger = logging.getLogger(__name__)


def create_default_entities(
    user_id: str,
    config: OnboardingConfig | Mapping[str, Any],
    *,
    clock: Clock = utc_now,
    id_factory: IdFactory = new_id,
) -> OnboardingResult:
    """Build the starter hierarchy described by ``config`` for ``user_id``.

    Args:
        user_id: Owner stamped on every entity.
        config: Parsed onboarding document. Plain mappings are run through
            validate_onboarding_config first.
        clock: Source of the single onboarding timestamp.
        id_factory: Mints one identifier per entity.

    Returns:
        OnboardingResult with drivers, milestones and actions in depth-first
        order, and an OnboardingStatus completed at the same timestamp.

    Raises:
        ValidationFailure: the config is malformed, an entity fails its
            schema, or the id factory repeats an identifier.
    """
    now = clock()
    config = validate_onboarding_config(config, today=now)

    seen_ids: set[str] = set()

    def mint() -> str:
        new = id_factory()
        if new in seen_ids:
            raise ValidationFailure.single("onboarding batch", "id", f"Duplicate identifier minted: {new}")
        seen_ids.add(new)
        return new

    drivers: list[Driver] = []
    milestones: list[Milestone] = []
    actions: list[Action] = []

    for driver_cfg in config.drivers:
        driver = validate_driver({
            "id": mint(),
            "userId": user_id,
            "title": driver_cfg.title,
            "description": driver_cfg.description,
            "isActive": driver_cfg.is_active,
            "isArchived": False,
            "createdAt": now,
            "updatedAt": now,
        })
        drivers.append(driver)

        for milestone_cfg in driver_cfg.milestones:
            milestone = validate_milestone({
                "id": mint(),
                "userId": user_id,
                "driverId": driver.id,
                "title": milestone_cfg.title,
                "description": milestone_cfg.description,
                "targetDate": milestone_cfg.target_date,
                "createdAt": now,
                "updatedAt": now,
            })
            milestones.append(milestone)

            for action_cfg in milestone_cfg.actions:
                action = validate_action({
                    "id": mint(),
                    "userId": user_id,
                    "milestoneId": milestone.id,
                    "title": action_cfg.title,
                    "description": action_cfg.description,
                    "state": action_cfg.state,
                    "estimatedMinutes": action_cfg.estimated_minutes,
                    "trigger": action_cfg.trigger,
                    "recurrencePattern": action_cfg.recurrence_pattern,
                    "createdAt": now,
                    "updatedAt": now,
                }, today=now)
                actions.append(action)

    status = OnboardingStatus(
        user_id=user_id,
        is_onboarded=True,
        onboarding_version=config.version,
        completed_at=now,
        created_at=now,
        updated_at=now,
    )

    logger.info(
        "Onboarding %s for user %s: %d drivers, %d milestones, %d actions",
        config.version, user_id, len(drivers), len(milestones), len(actions),
    )
    return OnboardingResult(
        drivers=drivers,
        milestones=milestones,
        actions=actions,
        onboarding_status=status,
    )
