"""
Timeplan — Schema Validator.

Shape contracts for every entity and input. Entity validation is
exhaustive: a ValidationFailure lists every violated field, built from
pydantic's accumulated errors. Onboarding configuration validation is
fail-fast instead; it guards a build-time document, so the first broken
rule is reported with a message naming the constraint.

Ownership (does user_id match the caller?) and parent existence are not
checked here; the first belongs to the request layer, the second to
timeplan.core.orphan_detection.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from timeplan.core.errors import FieldIssue, ValidationFailure
from timeplan.core.recurrence import as_date
from timeplan.data.models import (
    Action,
    ActionState,
    CreateActionInput,
    CreateDriverInput,
    CreateMilestoneInput,
    DailySnapshot,
    Driver,
    Milestone,
    OnboardingConfig,
    RecurrencePattern,
    UpdateDriverInput,
    UpdateUserSettingsInput,
)

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    DRIVER = "driver"
    MILESTONE = "milestone"
    ACTION = "action"
    RECURRENCE_PATTERN = "recurrence pattern"
    DAILY_SNAPSHOT = "daily snapshot"
    CREATE_DRIVER_INPUT = "create driver input"
    CREATE_MILESTONE_INPUT = "create milestone input"
    CREATE_ACTION_INPUT = "create action input"
    UPDATE_DRIVER_INPUT = "update driver input"
    UPDATE_USER_SETTINGS_INPUT = "update user settings input"


_MODELS: dict[EntityKind, type[BaseModel]] = {
    EntityKind.DRIVER: Driver,
    EntityKind.MILESTONE: Milestone,
    EntityKind.ACTION: Action,
    EntityKind.RECURRENCE_PATTERN: RecurrencePattern,
    EntityKind.DAILY_SNAPSHOT: DailySnapshot,
    EntityKind.CREATE_DRIVER_INPUT: CreateDriverInput,
    EntityKind.CREATE_MILESTONE_INPUT: CreateMilestoneInput,
    EntityKind.CREATE_ACTION_INPUT: CreateActionInput,
    EntityKind.UPDATE_DRIVER_INPUT: UpdateDriverInput,
    EntityKind.UPDATE_USER_SETTINGS_INPUT: UpdateUserSettingsInput,
}

# Friendlier wording for required fields that are missing or empty
_REQUIRED_MESSAGES = {
    "title": "Title is required",
    "driverId": "Milestones must be linked to a driver",
    "milestoneId": "Actions must be linked to a milestone",
}
_MISSING_TYPES = {"missing", "string_too_short"}

_VALID_STATES = [s.value for s in ActionState]


def _issues_from(exc: ValidationError) -> list[FieldIssue]:
    issues: list[FieldIssue] = []
    for err in exc.errors():
        loc = err["loc"]
        name = str(loc[-1]) if loc else ""
        message = err["msg"]
        if err["type"] in _MISSING_TYPES and name in _REQUIRED_MESSAGES:
            message = _REQUIRED_MESSAGES[name]
        issues.append(FieldIssue(field=".".join(str(part) for part in loc), message=message))
    return issues


def validate_entity(
    kind: EntityKind | str,
    data: Mapping[str, Any] | BaseModel,
    *,
    today: date | datetime | None = None,
) -> BaseModel:
    """Validate ``data`` as ``kind`` and return the typed model.

    When ``today`` is given, recurrence end dates before it are rejected too.
    Raises ValidationFailure listing every violated field.
    """
    kind = EntityKind(kind)
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)

    context = {"today": as_date(today)} if today is not None else None
    try:
        return _MODELS[kind].model_validate(data, context=context)
    except ValidationError as exc:
        failure = ValidationFailure(kind.value, _issues_from(exc))
        logger.debug("%s", failure)
        raise failure from exc


def validate_driver(data: Mapping[str, Any] | BaseModel) -> Driver:
    return validate_entity(EntityKind.DRIVER, data)


def validate_milestone(data: Mapping[str, Any] | BaseModel) -> Milestone:
    return validate_entity(EntityKind.MILESTONE, data)


def validate_action(
    data: Mapping[str, Any] | BaseModel,
    *,
    today: date | datetime | None = None,
) -> Action:
    return validate_entity(EntityKind.ACTION, data, today=today)


def validate_recurrence_shape(
    data: Mapping[str, Any] | BaseModel,
    *,
    today: date | datetime | None = None,
) -> RecurrencePattern:
    return validate_entity(EntityKind.RECURRENCE_PATTERN, data, today=today)


def validate_daily_snapshot(data: Mapping[str, Any] | BaseModel) -> DailySnapshot:
    return validate_entity(EntityKind.DAILY_SNAPSHOT, data)


def validate_create_driver_input(data: Mapping[str, Any] | BaseModel) -> CreateDriverInput:
    return validate_entity(EntityKind.CREATE_DRIVER_INPUT, data)


def validate_create_milestone_input(data: Mapping[str, Any] | BaseModel) -> CreateMilestoneInput:
    return validate_entity(EntityKind.CREATE_MILESTONE_INPUT, data)


def validate_create_action_input(
    data: Mapping[str, Any] | BaseModel,
    *,
    today: date | datetime | None = None,
) -> CreateActionInput:
    return validate_entity(EntityKind.CREATE_ACTION_INPUT, data, today=today)


def validate_update_driver_input(data: Mapping[str, Any] | BaseModel) -> UpdateDriverInput:
    return validate_entity(EntityKind.UPDATE_DRIVER_INPUT, data)


def validate_user_settings_update(data: Mapping[str, Any] | BaseModel) -> UpdateUserSettingsInput:
    return validate_entity(EntityKind.UPDATE_USER_SETTINGS_INPUT, data)


# ---------------------------------------------------------------------------
# Onboarding configuration (fail-fast)
# ---------------------------------------------------------------------------


def _config_error(field: str, message: str) -> ValidationFailure:
    return ValidationFailure.single("onboarding config", field, message)


def _get(item: Mapping[str, Any], camel: str, snake: str | None = None) -> Any:
    if camel in item:
        return item[camel]
    return item.get(snake) if snake else None


def _has_items(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _is_title(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def _check_action(action: Any, path: str) -> None:
    if not isinstance(action, Mapping):
        raise _config_error(path, "Each action must be an object")
    if not _is_title(action.get("title")):
        raise _config_error(f"{path}.title", "Each action must have a title")
    state = action.get("state")
    if not isinstance(state, str):
        raise _config_error(f"{path}.state", "Each action must have a state")
    if state not in _VALID_STATES:
        raise _config_error(f"{path}.state", f"Invalid action state: {state}")


def _check_milestone(milestone: Any, path: str) -> None:
    if not isinstance(milestone, Mapping):
        raise _config_error(path, "Each milestone must be an object")
    if not _is_title(milestone.get("title")):
        raise _config_error(f"{path}.title", "Each milestone must have a title")
    actions = milestone.get("actions")
    if not _has_items(actions):
        raise _config_error(f"{path}.actions", "Each milestone must have at least one action")
    for i, action in enumerate(actions):
        _check_action(action, f"{path}.actions[{i}]")


def _check_driver(driver: Any, path: str) -> None:
    if not isinstance(driver, Mapping):
        raise _config_error(path, "Each driver must be an object")
    if not _is_title(driver.get("title")):
        raise _config_error(f"{path}.title", "Each driver must have a title")
    if not isinstance(_get(driver, "isActive", "is_active"), bool):
        raise _config_error(f"{path}.isActive", "Each driver must have an isActive boolean")
    milestones = driver.get("milestones")
    if not _has_items(milestones):
        raise _config_error(f"{path}.milestones", "Each driver must have at least one milestone")
    for i, milestone in enumerate(milestones):
        _check_milestone(milestone, f"{path}.milestones[{i}]")


def validate_onboarding_config(
    config: Mapping[str, Any] | OnboardingConfig,
    *,
    today: date | datetime | None = None,
) -> OnboardingConfig:
    """Check an onboarding document depth-first and return it typed.

    Walks document → each driver → each milestone → each action and raises
    ValidationFailure at the first broken rule, before any entity exists.
    Optional fields (descriptions, durations, recurrence patterns) are then
    checked by parsing into OnboardingConfig, again reporting only the first
    problem.
    """
    if isinstance(config, OnboardingConfig):
        return config

    if not isinstance(config, Mapping):
        raise _config_error("", "Onboarding config must be an object")
    if not isinstance(config.get("version"), str):
        raise _config_error("version", "Onboarding config must have a version string")
    drivers = config.get("drivers")
    if not _has_items(drivers):
        raise _config_error("drivers", "Onboarding config must have at least one driver")
    for i, driver in enumerate(drivers):
        _check_driver(driver, f"drivers[{i}]")

    context = {"today": as_date(today)} if today is not None else None
    try:
        parsed = OnboardingConfig.model_validate(config, context=context)
    except ValidationError as exc:
        raise ValidationFailure("onboarding config", _issues_from(exc)[:1]) from exc

    logger.debug("Onboarding config %s: %d drivers", parsed.version, len(parsed.drivers))
    return parsed
