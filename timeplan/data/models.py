"""
Timeplan — Data Models.

The Driver → Milestone → Action hierarchy plus the records derived from it.
Attributes are snake_case; every model also accepts and emits the camelCase
document keys (``isActive``, ``milestoneId``) used by stored items and the
onboarding configuration.

Models are frozen value objects: rules in timeplan.core return updated
copies instead of mutating their inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

Identifier = Annotated[str, Field(min_length=1)]
Title = Annotated[str, Field(min_length=1, max_length=200)]
Description = Annotated[str, Field(max_length=1000)]
Trigger = Annotated[str, Field(max_length=500)]
Weekday = Annotated[int, Field(ge=0, le=6)]   # 0 = Sunday … 6 = Saturday
EstimatedMinutes = Annotated[int, Field(gt=0, le=1440)]


class ActionState(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DEFERRED = "deferred"
    ROLLED_OVER = "rolled-over"


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReviewDay(str, Enum):
    """Weekly review day, in the same Sunday-first order as Weekday numbers."""

    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @property
    def weekday(self) -> int:
        return list(ReviewDay).index(self)


class DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class RecurrencePattern(DomainModel):
    """How a habitual Action repeats.

    ``interval`` depends on the frequency: a list of weekday numbers for
    weekly patterns, a day of month (1-31) for monthly ones, unused for daily.
    ``end_date`` is inclusive.

    The "end date is not in the past" rule needs a reference day, so it is
    only checked when validation runs with ``context={"today": date}``.
    """

    frequency: RecurrenceFrequency
    interval: Union[int, list[Weekday], None] = None
    end_date: date | None = None

    @model_validator(mode="after")
    def _check_invariants(self, info: ValidationInfo) -> RecurrencePattern:
        if self.frequency is RecurrenceFrequency.WEEKLY and self.interval is not None:
            if not isinstance(self.interval, list):
                raise PydanticCustomError(
                    "weekly_interval",
                    "Weekly recurrence interval must be a list of days of week",
                )
            if not self.interval:
                raise PydanticCustomError(
                    "weekly_days_empty",
                    "Weekly recurrence must specify at least one day of week",
                )

        if self.frequency is RecurrenceFrequency.MONTHLY and self.interval is not None:
            if isinstance(self.interval, list):
                raise PydanticCustomError(
                    "monthly_interval",
                    "Monthly recurrence interval must be a single day of month",
                )
            if not 1 <= self.interval <= 31:
                raise PydanticCustomError(
                    "monthly_day_range",
                    "Monthly recurrence day must be between 1 and 31",
                )

        today = (info.context or {}).get("today")
        if self.end_date is not None and today is not None and self.end_date < today:
            raise PydanticCustomError(
                "end_date_past",
                "Recurrence end date cannot be in the past",
            )
        return self

    @property
    def weekdays(self) -> list[int] | None:
        if self.frequency is RecurrenceFrequency.WEEKLY and isinstance(self.interval, list):
            return self.interval
        return None

    @property
    def day_of_month(self) -> int | None:
        if self.frequency is RecurrenceFrequency.MONTHLY and isinstance(self.interval, int):
            return self.interval
        return None


class Driver(DomainModel):
    """Strategic intent — the "why"."""

    id: Identifier
    user_id: Identifier
    title: Title
    description: Description | None = None
    is_active: bool = True
    is_archived: bool = False
    created_at: datetime
    updated_at: datetime


class Milestone(DomainModel):
    """Temporal target belonging to exactly one Driver — the "when"."""

    id: Identifier
    user_id: Identifier
    driver_id: Identifier
    title: Title
    description: Description | None = None
    target_date: date | None = None
    created_at: datetime
    updated_at: datetime


class Action(DomainModel):
    """Executable work belonging to exactly one Milestone — the "what"."""

    id: Identifier
    user_id: Identifier
    milestone_id: Identifier
    title: Title
    description: Description | None = None
    state: ActionState = ActionState.PLANNED
    estimated_minutes: EstimatedMinutes | None = None
    trigger: Trigger | None = None              # concrete starting cue
    recurrence_pattern: RecurrencePattern | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_recurring(self) -> bool:
        return self.recurrence_pattern is not None


class OnboardingStatus(DomainModel):
    user_id: Identifier
    is_onboarded: bool = False
    onboarding_version: str
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class DailySnapshot(DomainModel):
    """Immutable copy of a user's actions as they stood on one day."""

    id: Identifier
    user_id: Identifier
    day: date = Field(alias="date")
    actions: list[Action] = Field(default_factory=list)
    created_at: datetime


class UserSettings(DomainModel):
    user_id: Identifier
    review_day: ReviewDay = ReviewDay.SUNDAY
    created_at: datetime
    updated_at: datetime


class ReviewStatus(DomainModel):
    user_id: Identifier
    last_completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Caller-supplied inputs
# ---------------------------------------------------------------------------


class CreateDriverInput(DomainModel):
    user_id: Identifier
    title: Title
    description: Description | None = None
    is_active: bool = True


class CreateMilestoneInput(DomainModel):
    user_id: Identifier
    driver_id: Identifier
    title: Title
    description: Description | None = None
    target_date: date | None = None


class CreateActionInput(DomainModel):
    user_id: Identifier
    milestone_id: Identifier
    title: Title
    description: Description | None = None
    state: ActionState = ActionState.PLANNED
    estimated_minutes: EstimatedMinutes | None = None
    trigger: Trigger | None = None
    recurrence_pattern: RecurrencePattern | None = None


class UpdateDriverInput(DomainModel):
    title: Title | None = None
    description: Description | None = None
    is_active: bool | None = None
    is_archived: bool | None = None


class UpdateUserSettingsInput(DomainModel):
    review_day: ReviewDay | None = None


# ---------------------------------------------------------------------------
# Onboarding configuration document
# ---------------------------------------------------------------------------


class ActionTemplate(DomainModel):
    title: Title
    description: Description | None = None
    state: ActionState
    estimated_minutes: EstimatedMinutes | None = None
    trigger: Trigger | None = None
    recurrence_pattern: RecurrencePattern | None = None


class MilestoneTemplate(DomainModel):
    title: Title
    description: Description | None = None
    target_date: date | None = None
    actions: list[ActionTemplate] = Field(min_length=1)


class DriverTemplate(DomainModel):
    title: Title
    description: Description | None = None
    is_active: bool
    milestones: list[MilestoneTemplate] = Field(min_length=1)


class OnboardingConfig(DomainModel):
    """Versioned document seeding a new account with an example hierarchy."""

    version: str
    drivers: list[DriverTemplate] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Results returned by the rule engine
# ---------------------------------------------------------------------------


@dataclass
class OrphanReport:
    """Entities whose hierarchy links are broken."""

    orphaned_actions: list[Action] = field(default_factory=list)
    orphaned_milestones: list[Milestone] = field(default_factory=list)
    orphaned_drivers: list[Driver] = field(default_factory=list)

    @property
    def has_orphans(self) -> bool:
        return bool(self.orphaned_actions or self.orphaned_milestones or self.orphaned_drivers)


@dataclass
class DeleteImpact:
    """How much a driver deletion would cascade into."""

    affected_milestones: int
    affected_actions: int


@dataclass
class OnboardingResult:
    drivers: list[Driver]
    milestones: list[Milestone]
    actions: list[Action]
    onboarding_status: OnboardingStatus

    @property
    def item_count(self) -> int:
        """Number of records the persistence layer must write atomically."""
        return len(self.drivers) + len(self.milestones) + len(self.actions) + 1


@dataclass
class RolloverResult:
    rolled_over: Action    # the original, now in the terminal state
    new_instance: Action   # fresh planned copy for the next occurrence
