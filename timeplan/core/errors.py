"""
Timeplan — Domain errors.

Every rule violation raised by timeplan.core derives from DomainError.
Detection helpers (orphan reports, impact queries) return results instead
of raising; these exceptions are reserved for rejected inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timeplan.data.models import ActionState


class DomainError(Exception):
    """Base class for errors raised by the domain rule engine."""


@dataclass(frozen=True)
class FieldIssue:
    field: str      # dotted path, e.g. "recurrencePattern.interval.0"
    message: str


class ValidationFailure(DomainError):
    """An entity or input failed its shape contract.

    ``issues`` holds one entry per violated field. Entity validation
    accumulates every issue; onboarding configuration validation stops at
    the first one.
    """

    def __init__(self, kind: str, issues: list[FieldIssue]) -> None:
        self.kind = kind
        self.issues = list(issues)
        details = "; ".join(
            f"{issue.field}: {issue.message}" if issue.field else issue.message
            for issue in self.issues
        )
        super().__init__(f"Invalid {kind}: {details}")

    @classmethod
    def single(cls, kind: str, field: str, message: str) -> ValidationFailure:
        return cls(kind, [FieldIssue(field=field, message=message)])

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]


class ReferentialIntegrityError(DomainError):
    """A new Milestone or Action would point at a parent that does not exist."""

    def __init__(self, message: str, reference_id: str) -> None:
        self.reference_id = reference_id
        super().__init__(message)


class StateTransitionError(DomainError):
    """Requested lifecycle transition is not in the transition table."""

    def __init__(
        self,
        from_state: ActionState,
        to_state: ActionState,
        valid_next_states: list[ActionState],
    ) -> None:
        self.from_state = from_state
        self.to_state = to_state
        self.valid_next_states = list(valid_next_states)
        allowed = ", ".join(s.value for s in self.valid_next_states) or "none"
        super().__init__(
            f"Cannot move action from '{from_state.value}' to '{to_state.value}'. "
            f"Valid transitions from '{from_state.value}': {allowed}"
        )


class RecurrencePatternError(DomainError):
    """A recurrence pattern breaks one of its own invariants."""

    def __init__(self, message: str, constraint: str = "") -> None:
        self.constraint = constraint   # e.g. "weekly_days_empty"
        super().__init__(message)
