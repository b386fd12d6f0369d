"""Entity store port — abstract interface for the persistence layer.

Core modules never import a storage backend. Handlers load collections
through this protocol, run the pure rules over them, and hand results back
for writing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from timeplan.core.errors import DomainError

if TYPE_CHECKING:
    from timeplan.data.models import (
        Action,
        Driver,
        Milestone,
        OnboardingResult,
        OnboardingStatus,
    )


class AlreadyOnboardedError(DomainError):
    """Raised by write_onboarding when the user's status record already exists."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} is already onboarded")


class EntityStorePort(Protocol):
    """Abstract store used by handlers wrapping the rule engine."""

    def list_drivers(self, user_id: str) -> list[Driver]: ...

    def list_milestones(self, user_id: str) -> list[Milestone]: ...

    def list_actions(self, user_id: str) -> list[Action]: ...

    def get_onboarding_status(self, user_id: str) -> OnboardingStatus | None: ...

    def write_onboarding(self, result: OnboardingResult) -> None:
        """Write the whole batch plus status all-or-nothing.

        Must be conditional on no status record existing for the user and
        raise AlreadyOnboardedError otherwise.
        """
        ...
