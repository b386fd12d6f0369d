"""
Timeplan — Onboarding Service.

Thin orchestration around the pure generator: check the user's status
through the EntityStorePort, build the batch, enforce the transaction size
limit, and hand the batch to the store for an all-or-nothing write.

A concurrent request that wins the conditional write surfaces as
AlreadyOnboardedError from the store and is reported as "already
onboarded", not as a failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from timeplan.core.onboarding import create_default_entities
from timeplan.ports.clock import Clock, IdFactory, new_id, utc_now
from timeplan.ports.entity_store_port import AlreadyOnboardedError

if TYPE_CHECKING:
    from timeplan.data.models import OnboardingConfig, OnboardingResult, OnboardingStatus
    from timeplan.ports.entity_store_port import EntityStorePort

logger = logging.getLogger(__name__)


class OnboardingBatchTooLargeError(Exception):
    """The generated batch does not fit in one store transaction."""

    def __init__(self, item_count: int, limit: int) -> None:
        self.item_count = item_count
        self.limit = limit
        super().__init__(
            f"Too many items to write in single transaction: {item_count} (limit {limit})"
        )


@dataclass
class OnboardingOutcome:
    already_onboarded: bool
    status: OnboardingStatus | None = None
    result: OnboardingResult | None = None


class OnboardingService:
    """Onboards users against an injected store, clock and id source."""

    def __init__(
        self,
        store: EntityStorePort,
        config: OnboardingConfig,
        *,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
        max_items: int = 100,
    ) -> None:
        self._store = store
        self._config = config
        self._clock = clock
        self._id_factory = id_factory
        self._max_items = max_items

    def initialize(self, user_id: str) -> OnboardingOutcome:
        """Onboard ``user_id`` unless their status record says it already happened."""
        existing = self._store.get_onboarding_status(user_id)
        if existing is not None and existing.is_onboarded:
            logger.info("User %s already onboarded (version %s)", user_id, existing.onboarding_version)
            return OnboardingOutcome(already_onboarded=True, status=existing)

        result = create_default_entities(
            user_id, self._config, clock=self._clock, id_factory=self._id_factory,
        )
        if result.item_count > self._max_items:
            raise OnboardingBatchTooLargeError(result.item_count, self._max_items)

        try:
            self._store.write_onboarding(result)
        except AlreadyOnboardedError:
            logger.info("User %s onboarded by a concurrent request", user_id)
            return OnboardingOutcome(already_onboarded=True)

        return OnboardingOutcome(
            already_onboarded=False,
            status=result.onboarding_status,
            result=result,
        )
