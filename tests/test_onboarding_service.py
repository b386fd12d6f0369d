"""Tests for timeplan.core.onboarding_service — idempotent onboarding.

The store is a MagicMock standing in for EntityStorePort.
"""

from unittest.mock import MagicMock

import pytest

from timeplan.core.onboarding_service import (
    OnboardingBatchTooLargeError,
    OnboardingService,
)
from timeplan.core.schemas import validate_onboarding_config
from timeplan.data.models import OnboardingStatus
from timeplan.ports.entity_store_port import AlreadyOnboardedError


def _make_service(valid_config, clock, id_factory, store=None, max_items=100):
    store = store or MagicMock()
    service = OnboardingService(
        store,
        validate_onboarding_config(valid_config),
        clock=clock,
        id_factory=id_factory,
        max_items=max_items,
    )
    return service, store


class TestInitialize:
    def test_new_user_is_onboarded(self, valid_config, clock, id_factory):
        service, store = _make_service(valid_config, clock, id_factory)
        store.get_onboarding_status.return_value = None

        outcome = service.initialize("u-1")

        assert outcome.already_onboarded is False
        assert outcome.status.is_onboarded is True
        assert len(outcome.result.actions) == 4
        store.write_onboarding.assert_called_once_with(outcome.result)

    def test_existing_status_short_circuits(self, valid_config, clock, id_factory, fixed_now):
        service, store = _make_service(valid_config, clock, id_factory)
        existing = OnboardingStatus(
            user_id="u-1",
            is_onboarded=True,
            onboarding_version="0.9.0",
            completed_at=fixed_now,
            created_at=fixed_now,
            updated_at=fixed_now,
        )
        store.get_onboarding_status.return_value = existing

        outcome = service.initialize("u-1")

        assert outcome.already_onboarded is True
        assert outcome.status is existing
        store.write_onboarding.assert_not_called()

    def test_status_not_onboarded_proceeds(self, valid_config, clock, id_factory, fixed_now):
        service, store = _make_service(valid_config, clock, id_factory)
        store.get_onboarding_status.return_value = OnboardingStatus(
            user_id="u-1",
            is_onboarded=False,
            onboarding_version="1.0.0",
            created_at=fixed_now,
            updated_at=fixed_now,
        )

        outcome = service.initialize("u-1")

        assert outcome.already_onboarded is False
        store.write_onboarding.assert_called_once()

    def test_concurrent_write_reported_as_already_onboarded(self, valid_config, clock, id_factory):
        service, store = _make_service(valid_config, clock, id_factory)
        store.get_onboarding_status.return_value = None
        store.write_onboarding.side_effect = AlreadyOnboardedError("u-1")

        outcome = service.initialize("u-1")

        assert outcome.already_onboarded is True
        assert outcome.result is None

    def test_batch_over_limit_is_not_written(self, valid_config, clock, id_factory):
        service, store = _make_service(valid_config, clock, id_factory, max_items=5)
        store.get_onboarding_status.return_value = None

        with pytest.raises(OnboardingBatchTooLargeError) as exc_info:
            service.initialize("u-1")

        assert exc_info.value.item_count == 10
        store.write_onboarding.assert_not_called()

    def test_store_failure_propagates(self, valid_config, clock, id_factory):
        service, store = _make_service(valid_config, clock, id_factory)
        store.get_onboarding_status.return_value = None
        store.write_onboarding.side_effect = RuntimeError("storage down")

        with pytest.raises(RuntimeError, match="storage down"):
            service.initialize("u-1")
