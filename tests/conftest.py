"""Shared test fixtures and configuration.

Pins the environment before any timeplan imports and provides a fixed
clock, a deterministic id factory and factories for sample entities.
"""

import os

# Patch env vars BEFORE any timeplan imports
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("MAX_ONBOARDING_ITEMS", "100")

import itertools
from datetime import datetime, timezone

import pytest

from timeplan.data.models import Action, ActionState, Driver, Milestone

FIXED_NOW = datetime(2026, 3, 12, 9, 30, tzinfo=timezone.utc)   # a Thursday
USER_ID = "test-user-id"


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def id_factory():
    """Returns "id-1", "id-2", … on successive calls."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def make_driver():
    def _make(**overrides) -> Driver:
        fields = {
            "id": "driver-1",
            "user_id": USER_ID,
            "title": "Test Driver",
            "description": "A test driver for unit tests",
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
        }
        fields.update(overrides)
        return Driver(**fields)
    return _make


@pytest.fixture
def make_milestone():
    def _make(**overrides) -> Milestone:
        fields = {
            "id": "milestone-1",
            "user_id": USER_ID,
            "driver_id": "driver-1",
            "title": "Test Milestone",
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
        }
        fields.update(overrides)
        return Milestone(**fields)
    return _make


@pytest.fixture
def make_action():
    def _make(**overrides) -> Action:
        fields = {
            "id": "action-1",
            "user_id": USER_ID,
            "milestone_id": "milestone-1",
            "title": "Test Action",
            "state": ActionState.PLANNED,
            "created_at": FIXED_NOW,
            "updated_at": FIXED_NOW,
        }
        fields.update(overrides)
        return Action(**fields)
    return _make


@pytest.fixture
def valid_config():
    """Onboarding document with 2 drivers, 3 milestones and 4 actions."""
    return {
        "version": "1.0.0",
        "drivers": [
            {
                "title": "Health",
                "description": "Feel good",
                "isActive": True,
                "milestones": [
                    {
                        "title": "Run a 5k",
                        "targetDate": "2026-06-01",
                        "actions": [
                            {
                                "title": "Morning run",
                                "state": "planned",
                                "estimatedMinutes": 30,
                                "trigger": "After brushing teeth",
                                "recurrencePattern": {"frequency": "weekly", "interval": [1, 3, 5]},
                            },
                            {"title": "Buy running shoes", "state": "planned"},
                        ],
                    },
                    {
                        "title": "Sleep better",
                        "actions": [
                            {
                                "title": "Lights out by 23:00",
                                "state": "planned",
                                "recurrencePattern": {"frequency": "daily"},
                            },
                        ],
                    },
                ],
            },
            {
                "title": "Career",
                "isActive": False,
                "milestones": [
                    {
                        "title": "Ship side project",
                        "actions": [
                            {"title": "Write README", "state": "in-progress", "description": "Docs first"},
                        ],
                    },
                ],
            },
        ],
    }
