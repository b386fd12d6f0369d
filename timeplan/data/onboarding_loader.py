"""
Timeplan — Onboarding document loader.

Reads the versioned onboarding JSON and validates it before anything is
generated from it, so a malformed document fails at load time rather than
halfway through onboarding a user.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from timeplan.core.schemas import validate_onboarding_config
from timeplan.data.models import OnboardingConfig

logger = logging.getLogger(__name__)


def load_onboarding_config(path: str | Path | None = None) -> OnboardingConfig:
    """Load and validate the onboarding document at ``path``.

    Defaults to settings.ONBOARDING_CONFIG_PATH. Raises OSError or
    json.JSONDecodeError for unreadable files and ValidationFailure for
    structurally invalid ones.
    """
    if path is None:
        from timeplan.config import settings
        path = settings.ONBOARDING_CONFIG_PATH

    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)

    config = validate_onboarding_config(raw)
    logger.debug("Loaded onboarding config %s from %s", config.version, path)
    return config
