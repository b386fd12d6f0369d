"""
Timeplan — Entry Point.

`python main.py [path]` validates an onboarding document (default:
ONBOARDING_CONFIG_PATH) and previews the graph it would generate, so a
broken document is caught before it ships.
"""

import logging
import sys

from timeplan.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from timeplan.core.errors import DomainError
from timeplan.core.onboarding import create_default_entities
from timeplan.data.onboarding_loader import load_onboarding_config

logger = logging.getLogger("timeplan")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    path = args[0] if args else None

    try:
        config = load_onboarding_config(path)
        preview = create_default_entities("preview-user", config)
    except (OSError, ValueError, DomainError) as exc:
        logger.error("Onboarding config rejected: %s", exc)
        return 1

    if preview.item_count > settings.MAX_ONBOARDING_ITEMS:
        logger.error(
            "Onboarding config %s produces %d items (limit %d)",
            config.version, preview.item_count, settings.MAX_ONBOARDING_ITEMS,
        )
        return 1

    logger.info(
        "Onboarding config %s OK: %d drivers, %d milestones, %d actions",
        config.version, len(preview.drivers), len(preview.milestones), len(preview.actions),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
