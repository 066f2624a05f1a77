"""
CLI entrypoint for pruning the revocation registry. Run from cron, e.g.:

  python -m tokengate.scripts.prune_revocations

Or hourly: 0 * * * * cd /path/to/tokengate && .venv/bin/python -m tokengate.scripts.prune_revocations

Only rows whose token has already expired are deleted; such a token fails
verification on its own, so dropping the row never re-enables it.
"""

import logging
import sys

from tokengate.core.config import get_settings
from tokengate.core.database import build_engine, build_session_factory
from tokengate.services.revocation import DatabaseRevocationRegistry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete revoked-token rows past their expiry."""
    settings = get_settings()
    registry = DatabaseRevocationRegistry(build_session_factory(build_engine(settings)))
    try:
        deleted = registry.prune()
        logger.info("Revocation prune completed: entries_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Revocation prune failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
