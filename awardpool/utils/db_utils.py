"""
Transaction helpers shared by the services.
"""

import logging
from contextlib import contextmanager

from awardpool import db

logger = logging.getLogger(__name__)


@contextmanager
def atomic():
    """
    Run a block of writes as one transaction.

    Commits when the block exits normally; rolls back and re-raises on any
    exception, so callers never observe a half-applied change.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.debug("Transaction rolled back", exc_info=True)
        raise
