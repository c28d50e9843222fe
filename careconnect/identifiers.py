import logging
import random

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import config
from .errors import IdentifierExhausted

logger = logging.getLogger(__name__)

# Largest value a signed 64-bit INTEGER column holds
MAX_STORED_ID = 2**63 - 1


def is_storable_id(value) -> bool:
    """True when ``value`` can be a public id, so it is safe to bind in a query."""
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= MAX_STORED_ID


def allocate_public_id(db: Session, column, attempts: int | None = None) -> int:
    """Pick a random public identifier not yet present in ``column``.

    The unique constraint on the column still guards the window between this
    check and the commit.
    """
    attempts = attempts or config.PUBLIC_ID_ATTEMPTS
    for _ in range(attempts):
        candidate = random.randint(1, config.PUBLIC_ID_MAX)
        taken = db.scalar(select(column).where(column == candidate))
        if taken is None:
            return candidate
        logger.debug("Public id %s already taken in %s, retrying", candidate, column)
    logger.error("Could not allocate a public id for %s after %d attempts", column, attempts)
    raise IdentifierExhausted("IDENTIFIER_EXHAUSTED", "Could not allocate a unique identifier")
