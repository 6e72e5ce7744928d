"""
Translation of persistence-layer exceptions into the MeterHub error taxonomy.

Connection-level failures (OperationalError, OSError, invalidated
connections) become StoreUnavailable; every other SQLAlchemy error, including
rows the database rejects, becomes StoreError. The underlying exception is
logged with its traceback and chained, but never exposed to the caller.

CHANGELOG:
- 2026-10-18: Initial creation
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError

from meterhub.exceptions import StoreError, StoreUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Re-raise store failures inside the block as StoreError subclasses.

    Args:
        action: Short description of the operation, used in log lines.

    Raises:
        StoreUnavailable: The database could not be reached.
        StoreError: Any other SQLAlchemy failure.
    """
    try:
        yield
    except (OperationalError, OSError) as exc:
        logger.error("Store unavailable during %s", action, exc_info=True)
        raise StoreUnavailable() from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            logger.error("Store connection lost during %s", action, exc_info=True)
            raise StoreUnavailable() from exc
        logger.error("Store error during %s", action, exc_info=True)
        raise StoreError() from exc
    except SQLAlchemyError as exc:
        logger.error("Store error during %s", action, exc_info=True)
        raise StoreError() from exc
