"""All-or-nothing apply over the SQLAlchemy session.

Every multi-record write (sale commit, sale reversal, product edits that touch stock)
goes through ``run_in_transaction`` so a failure never leaves half the rows written.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from dashboard.errors import DashboardError, TransactionFailure

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_ATTEMPTS = 3


def lock_for_update(query):
    """
    Apply row-level locking for critical reads.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; the conditional updates in the ledger
    still guard stock there.
    """
    return query.with_for_update()


def run_in_transaction(session, op: Callable[[], T], *, label: str = 'transaction',
                       attempts: int = DEFAULT_ATTEMPTS, backoff_base: float = 0.05) -> T:
    """Run ``op`` then commit; roll back on any failure.

    Lock contention (OperationalError, StaleDataError) is retried with exponential
    backoff, re-running ``op`` from scratch so it re-reads current state. Business
    errors propagate unchanged; other store errors become TransactionFailure.
    """
    attempts = max(1, attempts)
    for attempt in range(attempts):
        try:
            result = op()
            session.commit()
            return result
        except DashboardError:
            session.rollback()
            raise
        except (OperationalError, StaleDataError) as exc:
            session.rollback()
            if attempt >= attempts - 1:
                logger.error('%s failed after %d attempts: %s', label, attempts, exc)
                raise TransactionFailure() from exc
            logger.warning('%s contention (attempt %d/%d), retrying', label, attempt + 1, attempts)
            time.sleep(backoff_base * (2 ** attempt))
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception('%s aborted', label)
            raise TransactionFailure() from exc
    raise TransactionFailure()  # pragma: no cover
