"""
Transaction Utilities for the Durban Smart City backend
=======================================================

Helpers that group several database writes into one atomic unit.

Usage Examples:
    # Run planned mutations together; any failure rolls back all of them
    results = commit_unit_of_work([
        lambda: proposal.save(update_fields=["status", "updated_at"]),
        lambda: request.save(update_fields=["status", "updated_at"]),
    ])
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, Iterable, List

from django.db import IntegrityError, transaction

logger = logging.getLogger(__name__)


class TransactionError(Exception):
    """Raised when a unit of work is rejected by the database (constraint violation)."""

    pass


def commit_unit_of_work(mutations: Iterable[Callable[[], Any]], using: str = "default") -> List[Any]:
    """
    Apply every mutation inside one ``transaction.atomic`` block.

    When called inside an outer atomic block the work joins it through a
    savepoint, so row locks taken by the caller are still held.

    Args:
        mutations: zero-argument callables, applied in order
        using: database alias

    Returns:
        The return values of the mutations, in order.

    Raises:
        TransactionError: if a database constraint rejects the writes.
    """
    mutations = list(mutations)
    try:
        with transaction.atomic(using=using):
            results = [mutation() for mutation in mutations]
    except IntegrityError as e:
        logger.warning(f"Unit of work with {len(mutations)} mutation(s) rolled back: {e}")
        raise TransactionError(f"Transaction failed: {e}") from e
    logger.debug(f"Unit of work committed {len(mutations)} mutation(s)")
    return results


def log_transaction_performance(func):
    """
    Decorator to log transaction performance metrics.

    Usage:
        @log_transaction_performance
        def accept_proposal(...):
            pass
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
            elapsed = time.time() - start_time
            logger.info(f"Transaction {func.__name__} completed in {elapsed:.3f}s")
            return result
        except Exception as e:
            elapsed = time.time() - start_time
            logger.error(f"Transaction {func.__name__} failed after {elapsed:.3f}s: {e}")
            raise

    return wrapper
