"""Translation of driver errors into application errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import BackendError

logger = structlog.get_logger()


@contextmanager
def backend_errors(operation: str) -> Iterator[None]:
    """Re-raise any SQLAlchemy error inside the block as BackendError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.warning("backend_operation_failed", operation=operation, error=str(e))
        raise BackendError(operation, str(e)) from e
