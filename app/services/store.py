"""Translation of database failures into StoreError."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import StoreError

logger = logging.getLogger(__name__)


def describe(error: SQLAlchemyError) -> str:
    """Short message from a SQLAlchemy error, preferring the driver's text."""
    orig = getattr(error, "orig", None)
    return str(orig or error).splitlines()[0]


@asynccontextmanager
async def store_errors(action: str) -> AsyncIterator[None]:
    """Re-raise SQLAlchemy errors inside the block as StoreError.

    Args:
        action: What was being attempted, for the log and the message
    """
    try:
        yield
    except SQLAlchemyError as e:
        message = describe(e)
        logger.error(f"Store failure while trying to {action}: {message}")
        raise StoreError(f"Could not {action}: {message}") from e
