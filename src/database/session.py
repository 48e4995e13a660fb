"""Session helpers for project databases.

Usage:
    from database.session import session_scope

    with session_scope(factory) as session:
        repo = GenerationRepository(session)
        records = repo.list_recent()

Thread Safety:
    SQLAlchemy sessions are NOT thread-safe. Create a session per unit of work
    via the factory and never share one across threads.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]

__all__ = [
    "SessionFactory",
    "session_scope",
]


@contextmanager
def session_scope(factory: SessionFactory) -> Iterator[Session]:
    """Context manager for commit/rollback semantics around a session factory."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.debug(f"Session rolled back: {e}")
        raise
    finally:
        session.close()
