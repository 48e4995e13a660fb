"""Project store: lifecycle of the single open project database.

A ``ProjectStore`` owns at most one active handle (engine, session factory and
the project path it belongs to). Opening another project fully disposes the
previous handle before the new one becomes visible. ``inspect`` and ``create``
use short-lived engines and never touch the active handle.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Union

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from database.base import (
    create_project_engine,
    get_images_dir,
    get_project_db_path,
    make_session_factory,
)
from database.repositories import ProjectInfoRepository
from database.schema import ensure_schema
from database.session import session_scope as _session_scope
from services.errors import AlreadyExists, NoActiveProject, NotAProject, StoreIOError

logger = logging.getLogger(__name__)

KEY_NAME = "name"
KEY_CREATED_AT = "created_at"
KEY_LAST_OPENED = "last_opened"
METADATA_KEYS = (KEY_NAME, KEY_CREATED_AT, KEY_LAST_OPENED)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with milliseconds, e.g. 2025-01-31T12:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class ProjectSummary:
    name: str
    path: Path
    created_at: str = ""
    last_opened: str = ""


def _read_summary(session: Session, project_path: Path) -> ProjectSummary:
    values = ProjectInfoRepository(session).get_many(METADATA_KEYS)
    return ProjectSummary(
        name=values.get(KEY_NAME) or project_path.name,
        path=project_path,
        created_at=values.get(KEY_CREATED_AT, ""),
        last_opened=values.get(KEY_LAST_OPENED, ""),
    )


class ProjectStore:
    """Owns the active project handle and the project lifecycle operations."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._project_path: Optional[Path] = None

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def project_path(self) -> Optional[Path]:
        return self._project_path

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    # ------------------------------------------------------------------
    # Open-agnostic helpers
    # ------------------------------------------------------------------

    def inspect(self, path: Union[Path, str]) -> ProjectSummary:
        """Read a candidate project's metadata without touching the active handle."""
        project_path = Path(path).expanduser().absolute()
        db_path = get_project_db_path(project_path)
        if not db_path.is_file():
            raise NotAProject(project_path)

        engine = create_project_engine(db_path)
        try:
            with _session_scope(make_session_factory(engine)) as session:
                return _read_summary(session, project_path)
        except SQLAlchemyError as exc:
            raise StoreIOError(f"Error reading project {project_path}: {exc}") from exc
        finally:
            engine.dispose()

    def create(self, path: Union[Path, str]) -> ProjectSummary:
        """Initialize a new project at ``path``. The project is not opened."""
        if not str(path).strip():
            raise ValueError("Project path cannot be empty")

        project_path = Path(path).expanduser().absolute()
        db_path = get_project_db_path(project_path)
        if db_path.exists():
            raise AlreadyExists(project_path)

        try:
            project_path.mkdir(parents=True, exist_ok=True)
            get_images_dir(project_path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIOError(f"Cannot create project directory {project_path}: {exc}") from exc

        now = utc_timestamp()
        summary = ProjectSummary(
            name=project_path.name,
            path=project_path,
            created_at=now,
            last_opened=now,
        )

        engine = create_project_engine(db_path)
        try:
            ensure_schema(engine)
            with _session_scope(make_session_factory(engine)) as session:
                ProjectInfoRepository(session).set_many(
                    {
                        KEY_NAME: summary.name,
                        KEY_CREATED_AT: summary.created_at,
                        KEY_LAST_OPENED: summary.last_opened,
                    }
                )
        except (SQLAlchemyError, StoreIOError) as exc:
            engine.dispose()
            # A store without metadata would block a retry with AlreadyExists
            db_path.unlink(missing_ok=True)
            if isinstance(exc, StoreIOError):
                raise
            raise StoreIOError(f"Failed to initialize project {project_path}: {exc}") from exc
        finally:
            engine.dispose()

        logger.info(
            "Created project %s",
            project_path,
            extra={"event": "project.created", "project": str(project_path)},
        )
        return summary

    # ------------------------------------------------------------------
    # Active handle
    # ------------------------------------------------------------------

    def open(self, path: Union[Path, str]) -> None:
        """Make ``path`` the active project, closing any other one first."""
        project_path = Path(path).expanduser().absolute()
        db_path = get_project_db_path(project_path)

        with self._lock:
            if not db_path.is_file():
                raise NotAProject(project_path)

            if self._engine is not None and self._project_path == project_path:
                self._touch_last_opened(self._session_factory)
                return

            self.close()

            engine = create_project_engine(db_path)
            factory = make_session_factory(engine)
            try:
                ensure_schema(engine)
                self._touch_last_opened(factory)
            except Exception:
                engine.dispose()
                raise

            self._engine = engine
            self._session_factory = factory
            self._project_path = project_path

        logger.info(
            "Opened project %s",
            project_path,
            extra={"event": "project.opened", "project": str(project_path)},
        )

    def current(self) -> Optional[ProjectSummary]:
        """Summary of the active project, or None when nothing is open."""
        with self._lock:
            if self._session_factory is None or self._project_path is None:
                return None
            try:
                with _session_scope(self._session_factory) as session:
                    return _read_summary(session, self._project_path)
            except SQLAlchemyError as exc:
                raise StoreIOError(f"Error reading current project: {exc}") from exc

    def close(self) -> None:
        """Release the active handle. Safe to call when nothing is open."""
        with self._lock:
            if self._engine is None:
                self._project_path = None
                return
            closed_path = self._project_path
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._project_path = None

        logger.info(
            "Closed project %s",
            closed_path,
            extra={"event": "project.closed", "project": str(closed_path)},
        )

    def images_directory(self) -> Optional[Path]:
        project_path = self._project_path
        if project_path is None:
            return None
        return get_images_dir(project_path)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session on the active handle with commit/rollback semantics.

        The store lock is held for the whole unit of work so the handle cannot
        be swapped underneath it.
        """
        with self._lock:
            if self._session_factory is None:
                raise NoActiveProject()
            try:
                with _session_scope(self._session_factory) as session:
                    yield session
            except SQLAlchemyError as exc:
                raise StoreIOError(f"Project database error: {exc}") from exc

    def _touch_last_opened(self, factory: sessionmaker) -> None:
        try:
            with _session_scope(factory) as session:
                ProjectInfoRepository(session).set(KEY_LAST_OPENED, utc_timestamp())
        except SQLAlchemyError as exc:
            raise StoreIOError(f"Failed to update last_opened: {exc}") from exc
