"""Project database utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool


PROJECT_DB_FILENAME = "project.db"
IMAGES_DIRNAME = "images"

Base = declarative_base()


def get_project_db_path(project_path: Union[Path, str]) -> Path:
    """Get the database path for a project directory.

    Every project keeps its store at a fixed name: {project}/project.db
    """
    return Path(project_path) / PROJECT_DB_FILENAME


def get_images_dir(project_path: Union[Path, str]) -> Path:
    return Path(project_path) / IMAGES_DIRNAME


def create_project_engine(db_path: Path) -> Engine:
    """Create an engine for a project database.

    Uses NullPool so disposing the engine closes the file immediately.
    """
    return create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
