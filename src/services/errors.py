"""Exception taxonomy for the project store and the generation workflow."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class StoreError(RuntimeError):
    """Base class for project store failures."""


class NotAProject(StoreError):
    """Raised when a directory holds no initialized project store."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)
        super().__init__(f"Not a project (no project database): {self.path}")


class AlreadyExists(StoreError):
    """Raised when creating a project in a directory that already is one."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)
        super().__init__(f"This directory is already a project: {self.path}")


class NoActiveProject(StoreError):
    """Raised when a query needs the active handle but nothing is open."""

    def __init__(self, message: str = "No project is currently open"):
        super().__init__(message)


class StoreIOError(StoreError):
    """Disk, connection or schema failure while talking to a project store."""


class GenerationError(RuntimeError):
    """Base class for image generation failures."""


class MissingCredential(GenerationError):
    def __init__(self, message: str = "No API key configured"):
        super().__init__(message)


class NoOpenProject(GenerationError):
    def __init__(self, message: str = "No project is open"):
        super().__init__(message)


class GenerationFailed(GenerationError):
    """The generation API answered with a non-success status (or not at all)."""

    def __init__(self, status: Optional[int], body: str):
        self.status = status
        self.body = body or ""
        if status is None:
            message = f"Generation request failed: {self.body}"
        else:
            message = f"Generation failed ({status}): {self.body}"
        super().__init__(message)


class FileWriteError(GenerationError):
    """The generated image could not be written into the project."""

    def __init__(self, path: Union[Path, str], reason: str):
        self.path = Path(path)
        super().__init__(f"Failed to write image {self.path}: {reason}")
