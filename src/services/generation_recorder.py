"""Append-only log of generations for the active project."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from database.models import Generation
from database.repositories import GenerationRepository
from services.project_store import ProjectStore


@dataclass(frozen=True)
class NewGeneration:
    """A generation to record; the store assigns ``id`` and ``created_at``."""

    prompt: str
    image_path: str
    negative_prompt: Optional[str] = None
    model: Optional[str] = None
    seed: Optional[int] = None
    steps: Optional[int] = None
    guidance: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class GenerationRecord:
    id: int
    prompt: str
    image_path: str
    created_at: str
    negative_prompt: Optional[str] = None
    model: Optional[str] = None
    seed: Optional[int] = None
    steps: Optional[int] = None
    guidance: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_model(cls, row: Generation) -> "GenerationRecord":
        return cls(
            id=row.id,
            prompt=row.prompt,
            image_path=row.image_path,
            created_at=row.created_at,
            negative_prompt=row.negative_prompt,
            model=row.model,
            seed=row.seed,
            steps=row.steps,
            guidance=row.guidance,
            width=row.width,
            height=row.height,
        )


class GenerationRecorder:
    """Reads and appends generation records through the store's active handle.

    Every operation raises ``NoActiveProject`` when no project is open.
    """

    def __init__(self, store: ProjectStore):
        self.store = store

    def append(self, record: NewGeneration) -> int:
        if not record.prompt or not record.prompt.strip():
            raise ValueError("Generation prompt cannot be empty")
        if not record.image_path or not record.image_path.strip():
            raise ValueError("Generation image path cannot be empty")

        with self.store.session_scope() as session:
            row = GenerationRepository(session).create(
                prompt=record.prompt,
                image_path=record.image_path,
                negative_prompt=record.negative_prompt or None,
                model=record.model or None,
                seed=record.seed,
                steps=record.steps,
                guidance=record.guidance,
                width=record.width,
                height=record.height,
            )
            return row.id

    def list(self, limit: int = 50, offset: int = 0) -> List[GenerationRecord]:
        """Most recent first."""
        if limit < 0 or offset < 0:
            raise ValueError("limit and offset must be non-negative")

        with self.store.session_scope() as session:
            rows = GenerationRepository(session).list_recent(limit=limit, offset=offset)
            return [GenerationRecord.from_model(row) for row in rows]

    def get_by_id(self, generation_id: int) -> Optional[GenerationRecord]:
        with self.store.session_scope() as session:
            row = GenerationRepository(session).get_by_id(generation_id)
            return GenerationRecord.from_model(row) if row else None

    def count(self) -> int:
        with self.store.session_scope() as session:
            return GenerationRepository(session).count()
