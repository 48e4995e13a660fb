"""Generation repository for the per-project generation log."""

from typing import List, Optional

from ..models import Generation
from ..base_repository import BaseRepository


class GenerationRepository(BaseRepository[Generation]):
    """Repository for Generation operations. Rows are append-only."""

    model = Generation

    def create(
        self,
        prompt: str,
        image_path: str,
        negative_prompt: Optional[str] = None,
        model: Optional[str] = None,
        seed: Optional[int] = None,
        steps: Optional[int] = None,
        guidance: Optional[float] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> Generation:
        # created_at is computed by SQLite inside the INSERT
        return super().create(
            prompt=prompt,
            image_path=image_path,
            negative_prompt=negative_prompt,
            model=model,
            seed=seed,
            steps=steps,
            guidance=guidance,
            width=width,
            height=height,
        )

    def list_recent(self, limit: int = 50, offset: int = 0) -> List[Generation]:
        """Newest first; ties on created_at fall back to insertion order."""
        return (
            self.session.query(Generation)
            .order_by(Generation.created_at.desc(), Generation.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
