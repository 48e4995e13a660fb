"""Repository package - provides clean interface to database operations."""

from .project_info import ProjectInfoRepository
from .generation import GenerationRepository

__all__ = [
    "ProjectInfoRepository",
    "GenerationRepository",
]
