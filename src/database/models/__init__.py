"""Database models package.

Re-exports all models so `Base.metadata` is fully populated on import.
"""

# Base class
from ..base import Base

# Core models
from .core import ProjectInfo, Generation

__all__ = [
    "Base",
    "ProjectInfo",
    "Generation",
]
