"""Core database models: ProjectInfo, Generation."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Text,
    Index,
    func,
    text,
)

from ..base import Base

# ISO-8601 UTC with milliseconds, e.g. 2025-01-31T12:00:00.000Z
CURRENT_TIMESTAMP_ISO = text("(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))")
# Rendered into each INSERT so stores with an older column default still get a real timestamp
INSERT_TIMESTAMP_ISO = func.strftime("%Y-%m-%dT%H:%M:%fZ", "now")


class ProjectInfo(Base):
    """Key/value metadata describing the project (name, created_at, last_opened)."""

    __tablename__ = "project_info"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self):
        return f"<ProjectInfo(key='{self.key}', value='{self.value}')>"


class Generation(Base):
    """One completed image generation and the file it produced."""

    __tablename__ = "generations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    prompt = Column(Text, nullable=False)
    negative_prompt = Column(Text, nullable=True)
    model = Column(String(100), nullable=True)
    seed = Column(Integer, nullable=True)
    steps = Column(Integer, nullable=True)
    guidance = Column(Float, nullable=True)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    image_path = Column(Text, nullable=False)  # relative to <project>/images
    created_at = Column(
        String(32),
        nullable=False,
        default=INSERT_TIMESTAMP_ISO,
        server_default=CURRENT_TIMESTAMP_ISO,
    )

    # AUTOINCREMENT keeps ids monotonic across deletes and restarts
    __table_args__ = (
        Index("ix_generations_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Generation(id={self.id}, image_path='{self.image_path}')>"
