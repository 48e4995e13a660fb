"""Project metadata repository for ProjectInfo key/value rows."""

from typing import Dict, Iterable

from ..models import ProjectInfo


class ProjectInfoRepository:
    """Repository for ProjectInfo operations.

    Keys are natural primary keys, so this does not derive from BaseRepository.
    """

    def __init__(self, session):
        self.session = session

    def get_many(self, keys: Iterable[str]) -> Dict[str, str]:
        rows = self.session.query(ProjectInfo).filter(ProjectInfo.key.in_(list(keys))).all()
        return {row.key: row.value for row in rows}

    def set(self, key: str, value: str) -> None:
        """Insert or update a metadata row."""
        row = self.session.query(ProjectInfo).filter(ProjectInfo.key == key).first()
        if row:
            row.value = value
        else:
            self.session.add(ProjectInfo(key=key, value=value))
        self.session.commit()

    def set_many(self, values: Dict[str, str]) -> None:
        for key, value in values.items():
            row = self.session.query(ProjectInfo).filter(ProjectInfo.key == key).first()
            if row:
                row.value = value
            else:
                self.session.add(ProjectInfo(key=key, value=value))
        self.session.commit()
