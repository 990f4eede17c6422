"""
Saved builder projects, kept in a local JSON file.
"""

from __future__ import annotations
import json
import os
import uuid
from pathlib import Path
from typing import List, Optional, Protocol

from .config import ProjectData
from .utils import get_logger

logger = get_logger("project_store")


def get_projects_path() -> Path:
    configured = os.getenv("STUDIO_PROJECTS_PATH")
    if configured:
        return Path(configured)
    return Path.home() / ".manifest_studio" / "projects.json"


class ProjectStore(Protocol):
    def save(self, project: ProjectData) -> ProjectData:
        ...

    def list(self) -> List[ProjectData]:
        ...

    def get(self, project_id: str) -> Optional[ProjectData]:
        ...

    def delete(self, project_id: str) -> bool:
        ...


class JsonProjectStore:
    """Newest-first list of projects serialized to one JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_projects_path()

    def _read(self) -> List[ProjectData]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning(f"Could not read project store {self.path}: {exc}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Project store {self.path} is not a list, ignoring")
            return []
        return [ProjectData.from_dict(item) for item in data if isinstance(item, dict)]

    def _write(self, projects: List[ProjectData]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([p.to_dict() for p in projects], f, ensure_ascii=False, indent=2)

    def save(self, project: ProjectData) -> ProjectData:
        """Insert ``project`` at the front, or replace the stored copy with the same id."""
        if not project.id:
            project.id = uuid.uuid4().hex
        projects = [p for p in self._read() if p.id != project.id]
        projects.insert(0, project)
        self._write(projects)
        logger.info(f"Saved project {project.id} ({project.title})")
        return project

    def list(self) -> List[ProjectData]:
        return self._read()

    def get(self, project_id: str) -> Optional[ProjectData]:
        for project in self._read():
            if project.id == project_id:
                return project
        return None

    def delete(self, project_id: str) -> bool:
        projects = self._read()
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            return False
        self._write(remaining)
        logger.info(f"Deleted project {project_id}")
        return True
