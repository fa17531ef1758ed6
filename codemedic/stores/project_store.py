"""JSON file store for project records."""

from __future__ import annotations

import json
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..logging import get_logger

logger = get_logger("stores.projects")


class ProjectStore:
    """Stores one JSON document per project under ``data_dir``."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = data_dir
        self._dir.mkdir(parents=True, exist_ok=True)

    def create(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        now = _timestamp()
        project = {
            **record,
            "id": str(uuid.uuid4()),
            "createdAt": now,
            "lastModified": now,
        }
        self._save(project)
        logger.info("Project created: %s", project["id"])
        return project

    def get(self, project_id: str) -> Optional[Dict[str, Any]]:
        path = self._path_for(project_id)
        if path is None:
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug("Project not found: %s", project_id)
            return None
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Unreadable project record %s: %s", project_id, exc)
            return None
        return data if isinstance(data, dict) else None

    def update(self, project_id: str, changes: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        project = self.get(project_id)
        if project is None:
            return None
        updated = {**project, **changes, "id": project["id"], "lastModified": _timestamp()}
        self._save(updated)
        return updated

    def list_for_user(self, user_id: Optional[str]) -> List[Dict[str, Any]]:
        """Projects owned by ``user_id``, most recently modified first."""
        projects: List[Dict[str, Any]] = []
        for path in sorted(self._dir.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Error reading project file %s: %s", path.name, exc)
                continue
            if isinstance(data, dict) and data.get("userId") == user_id:
                projects.append(data)
        projects.sort(key=lambda item: str(item.get("lastModified", "")), reverse=True)
        return projects

    def delete(self, project_id: str) -> bool:
        path = self._path_for(project_id)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    # ------------------------------------------------------------------
    # Internal helpers

    def _save(self, project: Mapping[str, Any]) -> None:
        path = self._path_for(str(project["id"]))
        if path is None:
            raise ValueError(f"Invalid project id: {project['id']!r}")
        path.write_text(json.dumps(project, indent=2), encoding="utf-8")

    def _path_for(self, project_id: str) -> Optional[Path]:
        # Ids are uuid4 strings; anything else could escape the data directory.
        try:
            uuid.UUID(project_id)
        except (ValueError, TypeError, AttributeError):
            return None
        return self._dir / f"{project_id}.json"


def _timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


__all__ = ["ProjectStore"]
