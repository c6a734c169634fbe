"""
Session snapshot storage.

GOVERNANCE:
- Snapshots are backups for resumption only
- Last write wins, concurrent writers are not merged
"""

import logging
import os
import re
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from assessment.models import SessionSnapshot
from config import get_settings

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


class SnapshotStoreError(Exception):
    """Raised when a snapshot cannot be saved or loaded."""

    def __init__(self, message: str, session_id: Optional[str] = None):
        self.session_id = session_id
        super().__init__(message)


class SnapshotStore(Protocol):
    """Durable save/load contract for session snapshots."""

    def save(self, session_id: str, snapshot: SessionSnapshot) -> None: ...

    def load(self, session_id: str) -> Optional[SessionSnapshot]: ...

    def delete(self, session_id: str) -> None: ...


class InMemorySnapshotStore:
    """In-memory snapshot storage for demos and tests."""

    def __init__(self):
        self._snapshots: dict[str, str] = {}

    def save(self, session_id: str, snapshot: SessionSnapshot) -> None:
        """Store a snapshot, replacing any previous one."""
        # Serialized so later mutation of the caller's objects cannot leak in
        self._snapshots[session_id] = snapshot.model_dump_json()

    def load(self, session_id: str) -> Optional[SessionSnapshot]:
        """Retrieve a snapshot by session ID."""
        raw = self._snapshots.get(session_id)
        if raw is None:
            return None
        return SessionSnapshot.model_validate_json(raw)

    def delete(self, session_id: str) -> None:
        """Remove a snapshot if present."""
        self._snapshots.pop(session_id, None)

    def list_ids(self) -> list[str]:
        """List stored session IDs."""
        return list(self._snapshots)


class JsonFileSnapshotStore:
    """One JSON document per session in a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, session_id: str) -> Path:
        if not _SAFE_ID.match(session_id):
            raise SnapshotStoreError(
                f"Invalid session id {session_id!r}", session_id=session_id
            )
        return self.directory / f"{session_id}.json"

    def save(self, session_id: str, snapshot: SessionSnapshot) -> None:
        """Write a snapshot atomically."""
        path = self._path(session_id)
        tmp = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.model_dump_json())
            os.replace(tmp, path)
        except OSError as e:
            if tmp is not None:
                Path(tmp).unlink(missing_ok=True)
            raise SnapshotStoreError(
                f"Failed to save snapshot: {e}", session_id=session_id
            ) from e

    def load(self, session_id: str) -> Optional[SessionSnapshot]:
        """Read a snapshot, or None if none was saved."""
        path = self._path(session_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise SnapshotStoreError(
                f"Failed to read snapshot: {e}", session_id=session_id
            ) from e

        try:
            return SessionSnapshot.model_validate_json(raw)
        except ValidationError as e:
            raise SnapshotStoreError(
                f"Corrupt snapshot for session {session_id}", session_id=session_id
            ) from e

    def delete(self, session_id: str) -> None:
        """Remove a snapshot if present."""
        self._path(session_id).unlink(missing_ok=True)


@lru_cache
def get_snapshot_store() -> SnapshotStore:
    """Get the singleton snapshot store chosen by settings."""
    settings = get_settings()
    if settings.snapshot_dir:
        logger.info("using file snapshot store at %s", settings.snapshot_dir)
        return JsonFileSnapshotStore(settings.snapshot_dir)
    return InMemorySnapshotStore()
