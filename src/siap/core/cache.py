from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

"""
Local state cache.

The field app keeps the signed-in inspector, their schools, recent visits and any
submissions still waiting for the remote store in one JSON file, so it stays usable
offline. Only the application shell touches this cache; the visit workflow just
returns finalized records to its owner.
"""

logger = logging.getLogger(__name__)


class LocalState(BaseModel):
    """Everything persisted between sessions.

    `schools`/`visits`/`outbox` hold wire-shaped dicts; they are decoded through
    `siap.domain.decode` when read.
    """

    user: dict[str, Any] | None = None
    schools: list[dict[str, Any]] = Field(default_factory=list)
    visits: list[dict[str, Any]] = Field(default_factory=list)
    outbox: list[dict[str, Any]] = Field(default_factory=list)


class LocalStateCache:
    """A JSON-file-backed `load/save/clear` store."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> LocalState:
        """Return the persisted state, or an empty one if missing/corrupt."""
        if not self._path.exists():
            return LocalState()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return LocalState.model_validate(raw)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Ignoring unreadable local state %s: %s", self._path, e)
            return LocalState()

    def save(self, state: LocalState) -> None:
        """Write state to disk via a temporary file + atomic replace."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(
            json.dumps(state.model_dump(mode="json"), ensure_ascii=False),
            encoding="utf-8",
        )
        tmp.replace(self._path)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
