"""Story 6.4: Alert cooldown persistence.

The two last-fired timestamps are the only durable state the engine
depends on. They survive restarts through the JSON file store; the
in-memory store serves tests and hosts that persist elsewhere.
"""

import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from glucose_insights.config import Settings
from glucose_insights.logging_config import get_logger
from glucose_insights.schemas.alert import AlertCooldownState

logger = get_logger(__name__)


class CooldownStore(Protocol):
    """Read/write access to the persisted cooldown record."""

    def load(self) -> AlertCooldownState: ...

    def save(self, state: AlertCooldownState) -> None: ...


class InMemoryCooldownStore:
    """Cooldown record held in process memory."""

    def __init__(self, state: AlertCooldownState | None = None):
        self._state = state or AlertCooldownState()

    def load(self) -> AlertCooldownState:
        return self._state

    def save(self, state: AlertCooldownState) -> None:
        self._state = state


class JsonFileCooldownStore:
    """Cooldown record persisted as a small JSON document.

    A missing file means nothing has fired yet. An unreadable file is
    logged and treated the same way, so a corrupt record can at worst
    allow one early repeat alert.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @classmethod
    def from_settings(cls, settings: Settings) -> "JsonFileCooldownStore":
        """Store at the configured cooldown_state_path."""
        return cls(settings.cooldown_state_path)

    def load(self) -> AlertCooldownState:
        if not self.path.exists():
            return AlertCooldownState()

        try:
            return AlertCooldownState.model_validate_json(self.path.read_bytes())
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(
                "Unreadable cooldown record, starting fresh",
                path=str(self.path),
                error=str(e),
            )
            return AlertCooldownState()

    def save(self, state: AlertCooldownState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file and rename so readers never see a partial record
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(state.model_dump_json())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
