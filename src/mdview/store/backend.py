"""Key-value settings persistence injected into the file stores"""

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlmodel import Session

from mdview.store.tables import SettingRow


class SettingsBackend(ABC):
    @abstractmethod
    def load(self, key: str) -> Any | None:
        """Return the stored JSON-compatible value for key, or None."""
        raise NotImplementedError

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        raise NotImplementedError


@dataclass
class MemoryBackend(SettingsBackend):
    _values: dict[str, Any] = field(default_factory=dict)

    def load(self, key: str) -> Any | None:
        return copy.deepcopy(self._values.get(key))

    def save(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)


class SQLBackend(SettingsBackend):
    """Settings stored as JSON values in the `settings` table, one row per key."""

    def __init__(self, engine):
        self.engine = engine

    def load(self, key: str) -> Any | None:
        with Session(self.engine) as session:
            row = session.get(SettingRow, key)
            return row.value if row else None

    def save(self, key: str, value: Any) -> None:
        with Session(self.engine) as session:
            row = session.get(SettingRow, key) or SettingRow(key=key)
            row.value = value
            row.updated_at = datetime.now()
            session.add(row)
            session.commit()
