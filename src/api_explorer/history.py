"""Newest-first log of executed requests.

Entries and the log itself are immutable; ``record`` returns a new log.
"""

import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from api_explorer.form.model import FormState
from api_explorer.parser.base import ApiEndpoint


class HistoryEntry(BaseModel):
    """One executed request and its successful response."""

    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: float = Field(default_factory=time.time)  # seconds since epoch
    endpoint: ApiEndpoint
    form_data: FormState
    response: Any = None
    status: int | None = None
    duration_ms: int | None = None


class HistoryLog(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: tuple[HistoryEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def next_id(self) -> int:
        return self.entries[0].id + 1 if self.entries else 1

    def create_entry(
        self,
        endpoint: ApiEndpoint,
        form_data: FormState,
        response: Any = None,
        status: int | None = None,
        duration_ms: int | None = None,
    ) -> HistoryEntry:
        """New entry with the next id; snapshots are deep copies."""
        return HistoryEntry(
            id=self.next_id,
            endpoint=endpoint.model_copy(deep=True),
            form_data=form_data.model_copy(deep=True),
            response=response,
            status=status,
            duration_ms=duration_ms,
        )

    def record(self, entry: HistoryEntry) -> "HistoryLog":
        if self.entries and entry.id <= self.entries[0].id:
            raise ValueError(f"History entry id {entry.id} is not newer than {self.entries[0].id}")
        return HistoryLog(entries=(entry, *self.entries))

    def get(self, entry_id: int) -> HistoryEntry | None:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def replay(self, entry: HistoryEntry) -> tuple[ApiEndpoint, FormState]:
        """Endpoint and form exactly as stored, for re-driving the builder."""
        return entry.endpoint, entry.form_data

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "HistoryLog":
        return cls.model_validate_json(text)
