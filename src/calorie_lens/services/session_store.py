"""In-memory storage of per-browser session state."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import uuid4

from calorie_lens.domain.history import AppState


class SessionStore(Protocol):
    """Storage interface for browser session state."""

    def get(self, session_id: str) -> AppState:
        """Return the stored state, or a fresh one for unknown sessions."""

    def set(self, session_id: str, state: AppState) -> None:
        """Store the state for a session."""


@dataclass
class _StoredState:
    state: AppState
    expires_at: datetime


@dataclass
class InMemorySessionStore(SessionStore):
    """Session store kept in process memory; state expires after the TTL."""

    ttl_seconds: int = 43200
    _entries: dict[str, _StoredState] = field(default_factory=dict)

    def get(self, session_id: str) -> AppState:
        """Return the session state if it hasn't expired."""
        entry = self._entries.get(session_id)
        if entry is None:
            return AppState()
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(session_id, None)
            return AppState()
        return entry.state

    def set(self, session_id: str, state: AppState) -> None:
        """Store the session state and restart its TTL."""
        now = datetime.now(tz=UTC)
        self._evict_expired(now)
        self._entries[session_id] = _StoredState(
            state=state, expires_at=now + timedelta(seconds=self.ttl_seconds)
        )

    def _evict_expired(self, now: datetime) -> None:
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]


def new_session_id() -> str:
    """Return an opaque identifier for a new browser session."""
    return uuid4().hex
