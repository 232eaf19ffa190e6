from __future__ import annotations

import threading
import uuid

from stilo.application.ports.session_store import BookingSessionStorePort
from stilo.application.use_cases.booking_flow import BookingFlowController


class MemoryBookingSessionStore(BookingSessionStorePort):
    def __init__(self, limit: int = 1000) -> None:
        self._sessions: dict[str, BookingFlowController] = {}
        self._lock = threading.Lock()
        self._limit = limit

    def create(self, controller: BookingFlowController) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            # Oldest sessions go first once the limit is reached.
            while len(self._sessions) >= self._limit:
                oldest = next(iter(self._sessions))
                self._sessions.pop(oldest).exit()
            self._sessions[session_id] = controller
        return session_id

    def get(self, session_id: str) -> BookingFlowController | None:
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: str) -> BookingFlowController | None:
        with self._lock:
            return self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
