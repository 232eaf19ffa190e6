from __future__ import annotations

from abc import ABC, abstractmethod

from stilo.application.use_cases.booking_flow import BookingFlowController


class BookingSessionStorePort(ABC):
    @abstractmethod
    def create(self, controller: BookingFlowController) -> str:
        """Register a controller and return its new session id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> BookingFlowController | None:
        raise NotImplementedError

    @abstractmethod
    def discard(self, session_id: str) -> BookingFlowController | None:
        """Forget a session; returns the controller that was removed, if any."""
        raise NotImplementedError
