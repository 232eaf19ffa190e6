class BackendUnavailableError(RuntimeError):
    """Raised when a backend collaborator fails (network errors, timeouts, 5xx)."""
    pass


class BackendContractError(RuntimeError):
    """Raised when a backend response has an unexpected shape or missing data."""
    pass


class ReservationRejectedError(RuntimeError):
    """Raised when the backend refuses to persist a reservation."""
    pass


class IncompleteDraftError(ValueError):
    """Raised when an operation needs service, staff, date and time but some are missing."""
    pass
