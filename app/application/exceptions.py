class BookingFlowError(RuntimeError):
    """Base class for booking wizard failures."""
    pass


class AuthError(BookingFlowError):
    """Raised when sign-up or sign-in is rejected (bad credentials, duplicate account, provider down)."""
    pass


class LoadError(BookingFlowError):
    """Raised when professionals, services or appointments cannot be fetched."""
    pass


class ProfileResolutionError(BookingFlowError):
    """Raised when the client profile lookup or creation fails."""
    pass


class SubmissionError(BookingFlowError):
    """Raised when the appointment insert fails."""
    pass


class IncompleteBookingError(SubmissionError):
    """Raised before any store call when professional, service, date or time is missing."""
    pass


class SubmissionInProgressError(BookingFlowError):
    """Raised when a second submit arrives while one is still in flight."""
    pass


class StoreUpstreamError(RuntimeError):
    """Raised by store adapters on transport errors or error responses."""
    pass


class InvalidTransitionError(BookingFlowError):
    """Raised when an action is not legal from the current step."""
    pass


class InvalidSelectionError(BookingFlowError):
    """Raised for local validation failures (unknown card, unbookable date, bad slot, empty form field)."""
    pass


class ContractViolationError(InvalidSelectionError):
    """Raised when a service is selected that does not belong to the selected professional."""
    pass


class UnknownSessionError(LookupError):
    """Raised when no wizard exists for a session id."""
    pass
