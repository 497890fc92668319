from typing import Optional

from src.service.admission.domain.enum.error_code import ErrorCode


DUPLICATE_SCAN_MESSAGE = 'Please wait before scanning this ticket again'


class GateClientError(Exception):
    """Base class for failures surfaced to the gate orchestrator"""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TicketVerificationError(GateClientError):
    """Business rejection returned by the admission API. Never retried."""

    def __init__(
        self,
        *,
        error_code: Optional[ErrorCode],
        message: str,
        status_code: Optional[int] = None,
    ) -> None:
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class GateTransportError(GateClientError):
    """Network failure, timeout or an upstream gateway error. Retryable."""


class DuplicateScanError(GateClientError):
    error_code = ErrorCode.DUPLICATE_SCAN

    def __init__(self, message: str = DUPLICATE_SCAN_MESSAGE) -> None:
        super().__init__(message)
