from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    PaymentRequiredError,
)
from src.service.admission.domain.enum.error_code import ErrorCode


class TicketNotFoundError(NotFoundError):
    error_code = ErrorCode.TICKET_NOT_FOUND

    def __init__(self, message: str = 'Ticket not found') -> None:
        super().__init__(message)


class InvalidTicketIdError(DomainError):
    error_code = ErrorCode.INVALID_TICKET_ID

    def __init__(self, message: str = 'Invalid ticket identifier') -> None:
        super().__init__(message, 400)


class UnpaidTicketError(PaymentRequiredError):
    error_code = ErrorCode.UNPAID_TICKET

    def __init__(self, message: str = 'Ticket purchase is not paid') -> None:
        super().__init__(message)


class OrphanedTicketError(ConflictError):
    error_code = ErrorCode.ORPHANED_TICKET

    def __init__(self, message: str = 'Ticket is not linked to a valid purchase') -> None:
        super().__init__(message)


class PurchaseNotFoundError(NotFoundError):
    error_code = ErrorCode.PURCHASE_NOT_FOUND

    def __init__(self, message: str = 'Purchase not found') -> None:
        super().__init__(message)


class CredentialsAlreadyIssuedError(ConflictError):
    error_code = ErrorCode.CREDENTIALS_ALREADY_ISSUED

    def __init__(self, message: str = 'Credentials were already issued for this purchase') -> None:
        super().__init__(message)
