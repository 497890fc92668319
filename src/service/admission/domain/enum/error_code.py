from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable failure classification shared by the API, the audit log and the gate client"""

    TICKET_NOT_FOUND = 'TICKET_NOT_FOUND'
    INVALID_TICKET_ID = 'INVALID_TICKET_ID'
    UNPAID_TICKET = 'UNPAID_TICKET'
    ORPHANED_TICKET = 'ORPHANED_TICKET'
    ALREADY_USED = 'ALREADY_USED'
    DUPLICATE_SCAN = 'DUPLICATE_SCAN'
    PURCHASE_NOT_FOUND = 'PURCHASE_NOT_FOUND'
    CREDENTIALS_ALREADY_ISSUED = 'CREDENTIALS_ALREADY_ISSUED'
