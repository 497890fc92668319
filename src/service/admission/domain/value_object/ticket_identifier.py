import re

from src.service.admission.domain.admission_error import InvalidTicketIdError


MAX_IDENTIFIER_LENGTH = 128
_IDENTIFIER_PATTERN = re.compile(r'[A-Za-z0-9][A-Za-z0-9_-]*')


def normalize_ticket_identifier(raw: str | None) -> str:
    """
    Trim a scanned or typed identifier and check it is well-formed.

    Identifiers are opaque: legacy counter credentials and minted unit
    credentials (UUID strings) both fit `[A-Za-z0-9][A-Za-z0-9_-]*`.
    """
    identifier = (raw or '').strip()
    if not identifier:
        raise InvalidTicketIdError('Ticket identifier is required')
    if len(identifier) > MAX_IDENTIFIER_LENGTH:
        raise InvalidTicketIdError(
            f'Ticket identifier must be at most {MAX_IDENTIFIER_LENGTH} characters'
        )
    if not _IDENTIFIER_PATTERN.fullmatch(identifier):
        raise InvalidTicketIdError('Ticket identifier contains invalid characters')
    return identifier
