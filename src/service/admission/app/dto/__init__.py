from src.service.admission.app.dto.issued_credentials import IssuedCredentials
from src.service.admission.app.dto.ticket_lookup import TicketLookup

__all__ = ['IssuedCredentials', 'TicketLookup']
