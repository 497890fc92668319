from src.service.admission.domain.value_object.credential_model_policy import (
    CredentialModelPolicy,
)
from src.service.admission.domain.value_object.ticket_identifier import (
    normalize_ticket_identifier,
)
from src.service.admission.domain.value_object.ticket_view import TicketView

__all__ = ['CredentialModelPolicy', 'TicketView', 'normalize_ticket_identifier']
