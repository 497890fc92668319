"""Admission Service Interfaces (ports implemented by driven adapters)"""

from src.service.admission.app.interface.i_admission_attempt_log_command_repo import (
    IAdmissionAttemptLogCommandRepo,
)
from src.service.admission.app.interface.i_admission_attempt_log_query_repo import (
    IAdmissionAttemptLogQueryRepo,
)
from src.service.admission.app.interface.i_pin_hasher import IPinHasher
from src.service.admission.app.interface.i_purchase_query_repo import IPurchaseQueryRepo
from src.service.admission.app.interface.i_staff_pin_query_repo import IStaffPinQueryRepo
from src.service.admission.app.interface.i_ticket_credential_command_repo import (
    ITicketCredentialCommandRepo,
)
from src.service.admission.app.interface.i_ticket_issuance_gateway import (
    ITicketIssuanceGateway,
)
from src.service.admission.app.interface.i_ticket_query_repo import ITicketQueryRepo

__all__ = [
    'IAdmissionAttemptLogCommandRepo',
    'IAdmissionAttemptLogQueryRepo',
    'IPinHasher',
    'IPurchaseQueryRepo',
    'IStaffPinQueryRepo',
    'ITicketCredentialCommandRepo',
    'ITicketIssuanceGateway',
    'ITicketQueryRepo',
]
