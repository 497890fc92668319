"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.admission.driven_adapter.model.admission_attempt_log_model import (
    AdmissionAttemptLogModel,
)
from src.service.admission.driven_adapter.model.customer_model import CustomerModel
from src.service.admission.driven_adapter.model.event_model import EventModel
from src.service.admission.driven_adapter.model.purchase_model import PurchaseModel
from src.service.admission.driven_adapter.model.staff_pin_model import StaffPinModel
from src.service.admission.driven_adapter.model.ticket_credential_model import (
    TicketCredentialModel,
)

__all__ = [
    'AdmissionAttemptLogModel',
    'CustomerModel',
    'EventModel',
    'PurchaseModel',
    'StaffPinModel',
    'TicketCredentialModel',
]
