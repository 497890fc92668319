"""ORM model -> domain entity conversions shared by the admission repositories"""

from src.platform.types.utc_datetime import ensure_utc
from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)
from src.service.admission.domain.entity.purchase_entity import Customer, Event, Purchase
from src.service.admission.domain.entity.ticket_credential_entity import (
    CounterCredential,
    TicketCredential,
    UnitCredential,
)
from src.service.admission.domain.enum.admission_result import AttemptOutcome
from src.service.admission.domain.enum.credential_kind import CredentialKind
from src.service.admission.domain.enum.error_code import ErrorCode
from src.service.admission.domain.enum.payment_status import PaymentStatus
from src.service.admission.driven_adapter.model.admission_attempt_log_model import (
    AdmissionAttemptLogModel,
)
from src.service.admission.driven_adapter.model.customer_model import CustomerModel
from src.service.admission.driven_adapter.model.event_model import EventModel
from src.service.admission.driven_adapter.model.purchase_model import PurchaseModel
from src.service.admission.driven_adapter.model.ticket_credential_model import (
    TicketCredentialModel,
)


def to_credential(model: TicketCredentialModel) -> TicketCredential:
    if CredentialKind(model.kind) == CredentialKind.UNIT:
        return UnitCredential(
            identifier=model.identifier,
            purchase_id=model.purchase_id,
            consumed=model.consumed_count >= model.total_units,
            last_admitted_at=ensure_utc(model.last_admitted_at),
            last_admitted_by=model.last_admitted_by,
        )
    return CounterCredential(
        identifier=model.identifier,
        purchase_id=model.purchase_id,
        consumed_count=model.consumed_count,
        total_units=model.total_units,
        last_admitted_at=ensure_utc(model.last_admitted_at),
        last_admitted_by=model.last_admitted_by,
    )


def to_purchase(model: PurchaseModel) -> Purchase:
    return Purchase(
        id=model.id,
        customer_id=model.customer_id,
        event_id=model.event_id,
        ticket_name=model.ticket_name,
        quantity=model.quantity,
        payment_status=PaymentStatus(model.payment_status),
        is_bundle=model.is_bundle,
        admissions_per_bundle_unit=model.admissions_per_bundle_unit,
        created_at=ensure_utc(model.created_at),
    )


def to_customer(model: CustomerModel) -> Customer:
    return Customer(id=model.id, name=model.name, email=model.email, phone=model.phone)


def to_event(model: EventModel) -> Event:
    return Event(
        id=model.id,
        title=model.title,
        date_text=model.date_text,
        time_text=model.time_text,
        venue_name=model.venue_name,
    )


def to_attempt_log(model: AdmissionAttemptLogModel) -> AdmissionAttemptLog:
    return AdmissionAttemptLog(
        id=model.id,
        identifier=model.identifier,
        verifier_id=model.verifier_id,
        attempted_at=ensure_utc(model.attempted_at),
        outcome=AttemptOutcome(model.outcome),
        error_code=ErrorCode(model.error_code) if model.error_code else None,
        customer_name=model.customer_name,
        event_id=model.event_id,
        event_title=model.event_title,
    )
