from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from src.service.admission.app.dto.issued_credentials import IssuedCredentials
from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)
from src.service.admission.domain.value_object.ticket_view import TicketView


class TicketViewResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'identifier': '3f0c9d1e-2b7a-4c55-9f0e-6a1d2c3b4a5f',
                'purchase_id': 'P1',
                'credential_kind': 'unit',
                'customer_name': 'Ada Lovelace',
                'customer_email': 'ada@example.com',
                'customer_phone': None,
                'event_id': 'E1',
                'event_title': 'Harbour Lights Festival',
                'event_date_text': 'Sat 12 Oct',
                'event_time_text': '19:30',
                'venue_name': 'Pier 4',
                'ticket_name': 'General Admission',
                'quantity': 1,
                'consumed_count': 0,
                'total_units': 1,
                'consumed': False,
                'remaining_units': 1,
                'is_fully_consumed': False,
            }
        }
    )

    identifier: str
    purchase_id: str
    credential_kind: Literal['counter', 'unit']
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    event_id: str
    event_title: str
    event_date_text: Optional[str] = None
    event_time_text: Optional[str] = None
    venue_name: Optional[str] = None
    ticket_name: str
    quantity: int
    consumed_count: int
    total_units: int
    consumed: Optional[bool] = None
    remaining_units: int
    is_fully_consumed: bool

    @classmethod
    def from_view(cls, view: TicketView) -> 'TicketViewResponse':
        return cls(
            identifier=view.identifier,
            purchase_id=view.purchase_id,
            credential_kind=view.credential_kind.value,
            customer_name=view.customer_name,
            customer_email=view.customer_email,
            customer_phone=view.customer_phone,
            event_id=view.event_id,
            event_title=view.event_title,
            event_date_text=view.event_date_text,
            event_time_text=view.event_time_text,
            venue_name=view.venue_name,
            ticket_name=view.ticket_name,
            quantity=view.quantity,
            consumed_count=view.consumed_count,
            total_units=view.total_units,
            consumed=view.consumed,
            remaining_units=view.remaining_units,
            is_fully_consumed=view.is_fully_consumed,
        )


class AdmitTicketRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={'example': {'identifier': 'C1', 'verifier_id': 'gate-1'}}
    )

    identifier: str
    verifier_id: str = Field(min_length=1, max_length=128)

    @field_validator('verifier_id', mode='before')
    @classmethod
    def strip_verifier_id(cls, v: Any) -> Any:
        # Length limits apply to the trimmed value, matching the admission use case
        return v.strip() if isinstance(v, str) else v


class AdmitTicketResponse(BaseModel):
    identifier: str
    result: Literal['SUCCESS', 'ALREADY_USED', 'NOT_FOUND', 'DUPLICATE_SCAN']


class StaffPinCheckRequest(BaseModel):
    pin: SecretStr


class StaffPinCheckResponse(BaseModel):
    valid: bool


class AdmissionAttemptLogResponse(BaseModel):
    id: str
    identifier: str
    verifier_id: str
    attempted_at: datetime
    outcome: Literal['success', 'failure']
    error_code: Optional[str] = None
    customer_name: Optional[str] = None
    event_id: Optional[str] = None
    event_title: Optional[str] = None

    @classmethod
    def from_entity(cls, log: AdmissionAttemptLog) -> 'AdmissionAttemptLogResponse':
        return cls(
            id=log.id,
            identifier=log.identifier,
            verifier_id=log.verifier_id,
            attempted_at=log.attempted_at,
            outcome=log.outcome.value,
            error_code=log.error_code.value if log.error_code else None,
            customer_name=log.customer_name,
            event_id=log.event_id,
            event_title=log.event_title,
        )


class IssuedCredentialsResponse(BaseModel):
    purchase_id: str
    credential_kind: Literal['counter', 'unit']
    identifiers: List[str]
    policy_version: str

    @classmethod
    def from_dto(cls, issued: IssuedCredentials) -> 'IssuedCredentialsResponse':
        return cls(
            purchase_id=issued.purchase_id,
            credential_kind=issued.credential_kind.value,
            identifiers=list(issued.identifiers),
            policy_version=issued.policy_version,
        )
