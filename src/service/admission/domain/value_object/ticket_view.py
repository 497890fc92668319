from typing import Optional

import attrs

from src.service.admission.domain.entity.purchase_entity import Customer, Event, Purchase
from src.service.admission.domain.entity.ticket_credential_entity import (
    TicketCredential,
    UnitCredential,
    admission_state,
)
from src.service.admission.domain.enum.credential_kind import CredentialKind


@attrs.define(frozen=True)
class TicketView:
    """
    What the gate shows for a resolved credential.

    Callers branch on `remaining_units` / `is_fully_consumed` and never on the
    storage shape. `consumed` is only set for unit credentials.
    """

    identifier: str
    purchase_id: str
    credential_kind: CredentialKind
    customer_name: str
    event_id: str
    event_title: str
    ticket_name: str
    quantity: int
    consumed_count: int
    total_units: int
    consumed: Optional[bool] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    event_date_text: Optional[str] = None
    event_time_text: Optional[str] = None
    venue_name: Optional[str] = None

    @property
    def remaining_units(self) -> int:
        return max(self.total_units - self.consumed_count, 0)

    @property
    def is_fully_consumed(self) -> bool:
        return self.consumed_count >= self.total_units

    @classmethod
    def build(
        cls,
        *,
        credential: TicketCredential,
        purchase: Purchase,
        customer: Customer,
        event: Event,
    ) -> 'TicketView':
        state = admission_state(credential)
        return cls(
            identifier=credential.identifier,
            purchase_id=purchase.id,
            credential_kind=credential.kind,
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
            event_id=event.id,
            event_title=event.title,
            event_date_text=event.date_text,
            event_time_text=event.time_text,
            venue_name=event.venue_name,
            ticket_name=purchase.ticket_name,
            quantity=purchase.quantity,
            consumed_count=state.consumed_count,
            total_units=state.total_units,
            consumed=credential.consumed if isinstance(credential, UnitCredential) else None,
        )
