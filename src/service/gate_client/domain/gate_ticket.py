from typing import Any, Optional

import attrs


@attrs.define(frozen=True)
class GateTicket:
    """The ticket as the gate sees it after resolution; one shape for both credential kinds"""

    identifier: str
    credential_kind: str
    customer_name: str
    event_title: str
    ticket_name: str
    quantity: int
    remaining_units: int
    total_units: int
    is_fully_consumed: bool
    event_id: Optional[str] = None
    venue_name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> 'GateTicket':
        return cls(
            identifier=payload['identifier'],
            credential_kind=payload['credential_kind'],
            customer_name=payload['customer_name'],
            event_title=payload['event_title'],
            ticket_name=payload['ticket_name'],
            quantity=int(payload['quantity']),
            remaining_units=int(payload['remaining_units']),
            total_units=int(payload['total_units']),
            is_fully_consumed=bool(payload['is_fully_consumed']),
            event_id=payload.get('event_id'),
            venue_name=payload.get('venue_name'),
        )
