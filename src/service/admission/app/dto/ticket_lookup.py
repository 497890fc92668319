from typing import Optional

import attrs

from src.service.admission.domain.entity.purchase_entity import Customer, Event, Purchase
from src.service.admission.domain.entity.ticket_credential_entity import TicketCredential


@attrs.define(frozen=True)
class TicketLookup:
    """A credential row with whatever purchase context still resolves (missing parts are None)"""

    credential: TicketCredential
    purchase: Optional[Purchase] = None
    customer: Optional[Customer] = None
    event: Optional[Event] = None
