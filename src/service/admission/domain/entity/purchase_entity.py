from datetime import datetime
from typing import Optional

import attrs

from src.service.admission.domain.enum.payment_status import PaymentStatus


@attrs.define
class Purchase:
    id: str
    customer_id: str
    event_id: str
    ticket_name: str
    quantity: int = attrs.field(validator=attrs.validators.ge(1))
    payment_status: PaymentStatus = PaymentStatus.PENDING_PAYMENT
    is_bundle: bool = False
    admissions_per_bundle_unit: int = attrs.field(default=1, validator=attrs.validators.ge(1))
    created_at: Optional[datetime] = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def total_admission_units(self) -> int:
        if self.is_bundle:
            return self.quantity * self.admissions_per_bundle_unit
        return self.quantity


@attrs.define
class Customer:
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


@attrs.define
class Event:
    id: str
    title: str
    date_text: Optional[str] = None
    time_text: Optional[str] = None
    venue_name: Optional[str] = None
