"""
Ticket credentials: the identifier actually scanned at the door.

Two shapes share one storage primitive (`consumed_count < total_units`):

- CounterCredential: one identifier for every admission unit of a purchase,
  admitted while `consumed_count < total_units`.
- UnitCredential: one identifier per admission unit, consumed exactly once.

They are a tagged union, not a hierarchy. `admission_state` is the only place
that looks at which shape it has.
"""

from datetime import datetime
from typing import ClassVar, Optional, TypeAlias

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.admission.domain.enum.credential_kind import CredentialKind


@attrs.define(frozen=True)
class AdmissionState:
    consumed_count: int
    total_units: int

    @property
    def remaining_units(self) -> int:
        return max(self.total_units - self.consumed_count, 0)

    @property
    def is_fully_consumed(self) -> bool:
        return self.consumed_count >= self.total_units


@attrs.define(frozen=True)
class CounterCredential:
    kind: ClassVar[CredentialKind] = CredentialKind.COUNTER

    identifier: str
    purchase_id: str
    total_units: int = attrs.field(validator=attrs.validators.ge(1))
    consumed_count: int = attrs.field(default=0, validator=attrs.validators.ge(0))
    last_admitted_at: Optional[datetime] = None
    last_admitted_by: Optional[str] = None

    def __attrs_post_init__(self) -> None:
        if self.consumed_count > self.total_units:
            raise DomainError(
                f'consumed_count {self.consumed_count} exceeds total_units {self.total_units}'
            )


@attrs.define(frozen=True)
class UnitCredential:
    kind: ClassVar[CredentialKind] = CredentialKind.UNIT

    identifier: str
    purchase_id: str
    consumed: bool = False
    last_admitted_at: Optional[datetime] = None
    last_admitted_by: Optional[str] = None


TicketCredential: TypeAlias = CounterCredential | UnitCredential


def admission_state(credential: TicketCredential) -> AdmissionState:
    if isinstance(credential, UnitCredential):
        return AdmissionState(consumed_count=int(credential.consumed), total_units=1)
    return AdmissionState(
        consumed_count=credential.consumed_count, total_units=credential.total_units
    )


def was_admitted_recently_by(
    credential: TicketCredential, *, verifier_id: str, now: datetime, window_seconds: float
) -> bool:
    """Whether this verifier already admitted the credential inside the duplicate window"""
    if credential.last_admitted_at is None or credential.last_admitted_by != verifier_id:
        return False
    return (now - credential.last_admitted_at).total_seconds() < window_seconds
