from datetime import datetime, timezone

import attrs

from src.service.admission.domain.entity.purchase_entity import Purchase
from src.service.admission.domain.enum.credential_kind import CredentialKind


@attrs.define(frozen=True)
class CredentialModelPolicy:
    """
    Decides which credential shape a purchase gets at issuance time.

    Purchases created on or after `cutover_at` whose admission units fit under
    `max_unit_credentials` get one unit credential per unit; everything else
    (older purchases, very large bundles) keeps a single counter credential.
    The version is stored with the log line of every issuance.
    """

    version: str
    cutover_at: datetime
    max_unit_credentials: int = attrs.field(validator=attrs.validators.ge(1))

    def credential_kind_for(self, purchase: Purchase) -> CredentialKind:
        created_at = purchase.created_at or datetime.now(timezone.utc)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        if created_at < self.cutover_at:
            return CredentialKind.COUNTER
        if purchase.total_admission_units > self.max_unit_credentials:
            return CredentialKind.COUNTER
        return CredentialKind.UNIT
