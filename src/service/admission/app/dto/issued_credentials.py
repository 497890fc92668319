from typing import List

import attrs

from src.service.admission.domain.enum.credential_kind import CredentialKind


@attrs.define(frozen=True)
class IssuedCredentials:
    purchase_id: str
    credential_kind: CredentialKind
    identifiers: List[str]
    policy_version: str
