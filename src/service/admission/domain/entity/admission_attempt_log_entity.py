from datetime import datetime, timezone
from typing import Optional

import attrs
from uuid_utils import uuid7

from src.service.admission.domain.enum.admission_result import AttemptOutcome
from src.service.admission.domain.enum.error_code import ErrorCode


@attrs.define(frozen=True)
class AdmissionAttemptLog:
    """Append-only audit record of one admission attempt"""

    id: str
    identifier: str
    verifier_id: str
    attempted_at: datetime
    outcome: AttemptOutcome
    error_code: Optional[ErrorCode] = None
    customer_name: Optional[str] = None
    event_id: Optional[str] = None
    event_title: Optional[str] = None

    @classmethod
    def record(
        cls,
        *,
        identifier: str,
        verifier_id: str,
        error_code: Optional[ErrorCode] = None,
        customer_name: Optional[str] = None,
        event_id: Optional[str] = None,
        event_title: Optional[str] = None,
        attempted_at: Optional[datetime] = None,
    ) -> 'AdmissionAttemptLog':
        return cls(
            id=str(uuid7()),
            identifier=identifier,
            verifier_id=verifier_id,
            attempted_at=attempted_at or datetime.now(timezone.utc),
            outcome=AttemptOutcome.FAILURE if error_code else AttemptOutcome.SUCCESS,
            error_code=error_code,
            customer_name=customer_name,
            event_id=event_id,
            event_title=event_title,
        )
