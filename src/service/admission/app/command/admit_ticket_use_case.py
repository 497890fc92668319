from datetime import datetime, timezone
import time
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.admission_metrics import metrics
from src.service.admission.app.dto.ticket_lookup import TicketLookup
from src.service.admission.domain.admission_error import (
    InvalidTicketIdError,
    OrphanedTicketError,
    UnpaidTicketError,
)
from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)
from src.service.admission.domain.entity.ticket_credential_entity import (
    was_admitted_recently_by,
)
from src.service.admission.domain.enum.admission_result import AdmissionResult
from src.service.admission.domain.enum.error_code import ErrorCode
from src.service.admission.domain.value_object.ticket_identifier import (
    normalize_ticket_identifier,
)


MAX_VERIFIER_ID_LENGTH = 128
# Raw input is logged as presented, clipped to the column width
MAX_LOGGED_IDENTIFIER_LENGTH = 255

_RESULT_BY_ERROR_CODE: dict[ErrorCode, AdmissionResult] = {
    ErrorCode.TICKET_NOT_FOUND: AdmissionResult.NOT_FOUND,
    ErrorCode.DUPLICATE_SCAN: AdmissionResult.DUPLICATE_SCAN,
    ErrorCode.ALREADY_USED: AdmissionResult.ALREADY_USED,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdmitTicketUseCase:
    """
    Consume one admission unit of a credential.

    Flow (one transaction per call):
    1. Conditional update: consume a unit only if one remains, the purchase is
       paid and this verifier did not admit it inside the duplicate window
    2. If nothing was applied, classify why from the current row
    3. Append exactly one audit log entry, commit

    NOT_FOUND / ALREADY_USED / DUPLICATE_SCAN are returned as results.
    Unpaid and orphaned credentials raise after their failure is logged.
    """

    def __init__(
        self,
        *,
        unit_of_work: AbstractUnitOfWork,
        duplicate_window_seconds: float = settings.ADMISSION_DUPLICATE_WINDOW_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.unit_of_work = unit_of_work
        self.duplicate_window_seconds = duplicate_window_seconds
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        unit_of_work: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
    ) -> Self:
        return cls(unit_of_work=unit_of_work)

    @Logger.io
    async def execute(self, *, identifier: str, verifier_id: str) -> AdmissionResult:
        verifier_id = (verifier_id or '').strip()
        if not verifier_id or len(verifier_id) > MAX_VERIFIER_ID_LENGTH:
            raise DomainError(f'verifier_id must be 1-{MAX_VERIFIER_ID_LENGTH} characters')

        started = time.perf_counter()
        now = self.clock()

        try:
            normalized = normalize_ticket_identifier(identifier)
        except InvalidTicketIdError:
            await self._append_rejected_input(identifier=identifier, verifier_id=verifier_id, now=now)
            metrics.record_admission(
                event_id=None,
                result=ErrorCode.INVALID_TICKET_ID.value,
                duration=time.perf_counter() - started,
            )
            raise

        with self.tracer.start_as_current_span(
            'use_case.admit_ticket',
            attributes={'admission.identifier': normalized, 'admission.verifier_id': verifier_id},
        ) as span:
            async with self.unit_of_work as uow:
                state = await uow.ticket_credential_command_repo.try_consume_admission_unit(
                    identifier=normalized,
                    verifier_id=verifier_id,
                    now=now,
                    duplicate_window_seconds=self.duplicate_window_seconds,
                )
                # Same transaction: sees the row as this update left it
                lookup = await uow.ticket_query_repo.get_ticket_lookup(identifier=normalized)

                error_code = (
                    None
                    if state is not None
                    else self._classify_rejection(lookup, verifier_id=verifier_id, now=now)
                )

                await uow.admission_attempt_log_command_repo.append(
                    log=AdmissionAttemptLog.record(
                        identifier=normalized,
                        verifier_id=verifier_id,
                        error_code=error_code,
                        attempted_at=now,
                        customer_name=lookup.customer.name if lookup and lookup.customer else None,
                        event_id=lookup.purchase.event_id if lookup and lookup.purchase else None,
                        event_title=lookup.event.title if lookup and lookup.event else None,
                    )
                )
                await uow.commit()
            span.set_attribute('admission.outcome', error_code.value if error_code else 'SUCCESS')

        metrics.record_admission(
            event_id=lookup.purchase.event_id if lookup and lookup.purchase else None,
            result=error_code.value if error_code else AdmissionResult.SUCCESS.value,
            duration=time.perf_counter() - started,
        )

        if error_code == ErrorCode.UNPAID_TICKET:
            raise UnpaidTicketError()
        if error_code == ErrorCode.ORPHANED_TICKET:
            raise OrphanedTicketError()

        if error_code is None:
            Logger.base.info(f'✅ [ADMIT] {normalized} admitted by {verifier_id}')
            return AdmissionResult.SUCCESS

        result = _RESULT_BY_ERROR_CODE[error_code]
        Logger.base.info(f'🚫 [ADMIT] {normalized} rejected for {verifier_id}: {result}')
        return result

    def _classify_rejection(
        self, lookup: Optional[TicketLookup], *, verifier_id: str, now: datetime
    ) -> ErrorCode:
        if lookup is None:
            return ErrorCode.TICKET_NOT_FOUND
        # Checked before exhaustion: a retried request whose success response was lost
        if was_admitted_recently_by(
            lookup.credential,
            verifier_id=verifier_id,
            now=now,
            window_seconds=self.duplicate_window_seconds,
        ):
            return ErrorCode.DUPLICATE_SCAN
        if lookup.purchase is None:
            return ErrorCode.ORPHANED_TICKET
        if not lookup.purchase.is_paid:
            return ErrorCode.UNPAID_TICKET
        if lookup.customer is None or lookup.event is None:
            return ErrorCode.ORPHANED_TICKET
        return ErrorCode.ALREADY_USED

    async def _append_rejected_input(
        self, *, identifier: str, verifier_id: str, now: datetime
    ) -> None:
        async with self.unit_of_work as uow:
            await uow.admission_attempt_log_command_repo.append(
                log=AdmissionAttemptLog.record(
                    identifier=(identifier or '')[:MAX_LOGGED_IDENTIFIER_LENGTH],
                    verifier_id=verifier_id,
                    error_code=ErrorCode.INVALID_TICKET_ID,
                    attempted_at=now,
                )
            )
            await uow.commit()
