"""
Unit tests for AdmitTicketUseCase

Tests the admission flow against stub repositories:
1. Conditional consume (one call per attempt)
2. Rejection classification when nothing was applied
3. Exactly one audit log entry per attempt, committed with the consume
"""

from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock

import attrs
import pytest

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError
from src.service.admission.app.command.admit_ticket_use_case import AdmitTicketUseCase
from src.service.admission.app.dto.ticket_lookup import TicketLookup
from src.service.admission.domain.admission_error import (
    InvalidTicketIdError,
    OrphanedTicketError,
    UnpaidTicketError,
)
from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)
from src.service.admission.domain.entity.purchase_entity import Customer, Event, Purchase
from src.service.admission.domain.entity.ticket_credential_entity import (
    AdmissionState,
    CounterCredential,
    UnitCredential,
)
from src.service.admission.domain.enum.admission_result import AdmissionResult, AttemptOutcome
from src.service.admission.domain.enum.error_code import ErrorCode
from src.service.admission.domain.enum.payment_status import PaymentStatus


NOW = datetime(2024, 11, 2, 19, 0, tzinfo=timezone.utc)


class FakeUnitOfWork(AbstractUnitOfWork):
    """Holds AsyncMock repositories and counts commits"""

    def __init__(
        self,
        *,
        consumed: Optional[AdmissionState] = None,
        lookup: Optional[TicketLookup] = None,
    ) -> None:
        self.ticket_credential_command_repo = AsyncMock()
        self.ticket_credential_command_repo.try_consume_admission_unit.return_value = consumed
        self.ticket_query_repo = AsyncMock()
        self.ticket_query_repo.get_ticket_lookup.return_value = lookup
        self.admission_attempt_log_command_repo = AsyncMock()
        self.commits = 0

    async def _commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass

    @property
    def appended_logs(self) -> list[AdmissionAttemptLog]:
        return [
            call.kwargs['log']
            for call in self.admission_attempt_log_command_repo.append.await_args_list
        ]


def _lookup(
    *,
    credential=None,
    payment_status: PaymentStatus = PaymentStatus.PAID,
    with_purchase: bool = True,
) -> TicketLookup:
    purchase = Purchase(
        id='P1',
        customer_id='C-ada',
        event_id='E1',
        ticket_name='General Admission',
        quantity=1,
        payment_status=payment_status,
    )
    return TicketLookup(
        credential=credential or UnitCredential(identifier='U1', purchase_id='P1'),
        purchase=purchase if with_purchase else None,
        customer=Customer(id='C-ada', name='Ada Lovelace') if with_purchase else None,
        event=Event(id='E1', title='Harbour Lights Festival') if with_purchase else None,
    )


def _use_case(uow: FakeUnitOfWork) -> AdmitTicketUseCase:
    return AdmitTicketUseCase(unit_of_work=uow, duplicate_window_seconds=2.0, clock=lambda: NOW)


@pytest.mark.unit
class TestAdmitTicketUseCase:
    @pytest.mark.asyncio
    async def test_admit_success__logs_success_and_commits(self) -> None:
        # Arrange
        consumed = UnitCredential(identifier='U1', purchase_id='P1', consumed=True)
        uow = FakeUnitOfWork(
            consumed=AdmissionState(consumed_count=1, total_units=1),
            lookup=_lookup(credential=consumed),
        )

        # Act
        result = await _use_case(uow).execute(identifier=' U1 ', verifier_id='gate-1')

        # Assert - conditional consume with the normalized identifier
        assert result == AdmissionResult.SUCCESS
        uow.ticket_credential_command_repo.try_consume_admission_unit.assert_awaited_once_with(
            identifier='U1', verifier_id='gate-1', now=NOW, duplicate_window_seconds=2.0
        )

        # Assert - one success entry carrying the display context
        [log] = uow.appended_logs
        assert log.outcome == AttemptOutcome.SUCCESS
        assert log.error_code is None
        assert (log.identifier, log.verifier_id, log.attempted_at) == ('U1', 'gate-1', NOW)
        assert (log.customer_name, log.event_id, log.event_title) == (
            'Ada Lovelace',
            'E1',
            'Harbour Lights Festival',
        )
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_admit_rejected__unknown_identifier_not_found(self) -> None:
        uow = FakeUnitOfWork(consumed=None, lookup=None)

        result = await _use_case(uow).execute(identifier='NOPE', verifier_id='gate-1')

        assert result == AdmissionResult.NOT_FOUND
        [log] = uow.appended_logs
        assert log.outcome == AttemptOutcome.FAILURE
        assert log.error_code == ErrorCode.TICKET_NOT_FOUND
        assert log.customer_name is None
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_admit_rejected__exhausted_counter_already_used(self) -> None:
        uow = FakeUnitOfWork(
            consumed=None,
            lookup=_lookup(
                credential=CounterCredential(
                    identifier='C1',
                    purchase_id='P1',
                    total_units=3,
                    consumed_count=3,
                    last_admitted_at=NOW,
                    last_admitted_by='gate-2',
                )
            ),
        )

        result = await _use_case(uow).execute(identifier='C1', verifier_id='gate-1')

        assert result == AdmissionResult.ALREADY_USED
        assert uow.appended_logs[0].error_code == ErrorCode.ALREADY_USED

    @pytest.mark.asyncio
    async def test_admit_rejected__same_verifier_inside_window_is_duplicate(self) -> None:
        # Arrange - consumed unit credential, admitted by this gate one second ago
        credential = UnitCredential(
            identifier='U1',
            purchase_id='P1',
            consumed=True,
            last_admitted_at=datetime(2024, 11, 2, 18, 59, 59, tzinfo=timezone.utc),
            last_admitted_by='gate-1',
        )
        uow = FakeUnitOfWork(consumed=None, lookup=_lookup(credential=credential))

        # Act
        result = await _use_case(uow).execute(identifier='U1', verifier_id='gate-1')

        # Assert - duplicate takes precedence over already used
        assert result == AdmissionResult.DUPLICATE_SCAN
        assert uow.appended_logs[0].error_code == ErrorCode.DUPLICATE_SCAN

    @pytest.mark.asyncio
    async def test_admit_fail__unpaid_raises_after_logging(self) -> None:
        uow = FakeUnitOfWork(
            consumed=None, lookup=_lookup(payment_status=PaymentStatus.PENDING_PAYMENT)
        )

        with pytest.raises(UnpaidTicketError):
            await _use_case(uow).execute(identifier='U1', verifier_id='gate-1')

        assert [log.error_code for log in uow.appended_logs] == [ErrorCode.UNPAID_TICKET]
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_admit_fail__orphaned_raises_after_logging(self) -> None:
        uow = FakeUnitOfWork(consumed=None, lookup=_lookup(with_purchase=False))

        with pytest.raises(OrphanedTicketError):
            await _use_case(uow).execute(identifier='U1', verifier_id='gate-1')

        assert [log.error_code for log in uow.appended_logs] == [ErrorCode.ORPHANED_TICKET]
        assert uow.commits == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize('missing', ['customer', 'event'])
    async def test_admit_fail__paid_purchase_missing_customer_or_event(self, missing: str) -> None:
        # Arrange
        lookup = attrs.evolve(_lookup(), **{missing: None})
        uow = FakeUnitOfWork(consumed=None, lookup=lookup)

        # Act
        with pytest.raises(OrphanedTicketError):
            await _use_case(uow).execute(identifier='U1', verifier_id='gate-1')

        # Assert
        assert [log.error_code for log in uow.appended_logs] == [ErrorCode.ORPHANED_TICKET]
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_admit_fail__malformed_identifier_logged_as_presented(self) -> None:
        uow = FakeUnitOfWork()

        with pytest.raises(InvalidTicketIdError):
            await _use_case(uow).execute(identifier='a/b', verifier_id='gate-1')

        # Assert - never reaches the credential table
        uow.ticket_credential_command_repo.try_consume_admission_unit.assert_not_awaited()
        [log] = uow.appended_logs
        assert log.identifier == 'a/b'
        assert log.error_code == ErrorCode.INVALID_TICKET_ID
        assert uow.commits == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize('verifier_id', ['', '   ', 'g' * 129])
    async def test_admit_fail__invalid_verifier_id(self, verifier_id: str) -> None:
        uow = FakeUnitOfWork()

        with pytest.raises(DomainError) as exc_info:
            await _use_case(uow).execute(identifier='U1', verifier_id=verifier_id)

        assert exc_info.value.status_code == 400
        assert uow.appended_logs == []
