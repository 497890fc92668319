"""
Unit tests for VerificationOrchestrator

A scripted IGateApi stands in for the admission API; sleeps are recorded.
"""

from typing import Optional

import attrs
from pydantic import SecretStr
import pytest

from src.service.admission.domain.enum.admission_result import AdmissionResult
from src.service.admission.domain.enum.error_code import ErrorCode
from src.service.gate_client.app.duplicate_scan_guard import DuplicateScanGuard
from src.service.gate_client.app.interface.i_gate_api import IGateApi
from src.service.gate_client.app.staff_session_cache import MemoryTier, StaffSessionCache
from src.service.gate_client.app.verification_orchestrator import (
    ALREADY_USED_MESSAGE,
    INVALID_PIN_MESSAGE,
    VerificationOrchestrator,
)
from src.service.gate_client.domain.gate_client_error import (
    DUPLICATE_SCAN_MESSAGE,
    GateTransportError,
    TicketVerificationError,
)
from src.service.gate_client.domain.gate_ticket import GateTicket
from src.service.gate_client.domain.verification_state import VerificationState


def _ticket(*, remaining: int = 3, total: int = 3, identifier: str = 'C1') -> GateTicket:
    return GateTicket(
        identifier=identifier,
        credential_kind='counter',
        customer_name='Grace Hopper',
        event_title='Harbour Lights Festival',
        ticket_name='Family Bundle',
        quantity=1,
        remaining_units=remaining,
        total_units=total,
        is_fully_consumed=remaining == 0,
    )


class FakeGateApi(IGateApi):
    """
    Keeps a counter credential in memory. `resolve_errors` / `admit_errors` are
    raised (in order) before the call behaves normally.
    """

    def __init__(self, *, ticket: Optional[GateTicket] = None, pin: str = '1234') -> None:
        self.ticket = ticket or _ticket()
        self.pin = pin
        self.admit_result: Optional[AdmissionResult] = None
        self.resolve_errors: list[Exception] = []
        self.admit_errors: list[Exception] = []
        self.pin_errors: list[Exception] = []
        self.resolve_calls = 0
        self.admit_calls: list[tuple[str, str]] = []
        self.pin_calls = 0

    async def resolve_ticket(self, *, identifier: str) -> GateTicket:
        self.resolve_calls += 1
        if self.resolve_errors:
            raise self.resolve_errors.pop(0)
        return self.ticket

    async def admit_ticket(self, *, identifier: str, verifier_id: str) -> AdmissionResult:
        self.admit_calls.append((identifier, verifier_id))
        if self.admit_errors:
            raise self.admit_errors.pop(0)
        if self.admit_result is not None:
            return self.admit_result
        remaining = self.ticket.remaining_units - 1
        self.ticket = attrs.evolve(
            self.ticket, remaining_units=remaining, is_fully_consumed=remaining == 0
        )
        return AdmissionResult.SUCCESS

    async def check_staff_pin(self, *, pin: SecretStr) -> bool:
        self.pin_calls += 1
        if self.pin_errors:
            raise self.pin_errors.pop(0)
        return pin.get_secret_value() == self.pin


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeMonotonic:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def gate_api() -> FakeGateApi:
    return FakeGateApi()


@pytest.fixture
def session_cache() -> StaffSessionCache:
    return StaffSessionCache(tiers=[MemoryTier()])


@pytest.fixture
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def orchestrator(
    gate_api: FakeGateApi,
    session_cache: StaffSessionCache,
    monotonic: FakeMonotonic,
    sleep: RecordingSleep,
) -> VerificationOrchestrator:
    return VerificationOrchestrator(
        gate_api=gate_api,
        session_cache=session_cache,
        duplicate_scan_guard=DuplicateScanGuard(window_seconds=2.0, clock=monotonic),
        verifier_id='gate-1',
        max_attempts=3,
        base_delay=1.0,
        sleep=sleep,
    )


@pytest.fixture
def signed_in(session_cache: StaffSessionCache) -> StaffSessionCache:
    session_cache.start_session()
    return session_cache


@pytest.mark.unit
class TestStaffAuthorization:
    @pytest.mark.asyncio
    async def test_scan_without_session_asks_for_pin(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        snapshot = await orchestrator.scan('C1')

        assert snapshot.state == VerificationState.AWAITING_STAFF_AUTH
        assert snapshot.identifier == 'C1'
        assert gate_api.resolve_calls == 0

    @pytest.mark.asyncio
    async def test_invalid_pin_stays_locked(
        self,
        orchestrator: VerificationOrchestrator,
        gate_api: FakeGateApi,
        session_cache: StaffSessionCache,
    ) -> None:
        await orchestrator.scan('C1')

        snapshot = await orchestrator.submit_pin(SecretStr('0000'))

        assert snapshot.state == VerificationState.AWAITING_STAFF_AUTH
        assert snapshot.message == INVALID_PIN_MESSAGE
        assert not session_cache.is_authorized()
        assert gate_api.admit_calls == []

    @pytest.mark.asyncio
    async def test_valid_pin_resumes_the_pending_scan(
        self,
        orchestrator: VerificationOrchestrator,
        gate_api: FakeGateApi,
        session_cache: StaffSessionCache,
    ) -> None:
        # Arrange
        await orchestrator.scan('C1')

        # Act
        snapshot = await orchestrator.submit_pin(SecretStr('1234'))

        # Assert - session cached, scan carried through to admission
        assert session_cache.is_authorized()
        assert snapshot.state == VerificationState.ADMITTED_JUST_NOW
        assert gate_api.admit_calls == [('C1', 'gate-1')]
        assert orchestrator.history == [
            VerificationState.NO_CREDENTIAL_PROVIDED,
            VerificationState.AWAITING_STAFF_AUTH,
            VerificationState.CREDENTIAL_RESOLVING,
            VerificationState.CREDENTIAL_DISPLAYED,
            VerificationState.ADMITTED_JUST_NOW,
        ]

    @pytest.mark.asyncio
    async def test_valid_pin_without_pending_scan(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        snapshot = await orchestrator.submit_pin(SecretStr('1234'))

        assert snapshot.state == VerificationState.NO_CREDENTIAL_PROVIDED
        assert gate_api.resolve_calls == 0

    @pytest.mark.asyncio
    async def test_pin_check_network_failure_is_retried(
        self,
        orchestrator: VerificationOrchestrator,
        gate_api: FakeGateApi,
        sleep: RecordingSleep,
    ) -> None:
        gate_api.pin_errors = [GateTransportError('Network error')]

        snapshot = await orchestrator.submit_pin(SecretStr('1234'))

        assert snapshot.state == VerificationState.NO_CREDENTIAL_PROVIDED
        assert gate_api.pin_calls == 2
        assert sleep.delays == [1.0]

    @pytest.mark.asyncio
    async def test_logout_locks_the_gate(
        self,
        orchestrator: VerificationOrchestrator,
        signed_in: StaffSessionCache,
    ) -> None:
        snapshot = orchestrator.logout()

        assert snapshot.state == VerificationState.AWAITING_STAFF_AUTH
        assert not signed_in.is_authorized()


@pytest.mark.unit
@pytest.mark.usefixtures('signed_in')
class TestVerification:
    @pytest.mark.asyncio
    async def test_empty_scan(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        snapshot = await orchestrator.scan('   ')

        assert snapshot.state == VerificationState.NO_CREDENTIAL_PROVIDED
        assert gate_api.resolve_calls == 0

    @pytest.mark.asyncio
    async def test_admission_refreshes_ticket_without_admitting_again(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        snapshot = await orchestrator.scan(' C1 ')

        assert snapshot.state == VerificationState.ADMITTED_JUST_NOW
        assert snapshot.ticket.remaining_units == 2
        assert gate_api.resolve_calls == 2
        assert gate_api.admit_calls == [('C1', 'gate-1')]

    @pytest.mark.asyncio
    async def test_fully_consumed_ticket_is_never_admitted(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        gate_api.ticket = _ticket(remaining=0)

        snapshot = await orchestrator.scan('C1')

        assert snapshot.state == VerificationState.ALREADY_USED_DISPLAY
        assert snapshot.error_code == ErrorCode.ALREADY_USED
        assert snapshot.message == ALREADY_USED_MESSAGE
        assert gate_api.admit_calls == []

    @pytest.mark.asyncio
    async def test_admission_lost_to_another_gate(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        gate_api.admit_result = AdmissionResult.ALREADY_USED

        snapshot = await orchestrator.scan('C1')

        assert snapshot.state == VerificationState.ALREADY_USED_DISPLAY

    @pytest.mark.asyncio
    async def test_server_side_duplicate(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        gate_api.admit_result = AdmissionResult.DUPLICATE_SCAN

        snapshot = await orchestrator.scan('C1')

        assert snapshot.state == VerificationState.ADMISSION_FAILED
        assert snapshot.error_code == ErrorCode.DUPLICATE_SCAN
        assert snapshot.message == DUPLICATE_SCAN_MESSAGE

    @pytest.mark.asyncio
    async def test_local_rescan_inside_window_makes_no_calls(
        self,
        orchestrator: VerificationOrchestrator,
        gate_api: FakeGateApi,
        monotonic: FakeMonotonic,
    ) -> None:
        # Arrange - first scan admits
        await orchestrator.scan('C1')
        calls_before = (gate_api.resolve_calls, len(gate_api.admit_calls))

        # Act - same ticket a second later
        monotonic.now += 1.0
        snapshot = await orchestrator.scan('C1')

        # Assert
        assert snapshot.state == VerificationState.ADMISSION_FAILED
        assert snapshot.error_code == ErrorCode.DUPLICATE_SCAN
        assert (gate_api.resolve_calls, len(gate_api.admit_calls)) == calls_before

    @pytest.mark.asyncio
    async def test_rescan_after_window_admits_next_unit(
        self,
        orchestrator: VerificationOrchestrator,
        gate_api: FakeGateApi,
        monotonic: FakeMonotonic,
    ) -> None:
        await orchestrator.scan('C1')
        monotonic.now += 2.5

        snapshot = await orchestrator.scan('C1')

        assert snapshot.state == VerificationState.ADMITTED_JUST_NOW
        assert snapshot.ticket.remaining_units == 1

    @pytest.mark.asyncio
    async def test_resolution_failure_carries_error_code(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        gate_api.resolve_errors = [
            TicketVerificationError(
                error_code=ErrorCode.UNPAID_TICKET,
                message='Ticket purchase is not paid',
                status_code=402,
            )
        ]

        snapshot = await orchestrator.scan('PENDING-P3')

        assert snapshot.state == VerificationState.RESOLUTION_FAILED
        assert snapshot.error_code == ErrorCode.UNPAID_TICKET
        assert snapshot.message == 'Ticket purchase is not paid'
        assert gate_api.resolve_calls == 1
        assert gate_api.admit_calls == []

    @pytest.mark.asyncio
    async def test_transient_admit_failure_is_retried(
        self,
        orchestrator: VerificationOrchestrator,
        gate_api: FakeGateApi,
        sleep: RecordingSleep,
    ) -> None:
        gate_api.admit_errors = [GateTransportError('Network error'), GateTransportError('x')]

        snapshot = await orchestrator.scan('C1')

        assert snapshot.state == VerificationState.ADMITTED_JUST_NOW
        assert len(gate_api.admit_calls) == 3
        assert sleep.delays == [1.0, 1.5]

    @pytest.mark.asyncio
    async def test_admit_unreachable_after_retries(
        self,
        orchestrator: VerificationOrchestrator,
        gate_api: FakeGateApi,
    ) -> None:
        gate_api.admit_errors = [GateTransportError('Network error')] * 3

        snapshot = await orchestrator.scan('C1')

        assert snapshot.state == VerificationState.ADMISSION_FAILED
        assert snapshot.error_code is None
        assert snapshot.message == 'Network error'
        assert snapshot.ticket is not None

    @pytest.mark.asyncio
    async def test_refresh_failure_still_reports_admission(
        self, orchestrator: VerificationOrchestrator, gate_api: FakeGateApi
    ) -> None:
        # Arrange - first resolve succeeds, the refresh after admission fails for good
        original_resolve = gate_api.resolve_ticket
        calls = 0

        async def resolve_then_fail(*, identifier: str) -> GateTicket:
            nonlocal calls
            calls += 1
            if calls > 1:
                raise TicketVerificationError(error_code=None, message='Request failed (500)')
            return await original_resolve(identifier=identifier)

        gate_api.resolve_ticket = resolve_then_fail

        # Act
        snapshot = await orchestrator.scan('C1')

        # Assert - pre-admission ticket stays on screen
        assert snapshot.state == VerificationState.ADMITTED_JUST_NOW
        assert snapshot.ticket.remaining_units == 3
        assert len(gate_api.admit_calls) == 1
