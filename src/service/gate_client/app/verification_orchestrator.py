"""
Verification Orchestrator

Drives one gate device through a scan:

    NO_CREDENTIAL_PROVIDED -> AWAITING_STAFF_AUTH -> (PIN valid)
        -> CREDENTIAL_RESOLVING -> CREDENTIAL_DISPLAYED | RESOLUTION_FAILED
    CREDENTIAL_DISPLAYED (units remaining) -> admit once
        -> ADMITTED_JUST_NOW | ALREADY_USED_DISPLAY | ADMISSION_FAILED

Every remote call goes through with_retry. After a successful admission the
ticket is resolved again to refresh its counts, without admitting again.
"""

from typing import Awaitable, Callable, Optional, TypeVar

import anyio
import attrs
from pydantic import SecretStr

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.admission.domain.enum.admission_result import AdmissionResult
from src.service.admission.domain.enum.error_code import ErrorCode
from src.service.gate_client.app.duplicate_scan_guard import DuplicateScanGuard
from src.service.gate_client.app.interface.i_gate_api import IGateApi
from src.service.gate_client.app.retry_controller import with_retry
from src.service.gate_client.app.staff_session_cache import StaffSessionCache
from src.service.gate_client.domain.gate_client_error import (
    DUPLICATE_SCAN_MESSAGE,
    DuplicateScanError,
    GateClientError,
    TicketVerificationError,
)
from src.service.gate_client.domain.gate_ticket import GateTicket
from src.service.gate_client.domain.verification_state import VerificationState


T = TypeVar('T')

INVALID_PIN_MESSAGE = 'Invalid PIN'
NOT_FOUND_MESSAGE = 'Ticket not found'
ALREADY_USED_MESSAGE = 'This ticket has already been used'


@attrs.define(frozen=True)
class VerificationSnapshot:
    """What the gate screen shows after each step"""

    state: VerificationState
    identifier: Optional[str] = None
    ticket: Optional[GateTicket] = None
    error_code: Optional[ErrorCode] = None
    message: Optional[str] = None


class VerificationOrchestrator:
    def __init__(
        self,
        *,
        gate_api: IGateApi,
        session_cache: StaffSessionCache,
        duplicate_scan_guard: DuplicateScanGuard,
        verifier_id: str,
        max_attempts: int = settings.GATE_RETRY_MAX_ATTEMPTS,
        base_delay: float = settings.GATE_RETRY_BASE_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = anyio.sleep,
    ) -> None:
        self.gate_api = gate_api
        self.session_cache = session_cache
        self.duplicate_scan_guard = duplicate_scan_guard
        self.verifier_id = verifier_id
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.sleep = sleep

        self.snapshot = VerificationSnapshot(state=VerificationState.NO_CREDENTIAL_PROVIDED)
        self.history: list[VerificationState] = [self.snapshot.state]
        self._pending_identifier: Optional[str] = None

    @property
    def state(self) -> VerificationState:
        return self.snapshot.state

    async def scan(self, identifier: Optional[str]) -> VerificationSnapshot:
        identifier = (identifier or '').strip()
        if not identifier:
            self._pending_identifier = None
            return self._transition(VerificationState.NO_CREDENTIAL_PROVIDED)

        if not self.session_cache.is_authorized():
            self._pending_identifier = identifier
            return self._transition(VerificationState.AWAITING_STAFF_AUTH, identifier=identifier)

        return await self._verify(identifier)

    async def submit_pin(self, pin: SecretStr) -> VerificationSnapshot:
        identifier = self._pending_identifier
        try:
            valid = await self._call(
                lambda: self.gate_api.check_staff_pin(pin=pin), label='check_staff_pin'
            )
        except GateClientError as e:
            return self._transition(
                VerificationState.AWAITING_STAFF_AUTH, identifier=identifier, message=e.message
            )

        if not valid:
            return self._transition(
                VerificationState.AWAITING_STAFF_AUTH,
                identifier=identifier,
                message=INVALID_PIN_MESSAGE,
            )

        self.session_cache.start_session()
        self._pending_identifier = None
        if identifier is None:
            return self._transition(VerificationState.NO_CREDENTIAL_PROVIDED)
        return await self._verify(identifier)

    def logout(self) -> VerificationSnapshot:
        self.session_cache.end_session()
        self._pending_identifier = None
        return self._transition(VerificationState.AWAITING_STAFF_AUTH)

    async def _verify(self, identifier: str) -> VerificationSnapshot:
        try:
            self.duplicate_scan_guard.check(identifier=identifier)
        except DuplicateScanError as e:
            return self._transition(
                VerificationState.ADMISSION_FAILED,
                identifier=identifier,
                error_code=e.error_code,
                message=e.message,
            )

        self._transition(VerificationState.CREDENTIAL_RESOLVING, identifier=identifier)
        try:
            ticket = await self._resolve(identifier)
        except GateClientError as e:
            return self._fail(VerificationState.RESOLUTION_FAILED, identifier=identifier, error=e)

        self._transition(VerificationState.CREDENTIAL_DISPLAYED, identifier=identifier, ticket=ticket)
        if ticket.is_fully_consumed:
            return self._transition(
                VerificationState.ALREADY_USED_DISPLAY,
                identifier=identifier,
                ticket=ticket,
                error_code=ErrorCode.ALREADY_USED,
                message=ALREADY_USED_MESSAGE,
            )

        return await self._admit(identifier, ticket=ticket)

    async def _admit(self, identifier: str, *, ticket: GateTicket) -> VerificationSnapshot:
        try:
            result = await self._call(
                lambda: self.gate_api.admit_ticket(
                    identifier=identifier, verifier_id=self.verifier_id
                ),
                label='admit_ticket',
            )
        except GateClientError as e:
            return self._fail(
                VerificationState.ADMISSION_FAILED, identifier=identifier, error=e, ticket=ticket
            )

        if result == AdmissionResult.SUCCESS:
            try:
                ticket = await self._resolve(identifier)
            except GateClientError as e:
                # Admission already happened; keep the pre-admission ticket on screen
                Logger.base.warning(f'⚠️ [GATE] Refresh after admitting {identifier} failed: {e}')
            return self._transition(
                VerificationState.ADMITTED_JUST_NOW, identifier=identifier, ticket=ticket
            )

        if result == AdmissionResult.ALREADY_USED:
            return self._transition(
                VerificationState.ALREADY_USED_DISPLAY,
                identifier=identifier,
                ticket=ticket,
                error_code=ErrorCode.ALREADY_USED,
                message=ALREADY_USED_MESSAGE,
            )

        message = (
            DUPLICATE_SCAN_MESSAGE
            if result == AdmissionResult.DUPLICATE_SCAN
            else NOT_FOUND_MESSAGE
        )
        return self._transition(
            VerificationState.ADMISSION_FAILED,
            identifier=identifier,
            ticket=ticket,
            error_code=result.error_code,
            message=message,
        )

    async def _resolve(self, identifier: str) -> GateTicket:
        return await self._call(
            lambda: self.gate_api.resolve_ticket(identifier=identifier), label='resolve_ticket'
        )

    async def _call(self, operation: Callable[[], Awaitable[T]], *, label: str) -> T:
        return await with_retry(
            operation,
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            sleep=self.sleep,
            label=label,
        )

    def _fail(
        self,
        state: VerificationState,
        *,
        identifier: str,
        error: GateClientError,
        ticket: Optional[GateTicket] = None,
    ) -> VerificationSnapshot:
        error_code = error.error_code if isinstance(error, TicketVerificationError) else None
        return self._transition(
            state, identifier=identifier, ticket=ticket, error_code=error_code, message=error.message
        )

    def _transition(
        self,
        state: VerificationState,
        *,
        identifier: Optional[str] = None,
        ticket: Optional[GateTicket] = None,
        error_code: Optional[ErrorCode] = None,
        message: Optional[str] = None,
    ) -> VerificationSnapshot:
        self.snapshot = VerificationSnapshot(
            state=state,
            identifier=identifier,
            ticket=ticket,
            error_code=error_code,
            message=message,
        )
        self.history.append(state)
        detail = f' ({error_code or message})' if message else ''
        Logger.base.info(f'🎫 [GATE] {self.verifier_id} {identifier or "-"} -> {state}{detail}')
        return self.snapshot
