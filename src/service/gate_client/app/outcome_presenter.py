from typing import Optional

from src.service.admission.domain.enum.error_code import ErrorCode
from src.service.gate_client.app.verification_orchestrator import VerificationSnapshot
from src.service.gate_client.domain.outcome_display import AudioCue, DisplayTone, OutcomeDisplay
from src.service.gate_client.domain.verification_state import VerificationState


_ERROR_TITLES: dict[ErrorCode, str] = {
    ErrorCode.TICKET_NOT_FOUND: 'Ticket not found',
    ErrorCode.INVALID_TICKET_ID: 'Invalid ticket',
    ErrorCode.UNPAID_TICKET: 'Payment incomplete',
    ErrorCode.ORPHANED_TICKET: 'Ticket not valid',
    ErrorCode.DUPLICATE_SCAN: 'Scanned twice',
}


def present_outcome(snapshot: VerificationSnapshot) -> Optional[OutcomeDisplay]:
    """Map a terminal verification state to what the gate shows and plays; None while in progress"""
    if not snapshot.state.is_terminal:
        return None

    ticket = snapshot.ticket

    if snapshot.state == VerificationState.ADMITTED_JUST_NOW:
        message = 'Entry granted'
        if ticket is not None:
            message = (
                f'{ticket.customer_name} · {ticket.ticket_name} · '
                f'{ticket.remaining_units}/{ticket.total_units} admissions left'
            )
        return OutcomeDisplay(
            tone=DisplayTone.SUCCESS, title='Admitted', message=message, audio_cue=AudioCue.ADMIT
        )

    if snapshot.state == VerificationState.ALREADY_USED_DISPLAY:
        message = snapshot.message or 'This ticket has already been used'
        if ticket is not None:
            message = f'{message} ({ticket.customer_name}, {ticket.total_units} admissions)'
        return OutcomeDisplay(
            tone=DisplayTone.NOTICE,
            title='Already used',
            message=message,
            audio_cue=AudioCue.ALREADY_USED,
        )

    title = 'Verification failed'
    if snapshot.error_code is not None:
        title = _ERROR_TITLES.get(snapshot.error_code, title)
    return OutcomeDisplay(
        tone=DisplayTone.ERROR,
        title=title,
        message=snapshot.message or title,
        audio_cue=AudioCue.ERROR,
    )
