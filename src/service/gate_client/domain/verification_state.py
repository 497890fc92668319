from enum import StrEnum


class VerificationState(StrEnum):
    NO_CREDENTIAL_PROVIDED = 'no_credential_provided'
    AWAITING_STAFF_AUTH = 'awaiting_staff_auth'
    CREDENTIAL_RESOLVING = 'credential_resolving'
    CREDENTIAL_DISPLAYED = 'credential_displayed'
    RESOLUTION_FAILED = 'resolution_failed'
    ADMITTED_JUST_NOW = 'admitted_just_now'
    ALREADY_USED_DISPLAY = 'already_used_display'
    ADMISSION_FAILED = 'admission_failed'

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {
        VerificationState.RESOLUTION_FAILED,
        VerificationState.ADMITTED_JUST_NOW,
        VerificationState.ALREADY_USED_DISPLAY,
        VerificationState.ADMISSION_FAILED,
    }
)
