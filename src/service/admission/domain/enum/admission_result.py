from enum import StrEnum
from typing import Optional

from src.service.admission.domain.enum.error_code import ErrorCode


class AdmissionResult(StrEnum):
    SUCCESS = 'SUCCESS'
    ALREADY_USED = 'ALREADY_USED'
    NOT_FOUND = 'NOT_FOUND'
    DUPLICATE_SCAN = 'DUPLICATE_SCAN'

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return _RESULT_ERROR_CODES[self]


_RESULT_ERROR_CODES: dict[AdmissionResult, Optional[ErrorCode]] = {
    AdmissionResult.SUCCESS: None,
    AdmissionResult.ALREADY_USED: ErrorCode.ALREADY_USED,
    AdmissionResult.NOT_FOUND: ErrorCode.TICKET_NOT_FOUND,
    AdmissionResult.DUPLICATE_SCAN: ErrorCode.DUPLICATE_SCAN,
}


class AttemptOutcome(StrEnum):
    SUCCESS = 'success'
    FAILURE = 'failure'
