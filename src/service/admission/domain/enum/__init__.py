"""Admission Domain Enums"""

from src.service.admission.domain.enum.admission_result import AdmissionResult, AttemptOutcome
from src.service.admission.domain.enum.credential_kind import CredentialKind
from src.service.admission.domain.enum.error_code import ErrorCode
from src.service.admission.domain.enum.payment_status import PaymentStatus

__all__ = ['AdmissionResult', 'AttemptOutcome', 'CredentialKind', 'ErrorCode', 'PaymentStatus']
