from abc import ABC, abstractmethod

from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)


class IAdmissionAttemptLogCommandRepo(ABC):
    """Append-only writer for the admission audit trail"""

    @abstractmethod
    async def append(self, *, log: AdmissionAttemptLog) -> None:
        pass
