from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)


class IAdmissionAttemptLogQueryRepo(ABC):
    @abstractmethod
    async def list_recent(
        self, *, event_id: Optional[str], limit: int, failures_only: bool = False
    ) -> List[AdmissionAttemptLog]:
        """Newest first"""
        pass
