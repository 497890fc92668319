from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from src.service.admission.domain.entity.ticket_credential_entity import (
    AdmissionState,
    TicketCredential,
)


class ITicketCredentialCommandRepo(ABC):
    """Repository interface for credential writes"""

    @abstractmethod
    async def try_consume_admission_unit(
        self,
        *,
        identifier: str,
        verifier_id: str,
        now: datetime,
        duplicate_window_seconds: float,
    ) -> Optional[AdmissionState]:
        """
        Consume one admission unit in a single conditional update.

        Applies only while units remain, the purchase is paid and the same
        verifier has not admitted this credential inside the duplicate window.
        Returns the state after the update, or None when nothing was applied.
        """
        pass

    @abstractmethod
    async def create_many(self, *, credentials: Sequence[TicketCredential]) -> None:
        pass
