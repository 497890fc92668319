from abc import ABC, abstractmethod
from typing import Optional

from src.service.admission.app.dto.ticket_lookup import TicketLookup


class ITicketQueryRepo(ABC):
    """Repository interface for credential reads"""

    @abstractmethod
    async def get_ticket_lookup(self, *, identifier: str) -> Optional[TicketLookup]:
        pass

    @abstractmethod
    async def count_credentials_for_purchase(self, *, purchase_id: str) -> int:
        pass
