from abc import ABC, abstractmethod
from typing import List

from src.service.admission.domain.entity.purchase_entity import Purchase


class ITicketIssuanceGateway(ABC):
    """Ticket issuance collaborator: mints the identifiers printed on delivered tickets"""

    @abstractmethod
    async def mint_unit_credentials(self, *, purchase: Purchase) -> List[str]:
        """One unit credential per admission unit of the purchase"""
        pass

    @abstractmethod
    async def create_counter_credential(self, *, purchase: Purchase) -> str:
        pass
