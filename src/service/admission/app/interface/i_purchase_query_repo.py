from abc import ABC, abstractmethod
from typing import Optional

from src.service.admission.domain.entity.purchase_entity import Purchase


class IPurchaseQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, purchase_id: str) -> Optional[Purchase]:
        pass
