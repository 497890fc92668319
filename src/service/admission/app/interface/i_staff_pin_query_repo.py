from abc import ABC, abstractmethod
from typing import List


class IStaffPinQueryRepo(ABC):
    @abstractmethod
    async def list_active_pin_hashes(self) -> List[str]:
        pass
