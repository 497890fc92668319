from abc import ABC, abstractmethod

from pydantic import SecretStr

from src.service.admission.domain.enum.admission_result import AdmissionResult
from src.service.gate_client.domain.gate_ticket import GateTicket


class IGateApi(ABC):
    """
    Remote admission operations as seen from a gate device.

    Business rejections raise TicketVerificationError, network problems raise
    GateTransportError.
    """

    @abstractmethod
    async def resolve_ticket(self, *, identifier: str) -> GateTicket:
        pass

    @abstractmethod
    async def admit_ticket(self, *, identifier: str, verifier_id: str) -> AdmissionResult:
        pass

    @abstractmethod
    async def check_staff_pin(self, *, pin: SecretStr) -> bool:
        pass
