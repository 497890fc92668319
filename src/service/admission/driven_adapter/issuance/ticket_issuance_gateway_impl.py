from typing import List

from uuid_utils import uuid4

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_ticket_credential_command_repo import (
    ITicketCredentialCommandRepo,
)
from src.service.admission.app.interface.i_ticket_issuance_gateway import (
    ITicketIssuanceGateway,
)
from src.service.admission.domain.entity.purchase_entity import Purchase
from src.service.admission.domain.entity.ticket_credential_entity import (
    CounterCredential,
    UnitCredential,
)


class TicketIssuanceGatewayImpl(ITicketIssuanceGateway):
    """
    Mints credential identifiers and stores their rows.

    Identifiers are random UUID4 strings so they cannot be guessed from a
    neighbouring ticket; QR rendering and delivery happen downstream.
    """

    def __init__(self, *, ticket_credential_command_repo: ITicketCredentialCommandRepo) -> None:
        self.ticket_credential_command_repo = ticket_credential_command_repo

    @Logger.io
    async def mint_unit_credentials(self, *, purchase: Purchase) -> List[str]:
        credentials = [
            UnitCredential(identifier=str(uuid4()), purchase_id=purchase.id)
            for _ in range(purchase.total_admission_units)
        ]
        await self.ticket_credential_command_repo.create_many(credentials=credentials)
        Logger.base.info(
            f'🎫 [ISSUE] Minted {len(credentials)} unit credentials for purchase {purchase.id}'
        )
        return [credential.identifier for credential in credentials]

    @Logger.io
    async def create_counter_credential(self, *, purchase: Purchase) -> str:
        credential = CounterCredential(
            identifier=str(uuid4()),
            purchase_id=purchase.id,
            total_units=purchase.total_admission_units,
        )
        await self.ticket_credential_command_repo.create_many(credentials=[credential])
        Logger.base.info(
            f'🎫 [ISSUE] Counter credential for purchase {purchase.id} '
            f'({credential.total_units} units)'
        )
        return credential.identifier
