from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.admission_metrics import metrics
from src.service.admission.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.admission.domain.admission_error import (
    InvalidTicketIdError,
    OrphanedTicketError,
    TicketNotFoundError,
    UnpaidTicketError,
)
from src.service.admission.domain.value_object.ticket_identifier import (
    normalize_ticket_identifier,
)
from src.service.admission.domain.value_object.ticket_view import TicketView


class ResolveTicketUseCase:
    """
    Map a scanned identifier to the ticket the gate displays.

    Read-only: nothing is consumed and nothing is written to the audit log.
    Failure order: malformed id, unknown id, purchase gone, purchase unpaid,
    customer or event gone.
    """

    def __init__(self, *, ticket_query_repo: ITicketQueryRepo) -> None:
        self.ticket_query_repo = ticket_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
    ) -> Self:
        return cls(ticket_query_repo=ticket_query_repo)

    @Logger.io
    async def execute(self, *, identifier: str) -> TicketView:
        try:
            return await self._resolve(identifier=identifier)
        except (
            InvalidTicketIdError,
            TicketNotFoundError,
            OrphanedTicketError,
            UnpaidTicketError,
        ) as e:
            metrics.record_resolution_failure(error_code=e.error_code.value)
            raise

    async def _resolve(self, *, identifier: str) -> TicketView:
        normalized = normalize_ticket_identifier(identifier)

        lookup = await self.ticket_query_repo.get_ticket_lookup(identifier=normalized)
        if lookup is None:
            raise TicketNotFoundError()

        if lookup.purchase is None:
            raise OrphanedTicketError()

        # A credential row may exist before payment completes; it is never admissible
        if not lookup.purchase.is_paid:
            raise UnpaidTicketError()

        if lookup.customer is None or lookup.event is None:
            raise OrphanedTicketError('Ticket purchase no longer resolves to a customer or event')

        return TicketView.build(
            credential=lookup.credential,
            purchase=lookup.purchase,
            customer=lookup.customer,
            event=lookup.event,
        )
