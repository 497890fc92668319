from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.dto.ticket_lookup import TicketLookup
from src.service.admission.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.admission.driven_adapter.model.customer_model import CustomerModel
from src.service.admission.driven_adapter.model.event_model import EventModel
from src.service.admission.driven_adapter.model.purchase_model import PurchaseModel
from src.service.admission.driven_adapter.model.ticket_credential_model import (
    TicketCredentialModel,
)
from src.service.admission.driven_adapter.repo.model_mapper import (
    to_credential,
    to_customer,
    to_event,
    to_purchase,
)


class TicketQueryRepoImpl(ITicketQueryRepo):
    def __init__(
        self,
        session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None,
        *,
        session: AsyncSession | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.session = session

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            # Session injected by UoW - use directly (no context manager needed)
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io
    async def get_ticket_lookup(self, *, identifier: str) -> Optional[TicketLookup]:
        # Outer joins: a credential whose purchase, customer or event vanished must still resolve
        stmt = (
            select(TicketCredentialModel, PurchaseModel, CustomerModel, EventModel)
            .outerjoin(PurchaseModel, PurchaseModel.id == TicketCredentialModel.purchase_id)
            .outerjoin(CustomerModel, CustomerModel.id == PurchaseModel.customer_id)
            .outerjoin(EventModel, EventModel.id == PurchaseModel.event_id)
            .where(TicketCredentialModel.identifier == identifier)
        )
        async with self._get_session() as session:
            row = (await session.execute(stmt)).first()

        if row is None:
            return None

        credential_model, purchase_model, customer_model, event_model = row
        return TicketLookup(
            credential=to_credential(credential_model),
            purchase=to_purchase(purchase_model) if purchase_model else None,
            customer=to_customer(customer_model) if customer_model else None,
            event=to_event(event_model) if event_model else None,
        )

    @Logger.io
    async def count_credentials_for_purchase(self, *, purchase_id: str) -> int:
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count())
                .select_from(TicketCredentialModel)
                .where(TicketCredentialModel.purchase_id == purchase_id)
            )
            return result.scalar_one()
