from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncContextManager, AsyncIterator, Callable, Optional, Sequence

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_ticket_credential_command_repo import (
    ITicketCredentialCommandRepo,
)
from src.service.admission.domain.entity.ticket_credential_entity import (
    AdmissionState,
    TicketCredential,
    admission_state,
)
from src.service.admission.domain.enum.payment_status import PaymentStatus
from src.service.admission.driven_adapter.model.customer_model import CustomerModel
from src.service.admission.driven_adapter.model.event_model import EventModel
from src.service.admission.driven_adapter.model.purchase_model import PurchaseModel
from src.service.admission.driven_adapter.model.ticket_credential_model import (
    TicketCredentialModel,
)


class TicketCredentialCommandRepoImpl(ITicketCredentialCommandRepo):
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
        """
        If session is injected (from UoW), yield it directly and leave commit to the UoW.
        Otherwise open one from session_factory and commit on exit.
        """
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
                await session.commit()
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io
    async def try_consume_admission_unit(
        self,
        *,
        identifier: str,
        verifier_id: str,
        now: datetime,
        duplicate_window_seconds: float,
    ) -> Optional[AdmissionState]:
        """
        Single UPDATE ... WHERE ... RETURNING (compare-and-swap).

        The row lock taken by the UPDATE serializes concurrent gates: a second
        gate re-evaluates the WHERE clause after the first commits, so
        consumed_count can never pass total_units.
        """
        credential = TicketCredentialModel
        window_start = now - timedelta(seconds=duplicate_window_seconds)

        # Paid and still linked to its customer and event
        purchase_is_admissible = (
            select(PurchaseModel.id)
            .where(
                PurchaseModel.id == credential.purchase_id,
                PurchaseModel.payment_status == PaymentStatus.PAID.value,
                select(CustomerModel.id)
                .where(CustomerModel.id == PurchaseModel.customer_id)
                .correlate(PurchaseModel)
                .exists(),
                select(EventModel.id)
                .where(EventModel.id == PurchaseModel.event_id)
                .correlate(PurchaseModel)
                .exists(),
            )
            .correlate(credential)
            .exists()
        )
        outside_duplicate_window = or_(
            credential.last_admitted_by.is_(None),
            credential.last_admitted_at.is_(None),
            credential.last_admitted_by != verifier_id,
            credential.last_admitted_at <= window_start,
        )

        stmt = (
            update(credential)
            .where(
                and_(
                    credential.identifier == identifier,
                    credential.consumed_count < credential.total_units,
                    purchase_is_admissible,
                    outside_duplicate_window,
                )
            )
            .values(
                consumed_count=credential.consumed_count + 1,
                last_admitted_at=now,
                last_admitted_by=verifier_id,
            )
            .returning(credential.consumed_count, credential.total_units)
            .execution_options(synchronize_session=False)
        )

        async with self._get_session() as session:
            row = (await session.execute(stmt)).first()

        if row is None:
            return None

        Logger.base.info(
            f'🎟️ [ADMIT] {identifier} consumed {row.consumed_count}/{row.total_units} by {verifier_id}'
        )
        return AdmissionState(consumed_count=row.consumed_count, total_units=row.total_units)

    @Logger.io
    async def create_many(self, *, credentials: Sequence[TicketCredential]) -> None:
        async with self._get_session() as session:
            session.add_all([self._to_model(c) for c in credentials])
            await session.flush()

    @staticmethod
    def _to_model(credential: TicketCredential) -> TicketCredentialModel:
        state = admission_state(credential)
        return TicketCredentialModel(
            identifier=credential.identifier,
            purchase_id=credential.purchase_id,
            kind=credential.kind.value,
            consumed_count=state.consumed_count,
            total_units=state.total_units,
            last_admitted_at=credential.last_admitted_at,
            last_admitted_by=credential.last_admitted_by,
        )
