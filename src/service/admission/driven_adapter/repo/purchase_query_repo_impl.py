from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_purchase_query_repo import IPurchaseQueryRepo
from src.service.admission.domain.entity.purchase_entity import Purchase
from src.service.admission.driven_adapter.model.purchase_model import PurchaseModel
from src.service.admission.driven_adapter.repo.model_mapper import to_purchase


class PurchaseQueryRepoImpl(IPurchaseQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, purchase_id: str) -> Optional[Purchase]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PurchaseModel).where(PurchaseModel.id == purchase_id)
            )
            purchase_model = result.scalar_one_or_none()

            if not purchase_model:
                return None

            return to_purchase(purchase_model)
