from typing import AsyncContextManager, Callable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_staff_pin_query_repo import IStaffPinQueryRepo
from src.service.admission.driven_adapter.model.staff_pin_model import StaffPinModel


class StaffPinQueryRepoImpl(IStaffPinQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def list_active_pin_hashes(self) -> List[str]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(StaffPinModel.hashed_pin).where(StaffPinModel.is_active.is_(True))
            )
            return list(result.scalars().all())
