from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_admission_attempt_log_query_repo import (
    IAdmissionAttemptLogQueryRepo,
)
from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)
from src.service.admission.domain.enum.admission_result import AttemptOutcome
from src.service.admission.driven_adapter.model.admission_attempt_log_model import (
    AdmissionAttemptLogModel,
)
from src.service.admission.driven_adapter.repo.model_mapper import to_attempt_log


class AdmissionAttemptLogQueryRepoImpl(IAdmissionAttemptLogQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def list_recent(
        self, *, event_id: Optional[str], limit: int, failures_only: bool = False
    ) -> List[AdmissionAttemptLog]:
        stmt = select(AdmissionAttemptLogModel)
        if event_id:
            stmt = stmt.where(AdmissionAttemptLogModel.event_id == event_id)
        if failures_only:
            stmt = stmt.where(AdmissionAttemptLogModel.outcome == AttemptOutcome.FAILURE.value)
        # UUID7 ids are time ordered, so they break ties between equal timestamps
        stmt = stmt.order_by(
            AdmissionAttemptLogModel.attempted_at.desc(), AdmissionAttemptLogModel.id.desc()
        ).limit(limit)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [to_attempt_log(model) for model in result.scalars().all()]
