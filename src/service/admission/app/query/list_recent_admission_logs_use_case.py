from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_admission_attempt_log_query_repo import (
    IAdmissionAttemptLogQueryRepo,
)
from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)


class ListRecentAdmissionLogsUseCase:
    def __init__(self, *, admission_attempt_log_query_repo: IAdmissionAttemptLogQueryRepo) -> None:
        self.admission_attempt_log_query_repo = admission_attempt_log_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        admission_attempt_log_query_repo: IAdmissionAttemptLogQueryRepo = Depends(
            Provide[Container.admission_attempt_log_query_repo]
        ),
    ) -> Self:
        return cls(admission_attempt_log_query_repo=admission_attempt_log_query_repo)

    @Logger.io
    async def execute(
        self,
        *,
        event_id: Optional[str] = None,
        limit: int = settings.ADMISSION_LOG_DEFAULT_LIMIT,
        failures_only: bool = False,
    ) -> List[AdmissionAttemptLog]:
        limit = min(max(limit, 1), settings.ADMISSION_LOG_MAX_LIMIT)
        return await self.admission_attempt_log_query_repo.list_recent(
            event_id=event_id or None, limit=limit, failures_only=failures_only
        )
