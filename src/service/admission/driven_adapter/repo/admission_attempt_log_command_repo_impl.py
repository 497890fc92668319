from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_admission_attempt_log_command_repo import (
    IAdmissionAttemptLogCommandRepo,
)
from src.service.admission.domain.entity.admission_attempt_log_entity import (
    AdmissionAttemptLog,
)
from src.service.admission.driven_adapter.model.admission_attempt_log_model import (
    AdmissionAttemptLogModel,
)


class AdmissionAttemptLogCommandRepoImpl(IAdmissionAttemptLogCommandRepo):
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
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
                await session.commit()
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io
    async def append(self, *, log: AdmissionAttemptLog) -> None:
        async with self._get_session() as session:
            session.add(
                AdmissionAttemptLogModel(
                    id=log.id,
                    identifier=log.identifier,
                    verifier_id=log.verifier_id,
                    attempted_at=log.attempted_at,
                    outcome=log.outcome.value,
                    error_code=log.error_code.value if log.error_code else None,
                    customer_name=log.customer_name,
                    event_id=log.event_id,
                    event_title=log.event_title,
                )
            )
            await session.flush()
