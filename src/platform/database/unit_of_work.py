"""
Unit of Work Pattern - one database session and transaction shared by several repositories

Architecture:
- UoW owns the session lifecycle and commit/rollback
- Repositories receive the shared session from the UoW
- Use cases coordinate repositories through the UoW (admission: conditional
  update + classification read + audit log insert commit together)
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, AsyncContextManager, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.admission.app.interface.i_admission_attempt_log_command_repo import (
        IAdmissionAttemptLogCommandRepo,
    )
    from src.service.admission.app.interface.i_ticket_credential_command_repo import (
        ITicketCredentialCommandRepo,
    )
    from src.service.admission.app.interface.i_ticket_query_repo import ITicketQueryRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            state = await uow.ticket_credential_command_repo.try_consume_admission_unit(...)
            await uow.admission_attempt_log_command_repo.append(log=...)
            await uow.commit()
    """

    ticket_credential_command_repo: ITicketCredentialCommandRepo
    ticket_query_repo: ITicketQueryRepo
    admission_attempt_log_command_repo: IAdmissionAttemptLogCommandRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        # No-op after a successful commit
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory
        self._session_cm: Optional[AsyncContextManager[AsyncSession]] = None
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.admission.driven_adapter.repo.admission_attempt_log_command_repo_impl import (
            AdmissionAttemptLogCommandRepoImpl,
        )
        from src.service.admission.driven_adapter.repo.ticket_credential_command_repo_impl import (
            TicketCredentialCommandRepoImpl,
        )
        from src.service.admission.driven_adapter.repo.ticket_query_repo_impl import (
            TicketQueryRepoImpl,
        )

        self._session_cm = self.session_factory()
        self.session = await self._session_cm.__aenter__()

        # Repositories share the UoW session instead of opening their own
        self.ticket_credential_command_repo = TicketCredentialCommandRepoImpl(session=self.session)
        self.ticket_query_repo = TicketQueryRepoImpl(session=self.session)
        self.admission_attempt_log_command_repo = AdmissionAttemptLogCommandRepoImpl(
            session=self.session
        )

        return await super().__aenter__()

    async def __aexit__(self, *args) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self._session_cm is not None:
                await self._session_cm.__aexit__(*args)
            self._session_cm = None
            self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'UnitOfWork used outside of `async with`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
