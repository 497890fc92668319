"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.admission.domain.value_object.credential_model_policy import (
    CredentialModelPolicy,
)
from src.service.admission.driven_adapter.issuance.ticket_issuance_gateway_impl import (
    TicketIssuanceGatewayImpl,
)
from src.service.admission.driven_adapter.repo.admission_attempt_log_command_repo_impl import (
    AdmissionAttemptLogCommandRepoImpl,
)
from src.service.admission.driven_adapter.repo.admission_attempt_log_query_repo_impl import (
    AdmissionAttemptLogQueryRepoImpl,
)
from src.service.admission.driven_adapter.repo.purchase_query_repo_impl import (
    PurchaseQueryRepoImpl,
)
from src.service.admission.driven_adapter.repo.staff_pin_query_repo_impl import (
    StaffPinQueryRepoImpl,
)
from src.service.admission.driven_adapter.repo.ticket_credential_command_repo_impl import (
    TicketCredentialCommandRepoImpl,
)
from src.service.admission.driven_adapter.repo.ticket_query_repo_impl import TicketQueryRepoImpl
from src.service.admission.driven_adapter.security.bcrypt_pin_hasher import BcryptPinHasher


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (event-loop-aware engine from settings.DATABASE_URL_ASYNC)
    database = providers.Singleton(Database)

    # Unit of Work (one per request: admission update + audit log share its transaction)
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Repositories (stateless - use session_factory per call)
    ticket_query_repo = providers.Singleton(
        TicketQueryRepoImpl, session_factory=database.provided.session
    )
    ticket_credential_command_repo = providers.Singleton(
        TicketCredentialCommandRepoImpl, session_factory=database.provided.session
    )
    purchase_query_repo = providers.Singleton(
        PurchaseQueryRepoImpl, session_factory=database.provided.session
    )
    admission_attempt_log_command_repo = providers.Singleton(
        AdmissionAttemptLogCommandRepoImpl, session_factory=database.provided.session
    )
    admission_attempt_log_query_repo = providers.Singleton(
        AdmissionAttemptLogQueryRepoImpl, session_factory=database.provided.session
    )
    staff_pin_query_repo = providers.Singleton(
        StaffPinQueryRepoImpl, session_factory=database.provided.session
    )

    # Security
    pin_hasher = providers.Singleton(BcryptPinHasher)

    # Ticket issuance collaborator
    ticket_issuance_gateway = providers.Singleton(
        TicketIssuanceGatewayImpl,
        ticket_credential_command_repo=ticket_credential_command_repo,
    )
    credential_model_policy = providers.Singleton(
        CredentialModelPolicy,
        version=config_service.provided.CREDENTIAL_POLICY_VERSION,
        cutover_at=config_service.provided.CREDENTIAL_POLICY_CUTOVER_AT,
        max_unit_credentials=config_service.provided.CREDENTIAL_POLICY_MAX_UNIT_CREDENTIALS,
    )


container = Container()


def setup() -> None:
    container.config_service()
    container.database()


def cleanup() -> None:
    container.reset_singletons()
