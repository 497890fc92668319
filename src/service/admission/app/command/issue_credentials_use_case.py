from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.admission.app.dto.issued_credentials import IssuedCredentials
from src.service.admission.app.interface.i_purchase_query_repo import IPurchaseQueryRepo
from src.service.admission.app.interface.i_ticket_issuance_gateway import (
    ITicketIssuanceGateway,
)
from src.service.admission.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.admission.domain.admission_error import (
    CredentialsAlreadyIssuedError,
    PurchaseNotFoundError,
    UnpaidTicketError,
)
from src.service.admission.domain.enum.credential_kind import CredentialKind
from src.service.admission.domain.value_object.credential_model_policy import (
    CredentialModelPolicy,
)


class IssueCredentialsUseCase:
    """
    Issue the credentials of a paid purchase, once.

    The credential model policy picks the shape (and therefore which
    admission contract applies): unit credentials are minted one per admission
    unit, otherwise a single counter credential covers every unit.
    """

    def __init__(
        self,
        *,
        purchase_query_repo: IPurchaseQueryRepo,
        ticket_query_repo: ITicketQueryRepo,
        ticket_issuance_gateway: ITicketIssuanceGateway,
        credential_model_policy: CredentialModelPolicy,
    ) -> None:
        self.purchase_query_repo = purchase_query_repo
        self.ticket_query_repo = ticket_query_repo
        self.ticket_issuance_gateway = ticket_issuance_gateway
        self.credential_model_policy = credential_model_policy

    @classmethod
    @inject
    def depends(
        cls,
        purchase_query_repo: IPurchaseQueryRepo = Depends(Provide[Container.purchase_query_repo]),
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        ticket_issuance_gateway: ITicketIssuanceGateway = Depends(
            Provide[Container.ticket_issuance_gateway]
        ),
        credential_model_policy: CredentialModelPolicy = Depends(
            Provide[Container.credential_model_policy]
        ),
    ) -> Self:
        return cls(
            purchase_query_repo=purchase_query_repo,
            ticket_query_repo=ticket_query_repo,
            ticket_issuance_gateway=ticket_issuance_gateway,
            credential_model_policy=credential_model_policy,
        )

    @Logger.io
    async def execute(self, *, purchase_id: str) -> IssuedCredentials:
        purchase = await self.purchase_query_repo.get_by_id(purchase_id=purchase_id)
        if not purchase:
            raise PurchaseNotFoundError()

        if not purchase.is_paid:
            raise UnpaidTicketError('Credentials are only issued for paid purchases')

        if await self.ticket_query_repo.count_credentials_for_purchase(purchase_id=purchase_id):
            raise CredentialsAlreadyIssuedError()

        kind = self.credential_model_policy.credential_kind_for(purchase)
        if kind == CredentialKind.UNIT:
            identifiers = await self.ticket_issuance_gateway.mint_unit_credentials(
                purchase=purchase
            )
        else:
            identifiers = [
                await self.ticket_issuance_gateway.create_counter_credential(purchase=purchase)
            ]

        Logger.base.info(
            f'🎫 [ISSUE] purchase={purchase_id} kind={kind} units={purchase.total_admission_units} '
            f'policy={self.credential_model_policy.version}'
        )
        return IssuedCredentials(
            purchase_id=purchase_id,
            credential_kind=kind,
            identifiers=identifiers,
            policy_version=self.credential_model_policy.version,
        )
