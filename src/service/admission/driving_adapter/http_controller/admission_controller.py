from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.admission.app.command.admit_ticket_use_case import AdmitTicketUseCase
from src.service.admission.app.command.issue_credentials_use_case import (
    IssueCredentialsUseCase,
)
from src.service.admission.app.query.list_recent_admission_logs_use_case import (
    ListRecentAdmissionLogsUseCase,
)
from src.service.admission.app.query.resolve_ticket_use_case import ResolveTicketUseCase
from src.service.admission.driving_adapter.http_controller.schema.admission_schema import (
    AdmissionAttemptLogResponse,
    AdmitTicketRequest,
    AdmitTicketResponse,
    IssuedCredentialsResponse,
    TicketViewResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get('/ticket/resolve')
@Logger.io
async def resolve_ticket(
    identifier: str = Query(..., max_length=1024),
    use_case: ResolveTicketUseCase = Depends(ResolveTicketUseCase.depends),
) -> TicketViewResponse:
    with tracer.start_as_current_span('controller.resolve_ticket') as span:
        view = await use_case.execute(identifier=identifier)
        span.set_attribute('ticket.kind', view.credential_kind.value)
        span.set_attribute('ticket.remaining_units', view.remaining_units)
        return TicketViewResponse.from_view(view)


@router.post('/ticket/admit', status_code=status.HTTP_200_OK)
@Logger.io
async def admit_ticket(
    request: AdmitTicketRequest,
    use_case: AdmitTicketUseCase = Depends(AdmitTicketUseCase.depends),
) -> AdmitTicketResponse:
    with tracer.start_as_current_span('controller.admit_ticket') as span:
        span.set_attribute('verifier_id', request.verifier_id)

        result = await use_case.execute(
            identifier=request.identifier, verifier_id=request.verifier_id
        )

        span.set_attribute('admission.result', result.value)
        return AdmitTicketResponse(identifier=request.identifier.strip(), result=result.value)


@router.get('/admission_log')
@Logger.io
async def list_recent_admission_logs(
    event_id: Optional[str] = None,
    limit: int = Query(default=settings.ADMISSION_LOG_DEFAULT_LIMIT, ge=1),
    failures_only: bool = False,
    use_case: ListRecentAdmissionLogsUseCase = Depends(ListRecentAdmissionLogsUseCase.depends),
) -> List[AdmissionAttemptLogResponse]:
    logs = await use_case.execute(event_id=event_id, limit=limit, failures_only=failures_only)
    return [AdmissionAttemptLogResponse.from_entity(log) for log in logs]


@router.post('/purchase/{purchase_id}/credentials', status_code=status.HTTP_201_CREATED)
@Logger.io
async def issue_credentials(
    purchase_id: str,
    use_case: IssueCredentialsUseCase = Depends(IssueCredentialsUseCase.depends),
) -> IssuedCredentialsResponse:
    with tracer.start_as_current_span('controller.issue_credentials') as span:
        span.set_attribute('purchase_id', purchase_id)
        issued = await use_case.execute(purchase_id=purchase_id)
        span.set_attribute('credential.kind', issued.credential_kind.value)
        return IssuedCredentialsResponse.from_dto(issued)
