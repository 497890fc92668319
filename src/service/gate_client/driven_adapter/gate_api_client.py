from typing import Any, Optional

import httpx
from pydantic import SecretStr

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import inject_trace_context
from src.service.admission.domain.enum.admission_result import AdmissionResult
from src.service.admission.domain.enum.error_code import ErrorCode
from src.service.gate_client.app.interface.i_gate_api import IGateApi
from src.service.gate_client.domain.gate_client_error import (
    GateTransportError,
    TicketVerificationError,
)
from src.service.gate_client.domain.gate_ticket import GateTicket


# Upstream proxy/gateway failures: the request may not have reached the API
RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})


def _parse_error_code(raw: Any) -> Optional[ErrorCode]:
    try:
        return ErrorCode(raw)
    except ValueError:
        return None


class GateApiClient(IGateApi):
    """httpx client for the admission API; also usable as an async context manager"""

    def __init__(
        self,
        *,
        base_url: str = settings.GATE_API_BASE_URL,
        timeout: float = settings.GATE_HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> 'GateApiClient':
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def resolve_ticket(self, *, identifier: str) -> GateTicket:
        payload = await self._request('GET', '/api/ticket/resolve', params={'identifier': identifier})
        return GateTicket.from_payload(payload)

    async def admit_ticket(self, *, identifier: str, verifier_id: str) -> AdmissionResult:
        payload = await self._request(
            'POST',
            '/api/ticket/admit',
            json={'identifier': identifier, 'verifier_id': verifier_id},
        )
        return AdmissionResult(payload['result'])

    async def check_staff_pin(self, *, pin: SecretStr) -> bool:
        payload = await self._request(
            'POST', '/api/staff/pin/check', json={'pin': pin.get_secret_value()}
        )
        return bool(payload['valid'])

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        headers = inject_trace_context(headers={'Accept': 'application/json'})
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as e:
            raise GateTransportError(f'Network error calling {url}: {e!r}') from e

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise GateTransportError(f'Admission API unavailable ({response.status_code})')

        if response.is_error:
            raise self._to_verification_error(response)

        return response.json()

    @staticmethod
    def _to_verification_error(response: httpx.Response) -> TicketVerificationError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        detail = body.get('detail')
        message = detail if isinstance(detail, str) else f'Request failed ({response.status_code})'
        error_code = _parse_error_code(body.get('error_code'))

        Logger.base.info(
            f'🚫 [GATE API] {response.request.method} {response.request.url.path} '
            f'-> {response.status_code} {error_code or "-"}'
        )
        return TicketVerificationError(
            error_code=error_code, message=message, status_code=response.status_code
        )
