"""
Admission API tests (httpx AsyncClient + ASGITransport)

Every business failure answers with {"detail", "error_code"}; admission
outcomes other than unpaid/orphaned are 200 responses with a result.
"""

from httpx import AsyncClient
import pytest

from src.service.admission.domain.enum.credential_kind import CredentialKind
from src.service.admission.domain.enum.payment_status import PaymentStatus


@pytest.mark.asyncio
class TestResolveTicketApi:
    async def test_resolve_counter_ticket(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_ticket(
            identifier='C1',
            purchase_id='P2',
            kind=CredentialKind.COUNTER,
            total_units=3,
            consumed_count=1,
            ticket_name='Family Bundle',
        )

        response = await api_client.get('/api/ticket/resolve', params={'identifier': 'C1'})

        assert response.status_code == 200
        body = response.json()
        assert body['identifier'] == 'C1'
        assert body['credential_kind'] == 'counter'
        assert body['customer_name'] == 'Ada Lovelace'
        assert body['event_title'] == 'Harbour Lights Festival'
        assert body['ticket_name'] == 'Family Bundle'
        assert (body['consumed_count'], body['total_units'], body['remaining_units']) == (1, 3, 2)
        assert body['is_fully_consumed'] is False
        assert body['consumed'] is None

    async def test_resolve_unknown_ticket(self, api_client: AsyncClient) -> None:
        response = await api_client.get('/api/ticket/resolve', params={'identifier': 'NOPE'})

        assert response.status_code == 404
        assert response.json() == {'detail': 'Ticket not found', 'error_code': 'TICKET_NOT_FOUND'}

    async def test_resolve_malformed_identifier(self, api_client: AsyncClient) -> None:
        response = await api_client.get('/api/ticket/resolve', params={'identifier': 'a/b'})

        assert response.status_code == 400
        assert response.json()['error_code'] == 'INVALID_TICKET_ID'

    async def test_resolve_pending_payment(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_ticket(
            identifier='PENDING-P3',
            purchase_id='P3',
            payment_status=PaymentStatus.PENDING_PAYMENT,
        )

        response = await api_client.get(
            '/api/ticket/resolve', params={'identifier': 'PENDING-P3'}
        )

        assert response.status_code == 402
        assert response.json()['error_code'] == 'UNPAID_TICKET'

    async def test_resolve_orphaned_ticket(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_credential(identifier='U9', purchase_id='P-gone')

        response = await api_client.get('/api/ticket/resolve', params={'identifier': 'U9'})

        assert response.status_code == 409
        assert response.json()['error_code'] == 'ORPHANED_TICKET'

    async def test_resolve_missing_identifier(self, api_client: AsyncClient) -> None:
        response = await api_client.get('/api/ticket/resolve')

        assert response.status_code == 400
        assert isinstance(response.json()['detail'], list)


@pytest.mark.asyncio
class TestAdmitTicketApi:
    async def test_admit_unit_ticket_twice(self, api_client: AsyncClient, seeder) -> None:
        # Arrange
        await seeder.add_ticket(identifier='U1', purchase_id='P1')

        # Act
        first = await api_client.post(
            '/api/ticket/admit', json={'identifier': 'U1', 'verifier_id': 'gate-1'}
        )
        second = await api_client.post(
            '/api/ticket/admit', json={'identifier': 'U1', 'verifier_id': 'gate-2'}
        )

        # Assert
        assert first.status_code == 200
        assert first.json() == {'identifier': 'U1', 'result': 'SUCCESS'}
        assert second.json() == {'identifier': 'U1', 'result': 'ALREADY_USED'}

        resolved = await api_client.get('/api/ticket/resolve', params={'identifier': 'U1'})
        assert resolved.json()['is_fully_consumed'] is True

    async def test_admit_same_gate_twice_is_duplicate(
        self, api_client: AsyncClient, seeder
    ) -> None:
        await seeder.add_ticket(
            identifier='C1', purchase_id='P2', kind=CredentialKind.COUNTER, total_units=3
        )
        payload = {'identifier': 'C1', 'verifier_id': 'gate-1'}

        first = await api_client.post('/api/ticket/admit', json=payload)
        second = await api_client.post('/api/ticket/admit', json=payload)

        assert first.json()['result'] == 'SUCCESS'
        assert second.json()['result'] == 'DUPLICATE_SCAN'

    async def test_admit_unknown_ticket(self, api_client: AsyncClient) -> None:
        response = await api_client.post(
            '/api/ticket/admit', json={'identifier': ' NOPE ', 'verifier_id': 'gate-1'}
        )

        assert response.status_code == 200
        assert response.json() == {'identifier': 'NOPE', 'result': 'NOT_FOUND'}

    async def test_admit_pending_payment(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_ticket(
            identifier='PENDING-P3',
            purchase_id='P3',
            payment_status=PaymentStatus.PENDING_PAYMENT,
        )

        response = await api_client.post(
            '/api/ticket/admit', json={'identifier': 'PENDING-P3', 'verifier_id': 'gate-1'}
        )

        assert response.status_code == 402
        assert response.json()['error_code'] == 'UNPAID_TICKET'

    async def test_admit_without_verifier(self, api_client: AsyncClient) -> None:
        response = await api_client.post('/api/ticket/admit', json={'identifier': 'U1'})

        assert response.status_code == 400
        assert response.json()['detail'][0]['loc'] == ['body', 'verifier_id']

    @pytest.mark.parametrize('verifier_id', ['', '   ', 'g' * 129])
    async def test_admit_with_malformed_verifier_is_rejected_before_any_attempt(
        self, api_client: AsyncClient, seeder, verifier_id: str
    ) -> None:
        # Arrange
        await seeder.add_ticket(identifier='U1', purchase_id='P1')

        # Act
        response = await api_client.post(
            '/api/ticket/admit', json={'identifier': 'U1', 'verifier_id': verifier_id}
        )

        # Assert - request validation, not an admission attempt
        assert response.status_code == 400
        assert response.json()['detail'][0]['loc'] == ['body', 'verifier_id']
        assert await seeder.list_logs() == []
        assert (await seeder.get_credential('U1')).consumed_count == 0

    async def test_admit_trims_verifier_id(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_ticket(identifier='U1', purchase_id='P1')

        response = await api_client.post(
            '/api/ticket/admit', json={'identifier': 'U1', 'verifier_id': '  gate-1  '}
        )

        assert response.status_code == 200
        [log] = await seeder.list_logs()
        assert log.verifier_id == 'gate-1'


@pytest.mark.asyncio
class TestStaffPinApi:
    async def test_valid_pin(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_staff_pin(pin='1234')

        response = await api_client.post('/api/staff/pin/check', json={'pin': '1234'})

        assert response.status_code == 200
        assert response.json() == {'valid': True}

    async def test_wrong_pin(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_staff_pin(pin='1234')

        response = await api_client.post('/api/staff/pin/check', json={'pin': '0000'})

        assert response.json() == {'valid': False}

    async def test_malformed_pin_is_just_invalid(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_staff_pin(pin='1234')

        response = await api_client.post('/api/staff/pin/check', json={'pin': '12345'})

        assert response.status_code == 200
        assert response.json() == {'valid': False}


@pytest.mark.asyncio
class TestAdmissionLogApi:
    async def test_lists_newest_first_with_filters(self, api_client: AsyncClient, seeder) -> None:
        # Arrange - one success, one failure
        await seeder.add_ticket(identifier='U1', purchase_id='P1')
        await api_client.post(
            '/api/ticket/admit', json={'identifier': 'U1', 'verifier_id': 'gate-1'}
        )
        await api_client.post(
            '/api/ticket/admit', json={'identifier': 'U1', 'verifier_id': 'gate-2'}
        )

        # Act
        all_logs = await api_client.get('/api/admission_log', params={'event_id': 'E1'})
        failures = await api_client.get('/api/admission_log', params={'failures_only': 'true'})

        # Assert
        assert all_logs.status_code == 200
        assert [(log['verifier_id'], log['outcome']) for log in all_logs.json()] == [
            ('gate-2', 'failure'),
            ('gate-1', 'success'),
        ]
        assert all_logs.json()[1]['customer_name'] == 'Ada Lovelace'
        assert [log['error_code'] for log in failures.json()] == ['ALREADY_USED']

    async def test_limit_must_be_positive(self, api_client: AsyncClient) -> None:
        response = await api_client.get('/api/admission_log', params={'limit': 0})

        assert response.status_code == 400


@pytest.mark.asyncio
class TestIssueCredentialsApi:
    async def test_issue_then_conflict(self, api_client: AsyncClient, seeder) -> None:
        await seeder.add_event()
        await seeder.add_customer()
        await seeder.add_purchase(purchase_id='P1', quantity=2)

        created = await api_client.post('/api/purchase/P1/credentials')
        again = await api_client.post('/api/purchase/P1/credentials')

        assert created.status_code == 201
        assert created.json()['credential_kind'] == 'unit'
        assert len(created.json()['identifiers']) == 2
        assert again.status_code == 409
        assert again.json()['error_code'] == 'CREDENTIALS_ALREADY_ISSUED'

    async def test_unknown_purchase(self, api_client: AsyncClient) -> None:
        response = await api_client.post('/api/purchase/P404/credentials')

        assert response.status_code == 404
        assert response.json()['error_code'] == 'PURCHASE_NOT_FOUND'


@pytest.mark.asyncio
class TestCommonEndpoints:
    async def test_health(self, api_client: AsyncClient) -> None:
        response = await api_client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    async def test_metrics(self, api_client: AsyncClient) -> None:
        response = await api_client.get('/metrics')

        assert response.status_code == 200
        assert 'admission_attempts_total' in response.text
