#!/usr/bin/env python3
"""
Database Seed Script
Populate demo data for a gate rehearsal

Features:
1. Create Event + Customers - one event, three customers
2. Create Purchases
   - P1: paid, bought after the policy cutover -> one unit credential
   - P2: paid, legacy 3-person bundle bought before the cutover -> counter credential
   - P3: pending payment, with a credential row that must never admit
3. Issue credentials through IssueCredentialsUseCase
4. Create Staff PIN - a gate PIN for local testing
"""

import asyncio
from datetime import datetime, timezone

from pydantic import SecretStr
from sqlalchemy import func, select

from src.platform.config.di import container
from src.service.admission.app.command.issue_credentials_use_case import (
    IssueCredentialsUseCase,
)
from src.service.admission.domain.enum.payment_status import PaymentStatus
from src.service.admission.driven_adapter.model import (
    AdmissionAttemptLogModel,
    CustomerModel,
    EventModel,
    PurchaseModel,
    StaffPinModel,
    TicketCredentialModel,
)

DEFAULT_STAFF_PIN = '1234'
EVENT_ID = 'E1'

PURCHASES = [
    PurchaseModel(
        id='P1',
        customer_id='C-ada',
        event_id=EVENT_ID,
        ticket_name='General Admission',
        quantity=1,
        payment_status=PaymentStatus.PAID.value,
        created_at=datetime(2024, 11, 2, 18, 0, tzinfo=timezone.utc),
    ),
    PurchaseModel(
        id='P2',
        customer_id='C-grace',
        event_id=EVENT_ID,
        ticket_name='Group of 3',
        quantity=1,
        payment_status=PaymentStatus.PAID.value,
        is_bundle=True,
        admissions_per_bundle_unit=3,
        created_at=datetime(2024, 3, 14, 9, 30, tzinfo=timezone.utc),
    ),
    PurchaseModel(
        id='P3',
        customer_id='C-alan',
        event_id=EVENT_ID,
        ticket_name='General Admission',
        quantity=2,
        payment_status=PaymentStatus.PENDING_PAYMENT.value,
        created_at=datetime(2024, 11, 5, 12, 0, tzinfo=timezone.utc),
    ),
]


async def create_base_rows() -> None:
    print('🎫 Creating event, customers and purchases...')
    hasher = container.pin_hasher()

    async with container.database().session() as session:
        session.add(
            EventModel(
                id=EVENT_ID,
                title='Harbour Lights Festival',
                date_text='Sat 12 Oct',
                time_text='19:30',
                venue_name='Pier 4',
            )
        )
        session.add_all(
            [
                CustomerModel(id='C-ada', name='Ada Lovelace', email='ada@example.com'),
                CustomerModel(id='C-grace', name='Grace Hopper', phone='+1 555 0100'),
                CustomerModel(id='C-alan', name='Alan Turing', email='alan@example.com'),
            ]
        )
        session.add_all(PURCHASES)
        # Unpaid purchases can already carry a credential row; admission refuses it
        session.add(
            TicketCredentialModel(
                identifier='PENDING-P3',
                purchase_id='P3',
                kind='counter',
                consumed_count=0,
                total_units=2,
            )
        )
        session.add(
            StaffPinModel(
                label='Front gate',
                hashed_pin=hasher.hash_pin(plain_pin=SecretStr(DEFAULT_STAFF_PIN)),
            )
        )
        await session.commit()

    print(f'   ✅ Event {EVENT_ID}, {len(PURCHASES)} purchases, staff PIN created')


async def issue_credentials() -> None:
    print('🎟️ Issuing credentials...')
    use_case = IssueCredentialsUseCase(
        purchase_query_repo=container.purchase_query_repo(),
        ticket_query_repo=container.ticket_query_repo(),
        ticket_issuance_gateway=container.ticket_issuance_gateway(),
        credential_model_policy=container.credential_model_policy(),
    )

    for purchase in PURCHASES:
        if purchase.payment_status != PaymentStatus.PAID.value:
            continue
        issued = await use_case.execute(purchase_id=purchase.id)
        for identifier in issued.identifiers:
            print(f'   ✅ {purchase.id} [{issued.credential_kind}] {identifier}')


async def verify_data() -> None:
    print('🔍 Verifying seeded data...')

    async with container.database().session() as session:
        for model in (
            EventModel,
            CustomerModel,
            PurchaseModel,
            TicketCredentialModel,
            StaffPinModel,
            AdmissionAttemptLogModel,
        ):
            count = (await session.execute(select(func.count()).select_from(model))).scalar()
            print(f'   {model.__tablename__} count: {count}')

    print('   ✅ Data verification completed!')


async def main() -> None:
    print('🌱 Starting data seeding...')
    print('=' * 50)

    database = container.database()
    try:
        await database.create_all()
        await create_base_rows()
        print()
        await issue_credentials()
        print()
        await verify_data()

        print()
        print('=' * 50)
        print('🌱 Data seeding completed!')
        print(f'📋 Staff PIN: {DEFAULT_STAFF_PIN}')
        print('📋 Pending-payment credential: PENDING-P3')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        raise SystemExit(1)

    finally:
        await database.dispose()


if __name__ == '__main__':
    asyncio.run(main())
