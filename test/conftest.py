"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- A throwaway SQLite database per test (aiosqlite)
- AdmissionSeeder: inserts events, customers, purchases, credentials and staff PINs
- A settable clock for duplicate-window scenarios
- An httpx AsyncClient bound to the test app through the DI container

Architecture:
- Unit tests (test/**/unit/): stub repositories, no database
- Integration tests (test/**/integration/): real repositories on SQLite
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read once at import time (core_setting.settings), so the
# database URL and gate session file must be in the environment first
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    work_dir = Path(tempfile.mkdtemp(prefix='ticket_gate_test_'))

    # Nothing in the test run may reach a real PostgreSQL
    os.environ['DATABASE_URL_OVERRIDE'] = f'sqlite+aiosqlite:///{work_dir / "admission.db"}'
    os.environ['GATE_STAFF_SESSION_FILE'] = str(work_dir / 'staff_session.json')

    # Create test log directory
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['LOG_DIR'] = str(test_log_dir)


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import List, Optional  # noqa: E402

import bcrypt  # noqa: E402
from dependency_injector import providers  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import select  # noqa: E402

from src.platform.config.di import container  # noqa: E402
from src.platform.config.wire_modules import WIRE_MODULES  # noqa: E402
from src.platform.database.db_setting import Database  # noqa: E402
from src.service.admission.domain.enum.credential_kind import CredentialKind  # noqa: E402
from src.service.admission.domain.enum.payment_status import PaymentStatus  # noqa: E402
from src.service.admission.driven_adapter.model import (  # noqa: E402
    AdmissionAttemptLogModel,
    CustomerModel,
    EventModel,
    PurchaseModel,
    StaffPinModel,
    TicketCredentialModel,
)


DEFAULT_EVENT_ID = 'E1'
DEFAULT_EVENT_TITLE = 'Harbour Lights Festival'
DEFAULT_CUSTOMER_ID = 'C-ada'
DEFAULT_CUSTOMER_NAME = 'Ada Lovelace'
DEFAULT_STAFF_PIN = '1234'


# =============================================================================
# Database
# =============================================================================


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Fresh SQLite file per test; the engine lives on the test's event loop"""
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "admission.db"}')
    await db.create_all()
    yield db
    await db.dispose()


class AdmissionSeeder:
    """Inserts rows directly through the ORM models, bypassing the use cases"""

    def __init__(self, database: Database) -> None:
        self.database = database

    async def add_event(
        self,
        *,
        event_id: str = DEFAULT_EVENT_ID,
        title: str = DEFAULT_EVENT_TITLE,
        venue_name: Optional[str] = 'Pier 4',
    ) -> None:
        async with self.database.session() as session:
            await session.merge(
                EventModel(
                    id=event_id,
                    title=title,
                    date_text='Sat 12 Oct',
                    time_text='19:30',
                    venue_name=venue_name,
                )
            )
            await session.commit()

    async def add_customer(
        self, *, customer_id: str = DEFAULT_CUSTOMER_ID, name: str = DEFAULT_CUSTOMER_NAME
    ) -> None:
        async with self.database.session() as session:
            await session.merge(
                CustomerModel(id=customer_id, name=name, email=f'{customer_id}@example.com')
            )
            await session.commit()

    async def add_purchase(
        self,
        *,
        purchase_id: str,
        customer_id: str = DEFAULT_CUSTOMER_ID,
        event_id: str = DEFAULT_EVENT_ID,
        ticket_name: str = 'General Admission',
        quantity: int = 1,
        payment_status: PaymentStatus = PaymentStatus.PAID,
        is_bundle: bool = False,
        admissions_per_bundle_unit: int = 1,
        created_at: Optional[datetime] = None,
    ) -> None:
        async with self.database.session() as session:
            purchase = PurchaseModel(
                id=purchase_id,
                customer_id=customer_id,
                event_id=event_id,
                ticket_name=ticket_name,
                quantity=quantity,
                payment_status=payment_status.value,
                is_bundle=is_bundle,
                admissions_per_bundle_unit=admissions_per_bundle_unit,
            )
            if created_at is not None:
                purchase.created_at = created_at
            session.add(purchase)
            await session.commit()

    async def add_credential(
        self,
        *,
        identifier: str,
        purchase_id: str,
        kind: CredentialKind = CredentialKind.UNIT,
        total_units: int = 1,
        consumed_count: int = 0,
    ) -> None:
        async with self.database.session() as session:
            session.add(
                TicketCredentialModel(
                    identifier=identifier,
                    purchase_id=purchase_id,
                    kind=kind.value,
                    total_units=total_units,
                    consumed_count=consumed_count,
                )
            )
            await session.commit()

    async def add_ticket(
        self,
        *,
        identifier: str,
        purchase_id: str,
        kind: CredentialKind = CredentialKind.UNIT,
        total_units: int = 1,
        consumed_count: int = 0,
        payment_status: PaymentStatus = PaymentStatus.PAID,
        ticket_name: str = 'General Admission',
    ) -> None:
        """Event, customer, purchase and one credential in a single call"""
        await self.add_event()
        await self.add_customer()
        await self.add_purchase(
            purchase_id=purchase_id,
            quantity=total_units if kind == CredentialKind.COUNTER else 1,
            payment_status=payment_status,
            is_bundle=kind == CredentialKind.COUNTER,
            ticket_name=ticket_name,
        )
        await self.add_credential(
            identifier=identifier,
            purchase_id=purchase_id,
            kind=kind,
            total_units=total_units,
            consumed_count=consumed_count,
        )

    async def add_staff_pin(
        self, *, pin: str = DEFAULT_STAFF_PIN, label: str = 'Front door', is_active: bool = True
    ) -> None:
        # Low work factor keeps the suite fast; verification reads the cost from the hash
        hashed_pin = bcrypt.hashpw(pin.encode('utf-8'), bcrypt.gensalt(rounds=4)).decode('utf-8')
        async with self.database.session() as session:
            session.add(StaffPinModel(label=label, hashed_pin=hashed_pin, is_active=is_active))
            await session.commit()

    async def get_credential(self, identifier: str) -> TicketCredentialModel:
        async with self.database.session() as session:
            result = await session.execute(
                select(TicketCredentialModel).where(TicketCredentialModel.identifier == identifier)
            )
            return result.scalar_one()

    async def list_credentials(self, purchase_id: str) -> List[TicketCredentialModel]:
        async with self.database.session() as session:
            result = await session.execute(
                select(TicketCredentialModel).where(TicketCredentialModel.purchase_id == purchase_id)
            )
            return list(result.scalars().all())

    async def list_logs(self) -> List[AdmissionAttemptLogModel]:
        """Oldest first"""
        async with self.database.session() as session:
            result = await session.execute(
                select(AdmissionAttemptLogModel).order_by(
                    AdmissionAttemptLogModel.attempted_at, AdmissionAttemptLogModel.id
                )
            )
            return list(result.scalars().all())


@pytest.fixture
def seeder(database: Database) -> AdmissionSeeder:
    return AdmissionSeeder(database)


# =============================================================================
# Clock
# =============================================================================


class SettableClock:
    """Stands in for datetime.now(timezone.utc) in the admission use case"""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> SettableClock:
    return SettableClock(datetime(2024, 11, 2, 19, 0, tzinfo=timezone.utc))


# =============================================================================
# API client
# =============================================================================


@pytest_asyncio.fixture
async def api_client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient against the test app, with the container's database swapped for
    the per-test SQLite file. ASGITransport does not run the lifespan, so the
    container is wired here.
    """
    from test_main import app

    container.database.override(providers.Object(database))
    container.reset_singletons()
    container.wire(modules=WIRE_MODULES)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as client:
            yield client
    finally:
        container.unwire()
        container.database.reset_override()
        container.reset_singletons()
