"""
Shared fixtures: an in-memory SQLite database and a fixed reporting clock.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from pg_reporting.db.session import Database
from pg_reporting.models import (
    PG,
    ApprovalStatus,
    EntryType,
    Expense,
    LeavingRequest,
    LeavingRequestStatus,
    Member,
    Payment,
    PaymentStatus,
    PgType,
    Room,
)

FIXED_NOW = datetime(2024, 3, 20, 12, 0, 0)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
async def database():
    db = Database("sqlite+aiosqlite://")
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest.fixture
async def alpha(database):
    """
    PG "Alpha": one room (capacity 2, rent 5000), two members who joined in
    January, one approved March payment and one pending March payment whose
    overdue date passed two days before FIXED_NOW.
    """
    async with database.session() as session:
        pg = PG(name="Alpha", type=PgType.MENS, location="Koramangala", created_at=datetime(2023, 12, 1))
        session.add(pg)
        await session.flush()

        room = Room(
            pg_id=pg.id,
            room_no="101",
            capacity=2,
            rent=Decimal("5000"),
            electricity_charge=Decimal("400"),
            created_at=datetime(2023, 12, 1),
        )
        session.add(room)
        await session.flush()

        ravi = Member(
            name="Ravi",
            pg_id=pg.id,
            room_id=room.id,
            date_of_joining=datetime(2024, 1, 1),
            advance_amount=Decimal("2000"),
            created_at=datetime(2024, 1, 1),
        )
        arjun = Member(
            name="Arjun",
            pg_id=pg.id,
            room_id=room.id,
            date_of_joining=datetime(2024, 1, 1),
            advance_amount=Decimal("2000"),
            created_at=datetime(2024, 1, 1),
        )
        session.add_all([ravi, arjun])
        await session.flush()

        approved = Payment(
            member_id=ravi.id,
            pg_id=pg.id,
            month=3,
            year=2024,
            amount=Decimal("5000"),
            due_date=datetime(2024, 3, 5),
            overdue_date=Payment.compute_overdue_date(datetime(2024, 3, 5), grace_days=5),
            payment_status=PaymentStatus.PAID,
            approval_status=ApprovalStatus.APPROVED,
            paid_date=datetime(2024, 3, 6, 10, 30),
            created_at=datetime(2024, 3, 1, 9, 0),
        )
        lapsed = Payment(
            member_id=arjun.id,
            pg_id=pg.id,
            month=3,
            year=2024,
            amount=Decimal("5000"),
            due_date=datetime(2024, 3, 13, 12, 0),
            overdue_date=Payment.compute_overdue_date(datetime(2024, 3, 13, 12, 0), grace_days=5),
            payment_status=PaymentStatus.PENDING,
            approval_status=ApprovalStatus.PENDING,
            created_at=datetime(2024, 3, 1, 9, 0),
        )
        session.add_all([approved, lapsed])

        session.add_all([
            Expense(pg_id=pg.id, entry_type=EntryType.CASH_OUT, amount=Decimal("1500"), date=datetime(2024, 3, 10)),
            Expense(pg_id=pg.id, entry_type=EntryType.CASH_IN, amount=Decimal("900"), date=datetime(2024, 3, 11)),
        ])
        await session.commit()

        return {
            "pg_id": pg.id,
            "room_id": room.id,
            "member_ids": [ravi.id, arjun.id],
            "approved_payment_id": approved.id,
            "lapsed_payment_id": lapsed.id,
        }


@pytest.fixture
def add_departure(database):
    async def _add(pg_id, member_id, settled_date, status=LeavingRequestStatus.COMPLETED):
        async with database.session() as session:
            session.add(
                LeavingRequest(
                    pg_id=pg_id,
                    member_id=member_id,
                    status=status,
                    settled_date=settled_date,
                    created_at=settled_date,
                )
            )
            await session.commit()

    return _add
