from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from frontdesk.config.settings import Settings
from frontdesk.db.init_db import drop_db, init_db
from frontdesk.db.session import create_session_factory
from frontdesk.main import create_app
from frontdesk.models.enums import PaymentMethod, RoomStatus
from frontdesk.models.guest import Guest
from frontdesk.models.room import Room, RoomType
from frontdesk.models.staff import Staff
from frontdesk.schemas.booking import AdvancePayment, BookingCreate
from frontdesk.services.booking.booking_service import BookingService


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL="sqlite://",
        LOG_LEVEL="WARNING",
        LOG_FORMAT="standard",
        LOG_DIR=None,
        SMTP_HOST=None,
        WHATSAPP_PHONE_NUMBER_ID=None,
        WHATSAPP_ACCESS_TOKEN=None,
        STANDARD_CHECKOUT_TIME="12:00",
        GRACE_PERIOD_ENABLED=True,
        GRACE_PERIOD_MINUTES=60,
        LATE_FEE_PER_HOUR=Decimal("100"),
        MAX_LATE_FEE=Decimal("500"),
        HIGH_BALANCE_THRESHOLD=Decimal("5000"),
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(settings, session_factory):
    app = create_app(settings, session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# Seed factories
# ---------------------------------------------------------------------------

@pytest.fixture
def room_type(db_session) -> RoomType:
    room_type = RoomType(name="Deluxe", base_price=Decimal("1000.00"), max_occupancy=2)
    db_session.add(room_type)
    db_session.commit()
    return room_type


@pytest.fixture
def make_room(db_session, room_type):
    def _make(number: str, status: RoomStatus = RoomStatus.AVAILABLE) -> Room:
        room = Room(number=number, floor=1, room_type_id=room_type.id, status=status)
        db_session.add(room)
        db_session.commit()
        return room
    return _make


@pytest.fixture
def rooms(make_room):
    return [make_room("101"), make_room("102"), make_room("103")]


@pytest.fixture
def guest(db_session) -> Guest:
    guest = Guest(name="Asha Rao", phone="9876543210", email="asha@example.com")
    db_session.add(guest)
    db_session.commit()
    return guest


@pytest.fixture
def staff_member(db_session) -> Staff:
    member = Staff(name="Ravi Kumar", email="ravi@example.com", role="front_desk")
    db_session.add(member)
    db_session.commit()
    return member


@pytest.fixture
def booking_service(db_session, settings) -> BookingService:
    return BookingService(db_session, settings)


@pytest.fixture
def make_booking(booking_service, guest):
    """Three-night booking starting today unless dates are given."""
    def _make(
        room_ids,
        check_in: date | None = None,
        nights: int = 3,
        advance_cash: Decimal | None = None,
        **overrides,
    ):
        check_in = check_in or date.today()
        advance = []
        if advance_cash:
            advance.append(AdvancePayment(method=PaymentMethod.CASH, amount=advance_cash))
        data = BookingCreate(
            guest_id=guest.id,
            room_ids=list(room_ids),
            check_in=check_in,
            check_out=check_in + timedelta(days=nights),
            advance_payments=advance,
            **overrides,
        )
        return booking_service.create_booking(data)
    return _make
