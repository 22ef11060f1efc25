from datetime import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dockslot.core.security import generate_api_token, hash_token
from dockslot.db.base import Base, get_db
from dockslot.db.models.availability import AvailabilityWindow
from dockslot.db.models.profile import Profile
from dockslot.db.models.trip_type import TripType
from dockslot.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_captain(db, email="captain@example.com", **overrides):
    token = generate_api_token()
    values = dict(
        email=email,
        full_name="Jack Sparrow",
        business_name="Black Pearl Charters",
        timezone="America/New_York",
        booking_buffer_minutes=60,
        advance_booking_days=60,
        api_token_hash=hash_token(token),
    )
    values.update(overrides)
    captain = Profile(**values)
    db.add(captain)
    db.commit()
    db.refresh(captain)
    captain.plain_token = token
    return captain


def set_week(db, captain, start=time(6, 0), end=time(21, 0), active_days=range(7)):
    db.query(AvailabilityWindow).filter(AvailabilityWindow.owner_id == captain.id).delete()
    for day in range(7):
        db.add(
            AvailabilityWindow(
                owner_id=captain.id,
                day_of_week=day,
                start_time=start,
                end_time=end,
                is_active=day in active_days,
            )
        )
    db.commit()


@pytest.fixture
def captain(db):
    captain = make_captain(db)
    set_week(db, captain)
    return captain


@pytest.fixture
def trip_type(db, captain):
    trip = TripType(
        owner_id=captain.id,
        title="Half Day Inshore",
        duration_hours=4,
        price_total=450.00,
        deposit_amount=100.00,
        is_active=True,
    )
    db.add(trip)
    db.commit()
    db.refresh(trip)
    return trip


@pytest.fixture
def auth_headers(captain):
    return {"Authorization": f"Bearer {captain.plain_token}"}
