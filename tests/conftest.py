import itertools
import os
from datetime import timedelta

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["OTP_DELIVERY"] = "response"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from ride_booking.auth import create_access_token  # noqa: E402
from ride_booking.database import models  # noqa: E402
from ride_booking.database.database import Base, get_db  # noqa: E402
from ride_booking.main import app  # noqa: E402
from ride_booking.utils import hash_password, utcnow  # noqa: E402

PASSWORD = "secret123"


@pytest.fixture()
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


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session):
    counter = itertools.count(1)

    def _make(first_name="Pat", last_name="Passenger", phone="9000000000", rating_average=0.0, rating_count=0):
        n = next(counter)
        user = models.User(
            first_name=first_name,
            last_name=last_name,
            email=f"{first_name.lower()}{n}@example.com",
            phone=phone,
            password=hash_password(PASSWORD),
            rating_average=rating_average,
            rating_count=rating_count,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_trip(db_session):
    def _make(driver, total_seats=4, price_per_seat=250.0, booked_seats=0, status="active", departs_in=timedelta(days=2)):
        departure = utcnow() + departs_in
        trip = models.Trip(
            driver_id=driver.id,
            origin="Pune",
            destination="Mumbai",
            departure_date=departure.date(),
            departure_time=departure.strftime("%H:%M"),
            vehicle={"model": "Swift Dzire", "plate": "MH12AB1234"},
            price_per_seat=price_per_seat,
            total_seats=total_seats,
            booked_seats=booked_seats,
            total_earnings=0.0,
            status=status,
        )
        db_session.add(trip)
        db_session.commit()
        db_session.refresh(trip)
        return trip

    return _make


@pytest.fixture()
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": user.email, "role": "user"})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def booking_payload():
    def _payload(trip_id, seats=1, **overrides):
        payload = {
            "tripId": trip_id,
            "seatsBooked": seats,
            "pickupPoint": {"location": "Shivajinagar", "time": "08:30"},
            "dropPoint": {"location": "Dadar", "time": "11:45"},
            "paymentMethod": "upi",
            "passengerDetails": [{"name": f"Rider {i + 1}", "age": 30, "gender": "other"} for i in range(seats)],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture()
def book(client, auth_headers, booking_payload):
    """Create a booking through the API and return the response body."""
    def _book(passenger, trip, seats=1, **overrides):
        response = client.post(
            "/api/bookings/",
            json=booking_payload(trip.id, seats, **overrides),
            headers=auth_headers(passenger),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _book


@pytest.fixture()
def reload(db_session):
    """Fetch a fresh copy of a row after the API changed it."""
    def _reload(model, pk):
        db_session.expire_all()
        return db_session.get(model, pk)

    return _reload
