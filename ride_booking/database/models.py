# ride_booking/database/models.py
from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from ride_booking.database.database import Base
from ride_booking.utils import utcnow

# ==========================
# ✅ USER MODEL
# ==========================
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(100), unique=True, nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    password = Column(String(255), nullable=False)
    profile_image = Column(String(500), nullable=True)
    rating_average = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)

    trips = relationship("Trip", back_populates="driver")
    bookings = relationship("Booking", back_populates="passenger", foreign_keys="Booking.passenger_id")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def rating(self) -> dict:
        return {"average": self.rating_average or 0.0, "count": self.rating_count or 0}


# ==========================
# ✅ TRIP MODEL
# ==========================
class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    origin = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=False)
    departure_date = Column(Date, nullable=False)
    departure_time = Column(String(5), nullable=False)  # HH:MM, 24h
    vehicle = Column(JSON, nullable=True)
    price_per_seat = Column(Float, nullable=False)
    total_seats = Column(Integer, nullable=False)
    booked_seats = Column(Integer, nullable=False, default=0)
    total_earnings = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default="active")  # active | completed | cancelled
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    version_id = Column(Integer, nullable=False)

    driver = relationship("User", back_populates="trips")
    passengers = relationship(
        "TripPassenger",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="TripPassenger.id",
    )
    bookings = relationship("Booking", back_populates="trip")

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def available_seats(self) -> int:
        return (self.total_seats or 0) - (self.booked_seats or 0)

    def has_available_seats(self, seats: int) -> bool:
        return self.available_seats >= seats


class TripPassenger(Base):
    """Roster entry on a trip; one per live booking."""
    __tablename__ = "trip_passengers"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True, unique=True)
    seats_booked = Column(Integer, nullable=False)
    booking_date = Column(DateTime, default=utcnow)

    trip = relationship("Trip", back_populates="passengers")
    user = relationship("User")


# ==========================
# ✅ BOOKING MODEL
# ==========================
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    passenger_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    seats_booked = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    pickup_point = Column(JSON, nullable=False)  # {"location": ..., "time": "HH:MM"}
    drop_point = Column(JSON, nullable=False)
    payment_method = Column(String(20), nullable=False)  # cash | online | upi | card
    payment_status = Column(String(20), nullable=False, default="pending")  # pending | paid | failed
    transaction_id = Column(String(100), nullable=True)
    booking_status = Column(String(20), nullable=False, default="pending", index=True)
    passenger_details = Column(JSON, nullable=False, default=list)
    special_requests = Column(Text, nullable=True)

    otp_code = Column(String(10), nullable=True)
    otp_generated_at = Column(DateTime, nullable=True)
    otp_verified = Column(Boolean, nullable=False, default=False)

    rating_for_driver = Column(JSON, nullable=True)  # {"rating": int, "review": str | None}
    rating_for_passenger = Column(JSON, nullable=True)
    driver_contact = Column(JSON, nullable=True)  # {"name", "phone", "shared_at"}
    passenger_contact = Column(JSON, nullable=True)

    cancellation_reason = Column(String(500), nullable=True)
    cancelled_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    refund_amount = Column(Float, nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    version_id = Column(Integer, nullable=False)

    trip = relationship("Trip", back_populates="bookings")
    passenger = relationship("User", back_populates="bookings", foreign_keys=[passenger_id])

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def rating(self) -> dict:
        return {"for_driver": self.rating_for_driver, "for_passenger": self.rating_for_passenger}
