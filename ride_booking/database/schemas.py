# ride_booking/database/schemas.py
# =========================================================
# 🧩 Ride Booking Schemas (Pydantic v2)
# =========================================================
# Wire format is camelCase; snake_case field names are accepted on input too.

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, constr
from pydantic.alias_generators import to_camel

from ride_booking.core.config import MAX_SEATS_PER_BOOKING

TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"

PaymentMethod = Literal["cash", "online", "upi", "card"]
PaymentStatus = Literal["pending", "paid", "failed"]
BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]
TripStatus = Literal["active", "completed", "cancelled"]


# =========================================================
# ✅ Base Config
# =========================================================
class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


# =========================================================
# 👤 User Schemas
# =========================================================
class UserRegister(CamelModel):
    first_name: constr(strip_whitespace=True, min_length=1, max_length=100)  # type: ignore
    last_name: constr(strip_whitespace=True, max_length=100) = ""  # type: ignore
    email: EmailStr
    phone: Optional[str] = None
    password: constr(min_length=6, max_length=72)  # type: ignore
    profile_image: Optional[str] = None


class RatingSummary(CamelModel):
    average: float = 0.0
    count: int = 0


class UserSummary(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    rating: RatingSummary


class UserResponse(UserSummary):
    email: EmailStr
    created_at: Optional[datetime] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# =========================================================
# 🚗 Trip Schemas
# =========================================================
class TripCreate(CamelModel):
    origin: constr(strip_whitespace=True, min_length=1, max_length=200)  # type: ignore
    destination: constr(strip_whitespace=True, min_length=1, max_length=200)  # type: ignore
    departure_date: date
    departure_time: str = Field(..., pattern=TIME_PATTERN)
    price_per_seat: float = Field(..., ge=0)
    total_seats: int = Field(..., ge=1, le=8)
    vehicle: Optional[dict] = None


class TripPassengerOut(CamelModel):
    user_id: int
    booking_id: Optional[int] = None
    seats_booked: int
    booking_date: Optional[datetime] = None


class TripSummary(CamelModel):
    id: int
    origin: str
    destination: str
    departure_date: date
    departure_time: str
    driver_id: int
    vehicle: Optional[dict] = None


class TripResponse(TripSummary):
    driver: UserSummary
    price_per_seat: float
    total_seats: int
    booked_seats: int
    available_seats: int
    total_earnings: float
    status: TripStatus
    passengers: List[TripPassengerOut] = []
    created_at: Optional[datetime] = None


# =========================================================
# 🎟 Booking Schemas
# =========================================================
class Point(CamelModel):
    location: constr(strip_whitespace=True, min_length=1, max_length=300)  # type: ignore
    time: str = Field(..., pattern=TIME_PATTERN)


class PassengerDetail(CamelModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=100)  # type: ignore
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[Literal["male", "female", "other"]] = None
    phone: Optional[str] = None


class BookingCreate(CamelModel):
    trip_id: int = Field(..., gt=0)
    seats_booked: int = Field(..., ge=1, le=MAX_SEATS_PER_BOOKING)
    pickup_point: Point
    drop_point: Point
    payment_method: PaymentMethod
    passenger_details: List[PassengerDetail] = Field(..., min_length=1)
    special_requests: Optional[str] = Field(None, max_length=500)


class PaymentUpdate(CamelModel):
    payment_status: Literal["paid", "failed"]
    transaction_id: Optional[constr(strip_whitespace=True, min_length=1)] = None  # type: ignore


class CancelRequest(CamelModel):
    reason: Optional[str] = Field(None, max_length=500)


class OTPVerifyRequest(CamelModel):
    otp: str = Field(..., pattern=r"^\d{4}$")


class RateRequest(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = Field(None, max_length=500)


class RatingEntry(CamelModel):
    rating: int
    review: Optional[str] = None


class BookingRating(CamelModel):
    for_driver: Optional[RatingEntry] = None
    for_passenger: Optional[RatingEntry] = None


class SharedContact(CamelModel):
    name: str
    phone: Optional[str] = None
    shared_at: Optional[datetime] = None


class BookingResponse(CamelModel):
    id: int
    trip: TripSummary
    passenger: UserSummary
    seats_booked: int
    total_amount: float
    pickup_point: Point
    drop_point: Point
    payment_method: str
    payment_status: PaymentStatus
    transaction_id: Optional[str] = None
    booking_status: BookingStatus
    passenger_details: List[PassengerDetail]
    special_requests: Optional[str] = None
    otp_generated_at: Optional[datetime] = None
    otp_verified: bool = False
    rating: BookingRating
    driver_contact: Optional[SharedContact] = None
    passenger_contact: Optional[SharedContact] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[int] = None
    cancelled_at: Optional[datetime] = None
    refund_amount: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookingEnvelope(CamelModel):
    message: str
    booking: BookingResponse


class BookingCreatedResponse(BookingEnvelope):
    otp: Optional[str] = None


class BookingCancelledResponse(BookingEnvelope):
    refund_amount: float


class ContactInfo(CamelModel):
    name: str
    phone: Optional[str] = None


class ContactResponse(CamelModel):
    message: str
    contact: ContactInfo


class BookingPage(CamelModel):
    bookings: List[BookingResponse]
    total_pages: int
    current_page: int
    total: int
