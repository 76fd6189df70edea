# ride_booking/services/booking_service.py
"""
Booking lifecycle.

Every operation loads the booking (and its trip), applies a single state
transition and commits both records in one transaction. Callers handle
StaleDataError, raised when another request modified the same trip or
booking in between.
"""
import logging
import math
import secrets
from datetime import datetime
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from ride_booking.core.config import OTP_LENGTH, OTP_TTL_MINUTES
from ride_booking.database import models, schemas
from ride_booking.services import refund_policy, trip_service, user_service
from ride_booking.utils import generate_otp, utcnow

logger = logging.getLogger(__name__)


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _forbidden(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)


def is_passenger(booking: models.Booking, user: models.User) -> bool:
    return booking.passenger_id == user.id


def is_driver(booking: models.Booking, user: models.User) -> bool:
    return booking.trip is not None and booking.trip.driver_id == user.id


def get_booking_or_404(db: Session, booking_id: int) -> models.Booking:
    booking = db.query(models.Booking).filter(models.Booking.id == booking_id).first()
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


# ==============================================================
# Create
# ==============================================================

def create_booking(
    db: Session,
    user: models.User,
    data: schemas.BookingCreate,
    now: Optional[datetime] = None,
) -> Tuple[models.Booking, str]:
    """Reserve seats on a trip. Returns the booking and its plaintext OTP."""
    now = now or utcnow()

    trip = trip_service.get_trip(db, data.trip_id, for_update=True)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    if trip.status != "active":
        raise _bad_request("Trip is not available for booking")
    if trip.driver_id == user.id:
        raise _bad_request("You cannot book your own trip")
    if not trip.has_available_seats(data.seats_booked):
        raise _bad_request("Not enough seats available")
    if len(data.passenger_details) != data.seats_booked:
        raise _bad_request("Passenger details count must match seats booked")

    otp = generate_otp(OTP_LENGTH)
    booking = models.Booking(
        trip_id=trip.id,
        passenger_id=user.id,
        seats_booked=data.seats_booked,
        total_amount=round(trip.price_per_seat * data.seats_booked, 2),
        pickup_point=data.pickup_point.model_dump(),
        drop_point=data.drop_point.model_dump(),
        payment_method=data.payment_method,
        payment_status="pending",
        booking_status="pending",
        passenger_details=[detail.model_dump() for detail in data.passenger_details],
        special_requests=data.special_requests,
        otp_code=otp,
        otp_generated_at=now,
        otp_verified=False,
        created_at=now,
    )
    db.add(booking)
    db.flush()  # assigns booking.id for the roster entry

    trip_service.add_booking_to_trip(trip, booking)
    db.commit()
    db.refresh(booking)
    logger.info(
        "Booking %s created: user=%s trip=%s seats=%s amount=%.2f",
        booking.id, user.id, trip.id, booking.seats_booked, booking.total_amount,
    )
    return booking, otp


# ==============================================================
# Read
# ==============================================================

def get_booking_for_user(db: Session, booking_id: int, user: models.User) -> models.Booking:
    booking = get_booking_or_404(db, booking_id)
    if not is_passenger(booking, user) and not is_driver(booking, user):
        raise _forbidden("Not authorized to view this booking")
    return booking


def list_user_bookings(
    db: Session,
    user: models.User,
    page: int = 1,
    limit: int = 10,
    booking_status: Optional[str] = None,
) -> dict:
    query = db.query(models.Booking).filter(models.Booking.passenger_id == user.id)
    if booking_status:
        query = query.filter(models.Booking.booking_status == booking_status)

    total = query.count()
    bookings = (
        query.order_by(models.Booking.created_at.desc(), models.Booking.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "bookings": bookings,
        "total_pages": math.ceil(total / limit),
        "current_page": page,
        "total": total,
    }


# ==============================================================
# Payment / cancellation
# ==============================================================

def update_payment(
    db: Session,
    booking_id: int,
    user: models.User,
    data: schemas.PaymentUpdate,
) -> models.Booking:
    booking = get_booking_or_404(db, booking_id)
    if not is_passenger(booking, user):
        raise _forbidden("Not authorized to update this booking")
    if booking.booking_status == "cancelled":
        raise _bad_request("Booking is cancelled")
    if booking.booking_status == "completed":
        raise _bad_request("Booking is already completed")

    booking.payment_status = data.payment_status
    if data.payment_status == "paid" and data.transaction_id:
        booking.transaction_id = data.transaction_id
        booking.booking_status = "confirmed"
    elif data.payment_status == "failed":
        booking.booking_status = "cancelled"
        trip = trip_service.get_trip(db, booking.trip_id, for_update=True)
        if trip:
            trip_service.release_booking_from_trip(trip, booking)

    db.commit()
    db.refresh(booking)
    logger.info("Booking %s payment -> %s (status %s)", booking.id, booking.payment_status, booking.booking_status)
    return booking


def cancel_booking(
    db: Session,
    booking_id: int,
    user: models.User,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> models.Booking:
    now = now or utcnow()
    booking = get_booking_or_404(db, booking_id)
    if not is_passenger(booking, user):
        raise _forbidden("Not authorized to cancel this booking")
    if booking.booking_status == "cancelled":
        raise _bad_request("Booking is already cancelled")
    if booking.booking_status == "completed":
        raise _bad_request("Completed bookings cannot be cancelled")

    trip = trip_service.get_trip(db, booking.trip_id, for_update=True)
    hours_left = 0.0
    if trip:
        departure_at = refund_policy.departure_datetime(trip.departure_date, trip.departure_time)
        hours_left = refund_policy.hours_until(departure_at, now)

    booking.refund_amount = refund_policy.calculate_refund(
        booking.total_amount, booking.payment_status, hours_left
    )
    booking.booking_status = "cancelled"
    booking.cancellation_reason = reason
    booking.cancelled_by = user.id
    booking.cancelled_at = now
    if trip:
        trip_service.release_booking_from_trip(trip, booking)

    db.commit()
    db.refresh(booking)
    logger.info("Booking %s cancelled by user %s, refund %.2f", booking.id, user.id, booking.refund_amount)
    return booking


# ==============================================================
# OTP
# ==============================================================

def verify_otp(
    db: Session,
    booking_id: int,
    user: models.User,
    otp: str,
    now: Optional[datetime] = None,
) -> models.Booking:
    now = now or utcnow()
    booking = get_booking_or_404(db, booking_id)
    if not is_passenger(booking, user) and not is_driver(booking, user):
        raise _forbidden("Not authorized to verify this booking")
    if booking.booking_status == "cancelled":
        raise _bad_request("Booking is cancelled")
    if booking.booking_status == "completed":
        raise _bad_request("Booking is already completed")

    if not booking.otp_code or not secrets.compare_digest(booking.otp_code, otp):
        raise _bad_request("Invalid OTP")

    age_minutes = (now - booking.otp_generated_at).total_seconds() / 60
    if age_minutes > OTP_TTL_MINUTES:
        raise _bad_request("OTP has expired")

    booking.otp_verified = True
    booking.booking_status = "confirmed"
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s OTP verified by user %s", booking.id, user.id)
    return booking


# ==============================================================
# Contacts
# ==============================================================

def share_contact(
    db: Session,
    booking_id: int,
    user: models.User,
    now: Optional[datetime] = None,
) -> dict:
    """Disclose the other party's contact to a passenger or driver."""
    now = now or utcnow()
    booking = get_booking_or_404(db, booking_id)

    if is_passenger(booking, user):
        driver = booking.trip.driver
        contact = {"name": driver.full_name, "phone": driver.phone}
        booking.driver_contact = {**contact, "shared_at": now.isoformat()}
    elif is_driver(booking, user):
        passenger = booking.passenger
        contact = {"name": passenger.full_name, "phone": passenger.phone}
        booking.passenger_contact = {**contact, "shared_at": now.isoformat()}
    else:
        raise _forbidden("Not authorized to access contact details")

    db.commit()
    logger.info("Booking %s contact shared with user %s", booking.id, user.id)
    return contact


# ==============================================================
# Rating
# ==============================================================

def rate_booking(
    db: Session,
    booking_id: int,
    user: models.User,
    data: schemas.RateRequest,
) -> models.Booking:
    booking = get_booking_or_404(db, booking_id)
    if booking.booking_status != "completed":
        raise _bad_request("Can only rate completed bookings")

    entry = {"rating": data.rating, "review": data.review}
    if is_passenger(booking, user):
        if booking.rating_for_driver:
            raise _bad_request("You have already rated this driver")
        booking.rating_for_driver = entry
        target = booking.trip.driver
    elif is_driver(booking, user):
        if booking.rating_for_passenger:
            raise _bad_request("You have already rated this passenger")
        booking.rating_for_passenger = entry
        target = booking.passenger
    else:
        raise _forbidden("Not authorized to rate this booking")

    if target is not None:
        user_service.apply_rating(target, data.rating)

    db.commit()
    db.refresh(booking)
    logger.info("Booking %s rated %s by user %s", booking.id, data.rating, user.id)
    return booking
