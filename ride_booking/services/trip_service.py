import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from ride_booking.database import models, schemas

logger = logging.getLogger(__name__)

# --------- Trip publishing ---------

def create_trip(db: Session, driver: models.User, data: schemas.TripCreate) -> models.Trip:
    trip = models.Trip(
        driver_id=driver.id,
        origin=data.origin,
        destination=data.destination,
        departure_date=data.departure_date,
        departure_time=data.departure_time,
        price_per_seat=data.price_per_seat,
        total_seats=data.total_seats,
        vehicle=data.vehicle,
        booked_seats=0,
        total_earnings=0.0,
        status="active",
    )
    db.add(trip)
    db.commit()
    db.refresh(trip)
    logger.info("Trip %s published by driver %s", trip.id, driver.id)
    return trip


def get_trip(db: Session, trip_id: int, for_update: bool = False) -> Optional[models.Trip]:
    query = db.query(models.Trip).filter(models.Trip.id == trip_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_trip_or_404(db: Session, trip_id: int) -> models.Trip:
    trip = get_trip(db, trip_id)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return trip


def list_active_trips(
    db: Session,
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    limit: int = 50,
):
    query = db.query(models.Trip).filter(models.Trip.status == "active")
    if origin:
        query = query.filter(models.Trip.origin.ilike(origin))
    if destination:
        query = query.filter(models.Trip.destination.ilike(destination))
    return query.order_by(models.Trip.departure_date, models.Trip.departure_time).limit(limit).all()


# --------- Seat bookkeeping ---------

def add_booking_to_trip(trip: models.Trip, booking: models.Booking) -> None:
    """Count a new booking's seats and amount against the trip and roster it."""
    trip.booked_seats = (trip.booked_seats or 0) + booking.seats_booked
    trip.total_earnings = (trip.total_earnings or 0.0) + booking.total_amount
    trip.passengers.append(
        models.TripPassenger(
            user_id=booking.passenger_id,
            booking_id=booking.id,
            seats_booked=booking.seats_booked,
        )
    )


def release_booking_from_trip(trip: models.Trip, booking: models.Booking) -> None:
    """Undo add_booking_to_trip for a cancelled or payment-failed booking."""
    seats_left = (trip.booked_seats or 0) - booking.seats_booked
    earnings_left = (trip.total_earnings or 0.0) - booking.total_amount
    if seats_left < 0 or earnings_left < 0:
        logger.warning(
            "Trip %s counters would go negative releasing booking %s (seats=%s, earnings=%.2f)",
            trip.id, booking.id, seats_left, earnings_left,
        )
    trip.booked_seats = seats_left
    trip.total_earnings = earnings_left
    for entry in list(trip.passengers):
        if entry.booking_id == booking.id:
            trip.passengers.remove(entry)
    logger.info(
        "Released %s seat(s) of booking %s from trip %s",
        booking.seats_booked, booking.id, trip.id,
    )
