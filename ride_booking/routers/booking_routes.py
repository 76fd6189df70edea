# ride_booking/routers/booking_routes.py
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ride_booking.auth import get_current_user
from ride_booking.core.config import OTP_TTL_MINUTES, settings
from ride_booking.database import models, schemas
from ride_booking.database.database import get_db
from ride_booking.services import booking_service
from ride_booking.utils import send_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# -------------------- helpers --------------------
def _conflict() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Booking or trip was modified concurrently, please retry",
    )


def _server_error(exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"message": "Server error", "error": str(exc)},
    )


def _out(booking: models.Booking) -> schemas.BookingResponse:
    return schemas.BookingResponse.model_validate(booking)


def _otp_email_body(user: models.User, booking: models.Booking, otp: str) -> str:
    return (
        f"Hello {user.first_name},\n\n"
        f"Your booking #{booking.id} for {booking.seats_booked} seat(s) is reserved.\n"
        f"Share this OTP with your driver at pickup: {otp}\n"
        f"It will expire in {OTP_TTL_MINUTES} minutes.\n\nHappy travels!"
    )


# -------------------- Create --------------------
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.BookingCreatedResponse)
def create_booking(
    payload: schemas.BookingCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        booking, otp = booking_service.create_booking(db, current_user, payload)
    except HTTPException as e:
        logger.warning("Booking rejected for user %s on trip %s: %s", current_user.id, payload.trip_id, e.detail)
        raise
    except StaleDataError:
        db.rollback()
        raise _conflict()
    except Exception as e:
        db.rollback()
        logger.exception("Unexpected error creating booking: %s", e)
        raise _server_error(e)

    if settings.otp_by_email:
        background_tasks.add_task(
            send_email,
            current_user.email,
            "Your ride booking OTP",
            _otp_email_body(current_user, booking, otp),
        )

    return schemas.BookingCreatedResponse(
        message="Booking created successfully",
        booking=_out(booking),
        otp=otp if settings.otp_in_response else None,
    )


# -------------------- List (caller's own) --------------------
@router.get("/user/bookings", response_model=schemas.BookingPage)
def list_my_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    booking_status: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        result = booking_service.list_user_bookings(db, current_user, page, limit, booking_status)
    except Exception as e:
        logger.exception("Failed to list bookings for user %s: %s", current_user.id, e)
        raise _server_error(e)

    return schemas.BookingPage(
        bookings=[_out(b) for b in result["bookings"]],
        total_pages=result["total_pages"],
        current_page=result["current_page"],
        total=result["total"],
    )


# -------------------- Fetch --------------------
@router.get("/{booking_id}", response_model=schemas.BookingResponse)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        booking = booking_service.get_booking_for_user(db, booking_id, current_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to load booking %s: %s", booking_id, e)
        raise _server_error(e)
    return _out(booking)


# -------------------- Payment --------------------
@router.patch("/{booking_id}/payment", response_model=schemas.BookingEnvelope)
def update_payment_status(
    booking_id: int,
    payload: schemas.PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        booking = booking_service.update_payment(db, booking_id, current_user, payload)
    except HTTPException:
        raise
    except StaleDataError:
        db.rollback()
        raise _conflict()
    except Exception as e:
        db.rollback()
        logger.exception("Failed to update payment for booking %s: %s", booking_id, e)
        raise _server_error(e)

    return schemas.BookingEnvelope(message="Payment status updated successfully", booking=_out(booking))


# -------------------- Cancel --------------------
@router.patch("/{booking_id}/cancel", response_model=schemas.BookingCancelledResponse)
def cancel_booking(
    booking_id: int,
    payload: Optional[schemas.CancelRequest] = None,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    reason = payload.reason if payload else None
    try:
        booking = booking_service.cancel_booking(db, booking_id, current_user, reason)
    except HTTPException:
        raise
    except StaleDataError:
        db.rollback()
        raise _conflict()
    except Exception as e:
        db.rollback()
        logger.exception("Failed to cancel booking %s: %s", booking_id, e)
        raise _server_error(e)

    return schemas.BookingCancelledResponse(
        message="Booking cancelled successfully",
        booking=_out(booking),
        refund_amount=booking.refund_amount or 0.0,
    )


# -------------------- OTP --------------------
@router.post("/{booking_id}/verify-otp", response_model=schemas.BookingEnvelope)
def verify_otp(
    booking_id: int,
    payload: schemas.OTPVerifyRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        booking = booking_service.verify_otp(db, booking_id, current_user, payload.otp)
    except HTTPException as e:
        if e.status_code == status.HTTP_400_BAD_REQUEST:
            logger.warning("OTP check failed for booking %s by user %s: %s", booking_id, current_user.id, e.detail)
        raise
    except StaleDataError:
        db.rollback()
        raise _conflict()
    except Exception as e:
        db.rollback()
        logger.exception("Failed to verify OTP for booking %s: %s", booking_id, e)
        raise _server_error(e)

    return schemas.BookingEnvelope(message="OTP verified successfully", booking=_out(booking))


# -------------------- Contact --------------------
@router.post("/{booking_id}/share-contact", response_model=schemas.ContactResponse)
def share_contact(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        contact = booking_service.share_contact(db, booking_id, current_user)
    except HTTPException:
        raise
    except StaleDataError:
        db.rollback()
        raise _conflict()
    except Exception as e:
        db.rollback()
        logger.exception("Failed to share contact for booking %s: %s", booking_id, e)
        raise _server_error(e)

    return {"message": "Contact details shared successfully", "contact": contact}


# -------------------- Rate --------------------
@router.post("/{booking_id}/rate", response_model=schemas.BookingEnvelope)
def rate_booking(
    booking_id: int,
    payload: schemas.RateRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        booking = booking_service.rate_booking(db, booking_id, current_user, payload)
    except HTTPException:
        raise
    except StaleDataError:
        db.rollback()
        raise _conflict()
    except Exception as e:
        db.rollback()
        logger.exception("Failed to rate booking %s: %s", booking_id, e)
        raise _server_error(e)

    return schemas.BookingEnvelope(message="Rating submitted successfully", booking=_out(booking))
