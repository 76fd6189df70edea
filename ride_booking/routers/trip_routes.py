# ride_booking/routers/trip_routes.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ride_booking.auth import get_current_user
from ride_booking.database import models, schemas
from ride_booking.database.database import get_db
from ride_booking.services import trip_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["Trips"])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.TripResponse)
def publish_trip(
    payload: schemas.TripCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        return trip_service.create_trip(db, current_user, payload)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to publish trip for driver %s: %s", current_user.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Server error", "error": str(e)},
        )


@router.get("/", response_model=List[schemas.TripResponse])
def search_trips(
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Active trips, optionally filtered by origin/destination (case-insensitive)."""
    return trip_service.list_active_trips(db, origin, destination, limit)


@router.get("/{trip_id}", response_model=schemas.TripResponse)
def get_trip(trip_id: int, db: Session = Depends(get_db)):
    return trip_service.get_trip_or_404(db, trip_id)
