# ride_booking/routers/user_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ride_booking.auth import get_current_user
from ride_booking.database import models, schemas
from ride_booking.database.database import get_db
from ride_booking.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


# -------------------- Register --------------------
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=schemas.UserResponse)
def register(payload: schemas.UserRegister, db: Session = Depends(get_db)):
    try:
        return user_service.register_user(db, payload)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Unexpected error during user registration: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Server error", "error": str(e)},
        )


# -------------------- Login --------------------
@router.post("/login", response_model=schemas.Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """
    Expects form-urlencoded data with username (email) and password.
    """
    logger.info("Login attempt: username=%s", form_data.username)
    return user_service.authenticate_user(db, form_data.username, form_data.password)


# -------------------- Me --------------------
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user
