import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ride_booking.auth import create_access_token
from ride_booking.database import models, schemas
from ride_booking.utils import hash_password, verify_password

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()


def register_user(db: Session, data: schemas.UserRegister) -> models.User:
    if get_user_by_email(db, data.email):
        logger.warning("Attempt to register with existing email: %s", data.email)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = models.User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone=data.phone,
        profile_image=data.profile_image,
        password=hash_password(data.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    db.refresh(user)
    logger.info("User registered: %s", user.email)
    return user


def authenticate_user(db: Session, email: str, password: str) -> dict:
    """Check credentials and return a bearer token."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password):
        logger.warning("Failed login for %s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token({"sub": user.email, "role": "user"})
    return {"access_token": access_token, "token_type": "bearer"}


def apply_rating(user: models.User, rating: int) -> None:
    """Fold one more rating into the user's running average."""
    count = user.rating_count or 0
    average = user.rating_average or 0.0
    new_count = count + 1
    user.rating_average = ((average * count) + rating) / new_count
    user.rating_count = new_count
