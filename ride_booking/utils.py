import logging
import secrets
from datetime import datetime, timezone
from email.message import EmailMessage
from typing import Any, Optional

import aiosmtplib
import bcrypt

from ride_booking.core.config import BCRYPT_ROUNDS, EMAIL_PASSWORD, EMAIL_USER, SMTP_PORT, SMTP_SERVER

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the database hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ---------------- Password Hashing ----------------
def _normalize_password(password: str | bytes) -> bytes:
    if isinstance(password, str):
        password_bytes = password.encode("utf-8")
    elif isinstance(password, bytes):
        password_bytes = password
    else:
        raise TypeError("Password must be str or bytes")

    if len(password_bytes) > 72:
        logger.debug("Truncating password to 72 bytes for bcrypt compatibility")
        password_bytes = password_bytes[:72]
    return password_bytes


def hash_password(password: str | bytes) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_normalize_password(password), salt).decode("utf-8")


def verify_password(plain_password: str | bytes, hashed_password: str | bytes) -> bool:
    if not hashed_password:
        return False

    hashed = hashed_password.encode("utf-8") if isinstance(hashed_password, str) else hashed_password
    try:
        return bcrypt.checkpw(_normalize_password(plain_password), hashed)
    except ValueError:
        # stored value is not a bcrypt hash
        logger.exception("Failed to verify bcrypt hash due to invalid stored value")
        return False


# ---------------- Email ----------------
async def send_email(to_email: str, subject: str, body: str) -> Optional[Any]:
    if not SMTP_SERVER:
        logger.warning("SMTP_SERVER not configured; dropping email to %s", to_email)
        return None

    message = EmailMessage()
    message["From"] = f"Ride Booking <{EMAIL_USER}>"
    message["To"] = to_email
    message["Subject"] = subject
    message.set_content(body)

    try:
        response = await aiosmtplib.send(
            message,
            hostname=SMTP_SERVER,
            port=SMTP_PORT,
            start_tls=True,
            username=EMAIL_USER,
            password=EMAIL_PASSWORD,
        )
        logger.info("Email sent response: %s", response)
        return response
    except Exception as e:
        logger.exception("Failed to send email via SMTP: %s", e)
        return None


# ---------------- OTP ----------------
def generate_otp(length: int = 4) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))
