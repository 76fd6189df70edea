"""
Application configuration and settings
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Database Configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ride_booking.db")

# Auth Configuration
SECRET_KEY = os.getenv("SECRET_KEY", "supersecretkey")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

# CORS / logging
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Booking rules
MAX_SEATS_PER_BOOKING = int(os.getenv("MAX_SEATS_PER_BOOKING", 7))
OTP_LENGTH = int(os.getenv("OTP_LENGTH", 4))
OTP_TTL_MINUTES = int(os.getenv("OTP_TTL_MINUTES", 30))
OTP_DELIVERY = os.getenv("OTP_DELIVERY", "response").lower()  # response | email | both

# Refund tiers (hours before departure)
REFUND_FULL_HOURS = float(os.getenv("REFUND_FULL_HOURS", 24))
REFUND_PARTIAL_HOURS = float(os.getenv("REFUND_PARTIAL_HOURS", 2))
REFUND_PARTIAL_RATE = float(os.getenv("REFUND_PARTIAL_RATE", 0.5))

# SMTP Configuration
EMAIL_USER = os.getenv("EMAIL_USER")
EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD")
SMTP_SERVER = os.getenv("SMTP_SERVER")
SMTP_PORT = int(os.getenv("SMTP_PORT", 587))


class Settings:
    PROJECT_NAME: str = "Ride Booking API"
    VERSION: str = "1.0.0"
    DATABASE_URL = DATABASE_URL
    SECRET_KEY = SECRET_KEY
    ALGORITHM = ALGORITHM
    ACCESS_TOKEN_EXPIRE_MINUTES = ACCESS_TOKEN_EXPIRE_MINUTES
    BCRYPT_ROUNDS = BCRYPT_ROUNDS
    ALLOWED_ORIGINS = ALLOWED_ORIGINS
    LOG_LEVEL = LOG_LEVEL
    MAX_SEATS_PER_BOOKING = MAX_SEATS_PER_BOOKING
    OTP_LENGTH = OTP_LENGTH
    OTP_TTL_MINUTES = OTP_TTL_MINUTES
    OTP_DELIVERY = OTP_DELIVERY
    REFUND_FULL_HOURS = REFUND_FULL_HOURS
    REFUND_PARTIAL_HOURS = REFUND_PARTIAL_HOURS
    REFUND_PARTIAL_RATE = REFUND_PARTIAL_RATE
    EMAIL_USER = EMAIL_USER
    EMAIL_PASSWORD = EMAIL_PASSWORD
    SMTP_SERVER = SMTP_SERVER
    SMTP_PORT = SMTP_PORT

    @property
    def otp_in_response(self) -> bool:
        return self.OTP_DELIVERY in ("response", "both")

    @property
    def otp_by_email(self) -> bool:
        return self.OTP_DELIVERY in ("email", "both")


settings = Settings()
