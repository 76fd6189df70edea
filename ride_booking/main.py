# ride_booking/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ride_booking.core.config import LOG_LEVEL, settings
from ride_booking.database import models
from ride_booking.database.database import engine

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)


# Lifespan events (startup/shutdown)
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("✓ %s %s starting (db dialect: %s)", settings.PROJECT_NAME, settings.VERSION, engine.dialect.name)
    if settings.otp_in_response:
        logger.warning(
            "⚠ OTP_DELIVERY=%s: booking OTPs are returned in API responses; "
            "set OTP_DELIVERY=email to deliver them out-of-band",
            settings.OTP_DELIVERY,
        )
    yield
    engine.dispose()
    logger.info("✅ Graceful shutdown complete")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Seat bookings against driver-published trips",
    version=settings.VERSION,
    lifespan=lifespan,
)

# Ensure DB models/tables exist
models.Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------- error rendering --------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    body = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "location": err.get("loc", ("body",))[0],
            "message": err.get("msg"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


# --- Register routers under the /api prefix ---
from ride_booking.routers import booking_routes, health, trip_routes, user_routes  # noqa: E402

app.include_router(user_routes.router, prefix="/api")
app.include_router(trip_routes.router, prefix="/api")
app.include_router(booking_routes.router, prefix="/api")
app.include_router(health.router, prefix="/api")


@app.get("/")
def root():
    return {"message": "🚗 Ride Booking API is running successfully!"}
