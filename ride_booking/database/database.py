from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ride_booking.core.config import DATABASE_URL

SQLALCHEMY_DATABASE_URL = DATABASE_URL

# SQLite needs cross-thread access because FastAPI runs sync routes in a threadpool
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base model for all ORM classes
Base = declarative_base()


# ✅ Dependency for FastAPI routes
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
