# ride_booking/routers/health.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from ride_booking.database.database import get_db

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/db")
def db_health(db: Session = Depends(get_db)):
    """
    Lightweight health check for the database.
    Runs a trivial query so auth, connectivity and pool are all exercised.
    """
    try:
        value = db.execute(text("SELECT 1")).scalar()
        if value != 1:
            raise HTTPException(status_code=503, detail="Database returned unexpected result")
        return {"ok": True, "dialect": db.get_bind().dialect.name}
    except HTTPException:
        raise
    except Exception as e:
        # Do not leak secrets; just return an operational error
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}") from e
