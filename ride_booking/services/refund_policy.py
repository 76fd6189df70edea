"""
Refund calculation for cancelled bookings.

The policy is a pure function of how long before departure the booking is
cancelled and whether anything was paid. Unpaid bookings (cash, pending or
failed payments) refund nothing.
"""
from datetime import date, datetime, time
from typing import Optional

from ride_booking.core.config import REFUND_FULL_HOURS, REFUND_PARTIAL_HOURS, REFUND_PARTIAL_RATE


def departure_datetime(departure_date: date, departure_time: str) -> datetime:
    hours, minutes = (int(part) for part in departure_time.split(":"))
    return datetime.combine(departure_date, time(hour=hours, minute=minutes))


def hours_until(departure_at: datetime, now: datetime) -> float:
    return (departure_at - now).total_seconds() / 3600


def calculate_refund(
    total_amount: float,
    payment_status: str,
    hours_to_departure: float,
    full_hours: Optional[float] = None,
    partial_hours: Optional[float] = None,
    partial_rate: Optional[float] = None,
) -> float:
    full_hours = REFUND_FULL_HOURS if full_hours is None else full_hours
    partial_hours = REFUND_PARTIAL_HOURS if partial_hours is None else partial_hours
    partial_rate = REFUND_PARTIAL_RATE if partial_rate is None else partial_rate

    if payment_status != "paid":
        return 0.0
    if hours_to_departure >= full_hours:
        return round(total_amount, 2)
    if hours_to_departure >= partial_hours:
        return round(total_amount * partial_rate, 2)
    return 0.0
