from datetime import date, datetime

import pytest

from ride_booking.services.refund_policy import calculate_refund, departure_datetime, hours_until


@pytest.mark.parametrize(
    "hours, expected",
    [
        (72, 500.0),
        (24, 500.0),
        (23.9, 250.0),
        (2, 250.0),
        (1.5, 0.0),
        (-3, 0.0),
    ],
)
def test_paid_booking_tiers(hours, expected):
    assert calculate_refund(500.0, "paid", hours) == expected


@pytest.mark.parametrize("payment_status", ["pending", "failed"])
def test_unpaid_bookings_refund_nothing(payment_status):
    assert calculate_refund(500.0, payment_status, 100) == 0.0


def test_thresholds_are_overridable():
    assert calculate_refund(100.0, "paid", 10, full_hours=8) == 100.0
    assert calculate_refund(100.0, "paid", 10, partial_rate=0.25) == 25.0


def test_departure_datetime_and_hours_until():
    departure = departure_datetime(date(2030, 5, 1), "07:45")

    assert departure == datetime(2030, 5, 1, 7, 45)
    assert hours_until(departure, datetime(2030, 4, 30, 19, 45)) == 12.0
