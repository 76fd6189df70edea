"""initial schema: users, trips, trip passengers, bookings

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("profile_image", sa.String(length=500), nullable=True),
        sa.Column("rating_average", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "trips",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("driver_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("origin", sa.String(length=200), nullable=False),
        sa.Column("destination", sa.String(length=200), nullable=False),
        sa.Column("departure_date", sa.Date(), nullable=False),
        sa.Column("departure_time", sa.String(length=5), nullable=False),
        sa.Column("vehicle", sa.JSON(), nullable=True),
        sa.Column("price_per_seat", sa.Float(), nullable=False),
        sa.Column("total_seats", sa.Integer(), nullable=False),
        sa.Column("booked_seats", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_earnings", sa.Float(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("version_id", sa.Integer(), nullable=False),
    )
    op.create_index("ix_trips_id", "trips", ["id"])
    op.create_index("ix_trips_driver_id", "trips", ["driver_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trip_id", sa.Integer(), sa.ForeignKey("trips.id"), nullable=False),
        sa.Column("passenger_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("seats_booked", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("pickup_point", sa.JSON(), nullable=False),
        sa.Column("drop_point", sa.JSON(), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("transaction_id", sa.String(length=100), nullable=True),
        sa.Column("booking_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("passenger_details", sa.JSON(), nullable=False),
        sa.Column("special_requests", sa.Text(), nullable=True),
        sa.Column("otp_code", sa.String(length=10), nullable=True),
        sa.Column("otp_generated_at", sa.DateTime(), nullable=True),
        sa.Column("otp_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rating_for_driver", sa.JSON(), nullable=True),
        sa.Column("rating_for_passenger", sa.JSON(), nullable=True),
        sa.Column("driver_contact", sa.JSON(), nullable=True),
        sa.Column("passenger_contact", sa.JSON(), nullable=True),
        sa.Column("cancellation_reason", sa.String(length=500), nullable=True),
        sa.Column("cancelled_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(), nullable=True),
        sa.Column("refund_amount", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("version_id", sa.Integer(), nullable=False),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_trip_id", "bookings", ["trip_id"])
    op.create_index("ix_bookings_passenger_id", "bookings", ["passenger_id"])
    op.create_index("ix_bookings_booking_status", "bookings", ["booking_status"])
    op.create_index("ix_bookings_created_at", "bookings", ["created_at"])

    op.create_table(
        "trip_passengers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trip_id", sa.Integer(), sa.ForeignKey("trips.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=True, unique=True),
        sa.Column("seats_booked", sa.Integer(), nullable=False),
        sa.Column("booking_date", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_trip_passengers_id", "trip_passengers", ["id"])
    op.create_index("ix_trip_passengers_trip_id", "trip_passengers", ["trip_id"])


def downgrade():
    op.drop_table("trip_passengers")
    op.drop_table("bookings")
    op.drop_table("trips")
    op.drop_table("users")
