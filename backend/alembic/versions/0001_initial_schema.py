"""Initial rent-a-car schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("license_plate", sa.String(20), nullable=False, unique=True),
        sa.Column("brand", sa.String(50), nullable=False),
        sa.Column("model", sa.String(50), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("model_year", sa.Integer, nullable=True),
        sa.Column("mileage", sa.Integer, nullable=False),
        sa.Column("location", sa.String(100), nullable=False),
        sa.Column("daily_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_vehicles_license_plate", "vehicles", ["license_plate"])
    op.create_index("ix_vehicles_category", "vehicles", ["category"])
    op.create_index("ix_vehicles_location", "vehicles", ["location"])
    op.create_index("ix_vehicles_status", "vehicles", ["status"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("vehicle_id", sa.Integer, sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("pickup_date", sa.Date, nullable=False),
        sa.Column("return_date", sa.Date, nullable=False),
        sa.Column("pickup_location", sa.String(100), nullable=False),
        sa.Column("return_location", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("extras_cost", sa.Numeric(10, 2), nullable=False),
        sa.Column("insurance", sa.Boolean, nullable=False),
        sa.Column("additional_driver", sa.Boolean, nullable=False),
        sa.Column("child_seat", sa.Boolean, nullable=False),
        sa.Column("cancelled_at", sa.DateTime, nullable=True),
        sa.Column("checkout_at", sa.DateTime, nullable=True),
        sa.Column("checkout_mileage", sa.Integer, nullable=True),
        sa.Column("checkout_notes", sa.Text, nullable=True),
        sa.Column("checkin_at", sa.DateTime, nullable=True),
        sa.Column("checkin_mileage", sa.Integer, nullable=True),
        sa.Column("damage_present", sa.Boolean, nullable=False),
        sa.Column("damage_notes", sa.Text, nullable=True),
        sa.Column("damage_cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("extra_mileage_cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("late_fee", sa.Numeric(10, 2), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"])
    op.create_index("ix_bookings_vehicle_id", "bookings", ["vehicle_id"])
    op.create_index("ix_bookings_pickup_date", "bookings", ["pickup_date"])
    op.create_index("ix_bookings_return_date", "bookings", ["return_date"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_vehicle_dates", "bookings", ["vehicle_id", "pickup_date", "return_date"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("actor", sa.String(255), nullable=False),
        sa.Column("origin", sa.String(255), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(50), nullable=False),
        sa.Column("detail", sa.Text, nullable=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column("timestamp", sa.DateTime, nullable=False),
    )
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_entity_type", "audit_logs", ["entity_type"])
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"])
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("bookings")
    op.drop_table("vehicles")
    op.drop_table("customers")
