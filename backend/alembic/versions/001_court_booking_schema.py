# backend/alembic/versions/001_court_booking_schema.py
"""Court booking schema

Revision ID: 001_court_booking_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_court_booking_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_BOOKING_PREDICATE = "status <> 'cancelled'"


def _create_extension_prefer_extensions_schema(extension_name: str) -> None:
    """Create extension using extensions schema when available."""

    op.execute(
        f"""
        DO $$
        DECLARE
            extensions_schema_exists BOOLEAN;
        BEGIN
            SELECT EXISTS (
                SELECT 1 FROM pg_namespace WHERE nspname = 'extensions'
            ) INTO extensions_schema_exists;

            IF extensions_schema_exists THEN
                EXECUTE 'CREATE EXTENSION IF NOT EXISTS {extension_name} WITH SCHEMA extensions';
            ELSE
                EXECUTE 'CREATE EXTENSION IF NOT EXISTS {extension_name}';
            END IF;
        END
        $$;
        """
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create courts, rate schedules, blocks, holidays and bookings."""
    print("Creating court booking tables...")

    bind = op.get_bind()
    dialect_name = bind.dialect.name if bind is not None else "postgresql"
    is_postgres = dialect_name == "postgresql"

    op.create_table(
        "courts",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("court_type", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    print("Creating schedules table...")
    op.create_table(
        "schedules",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("court_id", sa.String(26), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_weekend", sa.Numeric(10, 2), nullable=True),
        sa.Column("price_holiday", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_monthly", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("monthly_discount", sa.Numeric(5, 2), nullable=True),
        sa.Column("is_blocked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("min_booking_time", sa.Integer(), nullable=False, server_default="60"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["court_id"], ["courts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="check_day_of_week_range"),
        sa.CheckConstraint("price > 0", name="check_price_positive"),
        sa.CheckConstraint(
            "price_weekend IS NULL OR price_weekend > 0", name="check_price_weekend_positive"
        ),
        sa.CheckConstraint(
            "price_holiday IS NULL OR price_holiday > 0", name="check_price_holiday_positive"
        ),
        sa.CheckConstraint(
            "monthly_discount IS NULL OR (monthly_discount >= 0 AND monthly_discount <= 100)",
            name="check_monthly_discount_range",
        ),
        sa.CheckConstraint("min_booking_time > 0", name="check_min_booking_time_positive"),
    )
    op.create_index("idx_schedules_court_day", "schedules", ["court_id", "day_of_week"])

    op.create_table(
        "schedule_blocks",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("court_id", sa.String(26), nullable=False),
        sa.Column("start_datetime", sa.DateTime(), nullable=False),
        sa.Column("end_datetime", sa.DateTime(), nullable=False),
        sa.Column("reason", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["court_id"], ["courts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("end_datetime > start_datetime", name="check_block_range"),
    )
    op.create_index(
        "idx_schedule_blocks_court_start", "schedule_blocks", ["court_id", "start_datetime"]
    )

    op.create_table(
        "holidays",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_holidays_date", "holidays", ["date"], unique=True)

    print("Creating bookings table...")
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("court_id", sa.String(26), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("is_monthly", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("subscription_end_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["court_id"], ["courts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'paid', 'failed', 'refunded')",
            name="ck_bookings_payment_status",
        ),
        sa.CheckConstraint("amount >= 0", name="check_amount_non_negative"),
        sa.CheckConstraint(
            "is_monthly = false OR subscription_end_date >= booking_date",
            name="check_subscription_end_date",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_booking_date", "bookings", ["booking_date"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("idx_bookings_court_date", "bookings", ["court_id", "booking_date"])
    op.create_index(
        "uq_bookings_active_court_slot",
        "bookings",
        ["court_id", "booking_date", "start_time"],
        unique=True,
        sqlite_where=sa.text(ACTIVE_BOOKING_PREDICATE),
        postgresql_where=sa.text(ACTIVE_BOOKING_PREDICATE),
    )

    if is_postgres:
        print("Adding booking overlap exclusion constraint...")
        _create_extension_prefer_extensions_schema("btree_gist")
        op.execute(
            """
            ALTER TABLE bookings
              ADD COLUMN IF NOT EXISTS booking_span tsrange
              GENERATED ALWAYS AS (
                tsrange(
                  (booking_date::timestamp + start_time),
                  CASE
                    WHEN end_time <= start_time
                      THEN (booking_date::timestamp + interval '1 day' + end_time)
                    ELSE (booking_date::timestamp + end_time)
                  END,
                  '[)'
                )
              ) STORED
            """
        )
        op.execute(
            f"""
            ALTER TABLE bookings
              ADD CONSTRAINT bookings_no_overlap_per_court
              EXCLUDE USING gist (
                court_id WITH =,
                booking_span WITH &&
              )
              WHERE ({ACTIVE_BOOKING_PREDICATE})
            """
        )

    print("Court booking tables created")


def downgrade() -> None:
    """Drop court booking tables."""
    print("Dropping court booking tables...")

    bind = op.get_bind()
    dialect_name = bind.dialect.name if bind is not None else "postgresql"
    if dialect_name == "postgresql":
        op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_overlap_per_court")
        op.execute("ALTER TABLE bookings DROP COLUMN IF EXISTS booking_span")

    op.drop_index("uq_bookings_active_court_slot", table_name="bookings")
    op.drop_index("idx_bookings_court_date", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_booking_date", table_name="bookings")
    op.drop_index("ix_bookings_user_id", table_name="bookings")
    op.drop_index("ix_bookings_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_holidays_date", table_name="holidays")
    op.drop_table("holidays")

    op.drop_index("idx_schedule_blocks_court_start", table_name="schedule_blocks")
    op.drop_table("schedule_blocks")

    op.drop_index("idx_schedules_court_day", table_name="schedules")
    op.drop_table("schedules")

    op.drop_table("courts")
