"""Appointments table definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    MetaData,
    Numeric,
    Table,
    Text,
    Uuid,
    func,
    text,
)

metadata = MetaData()

appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # References
    Column("listing_id", Uuid, nullable=False, index=True),
    Column("user_email", Text, nullable=False, index=True),
    # Snapshot fields (denormalized for history)
    Column("user_name", Text),
    Column("listing_title", Text, nullable=False),
    Column("listing_date", Date),
    Column("price", Numeric(10, 2), nullable=False),
    # Payment that paid for this booking; one booking per intent
    Column("payment_intent_id", Text, nullable=False, unique=True),
    # Status management
    Column("status", Text, nullable=False, server_default=text("'pending'")),
    Column("result", Text),
    # Audit
    Column("booked_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("delivered_at", DateTime(timezone=True)),
    CheckConstraint(
        "status IN ('pending', 'delivered')",
        name="appointments_status_check",
    ),
)
