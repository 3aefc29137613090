"""Listing (diagnostic test) table definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    Table,
    Text,
    Uuid,
    func,
    text,
)

metadata = MetaData()

listings = Table(
    "listings",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("title", Text, nullable=False),
    Column("image", Text),
    Column("details", Text),
    Column("date", Date),
    Column("price", Numeric(10, 2), nullable=False),
    # Capacity counters, only ever moved together
    Column("slots", Integer, nullable=False, server_default=text("0")),
    Column("booked", Integer, nullable=False, server_default=text("0")),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("slots >= 0", name="listings_slots_non_negative"),
    CheckConstraint("booked >= 0", name="listings_booked_non_negative"),
)
