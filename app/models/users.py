"""User table definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    MetaData,
    Table,
    Text,
    Uuid,
    func,
    text,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Identity key
    Column("email", Text, nullable=False, unique=True, index=True),
    # Profile info (mutable by the owner)
    Column("name", Text),
    Column("photo_url", Text),
    Column("blood_group", Text),
    Column("district", Text),
    Column("upazila", Text),
    # Administrative fields
    Column("role", Text, nullable=False, server_default=text("'user'")),
    Column("status", Text, nullable=False, server_default=text("'none'")),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("role IN ('user', 'admin')", name="users_role_check"),
)
