"""Database models."""

from sqlalchemy import MetaData

from app.models.appointments import appointments
from app.models.banners import banners
from app.models.listings import listings
from app.models.locations import districts, upazilas
from app.models.users import users

# Combined metadata for create_all / drop_all
metadata = MetaData()
for _table in (appointments, banners, listings, districts, upazilas, users):
    _table.to_metadata(metadata)

__all__ = [
    "appointments",
    "banners",
    "districts",
    "listings",
    "metadata",
    "upazilas",
    "users",
]
