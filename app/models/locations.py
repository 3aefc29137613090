"""Location reference tables (districts and upazilas)."""

from sqlalchemy import Column, Integer, MetaData, Table, Text

metadata = MetaData()

districts = Table(
    "districts",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", Text, nullable=False),
    Column("bn_name", Text),
)

upazilas = Table(
    "upazilas",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("district_id", Integer, nullable=False, index=True),
    Column("name", Text, nullable=False),
    Column("bn_name", Text),
)
