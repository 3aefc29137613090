"""Location reference data schemas."""

from pydantic import BaseModel


class District(BaseModel):
    """District entry."""

    id: int
    name: str
    bn_name: str | None = None


class Upazila(BaseModel):
    """Sub-district entry."""

    id: int
    district_id: int
    name: str
    bn_name: str | None = None


class LocationResponse(BaseModel):
    """All location reference lists."""

    districts: list[District]
    upazilas: list[Upazila]
