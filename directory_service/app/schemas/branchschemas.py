import math
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


def coerce_coordinate(value: Any) -> Optional[float]:
    """
    Latitude/longitude arrive as numbers or numeric strings. Anything that
    cannot be read as a finite number becomes 0.0; None stays None so that
    an update can tell "not sent" apart from "sent".
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return 0.0

    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return 0.0
    except (ValueError, OverflowError):
        return 0.0

    return number if math.isfinite(number) else 0.0


class BranchPayload(BaseModel):
    """Branch fields sent in the multipart ``data`` part; each may be absent."""

    name: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    category: Optional[str] = None
    sub_category: Optional[str] = Field(None, alias="subCategory")
    phone: Optional[str] = None
    description: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("name", "location", "category", "sub_category", "phone", "description", mode="before")
    @classmethod
    def only_strings(cls, v):
        # values of the wrong type are treated as not sent
        return v if isinstance(v, str) else None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def coordinates(cls, v):
        return coerce_coordinate(v)

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump().items() if v is not None}


class Branch(BaseModel):
    id: str = Field(alias="_id")
    name: str = ""
    location: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    category: str = ""
    sub_category: str = Field("", alias="subCategory")
    phone: str = ""
    description: str = ""
    images: List[str] = Field(default_factory=list)
    rate: float = 0.0
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True}

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
