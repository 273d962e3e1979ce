from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, DateTime
from sqlmodel import Column, Field, SQLModel

DEFAULT_PHOTO = "no-photo.jpg"


class Career(str, Enum):
    web_development = "Web Development"
    mobile_development = "Mobile Development"
    ui_ux = "UI/UX"
    data_science = "Data Science"
    business = "Business"
    other = "Other"


class Bootcamp(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    name: str = Field(max_length=50, unique=True)
    slug: str = Field(index=True)
    description: str = Field(max_length=500)
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = None

    # Location, filled from the geocoder on create
    latitude: Optional[float] = Field(default=None, index=True)
    longitude: Optional[float] = Field(default=None, index=True)
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None

    careers: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    average_rating: Optional[float] = None
    average_cost: Optional[float] = None
    photo: str = Field(default=DEFAULT_PHOTO)
    housing: bool = Field(default=False)
    job_assistance: bool = Field(default=False)
    job_guarantee: bool = Field(default=False)
    accept_gi: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
