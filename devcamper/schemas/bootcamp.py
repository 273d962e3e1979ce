import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from devcamper.models.bootcamp import Career

REQUIRED_FIELDS = ("name", "description", "careers", "housing", "job_assistance", "job_guarantee", "accept_gi")

URL_RE = re.compile(r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_+.~#?&/=]*)$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$")


def _check_website(v: Optional[str]) -> Optional[str]:
    if v is not None and not URL_RE.match(v):
        raise ValueError("Please use a valid URL with HTTP or HTTPS")
    return v


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is not None and not EMAIL_RE.match(v):
        raise ValueError("Please add a valid email")
    return v


def _check_careers(v: Optional[List[Career]]) -> Optional[List[Career]]:
    if v is not None and not v:
        raise ValueError("Please add at least one career")
    return v


class BootcampCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=500)
    address: str = Field(min_length=1)
    careers: List[Career]
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = None
    average_rating: Optional[float] = Field(default=None, ge=1, le=10)
    average_cost: Optional[float] = Field(default=None, ge=0)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False

    @field_validator("name", "description", "address")
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("website")
    @classmethod
    def validate_website(cls, v):
        return _check_website(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator("careers")
    @classmethod
    def validate_careers(cls, v):
        return _check_careers(v)


class BootcampUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    careers: Optional[List[Career]] = None
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = None
    average_rating: Optional[float] = Field(default=None, ge=1, le=10)
    average_cost: Optional[float] = Field(default=None, ge=0)
    housing: Optional[bool] = None
    job_assistance: Optional[bool] = None
    job_guarantee: Optional[bool] = None
    accept_gi: Optional[bool] = None

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in REQUIRED_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("website")
    @classmethod
    def validate_website(cls, v):
        return _check_website(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator("careers")
    @classmethod
    def validate_careers(cls, v):
        return _check_careers(v)


class BootcampResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    slug: str
    description: str
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None
    careers: List[str] = []
    average_rating: Optional[float] = None
    average_cost: Optional[float] = None
    photo: str
    housing: bool
    job_assistance: bool
    job_guarantee: bool
    accept_gi: bool
    created_at: datetime

    @field_validator("careers", mode="before")
    @classmethod
    def normalize_careers(cls, v):
        return v or []


class BootcampEnvelope(BaseModel):
    success: bool = True
    data: BootcampResponse


class BootcampListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[BootcampResponse]
