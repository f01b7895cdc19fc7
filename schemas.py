# schemas.py — request bodies (camelCase on the wire, snake_case in Python)
import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from flask import request
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"

class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v

# ---------- auth ----------
class RegisterIn(ApiModel):
    name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    password: str = Field(min_length=6, max_length=200)

class LoginIn(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1)

class ProfileUpdateIn(ApiModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    profile_picture_url: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=200)

    normalize_blanks = field_validator("profile_picture_url", "password", mode="before")(_blank_to_none)

class AdminUserIn(ApiModel):
    name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    password: str = Field(min_length=6, max_length=200)
    role: Literal["user", "admin"] = "user"

class AdminUserUpdateIn(ApiModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=200)
    role: Optional[Literal["user", "admin"]] = None

    normalize_blanks = field_validator("email", "password", mode="before")(_blank_to_none)

# ---------- bookings / events ----------
class BookingIn(ApiModel):
    name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    phone: str = Field(min_length=7, max_length=40)
    organization: Optional[str] = None
    room_id: int = Field(ge=1)
    date: dt.date
    time_slot: Optional[str] = None
    start_time: Optional[str] = Field(default=None, pattern=HHMM)
    end_time: Optional[str] = Field(default=None, pattern=HHMM)
    event_type: str = Field(min_length=1, max_length=120)
    attendees: int = Field(ge=1)
    description: Optional[str] = None
    event_image: Optional[str] = None

    normalize_blanks = field_validator("organization", "time_slot", "start_time", "end_time",
                                        "description", "event_image", mode="before")(_blank_to_none)

    @model_validator(mode="after")
    def check_times(self):
        if self.start_time and self.end_time:
            if self.end_time <= self.start_time:
                raise ValueError("End time must be after start time")
        elif not self.time_slot:
            raise ValueError("Either a time slot or start and end times are required")
        return self

class BookingStatusIn(ApiModel):
    status: Literal["pending", "approved", "rejected"]

class EventIn(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    date: dt.date
    start_time: str = Field(pattern=HHMM)
    end_time: str = Field(pattern=HHMM)
    room_id: int = Field(ge=1)
    category: str = Field(min_length=1, max_length=64)

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self

# ---------- donations / contact / newsletter ----------
class DonationIn(ApiModel):
    name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    amount: int = Field(gt=0)
    is_recurring: bool = False
    is_anonymous: bool = False
    message: Optional[str] = None
    image_url: Optional[str] = None

    normalize_blanks = field_validator("message", "image_url", mode="before")(_blank_to_none)

class ContactIn(ApiModel):
    name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    attachments: Optional[List[str]] = None
    subscribe_to_newsletter: bool = False

    @field_validator("attachments")
    @classmethod
    def check_uploaded_only(cls, v):
        if not v:
            return None
        for url in v:
            if not url.startswith("/uploads/"):
                raise ValueError("Attachments must be files uploaded through /api/upload")
        return v

class NewsletterSubscribeIn(ApiModel):
    email: EmailStr

class NewsletterComposeIn(ApiModel):
    subject: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=10)
    test_mode: bool = True
    test_email: Optional[EmailStr] = None

    normalize_blanks = field_validator("test_email", mode="before")(_blank_to_none)

    @model_validator(mode="after")
    def check_test_target(self):
        if self.test_mode and not self.test_email:
            raise ValueError("A test email address is required in test mode")
        return self

# ---------- site images ----------
def _uploaded_image_url(v):
    if v is not None and not v.startswith("/uploads/"):
        raise ValueError("Image must be a file uploaded through /api/upload")
    return v

class SiteImageIn(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    image_url: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=64)
    description: Optional[str] = None

    normalize_blanks = field_validator("description", mode="before")(_blank_to_none)
    check_image_url = field_validator("image_url")(_uploaded_image_url)

class SiteImageUpdateIn(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=64)
    image_url: Optional[str] = None

    check_image_url = field_validator("image_url")(_uploaded_image_url)

# ---------- dashboard ----------
class PreferencesIn(ApiModel):
    preferences: Dict[str, Any]

class VolunteerIn(ApiModel):
    event_id: Optional[int] = None
    hours_logged: int = Field(ge=1, le=24)
    activity_description: str = Field(min_length=1)
    date: dt.date

class EventRegisterIn(ApiModel):
    event_id: int = Field(ge=1)

class FeedbackIn(ApiModel):
    feedback: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    attended: bool = False

# ---------- helpers ----------
def parse_body(model):
    """Validate the JSON body against `model`; ValidationError is rendered as 400 by the app."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    return model.model_validate(data)

def validation_payload(e: ValidationError):
    errors = []
    for err in e.errors(include_url=False, include_context=False):
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        errors.append({"field": loc or None, "message": err.get("msg", "")})
    first = errors[0] if errors else {"field": None, "message": "Invalid request"}
    message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
    return {"ok": False, "error": "validation_error", "message": message, "errors": errors}
