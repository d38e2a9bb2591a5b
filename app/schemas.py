from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Annotated, Generic, TypeVar
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# INTEGER columns are signed 32-bit on Postgres
DB_INT_MAX = 2**31 - 1
RowId = Annotated[int, Field(ge=1, le=DB_INT_MAX)]

class CamelModel(BaseModel):
    """JSON is camelCase on the wire; snake_case names are accepted on input too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class Message(CamelModel):
    message: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# Pagination
class Pagination(CamelModel):
    current_page: int
    page_size: int
    total_count: int
    total_pages: int

class Page(CamelModel, Generic[T]):
    data: list[T]
    pagination: Pagination

# Users
class UserCreate(CamelModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=8)
    full_name: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(None, max_length=32)
    level_id: RowId | None = None
    category_id: RowId | None = None
    tags: str | None = None

class UserUpdate(CamelModel):
    """Only the fields present in the body are changed; an explicit null clears one."""
    full_name: str | None = Field(None, max_length=255)
    level_id: RowId | None = None
    category_id: RowId | None = None
    tags: str | None = None

class PasswordReset(CamelModel):
    current_password: str | None = None
    new_password: str = Field(min_length=8)

class UserOut(CamelModel):
    id: uuid.UUID
    email: EmailStr
    username: str
    full_name: str | None = None
    phone_number: str | None = None
    level_id: int | None = None
    category_id: int | None = None
    tags: str | None = None
    role: str
    created_at: datetime
    updated_at: datetime | None = None

class UserMessage(CamelModel):
    message: str
    user: UserOut

# Companies
class CompanyCreate(CamelModel):
    name: str = Field(min_length=1, max_length=512)

class CompanyOut(CamelModel):
    id: uuid.UUID
    name: str
    created_at: datetime

# Job categories & levels
class TitleIn(CamelModel):
    title: str = Field(min_length=1, max_length=255)

class TitleOut(CamelModel):
    id: int
    title: str

class CategoryOut(CamelModel):
    category: TitleOut

class CategoryMessage(CamelModel):
    message: str
    category: TitleOut

class LevelOut(CamelModel):
    level: TitleOut

class LevelMessage(CamelModel):
    message: str
    level: TitleOut

# Jobs
class JobCreate(CamelModel):
    title: str = Field(min_length=1, max_length=512)
    level_id: RowId
    category_id: RowId
    type_id: RowId | None = None
    location: str | None = Field(None, max_length=512)
    description: str = Field(min_length=1)
    compensation: str | None = Field(None, max_length=255)
    application_link: str | None = Field(None, max_length=2048)
    is_external: bool = False
    company_id: uuid.UUID | None = None
    tags: str | None = Field(None, max_length=1024)

class JobUpdate(JobCreate):
    """Updates replace every field, like a create."""

class JobOut(CamelModel):
    id: uuid.UUID
    title: str
    level_id: int
    category_id: int
    type_id: int | None = None
    location: str | None = None
    description: str
    compensation: str | None = None
    application_link: str | None = None
    is_external: bool
    company_id: uuid.UUID | None = None
    tags: str | None = None
    is_approved: bool
    created_at: datetime
    updated_at: datetime | None = None

class JobListItem(CamelModel):
    job: JobOut
    category: str | None = None
    level: str | None = None
    company_name: str | None = None

class JobAction(CamelModel):
    message: str
    job_id: uuid.UUID

class SavedJobOut(CamelModel):
    id: int
    user_id: uuid.UUID
    job_id: uuid.UUID
    created_at: datetime

class SaveJobResponse(CamelModel):
    saved_job: SavedJobOut
    message: str

# Events
def _ends_before_starts(starts_at: datetime | None, ends_at: datetime | None) -> bool:
    if starts_at is None or ends_at is None:
        return False
    # naive and aware datetimes cannot be ordered; treat naive as UTC
    if (starts_at.tzinfo is None) != (ends_at.tzinfo is None):
        starts_at = starts_at if starts_at.tzinfo else starts_at.replace(tzinfo=timezone.utc)
        ends_at = ends_at if ends_at.tzinfo else ends_at.replace(tzinfo=timezone.utc)
    return ends_at < starts_at

class EventCreate(CamelModel):
    title: str = Field(min_length=1, max_length=512)
    type_id: RowId
    description: str | None = None
    location: str | None = Field(None, max_length=512)
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @model_validator(mode="after")
    def check_window(self):
        if _ends_before_starts(self.starts_at, self.ends_at):
            raise ValueError("endsAt must not be before startsAt")
        return self

class EventUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=512)
    type_id: RowId | None = None
    description: str | None = None
    location: str | None = Field(None, max_length=512)
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @model_validator(mode="after")
    def check_required_not_cleared(self):
        for name in ("title", "type_id"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        if _ends_before_starts(self.starts_at, self.ends_at):
            raise ValueError("endsAt must not be before startsAt")
        return self

class EventOut(CamelModel):
    id: uuid.UUID
    title: str
    type_id: int
    description: str | None = None
    location: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

class EventMessage(CamelModel):
    message: str
    event: EventOut

class RegistrationIn(CamelModel):
    user_type: str = Field(min_length=1, max_length=64)

class RegistrationOut(CamelModel):
    id: int
    event_id: uuid.UUID
    user_id: uuid.UUID
    user_type: str
    created_at: datetime
