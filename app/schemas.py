"""
Pydantic schemas for request and response data validation.
Field names are snake_case in Python and camelCase on the wire.
Storage keys never appear in request schemas; the server derives them.
"""
import re
from datetime import datetime
from typing import ClassVar, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.models import MilestoneIcon, ValueIcon

FOLDER_PATTERN = re.compile(r"^[A-Za-z0-9_\-/]+$")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # Enable conversion from SQLAlchemy models
    )


class PartialUpdate(CamelModel):
    """
    Base for partial updates.
    Only fields the client sent are applied (model_dump(exclude_unset=True)).
    Fields listed in non_nullable may be omitted but not sent as null.
    """
    non_nullable: ClassVar[frozenset] = frozenset()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.model_fields_set & self.non_nullable:
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


# --- Shared ---

class ReorderItem(CamelModel):
    id: str
    display_order: int = Field(ge=0)


class ReorderRequest(CamelModel):
    """Body of POST /reorder: each pair is applied as its own row update."""
    items: List[ReorderItem]

    @field_validator("items")
    @classmethod
    def validate_unique_ids(cls, v):
        ids = [item.id for item in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate ids are not allowed")
        return v


class ReorderResponse(BaseModel):
    message: str
    updated: int


class MessageResponse(BaseModel):
    message: str


# --- Leadership periods ---

class LeadershipPeriodCreate(CamelModel):
    year: str = Field(min_length=1)
    jefatura: str = Field(min_length=1)
    segunda_voz: Optional[str] = None
    image_url: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)


class LeadershipPeriodUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset({"year", "jefatura", "display_order"})

    year: Optional[str] = Field(None, min_length=1)
    jefatura: Optional[str] = Field(None, min_length=1)
    segunda_voz: Optional[str] = None
    image_url: Optional[str] = None  # "" clears the image
    display_order: Optional[int] = Field(None, ge=0)


class LeadershipPeriodResponse(CamelModel):
    id: str
    year: str
    jefatura: str
    segunda_voz: Optional[str] = None
    image_url: Optional[str] = None
    image_s3_key: Optional[str] = None
    display_order: int
    created_at: datetime
    updated_at: datetime


# --- Shields ---

class ShieldCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    image_url: str = Field(min_length=1)
    symbolism: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)
    is_main_shield: bool = False


class ShieldUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset(
        {"title", "description", "image_url", "display_order", "is_main_shield"}
    )

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = Field(None, min_length=1)
    symbolism: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)
    is_main_shield: Optional[bool] = None


class ShieldResponse(CamelModel):
    id: str
    title: str
    description: str
    image_url: str
    image_s3_key: Optional[str] = None
    symbolism: Optional[str] = None
    display_order: int
    is_main_shield: bool
    created_at: datetime
    updated_at: datetime


# --- Shield values ---

class ShieldValueCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    icon_name: ValueIcon = ValueIcon.AWARD
    display_order: Optional[int] = Field(None, ge=0)


class ShieldValueUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset({"title", "description", "icon_name", "display_order"})

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    icon_name: Optional[ValueIcon] = None
    display_order: Optional[int] = Field(None, ge=0)


class ShieldValueResponse(CamelModel):
    id: str
    title: str
    description: str
    icon_name: ValueIcon
    display_order: int
    created_at: datetime
    updated_at: datetime


# --- Gallery categories ---

class GalleryCategoryCreate(CamelModel):
    name: str = Field(min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    display_order: Optional[int] = Field(None, ge=0)


class GalleryCategoryUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset({"name", "slug", "display_order"})

    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    display_order: Optional[int] = Field(None, ge=0)


class GalleryCategoryResponse(CamelModel):
    id: str
    name: str
    slug: str
    display_order: int
    created_at: datetime


# --- Gallery items ---

class GalleryItemCreate(CamelModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    image_url: str = Field(min_length=1)
    thumbnail_url: Optional[str] = None
    category_id: Optional[str] = None
    year: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)


class GalleryItemUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset({"title", "image_url", "display_order"})

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1)
    thumbnail_url: Optional[str] = None
    category_id: Optional[str] = None
    year: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)


class GalleryItemResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    image_url: str
    image_s3_key: Optional[str] = None
    thumbnail_url: Optional[str] = None
    thumbnail_s3_key: Optional[str] = None
    category_id: Optional[str] = None
    year: Optional[str] = None
    display_order: int
    created_at: datetime
    updated_at: datetime


# --- Historical milestones ---

class HistoricalMilestoneCreate(CamelModel):
    year: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    icon_name: MilestoneIcon = MilestoneIcon.FLAG
    display_order: Optional[int] = Field(None, ge=0)


class HistoricalMilestoneUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset({"year", "title", "description", "icon_name", "display_order"})

    year: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    icon_name: Optional[MilestoneIcon] = None
    display_order: Optional[int] = Field(None, ge=0)


class HistoricalMilestoneResponse(CamelModel):
    id: str
    year: str
    title: str
    description: str
    icon_name: MilestoneIcon
    display_order: int
    created_at: datetime
    updated_at: datetime


# --- Historical images ---

class HistoricalImageCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    image_url: str = Field(min_length=1)
    display_order: Optional[int] = Field(None, ge=0)


class HistoricalImageUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset({"title", "description", "image_url", "display_order"})

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = Field(None, min_length=1)
    display_order: Optional[int] = Field(None, ge=0)


class HistoricalImageResponse(CamelModel):
    id: str
    title: str
    description: str
    image_url: str
    image_s3_key: Optional[str] = None
    display_order: int
    created_at: datetime
    updated_at: datetime


# --- Site configuration ---

class SiteConfigUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset({"site_name", "site_subtitle", "founding_year"})

    site_name: Optional[str] = Field(None, min_length=1)
    site_subtitle: Optional[str] = Field(None, min_length=1)
    hero_description: Optional[str] = None
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    training_schedule: Optional[str] = None
    training_location: Optional[str] = None
    ceremonies_schedule: Optional[str] = None
    ceremonies_notes: Optional[str] = None
    meetings_schedule: Optional[str] = None
    meetings_location: Optional[str] = None
    admission_requirements: Optional[List[str]] = None
    footer_description: Optional[str] = None
    mission_statement: Optional[str] = None
    leadership_title: Optional[str] = None
    leadership_description: Optional[str] = None
    leadership_image_url: Optional[str] = None
    founding_year: Optional[int] = Field(None, ge=1800, le=2100)


class SiteConfigResponse(CamelModel):
    """id and updatedAt are null until the configuration is first saved."""
    id: Optional[str] = None
    site_name: str
    site_subtitle: str
    hero_description: Optional[str] = None
    logo_url: Optional[str] = None
    logo_s3_key: Optional[str] = None
    favicon_url: Optional[str] = None
    favicon_s3_key: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    training_schedule: Optional[str] = None
    training_location: Optional[str] = None
    ceremonies_schedule: Optional[str] = None
    ceremonies_notes: Optional[str] = None
    meetings_schedule: Optional[str] = None
    meetings_location: Optional[str] = None
    admission_requirements: Optional[List[str]] = None
    footer_description: Optional[str] = None
    mission_statement: Optional[str] = None
    leadership_title: Optional[str] = None
    leadership_description: Optional[str] = None
    leadership_image_url: Optional[str] = None
    leadership_image_s3_key: Optional[str] = None
    founding_year: int
    updated_at: Optional[datetime] = None


# --- Uploads ---

class PresignedUrlRequest(CamelModel):
    file_type: str
    folder: str = "uploads"

    @field_validator("file_type")
    @classmethod
    def validate_image_type(cls, v):
        if not v.startswith("image/"):
            raise ValueError("Only image files are allowed")
        return v

    @field_validator("folder")
    @classmethod
    def validate_folder(cls, v):
        v = v.strip().strip("/")
        if not v or ".." in v or not FOLDER_PATTERN.match(v):
            raise ValueError("Folder may only contain letters, digits, '-', '_' and '/'")
        return v


class PresignedUrlResponse(CamelModel):
    upload_url: str
    file_key: str
    public_url: str


class PresignedDownloadRequest(CamelModel):
    file_key: str = Field(min_length=1)

    @field_validator("file_key")
    @classmethod
    def validate_key(cls, v):
        if ".." in v or v.startswith("/"):
            raise ValueError("Invalid file key")
        return v


class PresignedDownloadResponse(CamelModel):
    download_url: str
    expires_in: int


# --- Users ---

class UserCreate(CamelModel):
    email: EmailStr
    user_name: str = Field(min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    config_step: int = Field(0, ge=0)
    is_active: bool = True
    send_invite: bool = False
    language: Literal["es", "en"] = "es"


class UserUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset] = frozenset({"user_name", "config_step", "is_active"})

    user_name: Optional[str] = Field(None, min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    config_step: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class UserResponse(CamelModel):
    id: str
    email: str
    user_name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    config_step: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class VerifyEmailResponse(CamelModel):
    user: UserResponse
    message: str
    email_sent: bool


# --- Auth ---

class LoginRequest(BaseModel):
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
