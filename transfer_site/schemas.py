"""
Pydantic schemas for request and response data validation.
Defines data structures for API endpoints with automatic validation and serialization.

JSON payloads use camelCase keys (isPublished, imageUrl, ...); snake_case keys are
accepted on input as well.
"""
import math
from datetime import datetime
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel


SLUG_PATTERN = r"^[a-z0-9-]+$"

Slug = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, pattern=SLUG_PATTERN)]
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ContactMethod = Literal["telegram", "whatsapp", "call"]

_http_url = TypeAdapter(HttpUrl)


def validate_http_url(value: str) -> str:
    """Check that value parses as an http(s) URL; return it unchanged."""
    _http_url.validate_python(value)
    return value


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationMetadata(CamelModel):
    """Offset pagination metadata for admin lead lists."""
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PaginationMetadata":
        return cls(total=total, page=page, limit=limit, pages=math.ceil(total / limit) if limit else 0)


class MessageResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None


# --- Auth -------------------------------------------------------------------

class LoginRequest(CamelModel):
    username: NonEmptyStr
    password: NonEmptyStr


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class SessionResponse(CamelModel):
    authenticated: bool
    username: Optional[str] = None
    role: Optional[str] = None


# --- Blog -------------------------------------------------------------------

class BlogPostCreate(CamelModel):
    """
    Request schema for creating a blog post.
    When slug is omitted it is derived from the title.
    """
    title: NonEmptyStr
    content: NonEmptyStr
    excerpt: str = ""
    image_url: Optional[str] = None
    slug: Optional[Slug] = None
    is_published: bool = False

    @field_validator("slug", "image_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class BlogPostUpdate(CamelModel):
    """Partial update: only supplied fields change."""
    title: Optional[NonEmptyStr] = None
    content: Optional[NonEmptyStr] = None
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    slug: Optional[Slug] = None
    is_published: Optional[bool] = None

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class BlogPostResponse(CamelModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: str
    image_url: Optional[str] = None
    is_published: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# --- Galleries --------------------------------------------------------------

class GalleryCreate(CamelModel):
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]
    slug: Slug
    description: Optional[str] = None
    is_published: bool = False


class GalleryUpdate(CamelModel):
    title: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]] = None
    slug: Optional[Slug] = None
    description: Optional[str] = None
    is_published: Optional[bool] = None


class PhotoCreate(CamelModel):
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = Field(default=None, ge=0)

    @field_validator("url")
    @classmethod
    def valid_url(cls, v):
        return validate_http_url(v)


class PhotoUpdate(CamelModel):
    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = Field(default=None, ge=0)

    @field_validator("url")
    @classmethod
    def valid_url(cls, v):
        if v is None:
            return v
        return validate_http_url(v)


class PhotoBatchCreate(CamelModel):
    """Candidate URLs are validated one by one by the handler, not here."""
    urls: List[str] = Field(min_length=1)


class PhotoReorderRequest(CamelModel):
    """Photo IDs of one gallery in the desired display order."""
    photo_ids: List[int] = Field(min_length=1)

    @field_validator("photo_ids")
    @classmethod
    def validate_unique_ids(cls, v):
        if len(v) != len(set(v)):
            raise ValueError("Duplicate photo IDs are not allowed")
        return v


class PhotoResponse(CamelModel):
    id: int
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    order: int
    gallery_id: int
    created_at: datetime
    updated_at: datetime


class PhotoBatchError(CamelModel):
    index: int
    url: str
    errors: Dict[str, str]


class PhotoBatchResult(CamelModel):
    """Outcome of a batch photo create: successes and per-index failures."""
    created: List[PhotoResponse]
    errors: List[PhotoBatchError]


class GalleryResponse(CamelModel):
    id: int
    title: str
    slug: str
    description: Optional[str] = None
    is_published: bool
    created_at: datetime
    updated_at: datetime


class GalleryListItem(GalleryResponse):
    cover_photo: Optional[PhotoResponse] = None
    photo_count: int = 0


class GalleryDetailResponse(GalleryResponse):
    photos: List[PhotoResponse] = []


# --- Reviews ----------------------------------------------------------------

class ReviewCreate(CamelModel):
    customer_name: NonEmptyStr
    rating: int = Field(ge=1, le=5)
    comment: NonEmptyStr
    image_url: Optional[str] = None
    review_image_url: Optional[str] = None
    video_url: Optional[str] = None
    is_approved: bool = False
    is_published: bool = False

    @field_validator("image_url", "review_image_url", "video_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class ReviewUpdate(CamelModel):
    customer_name: Optional[NonEmptyStr] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[NonEmptyStr] = None
    image_url: Optional[str] = None
    review_image_url: Optional[str] = None
    video_url: Optional[str] = None
    is_approved: Optional[bool] = None
    is_published: Optional[bool] = None


class ReviewApproveRequest(CamelModel):
    approved: bool = True


class ReviewResponse(CamelModel):
    id: int
    customer_name: str
    rating: int
    comment: str
    image_url: Optional[str] = None
    review_image_url: Optional[str] = None
    video_url: Optional[str] = None
    is_approved: bool
    is_published: bool
    created_at: datetime
    updated_at: datetime


# --- Routes -----------------------------------------------------------------

class RouteCreate(CamelModel):
    origin_city: NonEmptyStr
    destination_city: NonEmptyStr
    distance: float = Field(ge=0)
    estimated_time: NonEmptyStr
    price_comfort: float = Field(default=0, ge=0)
    price_business: float = Field(default=0, ge=0)
    price_minivan: float = Field(default=0, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    popularity_rating: int = Field(default=1, ge=0)
    is_active: bool = True


class RouteUpdate(CamelModel):
    id: int
    origin_city: Optional[NonEmptyStr] = None
    destination_city: Optional[NonEmptyStr] = None
    distance: Optional[float] = Field(default=None, ge=0)
    estimated_time: Optional[NonEmptyStr] = None
    price_comfort: Optional[float] = Field(default=None, ge=0)
    price_business: Optional[float] = Field(default=None, ge=0)
    price_minivan: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    popularity_rating: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class RouteResponse(CamelModel):
    id: int
    origin_city: str
    destination_city: str
    distance: float
    estimated_time: str
    price_comfort: float
    price_business: float
    price_minivan: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    popularity_rating: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


# --- Vehicles ---------------------------------------------------------------

class VehicleCreate(CamelModel):
    vehicle_class: NonEmptyStr = Field(alias="class")
    brand: NonEmptyStr
    model: NonEmptyStr
    year: int = Field(ge=1900, le=2100)
    seats: int = Field(ge=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    amenities: Optional[str] = None
    price: Optional[str] = None
    is_active: bool = True

    model_config = ConfigDict(protected_namespaces=())


class VehicleUpdate(CamelModel):
    id: int
    vehicle_class: Optional[NonEmptyStr] = Field(default=None, alias="class")
    brand: Optional[NonEmptyStr] = None
    model: Optional[NonEmptyStr] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    seats: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    amenities: Optional[str] = None
    price: Optional[str] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(protected_namespaces=())


class VehicleResponse(CamelModel):
    id: int
    vehicle_class: str = Field(alias="class")
    brand: str
    model: str
    year: int
    seats: int
    description: Optional[str] = None
    image_url: Optional[str] = None
    amenities: Optional[str] = None
    price: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(protected_namespaces=())


# --- Leads ------------------------------------------------------------------

class ApplicationRequestCreate(CamelModel):
    name: NonEmptyStr
    phone: NonEmptyStr
    contact_method: ContactMethod


class ApplicationRequestStatusUpdate(CamelModel):
    id: int
    status: NonEmptyStr


class ApplicationRequestResponse(CamelModel):
    id: int
    name: str
    phone: str
    contact_method: str
    status: str
    created_at: datetime
    updated_at: datetime


class TransferRequestCreate(CamelModel):
    customer_name: NonEmptyStr
    customer_phone: NonEmptyStr
    customer_email: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    date: datetime
    return_date: Optional[datetime] = None
    passengers: Optional[int] = Field(default=None, ge=0)
    vehicle_id: Optional[int] = None
    contact_method: Optional[ContactMethod] = None
    comments: Optional[str] = None

    @field_validator("return_date", "contact_method", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class TransferRequestUpdate(CamelModel):
    id: int
    customer_name: Optional[NonEmptyStr] = None
    customer_phone: Optional[NonEmptyStr] = None
    customer_email: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    passengers: Optional[int] = Field(default=None, ge=0)
    vehicle_id: Optional[int] = None
    contact_method: Optional[ContactMethod] = None
    comments: Optional[str] = None
    status: Optional[NonEmptyStr] = None


class TransferRequestResponse(CamelModel):
    id: int
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    date: datetime
    return_date: Optional[datetime] = None
    passengers: Optional[int] = None
    vehicle_id: Optional[int] = None
    vehicle: Optional[VehicleResponse] = None
    contact_method: Optional[str] = None
    comments: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class ContactRequestCreate(CamelModel):
    name: NonEmptyStr
    email: Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")]
    phone: Optional[str] = None
    message: NonEmptyStr


class ContactRequestUpdate(CamelModel):
    id: int
    name: Optional[NonEmptyStr] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    status: Optional[NonEmptyStr] = None


class ContactRequestResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    status: str
    created_at: datetime
    updated_at: datetime


class ApplicationRequestsPage(CamelModel):
    requests: List[ApplicationRequestResponse]
    pagination: PaginationMetadata


class TransferRequestsPage(CamelModel):
    transfer_requests: List[TransferRequestResponse]
    pagination: PaginationMetadata


class ContactRequestsPage(CamelModel):
    contact_requests: List[ContactRequestResponse]
    pagination: PaginationMetadata


# --- Settings singletons ----------------------------------------------------

class SiteSettingsUpdate(CamelModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    working_hours: Optional[str] = None
    company_name: Optional[str] = None
    company_desc: Optional[str] = None
    instagram_link: Optional[str] = None
    telegram_link: Optional[str] = None
    whatsapp_link: Optional[str] = None
    header_logo_url: Optional[str] = None
    footer_logo_url: Optional[str] = None
    google_maps_api_key: Optional[str] = None

    # Blank logo/API key values clear the stored value
    @field_validator(
        "header_logo_url", "footer_logo_url", "google_maps_api_key", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class SiteSettingsResponse(CamelModel):
    id: int
    phone: str
    email: str
    address: str
    working_hours: str
    company_name: str
    company_desc: str
    instagram_link: str
    telegram_link: str
    whatsapp_link: str
    header_logo_url: Optional[str] = None
    footer_logo_url: Optional[str] = None
    google_maps_api_key: Optional[str] = None


class HomeSettingsUpdate(CamelModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    background_image_url: Optional[str] = None
    feature1_title: Optional[str] = None
    feature1_text: Optional[str] = None
    feature1_icon: Optional[str] = None
    feature2_title: Optional[str] = None
    feature2_text: Optional[str] = None
    feature2_icon: Optional[str] = None
    feature3_title: Optional[str] = None
    feature3_text: Optional[str] = None
    feature3_icon: Optional[str] = None


class HomeSettingsResponse(CamelModel):
    id: int
    title: str
    subtitle: str
    background_image_url: str
    feature1_title: str
    feature1_text: str
    feature1_icon: str
    feature2_title: str
    feature2_text: str
    feature2_icon: str
    feature3_title: str
    feature3_text: str
    feature3_icon: str


class VehicleOption(CamelModel):
    """One vehicle choice shown in the booking modal."""
    value: str
    label: str
    price: Optional[str] = None
    image: Optional[str] = None
    desc: Optional[str] = None
    vehicle_id: Optional[int] = None


class TransferConfigUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    use_vehicles_from_db: Optional[bool] = None
    vehicle_options: Optional[List[VehicleOption]] = None
    custom_image_urls: Optional[Dict[str, str]] = None


class TransferConfigResponse(CamelModel):
    id: int
    title: str
    description: str
    use_vehicles_from_db: bool
    vehicles: List[VehicleOption] = []


class BenefitCreate(CamelModel):
    title: NonEmptyStr
    description: NonEmptyStr
    icon: NonEmptyStr


class BenefitUpdate(CamelModel):
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    icon: Optional[NonEmptyStr] = None
    order: Optional[int] = Field(default=None, ge=0)


class BenefitResponse(CamelModel):
    id: int
    title: str
    description: str
    icon: str
    order: int


class BenefitStatsUpdate(CamelModel):
    clients: Optional[NonEmptyStr] = None
    directions: Optional[NonEmptyStr] = None
    experience: Optional[NonEmptyStr] = None
    support: Optional[NonEmptyStr] = None


class BenefitStatsResponse(CamelModel):
    clients: str
    directions: str
    experience: str
    support: str


class BenefitsResponse(CamelModel):
    benefits: List[BenefitResponse]
    stats: BenefitStatsResponse


# --- Uploads / IndexNow -----------------------------------------------------

class UploadResponse(CamelModel):
    url: str
    storage: Literal["remote", "local"]


class RemoteUrlUploadRequest(CamelModel):
    image_url: str
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    folder: Optional[str] = None

    @field_validator("image_url")
    @classmethod
    def valid_image_url(cls, v):
        return validate_http_url(v)


class IndexNowRequest(CamelModel):
    urls: List[str] = Field(min_length=1)


class IndexNowServerResult(CamelModel):
    server: str
    status: Optional[int] = None
    error: Optional[str] = None


class IndexNowResponse(CamelModel):
    success: bool
    submitted: int
    results: List[IndexNowServerResult]
