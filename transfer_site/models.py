"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
"""
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, inspect,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from transfer_site.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def apply_changes(row, changes: dict) -> None:
    """Copy partial-update values onto a row; explicit nulls on NOT NULL columns are ignored."""
    columns = inspect(row).mapper.columns
    for field, value in changes.items():
        if value is None and field in columns and not columns[field].nullable:
            continue
        setattr(row, field, value)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )


class BlogPost(TimestampMixin, Base):
    """
    Blog article.
    published_at is stamped the first time the post is published and never cleared.
    """
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=False, default="")
    image_url = Column(String, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)


class PhotoGallery(TimestampMixin, Base):
    """Photo gallery owning an ordered collection of photos."""
    __tablename__ = "photo_galleries"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)

    photos = relationship(
        "GalleryPhoto",
        back_populates="gallery",
        cascade="all, delete-orphan",
        order_by="GalleryPhoto.order",
    )


class GalleryPhoto(TimestampMixin, Base):
    __tablename__ = "gallery_photos"

    id = Column(Integer, primary_key=True, index=True)
    url = Column(String, nullable=False)
    title = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0, index=True)
    gallery_id = Column(Integer, ForeignKey("photo_galleries.id", ondelete="CASCADE"), nullable=False, index=True)

    gallery = relationship("PhotoGallery", back_populates="photos")


class Review(TimestampMixin, Base):
    """
    Customer review.
    New reviews are neither approved nor published until an administrator approves them.
    """
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String, nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    review_image_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    is_published = Column(Boolean, nullable=False, default=False)


class Route(TimestampMixin, Base):
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, index=True)
    origin_city = Column(String, nullable=False)
    destination_city = Column(String, nullable=False)
    distance = Column(Float, nullable=False)
    estimated_time = Column(String, nullable=False)
    price_comfort = Column(Float, nullable=False, default=0)
    price_business = Column(Float, nullable=False, default=0)
    price_minivan = Column(Float, nullable=False, default=0)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    popularity_rating = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True)


class Vehicle(TimestampMixin, Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_class = Column("class", String, nullable=False)
    brand = Column(String, nullable=False)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    seats = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    amenities = Column(Text, nullable=True)
    price = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class ApplicationRequest(TimestampMixin, Base):
    """Short call-back lead from the site's application form."""
    __tablename__ = "application_requests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    contact_method = Column(String, nullable=False)
    status = Column(String, nullable=False, default="new", index=True)


class TransferRequest(TimestampMixin, Base):
    """Transfer booking lead."""
    __tablename__ = "transfer_requests"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    customer_email = Column(String, nullable=True)
    origin = Column(String, nullable=True)
    destination = Column(String, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False)
    return_date = Column(DateTime(timezone=True), nullable=True)
    passengers = Column(Integer, nullable=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True)
    contact_method = Column(String, nullable=True)
    comments = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="new", index=True)

    vehicle = relationship("Vehicle", lazy="selectin")


class ContactRequest(TimestampMixin, Base):
    """Message left through the contact form."""
    __tablename__ = "contact_requests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="new", index=True)


class Benefit(Base):
    __tablename__ = "benefits"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String, nullable=False)
    order = Column(Integer, nullable=False, default=1, index=True)


# Singleton configuration rows (id=1), created with defaults on first read.
# See transfer_site/services/singletons.py

class SiteSettings(TimestampMixin, Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True)
    phone = Column(String, nullable=False, default="+7 (900) 000-00-00")
    email = Column(String, nullable=False, default="info@royaltransfer.ru")
    address = Column(String, nullable=False, default="г. Калининград, ул. Примерная, д. 123")
    working_hours = Column(String, nullable=False, default="Пн-Вс: 24/7")
    company_name = Column(String, nullable=False, default="RoyalTransfer")
    company_desc = Column(
        Text,
        nullable=False,
        default="Комфортные трансферы из Калининграда в города Европы. Безопасность, комфорт и пунктуальность.",
    )
    instagram_link = Column(String, nullable=False, default="#")
    telegram_link = Column(String, nullable=False, default="#")
    whatsapp_link = Column(String, nullable=False, default="#")
    header_logo_url = Column(String, nullable=True)
    footer_logo_url = Column(String, nullable=True)
    google_maps_api_key = Column(String, nullable=True)


class HomeSettings(TimestampMixin, Base):
    __tablename__ = "home_settings"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False, default="Комфортные трансферы из Калининграда в Европу")
    subtitle = Column(
        Text,
        nullable=False,
        default="Безопасные и удобные поездки в города Польши, Германии, Литвы и других стран Европы",
    )
    background_image_url = Column(
        String,
        nullable=False,
        default="https://images.unsplash.com/photo-1449965408869-eaa3f722e40d?auto=format&fit=crop&w=2070&q=80",
    )
    feature1_title = Column(String, nullable=False, default="Любые направления")
    feature1_text = Column(String, nullable=False, default="Поездки в основные города Европы по фиксированным ценам")
    feature1_icon = Column(String, nullable=False, default="MapPin")
    feature2_title = Column(String, nullable=False, default="Круглосуточно")
    feature2_text = Column(String, nullable=False, default="Работаем 24/7, включая праздники и выходные дни")
    feature2_icon = Column(String, nullable=False, default="Clock")
    feature3_title = Column(String, nullable=False, default="Гарантия качества")
    feature3_text = Column(String, nullable=False, default="Комфортные автомобили и опытные водители")
    feature3_icon = Column(String, nullable=False, default="Check")


class TransferConfig(TimestampMixin, Base):
    """Booking modal configuration. vehicle_options and custom_image_urls hold JSON text."""
    __tablename__ = "transfer_config"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False, default="Заказать трансфер")
    description = Column(
        Text,
        nullable=False,
        default="Заполните форму ниже, и мы свяжемся с вами для подтверждения заказа",
    )
    use_vehicles_from_db = Column(Boolean, nullable=False, default=True)
    vehicle_options = Column(Text, nullable=True)
    custom_image_urls = Column(Text, nullable=True)


class BenefitStats(Base):
    __tablename__ = "benefit_stats"

    id = Column(Integer, primary_key=True)
    clients = Column(String, nullable=False, default="5000+")
    directions = Column(String, nullable=False, default="15+")
    experience = Column(String, nullable=False, default="10+")
    support = Column(String, nullable=False, default="24/7")
