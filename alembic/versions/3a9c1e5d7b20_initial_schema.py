"""initial_schema

Revision ID: 3a9c1e5d7b20
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a9c1e5d7b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'blog_posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('excerpt', sa.Text(), nullable=False, server_default=''),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_blog_posts_id'), 'blog_posts', ['id'], unique=False)
    op.create_index(op.f('ix_blog_posts_slug'), 'blog_posts', ['slug'], unique=True)

    op.create_table(
        'photo_galleries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index(op.f('ix_photo_galleries_id'), 'photo_galleries', ['id'], unique=False)
    op.create_index(op.f('ix_photo_galleries_slug'), 'photo_galleries', ['slug'], unique=True)

    op.create_table(
        'gallery_photos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column(
            'gallery_id',
            sa.Integer(),
            sa.ForeignKey('photo_galleries.id', ondelete='CASCADE'),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index(op.f('ix_gallery_photos_id'), 'gallery_photos', ['id'], unique=False)
    op.create_index(op.f('ix_gallery_photos_order'), 'gallery_photos', ['order'], unique=False)
    op.create_index(op.f('ix_gallery_photos_gallery_id'), 'gallery_photos', ['gallery_id'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('review_image_url', sa.String(), nullable=True),
        sa.Column('video_url', sa.String(), nullable=True),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index(op.f('ix_reviews_id'), 'reviews', ['id'], unique=False)

    op.create_table(
        'routes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('origin_city', sa.String(), nullable=False),
        sa.Column('destination_city', sa.String(), nullable=False),
        sa.Column('distance', sa.Float(), nullable=False),
        sa.Column('estimated_time', sa.String(), nullable=False),
        sa.Column('price_comfort', sa.Float(), nullable=False, server_default='0'),
        sa.Column('price_business', sa.Float(), nullable=False, server_default='0'),
        sa.Column('price_minivan', sa.Float(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('popularity_rating', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index(op.f('ix_routes_id'), 'routes', ['id'], unique=False)

    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('class', sa.String(), nullable=False),
        sa.Column('brand', sa.String(), nullable=False),
        sa.Column('model', sa.String(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('seats', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('amenities', sa.Text(), nullable=True),
        sa.Column('price', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index(op.f('ix_vehicles_id'), 'vehicles', ['id'], unique=False)

    op.create_table(
        'application_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('contact_method', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='new'),
        *_timestamps(),
    )
    op.create_index(op.f('ix_application_requests_id'), 'application_requests', ['id'], unique=False)
    op.create_index(op.f('ix_application_requests_status'), 'application_requests', ['status'], unique=False)

    op.create_table(
        'transfer_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('customer_phone', sa.String(), nullable=False),
        sa.Column('customer_email', sa.String(), nullable=True),
        sa.Column('origin', sa.String(), nullable=True),
        sa.Column('destination', sa.String(), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('return_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('passengers', sa.Integer(), nullable=True),
        sa.Column(
            'vehicle_id',
            sa.Integer(),
            sa.ForeignKey('vehicles.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('contact_method', sa.String(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='new'),
        *_timestamps(),
    )
    op.create_index(op.f('ix_transfer_requests_id'), 'transfer_requests', ['id'], unique=False)
    op.create_index(op.f('ix_transfer_requests_status'), 'transfer_requests', ['status'], unique=False)

    op.create_table(
        'contact_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='new'),
        *_timestamps(),
    )
    op.create_index(op.f('ix_contact_requests_id'), 'contact_requests', ['id'], unique=False)
    op.create_index(op.f('ix_contact_requests_status'), 'contact_requests', ['status'], unique=False)

    op.create_table(
        'benefits',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('icon', sa.String(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index(op.f('ix_benefits_id'), 'benefits', ['id'], unique=False)
    op.create_index(op.f('ix_benefits_order'), 'benefits', ['order'], unique=False)

    # Singleton rows are created with their defaults by the application on first read
    op.create_table(
        'site_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('working_hours', sa.String(), nullable=False),
        sa.Column('company_name', sa.String(), nullable=False),
        sa.Column('company_desc', sa.Text(), nullable=False),
        sa.Column('instagram_link', sa.String(), nullable=False),
        sa.Column('telegram_link', sa.String(), nullable=False),
        sa.Column('whatsapp_link', sa.String(), nullable=False),
        sa.Column('header_logo_url', sa.String(), nullable=True),
        sa.Column('footer_logo_url', sa.String(), nullable=True),
        sa.Column('google_maps_api_key', sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'home_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('subtitle', sa.Text(), nullable=False),
        sa.Column('background_image_url', sa.String(), nullable=False),
        sa.Column('feature1_title', sa.String(), nullable=False),
        sa.Column('feature1_text', sa.String(), nullable=False),
        sa.Column('feature1_icon', sa.String(), nullable=False),
        sa.Column('feature2_title', sa.String(), nullable=False),
        sa.Column('feature2_text', sa.String(), nullable=False),
        sa.Column('feature2_icon', sa.String(), nullable=False),
        sa.Column('feature3_title', sa.String(), nullable=False),
        sa.Column('feature3_text', sa.String(), nullable=False),
        sa.Column('feature3_icon', sa.String(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'transfer_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('use_vehicles_from_db', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('vehicle_options', sa.Text(), nullable=True),
        sa.Column('custom_image_urls', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'benefit_stats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('clients', sa.String(), nullable=False),
        sa.Column('directions', sa.String(), nullable=False),
        sa.Column('experience', sa.String(), nullable=False),
        sa.Column('support', sa.String(), nullable=False),
    )


def downgrade() -> None:
    for table in (
        'benefit_stats',
        'transfer_config',
        'home_settings',
        'site_settings',
        'benefits',
        'contact_requests',
        'transfer_requests',
        'application_requests',
        'vehicles',
        'routes',
        'reviews',
        'gallery_photos',
        'photo_galleries',
        'blog_posts',
    ):
        op.drop_table(table)
