"""
Slug generation and uniqueness checks for blog posts and photo galleries.

The unique index on the slug column is the authoritative guard; the checks here
only avoid the obvious collisions before insert.
"""
import logging
import random
import re
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 50
MIN_SLUG_LENGTH = 3

CYRILLIC_TRANSLIT = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo", "ж": "zh",
    "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m", "н": "n", "о": "o",
    "п": "p", "р": "r", "с": "s", "т": "t", "у": "u", "ф": "f", "х": "h", "ц": "ts",
    "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "", "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}

_STRIP_CHARS = re.compile(r"[^\w\sа-яё]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_NOT_SLUG = re.compile(r"[^a-z0-9-]")
_HYPHENS = re.compile(r"-{2,}")


class SlugConflictError(ValueError):
    """Raised when an explicit slug is already taken by another record."""

    def __init__(self, slug: str, entity: str = "record"):
        self.slug = slug
        self.entity = entity
        super().__init__(f"{entity} with this slug already exists")


def slugify(title: str, fallback_prefix: str = "item") -> str:
    """
    Derive a URL-safe slug from a title.

    Lowercases, drops punctuation, turns whitespace runs into hyphens,
    transliterates Cyrillic and truncates to 50 characters. Titles that reduce
    to fewer than 3 usable characters get a short random suffix.

    Args:
        title: Source title (any language)
        fallback_prefix: Prefix used when the title yields nothing usable

    Returns:
        str: Slug matching ^[a-z0-9-]+$ with length >= 3
    """
    slug = (title or "").lower()
    slug = _STRIP_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = "".join(CYRILLIC_TRANSLIT.get(ch, ch) for ch in slug)

    # Underscores survive \w and anything non-ASCII that is not Cyrillic is dropped
    slug = _NOT_SLUG.sub("", slug.replace("_", "-"))
    slug = _HYPHENS.sub("-", slug).strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")

    if len(slug) < MIN_SLUG_LENGTH:
        slug = f"{slug or fallback_prefix}-{uuid.uuid4().hex[:6]}"

    return slug


async def slug_exists(
    db: AsyncSession,
    model,
    slug: str,
    exclude_id: Optional[int] = None,
) -> bool:
    """Check whether another row of `model` already uses `slug`."""
    query = select(model.id).where(model.slug == slug)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def resolve_unique_slug(
    db: AsyncSession,
    model,
    title: str,
    candidate: Optional[str] = None,
) -> str:
    """
    Pick a slug for a new record.

    A derived slug that collides gets a single random suffix `-<0..999>`
    appended without re-checking. An explicit candidate that collides is
    rejected instead.

    Args:
        db: Database session
        model: SQLAlchemy model with `id` and `slug` columns
        title: Title to derive from when no candidate is given
        candidate: Explicit slug supplied by the caller

    Returns:
        str: Final slug

    Raises:
        SlugConflictError: If an explicit candidate is taken
    """
    if candidate:
        await ensure_slug_available(db, model, candidate, entity=model.__name__)
        return candidate

    slug = slugify(title)

    if await slug_exists(db, model, slug):
        suffixed = f"{slug}-{random.randint(0, 999)}"
        logger.info(f"Slug '{slug}' already taken for {model.__tablename__}, using '{suffixed}'")
        slug = suffixed

    return slug


async def ensure_slug_available(
    db: AsyncSession,
    model,
    slug: str,
    exclude_id: Optional[int] = None,
    entity: str = "record",
) -> None:
    """
    Reject an explicit slug already used by a different record.

    Raises:
        SlugConflictError: If the slug is taken
    """
    if await slug_exists(db, model, slug, exclude_id=exclude_id):
        raise SlugConflictError(slug, entity)
