import re

from transfer_site.services.slugs import MAX_SLUG_LENGTH, slugify

SLUG_RE = re.compile(r"^[a-z0-9-]+$")


def test_slugify_latin_title():
    assert slugify("Hello, World!") == "hello-world"


def test_slugify_collapses_whitespace_and_hyphens():
    assert slugify("  Trip   to -- Berlin  ") == "trip-to-berlin"


def test_slugify_transliterates_cyrillic():
    assert slugify("Поездка в Гданьск") == "poezdka-v-gdansk"


def test_slugify_truncates_long_titles():
    slug = slugify("word " * 40)
    assert len(slug) <= MAX_SLUG_LENGTH
    assert not slug.endswith("-")
    assert SLUG_RE.match(slug)


def test_slugify_short_title_gets_suffix():
    slug = slugify("Ab")
    assert slug.startswith("ab-")
    assert len(slug) >= 3
    assert SLUG_RE.match(slug)


def test_slugify_empty_title_uses_prefix():
    slug = slugify("!!!", fallback_prefix="post")
    assert slug.startswith("post-")
    assert SLUG_RE.match(slug)
