"""
XML builders for sitemaps, the RSS blog feed and the Google Merchant feed.

Every builder returns the complete document as a string so a failure while
building never produces a partial response.
"""
import html
import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, List, Optional

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"

SITEMAP_TYPES = ("blog", "gallery", "routes")

SITE_NAME = "RoyalTransfer"
RSS_TITLE = "RoyalTransfer - Блог о трансферах и путешествиях"
RSS_DESCRIPTION = "Статьи о путешествиях, трансферах и интересных местах от RoyalTransfer"
MERCHANT_TITLE = "RoyalTransfer - Трансферы из Калининграда в Европу"
MERCHANT_DESCRIPTION = "Комфортные трансферы из Калининграда в города Европы"
RSS_ITEM_LIMIT = 15

STATIC_PAGES = (
    ("", "daily", "1.0"),
    ("/blog", "daily", "0.8"),
    ("/reviews", "weekly", "0.7"),
    ("/gallery", "weekly", "0.7"),
    ("/privacy-policy", "monthly", "0.3"),
)

# Characters XML 1.0 does not allow anywhere, escaped or not
INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_lastmod(value: Optional[datetime]) -> Optional[str]:
    if not value:
        return None
    return _as_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_rfc822(value: datetime) -> str:
    return format_datetime(_as_utc(value), usegmt=True)


def _xml_text(text) -> str:
    return INVALID_XML_CHARS.sub("", str(text or ""))


def xml_escape(text) -> str:
    return html.escape(_xml_text(text))


def _cdata(text: str) -> str:
    return "<![CDATA[" + _xml_text(text).replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _image_block(loc: str, title: str, caption: str) -> List[str]:
    return [
        "    <image:image>",
        f"      <image:loc>{xml_escape(loc)}</image:loc>",
        f"      <image:title>{xml_escape(title)}</image:title>",
        f"      <image:caption>{xml_escape(caption)}</image:caption>",
        "    </image:image>",
    ]


def build_url_entry(
    loc: str,
    lastmod: Optional[datetime] = None,
    changefreq: Optional[str] = "weekly",
    priority: Optional[str] = "0.6",
    images: Iterable[List[str]] = (),
) -> str:
    lines = [
        "  <url>",
        f"    <loc>{xml_escape(loc)}</loc>",
    ]
    formatted_lastmod = format_lastmod(lastmod)
    if formatted_lastmod:
        lines.append(f"    <lastmod>{formatted_lastmod}</lastmod>")
    if changefreq:
        lines.append(f"    <changefreq>{changefreq}</changefreq>")
    if priority:
        lines.append(f"    <priority>{priority}</priority>")
    for image in images:
        lines.extend(image)
    lines.append("  </url>")
    return "\n".join(lines)


def _urlset(entries: List[str]) -> str:
    return "\n".join([
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NS}" xmlns:image="{IMAGE_NS}">',
        *entries,
        "</urlset>",
    ])


def build_sitemap_index(base_url: str, now: datetime) -> str:
    lastmod = format_lastmod(now)
    locations = [f"{base_url}/sitemap.xml"] + [f"{base_url}/api/sitemaps/{kind}" for kind in SITEMAP_TYPES]

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<sitemapindex xmlns="{SITEMAP_NS}">',
    ]
    for loc in locations:
        lines.extend([
            "  <sitemap>",
            f"    <loc>{xml_escape(loc)}</loc>",
            f"    <lastmod>{lastmod}</lastmod>",
            "  </sitemap>",
        ])
    lines.append("</sitemapindex>")
    return "\n".join(lines)


def build_pages_sitemap(base_url: str, now: datetime) -> str:
    entries = [
        build_url_entry(f"{base_url}{path}", lastmod=now, changefreq=changefreq, priority=priority)
        for path, changefreq, priority in STATIC_PAGES
    ]
    return _urlset(entries)


def build_blog_sitemap(posts, base_url: str) -> str:
    entries = []
    for post in posts:
        image_url = post.image_url or f"{base_url}/images/default-blog.jpg"
        entries.append(build_url_entry(
            f"{base_url}/blog/{post.slug}",
            lastmod=post.updated_at,
            changefreq="weekly",
            priority="0.7",
            images=[_image_block(image_url, post.title, f"{post.title} - Блог {SITE_NAME}")],
        ))
    return _urlset(entries)


def build_gallery_sitemap(galleries, base_url: str) -> str:
    entries = []
    for gallery in galleries:
        images = [
            _image_block(
                photo.url,
                photo.title or gallery.title,
                photo.description or f'Фотография из галереи "{gallery.title}"',
            )
            for photo in gallery.photos
        ]
        entries.append(build_url_entry(
            f"{base_url}/gallery/{gallery.slug}",
            lastmod=gallery.updated_at,
            changefreq="monthly",
            priority="0.6",
            images=images,
        ))
    return _urlset(entries)


def build_routes_sitemap(routes, base_url: str) -> str:
    entries = []
    for route in routes:
        title = f"{route.origin_city} - {route.destination_city}"
        image_url = route.image_url or f"{base_url}/images/routes/route-{route.id}.jpg"
        entries.append(build_url_entry(
            f"{base_url}/routes/{route.id}",
            lastmod=route.updated_at,
            changefreq="monthly",
            priority="0.5",
            images=[_image_block(
                image_url, title, f"Маршрут {title}: {route.description or 'комфортный трансфер'}"
            )],
        ))
    return _urlset(entries)


def build_rss_feed(posts, base_url: str, now: datetime) -> str:
    """RSS 2.0 feed of published blog posts with full content."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/" '
        'xmlns:atom="http://www.w3.org/2005/Atom">',
        "<channel>",
        f"<title>{xml_escape(RSS_TITLE)}</title>",
        f"<link>{xml_escape(base_url)}/blog</link>",
        f"<description>{xml_escape(RSS_DESCRIPTION)}</description>",
        "<language>ru-ru</language>",
        f"<lastBuildDate>{format_rfc822(now)}</lastBuildDate>",
        f'<atom:link href="{xml_escape(base_url)}/api/feed/rss" rel="self" type="application/rss+xml" />',
    ]

    for post in posts:
        link = xml_escape(f"{base_url}/blog/{post.slug}")
        image_url = post.image_url or f"{base_url}/images/default-blog.jpg"
        body = (
            f'<div><img src="{xml_escape(image_url)}" alt="{xml_escape(post.title)}" width="800" /></div>'
            + (post.content or "")
        )
        lines.extend([
            "<item>",
            f"  <title>{xml_escape(post.title)}</title>",
            f"  <link>{link}</link>",
            f'  <guid isPermaLink="true">{link}</guid>',
            f"  <pubDate>{format_rfc822(post.published_at or post.created_at)}</pubDate>",
            f"  <description>{xml_escape(post.excerpt or '')}</description>",
            f"  <content:encoded>{_cdata(body)}</content:encoded>",
            f'  <enclosure url="{xml_escape(image_url)}" type="image/jpeg" length="0" />',
            "</item>",
        ])

    lines.extend(["</channel>", "</rss>"])
    return "\n".join(lines)


def build_merchant_feed(routes, base_url: str, currency: str) -> str:
    """Google Merchant product feed: one product per active route, priced at the comfort class."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss xmlns:g="http://base.google.com/ns/1.0" version="2.0">',
        "<channel>",
        f"<title>{xml_escape(MERCHANT_TITLE)}</title>",
        f"<link>{xml_escape(base_url)}</link>",
        f"<description>{xml_escape(MERCHANT_DESCRIPTION)}</description>",
    ]

    for route in routes:
        origin = xml_escape(route.origin_city)
        destination = xml_escape(route.destination_city)
        image_url = route.image_url or f"{base_url}/images/logo.png"
        description = f"Комфортный трансфер из {origin} в {destination}."
        if route.description:
            description += f" {xml_escape(route.description)}"

        lines.extend([
            "<item>",
            f"  <g:id>route-{route.id}</g:id>",
            f"  <g:title>Трансфер {origin} - {destination}</g:title>",
            f"  <g:description>{description}</g:description>",
            f"  <g:link>{xml_escape(base_url)}/routes/{route.id}</g:link>",
            f"  <g:image_link>{xml_escape(image_url)}</g:image_link>",
            "  <g:availability>in stock</g:availability>",
            f"  <g:price>{route.price_comfort:.2f} {currency}</g:price>",
            f"  <g:brand>{SITE_NAME}</g:brand>",
            "  <g:condition>new</g:condition>",
            "  <g:product_type>Passenger Transportation Service</g:product_type>",
            "</item>",
        ])

    lines.extend(["</channel>", "</rss>"])
    return "\n".join(lines)


def build_robots_txt(base_url: str) -> str:
    return "\n".join([
        "User-agent: *",
        "Allow: /",
        "Disallow: /admin/",
        "Disallow: /api/",
        "",
        f"Sitemap: {base_url}/sitemap.xml",
        f"Sitemap: {base_url}/api/sitemap-index",
        f"Host: {base_url}",
        "",
    ])
