"""
HTML structural analysis.

Turns a raw HTML document into a flat set of SEO-relevant facts: head
tags, headings, images, links and asset counts. Parsing uses
BeautifulSoup with lxml, which tolerates broken markup, so malformed
documents yield empty lookups instead of errors.
"""

import logging
import re
from dataclasses import dataclass, field, asdict
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

SOCIAL_NETWORKS = ("facebook", "twitter", "linkedin", "instagram", "youtube", "tiktok")
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
EXCLUDED_HREF_PREFIXES = ("#", "mailto:", "tel:")


@dataclass(frozen=True)
class HtmlStructuralFacts:
    title: str = ""
    has_title: bool = False
    meta_description: str | None = None
    has_meta_description: bool = False
    canonical: str | None = None
    has_canonical: bool = False
    meta_robots: str | None = None
    has_noindex: bool = False
    has_viewport: bool = False
    h1_count: int = 0
    og_tags: int = 0
    twitter_tags: int = 0
    hreflang_count: int = 0
    image_count: int = 0
    images_missing_alt: int = 0
    internal_links: int = 0
    external_links: int = 0
    social_links: list[str] = field(default_factory=list)
    script_count: int = 0
    stylesheet_count: int = 0
    heading_structure: dict[str, int] = field(default_factory=dict)
    html_bytes: int = 0

    def to_summary(self) -> dict:
        """camelCase view used in the report summary."""
        return {to_camel(key): value for key, value in asdict(self).items()}


def to_absolute_url(href: str, origin: str) -> str:
    """Resolve ``href`` against ``origin`` with a lower-cased scheme and host."""
    try:
        parts = urlsplit(urljoin(origin, href))
    except ValueError:
        return href
    return urlunsplit(parts._replace(scheme=parts.scheme.lower(), netloc=parts.netloc.lower()))


def _attr_text(tag, name: str) -> str:
    if tag is None:
        return ""
    value = tag.get(name, "")
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def analyze_html(html: str, origin: str) -> HtmlStructuralFacts:
    """Extract structural facts from ``html``.

    Links are resolved against ``origin`` (scheme + host); a link is internal
    when its absolute URL starts with the origin. Fragment, ``mailto:`` and
    ``tel:`` links are not counted at all.
    """
    soup = BeautifulSoup(html, "lxml")

    title_tag = soup.select_one("head > title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    meta_description = _attr_text(soup.find("meta", attrs={"name": "description"}), "content")
    canonical = _attr_text(soup.find("link", attrs={"rel": "canonical"}), "href")

    meta_robots = None
    meta_robots_tag = soup.find("meta", attrs={"name": "robots"})
    if meta_robots_tag:
        meta_robots = _attr_text(meta_robots_tag, "content").lower()

    og_tags = len(soup.find_all("meta", property=re.compile(r"^og:")))
    twitter_tags = len(soup.find_all("meta", attrs={"name": re.compile(r"^twitter:")}))
    hreflang_count = len(soup.find_all("link", rel="alternate", hreflang=True))

    images = soup.find_all("img")
    images_missing_alt = sum(1 for img in images if not _attr_text(img, "alt"))

    internal_links = 0
    external_links = 0
    social_links = []
    for a in soup.find_all("a", href=True):
        href = _attr_text(a, "href")
        if not href or href.startswith(EXCLUDED_HREF_PREFIXES):
            continue

        absolute_href = to_absolute_url(href, origin)
        if absolute_href.startswith(origin):
            internal_links += 1
        else:
            external_links += 1

        if any(network in absolute_href.lower() for network in SOCIAL_NETWORKS):
            social_links.append(absolute_href)

    script_count = len(soup.select('script[src], script[type="module"]'))
    stylesheet_count = len(soup.find_all("link", rel="stylesheet"))

    heading_structure = {tag: len(soup.find_all(tag)) for tag in HEADING_TAGS}

    logger.debug(
        f"Parsed HTML: {len(images)} images, {internal_links} internal / "
        f"{external_links} external links, {heading_structure['h1']} H1"
    )

    return HtmlStructuralFacts(
        title=title,
        has_title=bool(title),
        meta_description=meta_description or None,
        has_meta_description=bool(meta_description),
        canonical=canonical or None,
        has_canonical=bool(canonical),
        meta_robots=meta_robots,
        has_noindex="noindex" in (meta_robots or ""),
        has_viewport=soup.find("meta", attrs={"name": "viewport"}) is not None,
        h1_count=heading_structure["h1"],
        og_tags=og_tags,
        twitter_tags=twitter_tags,
        hreflang_count=hreflang_count,
        image_count=len(images),
        images_missing_alt=images_missing_alt,
        internal_links=internal_links,
        external_links=external_links,
        social_links=social_links,
        script_count=script_count,
        stylesheet_count=stylesheet_count,
        heading_structure=heading_structure,
        html_bytes=len(html.encode("utf-8", errors="surrogatepass")),
    )
