"""
SEO rule catalogue and evaluator.

Each check is a declarative ``Rule``: a guard saying whether it applies to
the current context, a predicate returning ``(passed, details)``, and the
issue raised when it fails. ``evaluate_rules`` walks the catalogue in
order and produces one CheckDetail per applicable rule plus one Issue per
failure.

Catalogue:
    HTML analyzer              (only when HTML is unavailable)
    Title tag present          contentTags   high    25
    Meta description present   (check only, no issue)
    Canonical tag configured   technical     medium  10
    Page set to index          technical     high    50
    Single H1 heading          contentTags   low     10 (none) / 5 (several)
    HTML size under 200 KB     performance   medium  10
    Viewport meta tag present  mobile        high    25
    Open Graph tags present    social        medium   8
    Twitter card tags present  social        medium   7
    Image alt coverage >= 80%  contentTags   low      5
    Internal links adequate    navigability  medium  10
    HTTPS in use               technical     high    20
    robots.txt available       technical     low      5
    sitemap.xml available      technical+navigability  medium  5
    Requests under 150         performance   medium  15  (remote data)
    Mobile-friendly            mobile        high    20  (remote data)
    Crawl depth <= 3           navigability  medium  10  (remote data)
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Literal

from seo_analyzer.schemas.report import CheckDetail
from seo_analyzer.services.context import AnalysisContext

logger = logging.getLogger(__name__)

ScoreCategory = Literal["technical", "content_tags", "performance", "mobile", "navigability", "social"]
IssueImpact = Literal["high", "medium", "low"]

SCORE_CATEGORIES = ("technical", "content_tags", "performance", "mobile", "navigability", "social")

MAX_HTML_BYTES = 200 * 1024
MIN_ALT_COVERAGE = 0.8
MIN_INTERNAL_LINKS = 5
MAX_RESOURCES = 150
MAX_CRAWL_DEPTH = 3


@dataclass(frozen=True)
class Issue:
    id: str
    title: str
    why: str
    how_to_fix: str
    impact: IssueImpact
    categories: tuple[ScoreCategory, ...]
    penalty: int

    def __post_init__(self):
        if self.penalty <= 0:
            raise ValueError(f"Issue {self.id} must have a positive penalty")
        if not self.categories:
            raise ValueError(f"Issue {self.id} must affect at least one category")
        unknown = set(self.categories) - set(SCORE_CATEGORIES)
        if unknown:
            raise ValueError(f"Issue {self.id} has unknown categories: {sorted(unknown)}")


CheckOutcome = tuple[bool, str | None]


def always(context: AnalysisContext) -> bool:
    return True


def has_html(context: AnalysisContext) -> bool:
    return context.html is not None


@dataclass(frozen=True)
class Rule:
    category: str
    item: str
    evaluate: Callable[[AnalysisContext], CheckOutcome]
    issue: Issue | None = None
    select_issue: Callable[[AnalysisContext], Issue | None] | None = None
    applies: Callable[[AnalysisContext], bool] = always

    def issue_for(self, context: AnalysisContext) -> Issue | None:
        if self.select_issue is not None:
            return self.select_issue(context)
        return self.issue


# =========================================================================
# Issue templates
# =========================================================================

HTML_FETCH_FAILURE = Issue(
    id="html-fetch-failure",
    title="Failed to fetch landing page HTML",
    why="The analyzer could not download the HTML of the target page.",
    how_to_fix="Ensure the page is accessible publicly without authentication or blocking common user agents.",
    impact="high",
    categories=("technical", "performance", "content_tags"),
    penalty=20,
)

MISSING_TITLE = Issue(
    id="missing-title",
    title="Missing title tag",
    why="Pages without title tags rank poorly because search engines rely on them for context.",
    how_to_fix="Add a concise, keyword-focused <title> tag to the page head.",
    impact="high",
    categories=("content_tags",),
    penalty=25,
)

MISSING_CANONICAL = Issue(
    id="missing-canonical",
    title="Missing canonical URL",
    why="Without a canonical tag, search engines may index duplicate versions of this page.",
    how_to_fix="Add a <link rel=\"canonical\"> tag referencing the preferred URL.",
    impact="medium",
    categories=("technical",),
    penalty=10,
)

NOINDEX = Issue(
    id="noindex",
    title="Page blocked from indexing",
    why="The robots meta tag contains noindex so the page can't appear in search results.",
    how_to_fix="Remove the noindex directive from the robots meta tag or ensure it's intended.",
    impact="high",
    categories=("technical",),
    penalty=50,
)

MISSING_H1 = Issue(
    id="missing-h1",
    title="Missing H1 heading",
    why="The primary H1 heading helps search engines and users understand page focus.",
    how_to_fix="Add a single descriptive H1 heading to the main page content.",
    impact="low",
    categories=("content_tags",),
    penalty=10,
)

MULTIPLE_H1 = Issue(
    id="multiple-h1",
    title="Multiple H1 headings",
    why="Using more than one H1 dilutes relevance and confuses crawlers.",
    how_to_fix="Limit the page to a single H1 and use H2/H3 tags for subtopics.",
    impact="low",
    categories=("content_tags",),
    penalty=5,
)

LARGE_HTML = Issue(
    id="large-html",
    title="HTML payload is heavy",
    why="Pages larger than 200 KB load slower and consume more crawl budget.",
    how_to_fix="Minify HTML and remove unused markup or inline scripts to reduce size.",
    impact="medium",
    categories=("performance",),
    penalty=10,
)

MISSING_VIEWPORT = Issue(
    id="missing-viewport",
    title="Missing viewport meta tag",
    why="Without a viewport tag, the page renders poorly on mobile devices.",
    how_to_fix="Add <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">.",
    impact="high",
    categories=("mobile",),
    penalty=25,
)

MISSING_OG = Issue(
    id="missing-og",
    title="Open Graph tags missing",
    why="Social sharing platforms rely on OG tags to render rich previews.",
    how_to_fix="Add standard og:title, og:description, og:image, and og:url tags.",
    impact="medium",
    categories=("social",),
    penalty=8,
)

MISSING_TWITTER = Issue(
    id="missing-twitter",
    title="Twitter card tags missing",
    why="Twitter uses dedicated tags to show previews when your link is shared.",
    how_to_fix="Add twitter:card, twitter:title, and twitter:description meta tags.",
    impact="medium",
    categories=("social",),
    penalty=7,
)

MISSING_ALT = Issue(
    id="missing-alt",
    title="Images missing alt text",
    why="Alt text improves accessibility and helps search engines understand images.",
    how_to_fix="Add descriptive alt attributes to significant images.",
    impact="low",
    categories=("content_tags",),
    penalty=5,
)

LOW_INTERNAL_LINKS = Issue(
    id="low-internal-links",
    title="Weak internal linking",
    why="Few internal links make it harder for crawlers and users to discover content.",
    how_to_fix="Add contextual internal links pointing to related pages.",
    impact="medium",
    categories=("navigability",),
    penalty=10,
)

HTTP_PROTOCOL = Issue(
    id="http-protocol",
    title="Site not served over HTTPS",
    why="Secure HTTPS is a ranking signal and protects user data.",
    how_to_fix="Install an SSL certificate and redirect HTTP traffic to HTTPS.",
    impact="high",
    categories=("technical",),
    penalty=20,
)

MISSING_ROBOTS = Issue(
    id="missing-robots",
    title="robots.txt not found",
    why="Without robots.txt you cannot control crawler access effectively.",
    how_to_fix="Create robots.txt at the site root to manage crawl behaviour.",
    impact="low",
    categories=("technical",),
    penalty=5,
)

MISSING_SITEMAP = Issue(
    id="missing-sitemap",
    title="sitemap.xml not found",
    why="Sitemaps help search engines discover and prioritise your pages.",
    how_to_fix="Generate a sitemap.xml and reference it in robots.txt and Search Console.",
    impact="medium",
    categories=("technical", "navigability"),
    penalty=5,
)

EXCESSIVE_REQUESTS = Issue(
    id="excessive-requests",
    title="Too many network requests",
    why="Request-heavy pages are slower to load and hurt Core Web Vitals.",
    how_to_fix="Concatenate assets, lazy-load below-the-fold content, and remove unused scripts.",
    impact="medium",
    categories=("performance",),
    penalty=15,
)

NOT_MOBILE_FRIENDLY = Issue(
    id="not-mobile-friendly",
    title="Page is not mobile-friendly",
    why="Mobile usability issues impact rankings and conversion on handheld devices.",
    how_to_fix="Adopt responsive layouts and ensure tap targets and fonts meet mobile guidelines.",
    impact="high",
    categories=("mobile",),
    penalty=20,
)

DEEP_PAGE = Issue(
    id="deep-page",
    title="Page is deeply nested",
    why="Pages more than three clicks from the homepage receive less crawl frequency.",
    how_to_fix="Expose the page via menus, breadcrumbs, or internal links closer to the homepage.",
    impact="medium",
    categories=("navigability",),
    penalty=10,
)


# =========================================================================
# Predicates
# =========================================================================

def _html_unavailable(context: AnalysisContext) -> CheckOutcome:
    return False, context.html_error or "Unable to parse HTML"


def _html_failure_issue(context: AnalysisContext) -> Issue | None:
    # Only a failed download is penalised; a parser fault is our problem, not the site's
    return HTML_FETCH_FAILURE if context.html_fetch_failed else None


def _title_present(context: AnalysisContext) -> CheckOutcome:
    return context.html.has_title, context.html.title or None


def _meta_description_present(context: AnalysisContext) -> CheckOutcome:
    return context.html.has_meta_description, context.html.meta_description


def _canonical_configured(context: AnalysisContext) -> CheckOutcome:
    return context.html.has_canonical, context.html.canonical


def _indexable(context: AnalysisContext) -> CheckOutcome:
    if context.html.has_noindex:
        return False, context.html.meta_robots
    return True, "indexable"


def _single_h1(context: AnalysisContext) -> CheckOutcome:
    h1_count = context.html.h1_count
    if h1_count == 1:
        return True, "Exactly one H1 tag found."
    return False, f"Found {h1_count} H1 tags"


def _h1_issue(context: AnalysisContext) -> Issue:
    return MISSING_H1 if context.html.h1_count == 0 else MULTIPLE_H1


def _html_size(context: AnalysisContext) -> CheckOutcome:
    html_bytes = context.html.html_bytes
    html_kb = math.floor(html_bytes / 1024 + 0.5)
    return html_bytes <= MAX_HTML_BYTES, f"{html_kb} KB"


def _viewport_present(context: AnalysisContext) -> CheckOutcome:
    return context.html.has_viewport, None


def _open_graph_present(context: AnalysisContext) -> CheckOutcome:
    return context.html.og_tags > 0, f"{context.html.og_tags} OG tags"


def _twitter_present(context: AnalysisContext) -> CheckOutcome:
    return context.html.twitter_tags > 0, f"{context.html.twitter_tags} Twitter tags"


def _alt_coverage(context: AnalysisContext) -> CheckOutcome:
    image_count = context.html.image_count
    with_alt = image_count - context.html.images_missing_alt
    ratio = 1.0 if image_count == 0 else with_alt / image_count
    return ratio >= MIN_ALT_COVERAGE, f"{with_alt}/{image_count} images with alt"


def _internal_links(context: AnalysisContext) -> CheckOutcome:
    internal_links = context.html.internal_links
    return internal_links >= MIN_INTERNAL_LINKS, f"{internal_links} internal links"


def _https(context: AnalysisContext) -> CheckOutcome:
    return context.https, context.url


def _robots_txt(context: AnalysisContext) -> CheckOutcome:
    return context.robots_txt_found, f"{context.origin}/robots.txt"


def _sitemap(context: AnalysisContext) -> CheckOutcome:
    return context.sitemap_found, f"{context.origin}/sitemap.xml"


def _requests(context: AnalysisContext) -> CheckOutcome:
    return context.resource_count <= MAX_RESOURCES, f"{context.resource_count} resources"


def _mobile_friendly(context: AnalysisContext) -> CheckOutcome:
    return bool(context.mobile_friendly), None


def _crawl_depth(context: AnalysisContext) -> CheckOutcome:
    return context.crawl_depth <= MAX_CRAWL_DEPTH, f"Depth {context.crawl_depth}"


# =========================================================================
# Catalogue
# =========================================================================

RULES: tuple[Rule, ...] = (
    Rule("Technical", "HTML analyzer", _html_unavailable,
         select_issue=_html_failure_issue, applies=lambda ctx: ctx.html is None),
    Rule("Content", "Title tag present", _title_present, MISSING_TITLE, applies=has_html),
    Rule("Content", "Meta description present", _meta_description_present, applies=has_html),
    Rule("Technical", "Canonical tag configured", _canonical_configured, MISSING_CANONICAL, applies=has_html),
    Rule("Technical", "Page set to index", _indexable, NOINDEX, applies=has_html),
    Rule("Content", "Single H1 heading", _single_h1, select_issue=_h1_issue, applies=has_html),
    Rule("Performance", "HTML size under 200 KB", _html_size, LARGE_HTML, applies=has_html),
    Rule("Mobile", "Viewport meta tag present", _viewport_present, MISSING_VIEWPORT, applies=has_html),
    Rule("Social", "Open Graph tags present", _open_graph_present, MISSING_OG, applies=has_html),
    Rule("Social", "Twitter card tags present", _twitter_present, MISSING_TWITTER, applies=has_html),
    Rule("Content", "Image alt text coverage ≥ 80%", _alt_coverage, MISSING_ALT, applies=has_html),
    Rule("Navigability", "Internal links adequate", _internal_links, LOW_INTERNAL_LINKS, applies=has_html),
    Rule("Technical", "HTTPS in use", _https, HTTP_PROTOCOL),
    Rule("Technical", "robots.txt available", _robots_txt, MISSING_ROBOTS),
    Rule("Technical", "sitemap.xml available", _sitemap, MISSING_SITEMAP),
    Rule("Performance", "Requests under 150", _requests, EXCESSIVE_REQUESTS,
         applies=lambda ctx: ctx.resource_count is not None),
    Rule("Mobile", "Mobile-friendly per DataForSEO", _mobile_friendly, NOT_MOBILE_FRIENDLY,
         applies=lambda ctx: ctx.mobile_friendly is not None),
    Rule("Navigability", "Crawl depth ≤ 3", _crawl_depth, DEEP_PAGE,
         applies=lambda ctx: ctx.crawl_depth is not None),
)


def evaluate_rules(
    context: AnalysisContext,
    rules: tuple[Rule, ...] = RULES,
) -> tuple[list[CheckDetail], list[Issue]]:
    """Evaluate ``rules`` in order against ``context``.

    A rule that raises is recorded as a failed check carrying the exception
    text and contributes no issue.
    """
    checks: list[CheckDetail] = []
    issues: list[Issue] = []

    for rule in rules:
        try:
            if not rule.applies(context):
                continue
            passed, details = rule.evaluate(context)
            issue = None if passed else rule.issue_for(context)
        except Exception as e:
            logger.error(f"Check '{rule.item}' raised {type(e).__name__}: {e}")
            checks.append(CheckDetail(
                category=rule.category,
                item=rule.item,
                passed=False,
                details=f"Check raised {type(e).__name__}: {e}",
            ))
            continue

        checks.append(CheckDetail(
            category=rule.category,
            item=rule.item,
            passed=bool(passed),
            details=details,
        ))
        if issue is not None:
            issues.append(issue)

    logger.debug(f"Evaluated {len(checks)} checks, {len(issues)} issues for {context.url}")
    return checks, issues
