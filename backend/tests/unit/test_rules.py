"""
Unit tests for the SEO rule catalogue and evaluator.

Covers:
- Catalogue order and applicability (HTML, always-on, remote-gated)
- Pass/fail conditions and details strings
- Issue selection
- Per-check fault isolation
"""
from dataclasses import replace

import pytest

from seo_analyzer.schemas.onpage import OnPageLinks, OnPageMobile, OnPagePageMetrics, OnPageSummary
from seo_analyzer.services.context import (
    AnalysisContext,
    RemoteCrawlAvailable,
    RemoteCrawlUnavailable,
)
from seo_analyzer.services.html_analyzer import HtmlStructuralFacts, analyze_html
from seo_analyzer.services.rules import (
    HTML_FETCH_FAILURE,
    RULES,
    Issue,
    Rule,
    evaluate_rules,
)

from fixtures.sample_pages import DEMO_PAGE_HTML, NOINDEX_PAGE_HTML, PERFECT_PAGE_HTML


def make_context(html: HtmlStructuralFacts | None = None, **overrides) -> AnalysisContext:
    values = dict(
        url="https://example.com",
        origin="https://example.com",
        https=True,
        robots_txt_found=True,
        sitemap_found=True,
        html=html,
    )
    values.update(overrides)
    return AnalysisContext(**values)


def remote_summary(resources: int = 42, friendly: bool = True, depth: int = 1) -> RemoteCrawlAvailable:
    return RemoteCrawlAvailable(summary=OnPageSummary(
        page_metrics=OnPagePageMetrics(resources=resources),
        mobile=OnPageMobile(friendly=friendly),
        links=OnPageLinks(depth=depth),
    ))


def check_by_item(checks, item):
    return next(check for check in checks if check.item == item)


def issue_ids(issues):
    return [issue.id for issue in issues]


@pytest.fixture
def perfect_facts() -> HtmlStructuralFacts:
    return analyze_html(PERFECT_PAGE_HTML, "https://example.com")


class TestCatalogue:
    """Test catalogue structure."""

    def test_catalogue_order(self):
        assert [rule.item for rule in RULES] == [
            "HTML analyzer",
            "Title tag present",
            "Meta description present",
            "Canonical tag configured",
            "Page set to index",
            "Single H1 heading",
            "HTML size under 200 KB",
            "Viewport meta tag present",
            "Open Graph tags present",
            "Twitter card tags present",
            "Image alt text coverage ≥ 80%",
            "Internal links adequate",
            "HTTPS in use",
            "robots.txt available",
            "sitemap.xml available",
            "Requests under 150",
            "Mobile-friendly per DataForSEO",
            "Crawl depth ≤ 3",
        ]

    def test_issue_requires_positive_penalty(self):
        with pytest.raises(ValueError):
            Issue(
                id="bad", title="Bad", why="", how_to_fix="",
                impact="low", categories=("technical",), penalty=0,
            )

    def test_issue_rejects_unknown_category(self):
        with pytest.raises(ValueError):
            Issue(
                id="bad", title="Bad", why="", how_to_fix="",
                impact="low", categories=("speed",), penalty=5,
            )


class TestPerfectPage:
    """A well optimized page with full remote data."""

    def test_all_checks_pass(self, perfect_facts):
        checks, issues = evaluate_rules(make_context(perfect_facts, remote=remote_summary()))

        assert len(checks) == 17
        assert all(check.passed for check in checks)
        assert issues == []

    def test_details_strings(self, perfect_facts):
        checks, _ = evaluate_rules(make_context(perfect_facts, remote=remote_summary()))

        assert check_by_item(checks, "Title tag present").details == perfect_facts.title
        assert check_by_item(checks, "Page set to index").details == "indexable"
        assert check_by_item(checks, "Single H1 heading").details == "Exactly one H1 tag found."
        assert check_by_item(checks, "Open Graph tags present").details == "4 OG tags"
        assert check_by_item(checks, "Twitter card tags present").details == "2 Twitter tags"
        assert check_by_item(checks, "Image alt text coverage ≥ 80%").details == "1/1 images with alt"
        assert check_by_item(checks, "Internal links adequate").details == "5 internal links"
        assert check_by_item(checks, "HTTPS in use").details == "https://example.com"
        assert check_by_item(checks, "robots.txt available").details == "https://example.com/robots.txt"
        assert check_by_item(checks, "sitemap.xml available").details == "https://example.com/sitemap.xml"
        assert check_by_item(checks, "Requests under 150").details == "42 resources"
        assert check_by_item(checks, "Crawl depth ≤ 3").details == "Depth 1"


class TestHtmlChecks:
    """Test individual HTML-derived checks."""

    def test_demo_page_issues(self):
        facts = analyze_html(DEMO_PAGE_HTML, "http://demo.test")
        context = make_context(facts, url="http://demo.test", origin="http://demo.test", https=False)

        checks, issues = evaluate_rules(context)

        assert issue_ids(issues) == [
            "missing-canonical",
            "missing-h1",
            "missing-viewport",
            "missing-og",
            "missing-twitter",
            "missing-alt",
            "low-internal-links",
            "http-protocol",
        ]
        assert check_by_item(checks, "Single H1 heading").details == "Found 0 H1 tags"
        assert check_by_item(checks, "Image alt text coverage ≥ 80%").details == "0/1 images with alt"

    def test_meta_description_fails_without_issue(self, perfect_facts):
        facts = replace(perfect_facts, meta_description=None, has_meta_description=False)

        checks, issues = evaluate_rules(make_context(facts))

        assert check_by_item(checks, "Meta description present").passed is False
        assert issues == []

    def test_noindex(self):
        facts = analyze_html(NOINDEX_PAGE_HTML, "https://example.com")

        checks, issues = evaluate_rules(make_context(facts))

        check = check_by_item(checks, "Page set to index")
        assert check.passed is False
        assert check.details == "noindex, nofollow"
        noindex = next(issue for issue in issues if issue.id == "noindex")
        assert noindex.penalty == 50
        assert noindex.categories == ("technical",)

    def test_multiple_h1(self, perfect_facts):
        facts = replace(perfect_facts, h1_count=2)

        checks, issues = evaluate_rules(make_context(facts))

        assert check_by_item(checks, "Single H1 heading").details == "Found 2 H1 tags"
        assert issue_ids(issues) == ["multiple-h1"]
        assert issues[0].penalty == 5

    def test_large_html(self, perfect_facts):
        facts = replace(perfect_facts, html_bytes=300 * 1024)

        checks, issues = evaluate_rules(make_context(facts))

        check = check_by_item(checks, "HTML size under 200 KB")
        assert check.passed is False
        assert check.details == "300 KB"
        assert issue_ids(issues) == ["large-html"]

    def test_html_size_boundary(self, perfect_facts):
        facts = replace(perfect_facts, html_bytes=204800)

        checks, _ = evaluate_rules(make_context(facts))

        check = check_by_item(checks, "HTML size under 200 KB")
        assert check.passed is True
        assert check.details == "200 KB"

    def test_html_size_rounds_half_up(self, perfect_facts):
        facts = replace(perfect_facts, html_bytes=1536)

        checks, _ = evaluate_rules(make_context(facts))

        assert check_by_item(checks, "HTML size under 200 KB").details == "2 KB"

    def test_alt_coverage_boundary(self, perfect_facts):
        facts = replace(perfect_facts, image_count=5, images_missing_alt=1)

        checks, issues = evaluate_rules(make_context(facts))

        assert check_by_item(checks, "Image alt text coverage ≥ 80%").passed is True
        assert issues == []

    def test_alt_coverage_vacuous_without_images(self, perfect_facts):
        facts = replace(perfect_facts, image_count=0, images_missing_alt=0)

        checks, _ = evaluate_rules(make_context(facts))

        check = check_by_item(checks, "Image alt text coverage ≥ 80%")
        assert check.passed is True
        assert check.details == "0/0 images with alt"

    def test_internal_links_threshold(self, perfect_facts):
        facts = replace(perfect_facts, internal_links=4)

        checks, issues = evaluate_rules(make_context(facts))

        assert check_by_item(checks, "Internal links adequate").details == "4 internal links"
        assert issue_ids(issues) == ["low-internal-links"]


class TestAlwaysOnChecks:
    """Test protocol and resource probe checks."""

    def test_http_robots_sitemap(self, perfect_facts):
        context = make_context(
            perfect_facts,
            url="http://example.com",
            origin="http://example.com",
            https=False,
            robots_txt_found=False,
            sitemap_found=False,
        )

        _, issues = evaluate_rules(context)

        assert issue_ids(issues) == ["http-protocol", "missing-robots", "missing-sitemap"]
        sitemap = issues[-1]
        assert sitemap.categories == ("technical", "navigability")


class TestHtmlUnavailable:
    """Test behaviour when HTML could not be analysed."""

    def test_fetch_failure(self):
        context = make_context(None, html_error="Unexpected status 503 for https://example.com", html_fetch_failed=True)

        checks, issues = evaluate_rules(context)

        assert [check.item for check in checks] == [
            "HTML analyzer",
            "HTTPS in use",
            "robots.txt available",
            "sitemap.xml available",
        ]
        assert checks[0].passed is False
        assert checks[0].category == "Technical"
        assert checks[0].details == "Unexpected status 503 for https://example.com"
        assert issues == [HTML_FETCH_FAILURE]

    def test_parse_failure_records_check_only(self):
        context = make_context(None, html_error="Unable to parse HTML: boom")

        checks, issues = evaluate_rules(context)

        assert checks[0].item == "HTML analyzer"
        assert checks[0].details == "Unable to parse HTML: boom"
        assert issues == []


class TestRemoteGatedChecks:
    """Test checks that depend on the remote crawl."""

    def test_skipped_when_remote_unavailable(self, perfect_facts):
        context = make_context(perfect_facts, remote=RemoteCrawlUnavailable(reason="no credentials"))

        checks, _ = evaluate_rules(context)

        items = [check.item for check in checks]
        assert "Requests under 150" not in items
        assert "Mobile-friendly per DataForSEO" not in items
        assert "Crawl depth ≤ 3" not in items

    def test_skipped_when_field_undefined(self, perfect_facts):
        remote = RemoteCrawlAvailable(summary=OnPageSummary(links=OnPageLinks(depth=5)))

        checks, issues = evaluate_rules(make_context(perfect_facts, remote=remote))

        items = [check.item for check in checks]
        assert "Requests under 150" not in items
        assert "Mobile-friendly per DataForSEO" not in items
        assert check_by_item(checks, "Crawl depth ≤ 3").details == "Depth 5"
        assert issue_ids(issues) == ["deep-page"]

    def test_remote_failures(self, perfect_facts):
        remote = remote_summary(resources=180, friendly=False, depth=4)

        checks, issues = evaluate_rules(make_context(perfect_facts, remote=remote))

        assert check_by_item(checks, "Requests under 150").details == "180 resources"
        assert issue_ids(issues) == ["excessive-requests", "not-mobile-friendly", "deep-page"]

    def test_requests_boundary(self, perfect_facts):
        checks, issues = evaluate_rules(make_context(perfect_facts, remote=remote_summary(resources=150)))

        assert check_by_item(checks, "Requests under 150").passed is True
        assert issues == []


class TestFaultIsolation:
    """Test that a failing check does not abort evaluation."""

    def test_raising_check_is_recorded(self, perfect_facts):
        def explode(context):
            raise RuntimeError("boom")

        rules = (
            Rule("Technical", "Exploding check", explode),
        ) + RULES

        checks, issues = evaluate_rules(make_context(perfect_facts), rules)

        assert checks[0].item == "Exploding check"
        assert checks[0].passed is False
        assert checks[0].details == "Check raised RuntimeError: boom"
        assert all(check.passed for check in checks[1:])
        assert issues == []

    def test_evaluation_is_deterministic(self, perfect_facts):
        context = make_context(perfect_facts, remote=remote_summary())

        assert evaluate_rules(context) == evaluate_rules(context)
