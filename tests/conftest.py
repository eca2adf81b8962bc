"""
Shared fixtures: an in-memory page fetcher and canned pages.
"""

import json
from typing import Dict, List, Union

import pytest

from job_retriever.core.config import RetrieverConfig
from job_retriever.crawler.fetchers import PageFetcher, PageFetchError


class FakeFetcher(PageFetcher):
    """Serves canned HTML by URL; unknown URLs behave like a 404."""

    agent = "fake+test"

    def __init__(self, pages: Dict[str, Union[str, Exception]]):
        self.pages = pages
        self.calls: List[str] = []
        self.closed = False

    async def fetch_html(self, url: str, max_retries: int = 3) -> str:
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise PageFetchError(f"HTTP 404 for {url}")
        if isinstance(page, Exception):
            raise page
        return page

    async def close(self):
        self.closed = True


def job_posting_page(posting: dict, body: str = "") -> str:
    return f"""
    <html>
    <head>
        <title>{posting.get('title', 'Job')}</title>
        <script type="application/ld+json">{json.dumps(posting)}</script>
    </head>
    <body>{body}</body>
    </html>
    """


@pytest.fixture
def fast_config():
    """Config with all sleeps disabled."""
    return RetrieverConfig(
        job_url="https://jobs.example/123",
        ws_endpoint="ws://127.0.0.1:9222",
        retry_backoff_ms=0,
        settle_ms=0,
        click_settle_ms=0,
        batch_delay_s=0,
    )


@pytest.fixture
def acme_posting():
    return {
        "@context": "https://schema.org",
        "@type": "JobPosting",
        "title": "Senior Backend Engineer",
        "description": "<p>Join Acme to build <b>distributed systems</b> in Python.</p>",
        "datePosted": "2024-01-15",
        "employmentType": "FULL_TIME",
        "hiringOrganization": {"@type": "Organization", "name": "Acme Corp", "url": "https://acme.example"},
        "jobLocation": {
            "@type": "Place",
            "address": {
                "@type": "PostalAddress",
                "addressLocality": "San Francisco",
                "addressRegion": "CA",
                "addressCountry": "usa",
            },
        },
        "baseSalary": {
            "@type": "MonetaryAmount",
            "currency": "USD",
            "value": {"@type": "QuantitativeValue", "minValue": 150000, "maxValue": 180000, "unitText": "YEAR"},
        },
    }


ACME_HOMEPAGE = """
<html>
<head>
    <title>Acme Corp</title>
    <meta name="description" content="Acme Corp builds software for logistics teams.">
</head>
<body>
    <p>Acme is a software company founded in 2012 with 200-500 employees.</p>
    <p>We are headquartered in Austin, Texas, USA.</p>
</body>
</html>
"""

ACME_ABOUT = """
<html><body>
    <p>Our values are integrity, collaboration and transparency in everything we do.</p>
    <p>Benefits include health insurance, dental, and flexible hours.</p>
</body></html>
"""

ACME_CAREERS = """
<html><body>
    <p>We value innovation. Perks: stock options, parental leave, dental.</p>
</body></html>
"""

WIKIPEDIA_ACME = """
<html>
<head><title>Acme Corp - Wikipedia</title></head>
<body>
<div id="mw-content-text">
    <p>Short stub.</p>
    <p>Acme Corp is an American software company founded in 2012. It builds routing and fleet
    management software used by logistics operators across North America and Europe, and is
    headquartered in Austin.</p>
</div>
<table class="infobox"><tr><th>Industry</th><td>Software</td></tr></table>
</body>
</html>
"""

LINKEDIN_WALL = """
<html><head><title>Sign In | LinkedIn</title></head><body><form>Sign in</form></body></html>
"""

LINKEDIN_PUBLIC = """
<html><head><title>Acme Corp | LinkedIn</title></head>
<body>
<p data-test-id="about-us__description">Acme Corp makes fleet software for logistics operators around the world.</p>
</body></html>
"""
