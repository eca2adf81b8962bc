"""
End-to-end retrieval tests over an in-memory fetcher.

No browser or network is involved; the fetcher serves canned pages.
"""

from unittest.mock import patch

import pytest
from conftest import (
    ACME_ABOUT,
    ACME_CAREERS,
    ACME_HOMEPAGE,
    LINKEDIN_WALL,
    WIKIPEDIA_ACME,
    FakeFetcher,
    job_posting_page,
)

from job_retriever.core.config import RetrieverConfig
from job_retriever.crawler.browser_crawler import BrowserConnectionError
from job_retriever.pipeline.retriever import JobRetriever, hiring_organization
from job_retriever.pipeline.schema import JobData

JOB_URL = "https://jobs.example/123"


class TestHiringOrganization:
    def test_dict(self):
        raw = {"hiringOrganization": {"name": " Acme Corp ", "url": "https://acme.example"}}
        assert hiring_organization(raw) == ("Acme Corp", "https://acme.example")

    def test_same_as_list(self):
        raw = {"hiringOrganization": {"name": "Acme", "sameAs": ["https://acme.example", "https://x.example"]}}
        assert hiring_organization(raw) == ("Acme", "https://acme.example")

    def test_string_and_missing(self):
        assert hiring_organization({"hiringOrganization": "Acme"}) == ("Acme", None)
        assert hiring_organization({}) == (None, None)
        assert hiring_organization(None) == (None, None)


class TestRetrieve:
    @pytest.mark.asyncio
    async def test_structured_posting_with_enrichment(self, fast_config, acme_posting):
        fetcher = FakeFetcher({
            JOB_URL: job_posting_page(acme_posting),
            "https://acme.example": ACME_HOMEPAGE,
            "https://acme.example/about": ACME_ABOUT,
            "https://acme.example/careers": ACME_CAREERS,
            "https://en.wikipedia.org/wiki/Acme_Corp": WIKIPEDIA_ACME,
            "https://www.linkedin.com/company/acme-corp": LINKEDIN_WALL,
        })
        data = await JobRetriever(fast_config, fetcher=fetcher).retrieve()

        assert isinstance(data, JobData)
        assert data.job.title == "Senior Backend Engineer"
        assert data.job.role_seniority == "senior"
        assert data.job.contract_type == "full-time"
        assert data.job.location.country == "US"
        assert data.job.salary.min == 150000
        assert data.job.salary.max == 180000
        assert data.job.salary.currency == "USD"
        assert data.job.salary.period == "year"
        assert data.job.posting_date == "2024-01-15T00:00:00+00:00"
        assert data.job.source_url == JOB_URL
        assert data.job.raw_schema_org["title"] == "Senior Backend Engineer"

        assert data.company.name == "Acme Corp"
        assert data.company.website == "https://acme.example"
        assert "https://acme.example" in data.company.data_sources
        assert data.company.hq_location.country == "US"
        assert data.company.industry == "Software"

        assert data.metadata.agent == "fake+test"
        assert any("LinkedIn" in note for note in data.metadata.notes)
        assert fetcher.closed

    @pytest.mark.asyncio
    async def test_salary_from_text_only(self, fast_config):
        html = "<html><body><h1>Backend Engineer</h1><p>Pay: $90,000 - $120,000 per year</p></body></html>"
        data = await JobRetriever(fast_config, fetcher=FakeFetcher({JOB_URL: html})).retrieve()

        assert data.job.title == "Backend Engineer"
        assert data.job.salary.min == 90000
        assert data.job.salary.max == 120000
        assert data.job.salary.currency == "USD"
        assert data.job.salary.period == "year"


class TestFailures:
    @pytest.mark.asyncio
    async def test_browser_unavailable(self, fast_config):
        fetcher = FakeFetcher({JOB_URL: BrowserConnectionError("LIGHTPANDA_WS environment variable is required")})
        data = await JobRetriever(fast_config, fetcher=fetcher).retrieve()

        assert data.job.source_url == JOB_URL
        assert data.job.title == ""
        assert data.company.name == ""
        assert data.company.data_sources == []
        assert data.metadata.notes == ["Error during extraction: LIGHTPANDA_WS environment variable is required"]
        assert fetcher.closed

    @pytest.mark.asyncio
    async def test_no_endpoint_configured(self):
        """The real browser transport with nothing to connect to still resolves."""
        data = await JobRetriever(RetrieverConfig(job_url=JOB_URL)).retrieve()

        assert data.job.source_url == JOB_URL
        assert data.job.title == ""
        assert data.metadata.agent == "lightpanda+playwright"
        assert len(data.metadata.notes) == 1
        assert "LIGHTPANDA_WS" in data.metadata.notes[0]

    @pytest.mark.asyncio
    async def test_validation_failure_falls_back_to_minimal_record(self, fast_config, acme_posting):
        fetcher = FakeFetcher({JOB_URL: job_posting_page(acme_posting)})
        with patch("job_retriever.pipeline.retriever.normalize", return_value={"job": {"title": 42}}):
            data = await JobRetriever(fast_config, fetcher=fetcher).retrieve()

        assert data.job.source_url == JOB_URL
        assert data.job.title == ""
        assert data.metadata.agent == "fake+test"
        assert any(note.startswith("Validation error:") for note in data.metadata.notes)
