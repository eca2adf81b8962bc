"""
Unit tests for the job extraction orchestrator.
"""

from unittest.mock import patch

from conftest import job_posting_page

from job_retriever.pipeline.extractor import JobExtractor

URL = "https://jobs.example/123"


class TestJsonLdPrecedence:
    def test_jsonld_beats_dom(self, acme_posting):
        """Structured data wins over conflicting DOM content."""
        html = job_posting_page(acme_posting, body="""
            <h1 class="job-title">Marketing Coordinator</h1>
            <div class="job-location">Berlin, Germany</div>
        """)
        job = JobExtractor().extract(html, URL)

        assert job["title"] == "Senior Backend Engineer"
        assert job["location"]["city"] == "San Francisco"
        assert job["role_seniority"] == "senior"
        assert job["raw_schema_org"]["hiringOrganization"]["name"] == "Acme Corp"
        assert job["source_url"] == URL

    def test_far_future_deadline_keeps_jsonld(self, acme_posting):
        posting = dict(acme_posting, validThrough="9999-12-31T23:59:59-05:00")
        html = job_posting_page(posting, body='<h1 class="job-title">Marketing Coordinator</h1>')
        notes = []
        job = JobExtractor(notes).extract(html, URL)

        assert notes == []
        assert job["title"] == "Senior Backend Engineer"
        assert job["raw_schema_org"]["validThrough"] == "9999-12-31T23:59:59-05:00"

    def test_jsonld_salary_not_overwritten(self, acme_posting):
        html = job_posting_page(acme_posting, body="<p>Salary $10 - $20 per hour</p>")
        job = JobExtractor().extract(html, URL)
        assert job["salary"]["min"] == 150000


class TestDomFallback:
    def test_title_and_location_from_dom(self):
        """Without structured data the DOM selectors fill the gaps."""
        html = """
        <html><body>
            <h1 data-testid="job-title-header">Junior Data Analyst</h1>
            <div class="location">London, England, UK</div>
            <div class="job-description">
                We are looking for a junior analyst to join our team. You will work with SQL, python and
                dashboards. This is a remote role with occasional travel to the office in London.
            </div>
        </body></html>
        """
        job = JobExtractor().extract(html, URL)

        assert job["title"] == "Junior Data Analyst"
        assert job["role_seniority"] == "entry"
        assert job["location"] == {"city": "London", "region": "England", "country": "UK", "remote_policy": ""}
        assert job["description_text"].startswith("We are looking")
        assert job["work_model"] == "hybrid"
        assert "python" in job["tech_stack"]
        assert job["raw_schema_org"] == {}

    def test_salary_from_text(self):
        html = "<html><body><h1>Backend Engineer</h1><p>$90,000 - $120,000 per year</p></body></html>"
        job = JobExtractor().extract(html, URL)
        assert job["salary"] == {"min": 90000, "max": 120000, "currency": "$", "period": "year"}

    def test_empty_page(self):
        job = JobExtractor().extract("", URL)
        assert job == {"source_url": URL, "raw_schema_org": {}}


class TestStageIsolation:
    def test_failing_stage_is_noted(self, acme_posting):
        """A stage that raises is skipped; later stages still run."""
        notes = []
        html = job_posting_page(acme_posting, body="<p>Python and Docker</p>")
        with patch(
            "job_retriever.pipeline.heuristics.HeuristicExtractor.extract_seniority",
            side_effect=RuntimeError("lexicon exploded"),
        ):
            job = JobExtractor(notes).extract(html, URL)

        assert job["title"] == "Senior Backend Engineer"
        assert "role_seniority" not in job
        assert job["tech_stack"] == ["python", "docker"]
        assert len(notes) == 1
        assert "seniority" in notes[0]
        assert "lexicon exploded" in notes[0]
