"""
Unit tests for the job-page and company heuristics.
"""

from datetime import datetime

import pytest
from bs4 import BeautifulSoup

from job_retriever.pipeline.heuristics import CompanyHeuristics, HeuristicExtractor


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestDomFallbacks:
    def test_title_prefers_specific_selector(self):
        page = soup('<h1>Careers at Example</h1><h1 class="job-title">Data Engineer II</h1>')
        assert HeuristicExtractor().extract_title(page) == "Data Engineer II"

    def test_title_length_bounds(self):
        """Too-short candidates are skipped in favour of the next selector."""
        page = soup('<div class="job-title">Job</div><h1>Platform Engineer</h1>')
        assert HeuristicExtractor().extract_title(page) == "Platform Engineer"

    def test_description_needs_length(self):
        long_text = "You will design and operate data pipelines. " * 5
        page = soup(f'<div class="description">short</div><div class="job-details">{long_text}</div>')
        assert HeuristicExtractor().extract_description(page).startswith("You will design")

    def test_location_parse(self):
        page = soup('<span class="job-location">Berlin, Berlin, Germany</span>')
        location = HeuristicExtractor().extract_location(page)
        assert location == {"city": "Berlin", "region": "Berlin", "country": "Germany", "remote_policy": ""}

    def test_location_remote(self):
        location = HeuristicExtractor().parse_location("Remote, EU")
        assert location["remote_policy"] == "remote"
        assert location["city"] == "Remote"
        assert location["region"] == "EU"


class TestSeniority:
    @pytest.mark.parametrize("title,expected", [
        ("Software Engineering Intern", "intern"),
        ("Junior Data Analyst", "entry"),
        ("Mid-Level QA Engineer", "mid"),
        ("Senior Backend Engineer", "senior"),
        ("Sr. Product Designer", "senior"),
        ("Tech Lead, Payments", "lead"),
        ("Staff Engineer", "principal"),
        ("Head of Marketing", "director"),
        ("CTO", "c-level"),
        ("Software Engineer", ""),
        ("International Sales Manager", ""),
    ])
    def test_levels(self, title, expected):
        assert HeuristicExtractor().extract_seniority(title) == expected

    def test_priority_order(self):
        """Titles matching several levels resolve to the first level checked."""
        assert HeuristicExtractor().extract_seniority("Senior Intern") == "intern"


class TestWorkModel:
    def test_hybrid(self):
        assert HeuristicExtractor().extract_work_model("Remote two days a week, office the rest") == "hybrid"

    def test_remote(self):
        assert HeuristicExtractor().extract_work_model("This role is fully remote.") == "remote"
        assert HeuristicExtractor().extract_work_model("Work from home anywhere") == "remote"

    def test_on_site(self):
        assert HeuristicExtractor().extract_work_model("This is an on-site position") == "on-site"

    def test_none(self):
        assert HeuristicExtractor().extract_work_model("Great team") == ""


class TestSkills:
    def test_lexicons_and_phrases(self):
        text = (
            "We use Python and Docker on AWS. Strong communication and leadership. "
            "Experience with Terraform, Ansible & Helm. Knowledge of gRPC."
        )
        skills = HeuristicExtractor().extract_skills(text)
        assert skills["tech"] == ["python", "docker", "aws"]
        assert skills["soft"] == ["leadership", "communication"]
        assert skills["hard"][:3] == ["python", "docker", "aws"]
        assert "Terraform" in skills["hard"]
        assert "Ansible" in skills["hard"]
        assert "Helm" in skills["hard"]
        assert "gRPC" in skills["hard"]

    def test_long_phrase_ignored(self):
        text = "Experience with " + "many different things " * 10 + "."
        assert HeuristicExtractor().extract_skills(text)["hard"] == []


class TestSalary:
    def test_repeated_currency_symbol(self):
        salary = HeuristicExtractor().extract_salary("Pay: $90,000 - $120,000 per year plus equity")
        assert salary == {"min": 90000, "max": 120000, "currency": "$", "period": "year"}

    def test_currency_last(self):
        salary = HeuristicExtractor().extract_salary("Compensation 50,000 - 60,000 EUR annually")
        assert salary == {"min": 50000, "max": 60000, "currency": "EUR", "period": "year"}

    def test_k_suffix_and_hourly(self):
        salary = HeuristicExtractor().extract_salary("£45 - £60 per hour")
        assert salary["min"] == 45
        assert salary["period"] == "hour"

        salary = HeuristicExtractor().extract_salary("Range: $85k to $110k")
        assert salary["min"] == 85000
        assert salary["max"] == 110000
        assert salary["period"] == "year"

    def test_no_salary(self):
        assert HeuristicExtractor().extract_salary("Competitive pay") is None


class TestYears:
    def test_range(self):
        assert HeuristicExtractor().extract_years("3-5 years experience") == {"min_years": 3, "max_years": 5}

    def test_minimum(self):
        assert HeuristicExtractor().extract_years("5+ years of Go") == {"min_years": 5, "max_years": None}

    def test_nothing(self):
        assert HeuristicExtractor().extract_years("plenty") == {"min_years": None, "max_years": None}


class TestCompanyHeuristics:
    def test_company_name(self):
        page = soup('<div class="company-name">Acme Corp</div>')
        assert CompanyHeuristics().extract_company_name(page) == "Acme Corp"

    def test_website_by_link_text(self):
        page = soup("""
            <a href="mailto:jobs@acme.example">Email the company</a>
            <a href="https://twitter.com/acme">Company on Twitter</a>
            <a href="https://www.acme.com/">Visit website</a>
        """)
        assert CompanyHeuristics().find_company_website(page, "Acme", "https://jobs.example/1") == "https://www.acme.com/"

    def test_website_by_name_in_href(self):
        page = soup('<a href="https://blueharbor.io/home">Home</a>')
        assert CompanyHeuristics().find_company_website(page, "Blue Harbor", "https://jobs.example/1") == "https://blueharbor.io/home"

    def test_website_none(self):
        page = soup('<a href="/apply">Apply</a>')
        assert CompanyHeuristics().find_company_website(page, "Acme", "https://jobs.example/1") == ""

    def test_industry(self):
        assert CompanyHeuristics().extract_industry("A leading fintech platform") == "Fintech"
        assert CompanyHeuristics().extract_industry("Nothing relevant") == ""

    @pytest.mark.parametrize("text,expected", [
        ("We have 200-500 employees", (200, 500)),
        ("Over 1,000+ employees worldwide", (1000, None)),
        ("A small company with big ideas", (1, 50)),
        ("A large company", (501, None)),
        ("a team of 12 engineers", (12, None)),
        ("no size here", None),
    ])
    def test_size(self, text, expected):
        assert CompanyHeuristics().extract_size(text) == expected

    def test_founded_year(self):
        assert CompanyHeuristics().extract_founded_year("Founded in 2012 in Austin") == 2012
        assert CompanyHeuristics().extract_founded_year("Established: 1998") == 1998
        assert CompanyHeuristics().extract_founded_year("since 1755 and 1901") is None
        future = datetime.now().year + 5
        assert CompanyHeuristics().extract_founded_year(f"founded {future}") is None

    def test_headquarters(self):
        hq = CompanyHeuristics().extract_headquarters("We are headquartered in Austin, Texas, USA.")
        assert hq == {"city": "Austin", "region": "Texas", "country": "USA"}

        hq = CompanyHeuristics().extract_headquarters("The team is based in New York, United States")
        assert hq == {"city": "New York", "region": "", "country": "United States"}

    def test_values_and_benefits(self):
        text = "We believe in integrity, innovation and growth. Health insurance, PTO and dental included."
        assert CompanyHeuristics().extract_values(text) == ["innovation", "integrity", "growth"]
        assert CompanyHeuristics().extract_benefits(text) == ["health insurance", "dental", "pto"]
