"""
Job extraction orchestrator.

Builds a partial job record from a rendered job page with deterministic
fallbacks:
1. JSON-LD JobPosting (authoritative when present)
2. DOM selectors for title, description and location
3. Seniority from the title
4. Work model from the description
5. Skills from page text
6. Salary from page text

No stage is fatal. A stage that raises is logged, noted, and skipped; the
fields gathered so far are returned.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from bs4 import BeautifulSoup

from job_retriever.core.dom import page_text, parse_html
from job_retriever.pipeline.heuristics import HeuristicExtractor
from job_retriever.pipeline.jsonld import JSONLDExtractor

logger = logging.getLogger(__name__)


class JobExtractor:
    """Partial job record from page HTML; JSON-LD first, heuristics second."""

    def __init__(self, notes: Optional[List[str]] = None):
        self.notes = notes if notes is not None else []
        self.jsonld = JSONLDExtractor()
        self.heuristics = HeuristicExtractor()

    def _run_stage(self, name: str, stage: Callable[[], None]):
        try:
            stage()
        except Exception as e:
            logger.warning(f"[extract] {name} failed: {e}")
            self.notes.append(f"Job extraction step '{name}' failed: {e}")

    def extract(self, html: str, url: str) -> Dict[str, Any]:
        """
        Extract job fields from a page.

        Args:
            html: Rendered page HTML
            url: The page URL (becomes source_url)

        Returns:
            Partial job dict; always carries source_url and raw_schema_org
        """
        job: Dict[str, Any] = {"source_url": url, "raw_schema_org": {}}
        soup = parse_html(html)
        state: Dict[str, Any] = {}

        def text() -> str:
            if "text" not in state:
                state["text"] = page_text(soup)
            return state["text"]

        self._run_stage("json-ld", lambda: self._apply_jsonld(job, soup))
        self._run_stage("dom", lambda: self._apply_dom(job, soup))
        self._run_stage("seniority", lambda: self._apply_seniority(job))
        self._run_stage("work model", lambda: self._apply_work_model(job))
        self._run_stage("skills", lambda: self._apply_skills(job, text()))
        self._run_stage("salary", lambda: self._apply_salary(job, text()))

        logger.debug(f"[extract] {url}: {len(job)} fields")
        return job

    def _apply_jsonld(self, job: Dict[str, Any], soup: BeautifulSoup):
        posting = self.jsonld.find_job_posting(soup)
        if posting is None:
            return
        job.update(self.jsonld.map_job_posting(posting))
        job["raw_schema_org"] = posting

    def _apply_dom(self, job: Dict[str, Any], soup: BeautifulSoup):
        if not job.get("title"):
            title = self.heuristics.extract_title(soup)
            if title:
                job["title"] = title
        if not job.get("description_text"):
            description = self.heuristics.extract_description(soup)
            if description:
                job["description_text"] = description
        location = job.get("location") or {}
        if not location.get("city") and not location.get("country"):
            found = self.heuristics.extract_location(soup)
            if found:
                job["location"] = found

    def _apply_seniority(self, job: Dict[str, Any]):
        if job.get("title") and not job.get("role_seniority"):
            level = self.heuristics.extract_seniority(job["title"])
            if level:
                job["role_seniority"] = level

    def _apply_work_model(self, job: Dict[str, Any]):
        if not job.get("work_model") and job.get("description_text"):
            model = self.heuristics.extract_work_model(job["description_text"])
            if model:
                job["work_model"] = model

    def _apply_skills(self, job: Dict[str, Any], text: str):
        if job.get("hard_skills") and job.get("soft_skills") and job.get("tech_stack"):
            return
        skills = self.heuristics.extract_skills(text)
        for field, key in (("hard_skills", "hard"), ("soft_skills", "soft"), ("tech_stack", "tech")):
            if not job.get(field) and skills[key]:
                job[field] = skills[key]

    def _apply_salary(self, job: Dict[str, Any], text: str):
        salary = job.get("salary") or {}
        if salary.get("min") is not None or salary.get("max") is not None:
            return
        found = self.heuristics.extract_salary(text)
        if found:
            job["salary"] = found
