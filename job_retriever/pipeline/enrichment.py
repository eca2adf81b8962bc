"""
Company enricher.

Builds a partial company profile from independent, best-effort sources:
1. Company name (hiring organization, else job-page selectors)
2. Company website (hiring organization URL, else link discovery)
3. Official website homepage and /about, /company, /about-us, /careers
4. Wikipedia article
5. LinkedIn company page

Each source produces a SourceResult. Results are folded into the profile in
that fixed order, so a failing source only ever adds a note. Every URL that
was fetched and accepted is appended to data_sources once, in discovery order.
"""

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Optional
from urllib.parse import quote, urljoin

from bs4 import BeautifulSoup

from job_retriever.core.dom import meta_content, page_text, parse_html, select_first_text, title_text
from job_retriever.core.lexicons import (
    COMPANY_SUBPAGES,
    LINKEDIN_BASE,
    LINKEDIN_DESCRIPTION_SELECTORS,
    LINKEDIN_WALL_MARKERS,
    MAX_BENEFITS,
    MAX_CULTURE_VALUES,
    WIKIPEDIA_ACCEPT_WORDS,
    WIKIPEDIA_BASE,
)
from job_retriever.crawler.fetchers import PageFetcher
from job_retriever.pipeline.heuristics import CompanyHeuristics
from job_retriever.pipeline.normalize import normalize_url

logger = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class SourceResult:
    """Outcome of one enrichment source."""

    source: str
    updates: Dict[str, Any] = field(default_factory=dict)
    accepted_urls: List[str] = field(default_factory=list)
    error: Optional[str] = None


def wikipedia_url_for(name: str) -> str:
    return WIKIPEDIA_BASE + quote(WHITESPACE_RE.sub("_", name.strip()))


def linkedin_url_for(name: str) -> str:
    return LINKEDIN_BASE + quote(WHITESPACE_RE.sub("-", name.strip().lower()))


def _merge_updates(target: Dict[str, Any], updates: Dict[str, Any]):
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge_updates(target[key], value)
        else:
            target[key] = copy.deepcopy(value)


def _union(existing: List[str], new: List[str], cap: int) -> List[str]:
    result = list(existing)
    for item in new:
        if item not in result:
            result.append(item)
    return result[:cap]


class CompanyEnricher:
    """Folds independent company sources into one partial company profile."""

    def __init__(self, fetcher: PageFetcher, notes: Optional[List[str]] = None, max_retries: int = 3):
        self.fetcher = fetcher
        self.notes = notes if notes is not None else []
        self.max_retries = max_retries
        self.heuristics = CompanyHeuristics()

    async def enrich(
        self,
        job_html: str,
        page_url: str,
        org_name: Optional[str] = None,
        org_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Enrich a company profile starting from the job page.

        Args:
            job_html: Rendered job page HTML
            page_url: Job page URL (base for relative links)
            org_name: hiringOrganization.name from structured data, if any
            org_url: hiringOrganization.url / sameAs from structured data, if any

        Returns:
            Partial company dict
        """
        company: Dict[str, Any] = {"data_sources": [], "work_culture": {"values": [], "benefits": []}}
        soup = parse_html(job_html)

        self._apply(company, await self._run_step("company name", self._identify_company(soup, org_name)))
        self._apply(
            company, await self._run_step("company website", self._discover_website(soup, company, page_url, org_url))
        )

        if company.get("website"):
            self._apply(company, await self._run_step("official website", self._enrich_from_website(company)))

        if company.get("name"):
            self._apply(company, await self._run_step("Wikipedia", self._enrich_from_wikipedia(company)))
            self._apply(company, await self._run_step("LinkedIn", self._enrich_from_linkedin(company)))

        logger.info(f"[enrich] {company.get('name') or '(unknown company)'}: {len(company['data_sources'])} sources")
        return company

    async def _run_step(self, source: str, step: Awaitable[SourceResult]) -> SourceResult:
        try:
            return await step
        except Exception as e:
            logger.warning(f"[enrich] {source} failed: {e}")
            return SourceResult(source=source, error=str(e))

    def _apply(self, company: Dict[str, Any], result: SourceResult):
        if result.error:
            self.notes.append(f"Company enrichment from {result.source} skipped: {result.error}")
        _merge_updates(company, result.updates)
        for url in result.accepted_urls:
            if url not in company["data_sources"]:
                company["data_sources"].append(url)

    async def _identify_company(self, soup: BeautifulSoup, org_name: Optional[str]) -> SourceResult:
        name = (org_name or "").strip() or self.heuristics.extract_company_name(soup)
        return SourceResult(source="company name", updates={"name": name} if name else {})

    async def _discover_website(
        self, soup: BeautifulSoup, company: Dict[str, Any], page_url: str, org_url: Optional[str]
    ) -> SourceResult:
        website = (org_url or "").strip()
        if not website:
            website = self.heuristics.find_company_website(soup, company.get("name", ""), page_url)
        if not website:
            return SourceResult(source="company website")
        return SourceResult(source="company website", updates={"website": normalize_url(website)})

    async def _enrich_from_website(self, company: Dict[str, Any]) -> SourceResult:
        website = company["website"]
        result = SourceResult(source="official website")
        working = copy.deepcopy(company)

        html = await self.fetcher.fetch_html(website, max_retries=self.max_retries)
        result.accepted_urls.append(website)
        self._read_homepage(working, parse_html(html))

        subpage_urls = [urljoin(website, path) for path in COMPANY_SUBPAGES]
        pages = await self.fetcher.fetch_many(subpage_urls, max_retries=self.max_retries)
        for url in subpage_urls:
            page = pages.get(url)
            if page is None or isinstance(page, Exception):
                logger.debug(f"[enrich] Subpage {url} unavailable: {page}")
                continue
            self._read_about_page(working, parse_html(page))
            result.accepted_urls.append(url)

        result.updates = {key: value for key, value in working.items() if key != "data_sources"}
        return result

    def _read_homepage(self, company: Dict[str, Any], soup: BeautifulSoup):
        text = page_text(soup)

        description = meta_content(soup, "description")
        if description and not company.get("about_summary"):
            company["about_summary"] = description

        if not company.get("industry"):
            industry = self.heuristics.extract_industry(text)
            if industry:
                company["industry"] = industry

        size = company.get("size_employees") or {}
        if size.get("min") is None and size.get("max") is None:
            found = self.heuristics.extract_size(text)
            if found:
                company["size_employees"] = {"min": found[0], "max": found[1]}

        if not company.get("founded_year"):
            year = self.heuristics.extract_founded_year(text)
            if year:
                company["founded_year"] = year

        hq = company.get("hq_location") or {}
        if not hq.get("city"):
            found_hq = self.heuristics.extract_headquarters(text)
            if found_hq:
                company["hq_location"] = found_hq

    def _read_about_page(self, company: Dict[str, Any], soup: BeautifulSoup):
        text = page_text(soup)

        if not company.get("about_summary"):
            paragraph = self.heuristics.extract_about_paragraph(soup)
            if paragraph:
                company["about_summary"] = paragraph

        culture = company.setdefault("work_culture", {})
        culture["values"] = _union(culture.get("values") or [], self.heuristics.extract_values(text), MAX_CULTURE_VALUES)
        culture["benefits"] = _union(culture.get("benefits") or [], self.heuristics.extract_benefits(text), MAX_BENEFITS)

    async def _enrich_from_wikipedia(self, company: Dict[str, Any]) -> SourceResult:
        url = wikipedia_url_for(company["name"])
        result = SourceResult(source="Wikipedia")
        html = await self.fetcher.fetch_html(url, max_retries=1)
        soup = parse_html(html)
        text = page_text(soup)

        if not any(word in text.lower() for word in WIKIPEDIA_ACCEPT_WORDS):
            result.error = f"{url} does not look like a company article"
            return result

        result.accepted_urls.append(url)
        updates: Dict[str, Any] = {"wikipedia_url": url}

        if not company.get("founded_year"):
            year = self.heuristics.extract_founded_year(text)
            if year:
                updates["founded_year"] = year

        if not company.get("industry"):
            industry = self.heuristics.extract_wikipedia_industry(text) or self.heuristics.extract_industry(text)
            if industry:
                updates["industry"] = industry

        summary = ""
        for paragraph in soup.select("#mw-content-text p"):
            paragraph_text = " ".join(paragraph.get_text(" ").split())
            if len(paragraph_text) > 100:
                summary = paragraph_text
                break
        if summary and len(summary) > len(company.get("about_summary") or ""):
            updates["about_summary"] = summary

        result.updates = updates
        return result

    async def _enrich_from_linkedin(self, company: Dict[str, Any]) -> SourceResult:
        url = linkedin_url_for(company["name"])
        result = SourceResult(source="LinkedIn")
        html = await self.fetcher.fetch_html(url, max_retries=1)
        soup = parse_html(html)

        title = title_text(soup)
        if any(marker in title for marker in LINKEDIN_WALL_MARKERS):
            result.error = f"{url} is behind a sign-in wall"
            return result

        result.accepted_urls.append(url)
        result.updates = {"linkedin_url": url}
        if not company.get("about_summary"):
            description = select_first_text(soup, LINKEDIN_DESCRIPTION_SELECTORS, lambda t: len(t) > 50)
            if description:
                result.updates["about_summary"] = description
        return result
