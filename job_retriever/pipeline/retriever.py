"""
Retrieval orchestrator.

fetch -> extract job -> enrich company -> normalize -> validate.

retrieve() always resolves to a schema-valid JobData. Fetch, extraction and
enrichment failures are recorded in metadata.notes and whatever was gathered
is kept; a validation failure falls back to the minimal record.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from job_retriever.core.config import RetrieverConfig
from job_retriever.crawler.fetchers import PageFetcher, build_fetcher
from job_retriever.pipeline.enrichment import CompanyEnricher
from job_retriever.pipeline.extractor import JobExtractor
from job_retriever.pipeline.normalize import normalize
from job_retriever.pipeline.schema import JobData, minimal_job_data, utc_now_iso, validate_job_data

logger = logging.getLogger(__name__)


def hiring_organization(raw_schema_org: Any) -> Tuple[Optional[str], Optional[str]]:
    """(name, url) of the JobPosting's hiringOrganization, when present."""
    if not isinstance(raw_schema_org, dict):
        return None, None
    org = raw_schema_org.get("hiringOrganization")
    if isinstance(org, list):
        org = org[0] if org else None
    if isinstance(org, str):
        return org.strip() or None, None
    if not isinstance(org, dict):
        return None, None
    name = org.get("name") or org.get("legalName")
    url = org.get("url") or org.get("sameAs")
    if isinstance(url, list):
        url = url[0] if url else None
    return (str(name).strip() if name else None), (str(url).strip() if url else None)


class JobRetriever:
    """Runs one retrieval for config.job_url."""

    def __init__(self, config: RetrieverConfig, fetcher: Optional[PageFetcher] = None):
        self.config = config
        self._fetcher = fetcher

    async def retrieve(self) -> JobData:
        """
        Retrieve, enrich and normalize the configured job posting.

        Returns:
            JobData; never raises for fetch, extraction, enrichment or validation failures
        """
        url = self.config.job_url
        notes: List[str] = []
        job: Dict[str, Any] = {"source_url": url}
        company: Dict[str, Any] = {}
        fetcher: Optional[PageFetcher] = self._fetcher
        agent = self.config.agent

        try:
            if fetcher is None:
                fetcher = build_fetcher(self.config)
            agent = fetcher.agent or agent

            logger.info(f"[retriever] Fetching {url} via {agent}")
            html = await fetcher.fetch_html(url, max_retries=self.config.max_retries)

            job = JobExtractor(notes).extract(html, url)

            org_name, org_url = hiring_organization(job.get("raw_schema_org"))
            enricher = CompanyEnricher(fetcher, notes, max_retries=self.config.max_retries)
            company = await enricher.enrich(html, url, org_name=org_name, org_url=org_url)
        except Exception as e:
            logger.error(f"[retriever] Retrieval of {url} failed: {e}")
            notes.append(f"Error during extraction: {e}")
        finally:
            if fetcher is not None:
                try:
                    await fetcher.close()
                except Exception as e:
                    logger.warning(f"[retriever] Closing fetcher failed: {e}")

        partial = {
            "job": job,
            "company": company,
            "metadata": {"scraped_at": utc_now_iso(), "agent": agent, "notes": notes},
        }
        try:
            return validate_job_data(normalize(partial))
        except ValidationError as e:
            logger.error(f"[retriever] Validation failed for {url}: {e}")
            notes.append(f"Validation error: {e}")
            return minimal_job_data(url, notes, agent=agent)
