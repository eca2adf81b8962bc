"""
JSON-LD extractor.

Finds a Schema.org JobPosting in a page's structured data and maps it onto
job fields.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from job_retriever.core.dom import html_to_text
from job_retriever.pipeline.heuristics import HeuristicExtractor, parse_amount
from job_retriever.pipeline.normalize import normalize_date

logger = logging.getLogger(__name__)

LIST_SPLIT_RE = re.compile(r"[,;]+")


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("name") or value.get("@value") or "").strip()
    return str(value).strip()


def _as_number(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return parse_amount(value.strip())
    return None


def _as_list(value: Any, splitter: Optional[re.Pattern] = None) -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [_as_text(v) for v in value if _as_text(v)]
    text = _as_text(value)
    if splitter is not None:
        return [part.strip() for part in splitter.split(text) if part.strip()]
    return [text] if text else []


class JSONLDExtractor:
    """Extracts job data from JSON-LD structured data."""

    def __init__(self):
        self.heuristics = HeuristicExtractor()

    def find_job_posting(self, soup: BeautifulSoup) -> Optional[Dict[str, Any]]:
        """
        First JobPosting object across all ld+json scripts.

        Searches top-level objects, list elements and @graph containers at
        any depth. Scripts that fail to parse are skipped.
        """
        for script in soup.find_all("script", type="application/ld+json"):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                data = json.loads(raw)
            except (json.JSONDecodeError, TypeError) as e:
                logger.debug(f"[extract] Skipping malformed JSON-LD: {e}")
                continue
            posting = self._search(data)
            if posting is not None:
                return posting
        return None

    def _search(self, data: Any) -> Optional[Dict[str, Any]]:
        if isinstance(data, list):
            for item in data:
                found = self._search(item)
                if found is not None:
                    return found
            return None
        if not isinstance(data, dict):
            return None
        if self._is_job_posting(data):
            return data
        graph = data.get("@graph")
        if isinstance(graph, (list, dict)):
            return self._search(graph)
        return None

    def _is_job_posting(self, item: Dict) -> bool:
        item_type = item.get("@type", "")
        if isinstance(item_type, str):
            return item_type == "JobPosting"
        if isinstance(item_type, list):
            return "JobPosting" in item_type
        return False

    def map_job_posting(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Map a JobPosting object onto job fields.

        Only fields present in the object are returned.
        """
        job: Dict[str, Any] = {}

        if data.get("title"):
            job["title"] = _as_text(data["title"])
        if data.get("description"):
            job["description_text"] = html_to_text(str(data["description"]))

        if data.get("datePosted"):
            job["posting_date"] = normalize_date(str(data["datePosted"]))
        if data.get("validThrough"):
            job["application_deadline"] = normalize_date(str(data["validThrough"]))

        location = self._map_location(data.get("jobLocation"))
        if location:
            job["location"] = location
            if location.get("remote_policy") == "remote":
                job["work_model"] = "remote"

        salary = self._map_salary(data.get("baseSalary"))
        if salary:
            job["salary"] = salary

        employment_type = _first(data.get("employmentType"))
        if employment_type:
            job["contract_type"] = _as_text(employment_type)

        experience = self._map_experience(data.get("experienceRequirements"))
        if experience:
            job["required_experience"] = experience

        education = data.get("educationRequirements")
        if isinstance(education, dict):
            education = education.get("credentialCategory") or education.get("name")
        if _first(education):
            job["required_education"] = _as_text(_first(education))

        skills = _as_list(data.get("skills"), LIST_SPLIT_RE)
        if skills:
            job["hard_skills"] = skills

        responsibilities = data.get("responsibilities")
        if isinstance(responsibilities, str):
            items = [html_to_text(line) for line in responsibilities.split("\n")]
            responsibilities = [item for item in items if item]
        else:
            responsibilities = _as_list(responsibilities)
        if responsibilities:
            job["responsibilities"] = responsibilities

        category = _first(data.get("occupationalCategory"))
        if category:
            job["department_function"] = _as_text(category)

        location_type = " ".join(_as_list(data.get("jobLocationType"))).lower()
        if "telecommute" in location_type or "remote" in location_type:
            job["work_model"] = "remote"

        return job

    def _map_location(self, job_location: Any) -> Optional[Dict[str, str]]:
        if not job_location:
            return None
        location = {"city": "", "region": "", "country": "", "remote_policy": ""}
        first = _first(job_location)
        address = first.get("address") if isinstance(first, dict) else None
        if isinstance(address, dict):
            location["city"] = _as_text(address.get("addressLocality"))
            location["region"] = _as_text(address.get("addressRegion"))
            location["country"] = _as_text(address.get("addressCountry"))
        elif isinstance(address, str):
            location.update(
                {k: v for k, v in self.heuristics.parse_location(address).items() if k != "remote_policy"}
            )

        serialized = json.dumps(job_location, default=str).lower()
        if "remote" in serialized or "home" in serialized:
            location["remote_policy"] = "remote"
        return location

    def _map_salary(self, base_salary: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(base_salary, dict) or base_salary.get("value") is None:
            return None
        salary: Dict[str, Any] = {"min": None, "max": None, "currency": "", "period": ""}
        value = base_salary["value"]
        if isinstance(value, dict):
            salary["min"] = _as_number(value.get("minValue"))
            salary["max"] = _as_number(value.get("maxValue"))
            single = _as_number(value.get("value"))
            if single is not None and salary["min"] is None and salary["max"] is None:
                salary["min"] = salary["max"] = single
            currency = base_salary.get("currency") or value.get("currency")
            unit = value.get("unitText") or base_salary.get("unitText")
        else:
            salary["min"] = salary["max"] = _as_number(value)
            currency = base_salary.get("currency")
            unit = base_salary.get("unitText")
        if currency:
            salary["currency"] = _as_text(currency)
        if unit:
            salary["period"] = _as_text(unit)
        return salary

    def _map_experience(self, requirement: Any) -> Optional[Dict[str, Any]]:
        requirement = _first(requirement)
        if not requirement:
            return None
        if isinstance(requirement, dict):
            months = _as_number(requirement.get("monthsOfExperience"))
            if months is not None:
                years = months / 12
                years = int(years) if float(years).is_integer() else round(years, 1)
                return {"min_years": years, "max_years": None}
            requirement = requirement.get("description") or ""
        years = self.heuristics.extract_years(str(requirement))
        if years["min_years"] is None and years["max_years"] is None:
            return None
        return years
