"""
Data normalizer.

Pure canonicalization of a partial JobData dict: country and currency codes,
contract/work-model/seniority vocabularies, skill capitalization, array dedupe
and caps, whitespace cleanup, URL schemes and ISO dates.

Every function here is total and idempotent. `None` in a text slot becomes
"" and `None` in a list slot becomes []; any other value of an unexpected
type is returned unchanged so the schema validator can reject it.
"""

import copy
import re
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

from job_retriever.core.lexicons import (
    COUNTRY_CODES,
    CURRENCY_CODES,
    MAX_SKILLS_ARRAY,
    MAX_STRING_ARRAY,
    MAX_TEXT_LENGTH,
    SENIORITY_CANONICAL,
    TECH_CASE_MAP,
)
from job_retriever.pipeline.schema import default_record

logger = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"\s+")
CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")

# Fields whose values are opaque and never merged or rewritten
OPAQUE_FIELDS = {"raw_schema_org"}

# A free-text date is complete when both defaults parse to the same value
_COMPLETION_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def clean_string(value: Any) -> Any:
    """Collapse whitespace, drop control characters, trim, cap at 1000 chars."""
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    text = WHITESPACE_RE.sub(" ", value)
    text = CONTROL_CHARS_RE.sub("", text)
    text = WHITESPACE_RE.sub(" ", text).strip()
    return text[:MAX_TEXT_LENGTH].strip()


def normalize_country(value: Any) -> Any:
    """Country name or alias to ISO-3166 alpha-2; unknown values upper-cased."""
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    cleaned = clean_string(value)
    if not cleaned:
        return ""
    return COUNTRY_CODES.get(cleaned.lower(), cleaned.upper())


def normalize_currency(value: Any) -> Any:
    """Currency symbol, word or code to ISO-4217; unknown values upper-cased."""
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    cleaned = clean_string(value)
    if not cleaned:
        return ""
    return CURRENCY_CODES.get(cleaned.lower(), cleaned.upper())


def normalize_period(value: Any) -> Any:
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    cleaned = clean_string(value)
    p = cleaned.lower()
    if not p:
        return ""
    if "year" in p or "annual" in p:
        return "year"
    if "month" in p:
        return "month"
    if "week" in p:
        return "week"
    if "day" in p or "daily" in p:
        return "day"
    if "hour" in p:
        return "hour"
    return cleaned


def normalize_contract_type(value: Any) -> Any:
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    cleaned = clean_string(value)
    ct = cleaned.lower()
    if not ct:
        return ""
    if "full" in ct and "time" in ct:
        return "full-time"
    if "part" in ct and "time" in ct:
        return "part-time"
    if "contract" in ct:
        return "contract"
    if "freelance" in ct:
        return "freelance"
    if "intern" in ct:
        return "internship"
    if "temporary" in ct or "temp" in ct:
        return "temporary"
    if "permanent" in ct:
        return "permanent"
    return cleaned


def normalize_work_model(value: Any) -> Any:
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    cleaned = clean_string(value)
    wm = cleaned.lower()
    if not wm:
        return ""
    if "remote" in wm:
        return "remote"
    if "hybrid" in wm:
        return "hybrid"
    if "on-site" in wm or "onsite" in wm or "office" in wm:
        return "on-site"
    return cleaned


def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(keyword) + r"(?![a-z0-9])")


SENIORITY_PATTERNS = [
    (label, [_keyword_pattern(k) for k in keywords]) for label, keywords in SENIORITY_CANONICAL
]


def normalize_seniority(value: Any) -> Any:
    """
    Map a seniority hint onto the canonical ladder.

    Keywords match on word boundaries so "International" is not an intern.
    Unmatched values are passed through.
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    cleaned = clean_string(value)
    s = cleaned.lower()
    if not s:
        return ""
    for label, patterns in SENIORITY_PATTERNS:
        if any(p.search(s) for p in patterns):
            return label
    return cleaned


def normalize_string_array(values: Any) -> Any:
    """Clean, drop empties, case-sensitive dedupe (first kept), cap at 50."""
    if values is None:
        return []
    if not isinstance(values, list):
        return values
    result: List[Any] = []
    for item in values:
        cleaned = clean_string(item)
        if isinstance(cleaned, str) and not cleaned:
            continue
        if cleaned in result:
            continue
        result.append(cleaned)
    return result[:MAX_STRING_ARRAY]


def canonical_skill(skill: str) -> str:
    cleaned = clean_string(skill)
    return TECH_CASE_MAP.get(cleaned.lower(), cleaned)


def normalize_skills_array(values: Any) -> Any:
    """Canonical capitalization, case-insensitive dedupe (first kept), cap at 30."""
    if values is None:
        return []
    if not isinstance(values, list):
        return values
    result: List[Any] = []
    seen = set()
    for item in values:
        if not isinstance(item, str):
            result.append(item)
            continue
        skill = canonical_skill(item)
        if not skill or skill.lower() in seen:
            continue
        seen.add(skill.lower())
        result.append(skill)
    return result[:MAX_SKILLS_ARRAY]


def normalize_url(value: Any) -> Any:
    """Protocol-relative URLs get https:, schemeless ones get https://."""
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    url = value.strip()
    if not url:
        return ""
    if url.startswith("//"):
        return f"https:{url}"
    if not url.startswith(("http://", "https://")):
        return f"https://{url}"
    return url


def normalize_date(value: Any) -> Any:
    """
    Parse a date into ISO-8601 UTC; unparsable values are left as they are.

    Naive datetimes are taken to be UTC. Dates missing a year, month or day
    ("Friday", "March 3") are left as they are rather than completed from
    today's date.
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return ""
    try:
        parsed = date_parser.isoparse(text)
    except (ValueError, OverflowError):
        try:
            parsed = date_parser.parse(text, default=_COMPLETION_DEFAULTS[0])
            if parsed != date_parser.parse(text, default=_COMPLETION_DEFAULTS[1]):
                logger.debug(f"[normalize] Leaving incomplete date {text!r}")
                return value
        except (ValueError, OverflowError, TypeError) as e:
            logger.debug(f"[normalize] Leaving unparsable date {text!r}: {e}")
            return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc).isoformat()
    except OverflowError as e:
        logger.debug(f"[normalize] Leaving out-of-range date {text!r}: {e}")
        return value


def _order_range(container: Any, low_key: str, high_key: str):
    if not isinstance(container, dict):
        return
    low, high = container.get(low_key), container.get(high_key)
    if _is_number(low) and _is_number(high) and low > high:
        container[low_key], container[high_key] = high, low


def _capitalize_first(value: Any) -> Any:
    cleaned = clean_string(value)
    if isinstance(cleaned, str) and cleaned:
        return cleaned[0].upper() + cleaned[1:]
    return cleaned


def _normalize_place(place: Any) -> Any:
    if not isinstance(place, dict):
        return place
    place["city"] = clean_string(place.get("city"))
    place["region"] = clean_string(place.get("region"))
    place["country"] = normalize_country(place.get("country"))
    return place


def _merge(base: Dict[str, Any], overlay: Any) -> Dict[str, Any]:
    """Overlay a partial dict onto defaults, merging nested dicts."""
    if not isinstance(overlay, dict):
        return base
    for key, value in overlay.items():
        if value is None and base.get(key) is not None:
            # None never replaces a non-null default
            continue
        if isinstance(value, dict) and isinstance(base.get(key), dict) and key not in OPAQUE_FIELDS:
            base[key] = _merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def _normalize_job(job: Dict[str, Any]):
    if isinstance(job.get("location"), dict):
        loc = _normalize_place(job["location"])
        loc["remote_policy"] = normalize_work_model(loc.get("remote_policy"))

    salary = job.get("salary")
    if isinstance(salary, dict):
        salary["currency"] = normalize_currency(salary.get("currency"))
        salary["period"] = normalize_period(salary.get("period"))
        _order_range(salary, "min", "max")

    _order_range(job.get("required_experience"), "min_years", "max_years")

    job["contract_type"] = normalize_contract_type(job.get("contract_type"))
    job["work_model"] = normalize_work_model(job.get("work_model"))
    job["role_seniority"] = normalize_seniority(job.get("role_seniority"))

    for field in ("languages", "responsibilities", "nice_to_have", "detected_duplicates"):
        job[field] = normalize_string_array(job.get(field))
    for field in ("hard_skills", "soft_skills", "tech_stack"):
        job[field] = normalize_skills_array(job.get(field))

    for field in ("source_url", "title", "department_function", "required_education", "description_text"):
        job[field] = clean_string(job.get(field))

    job["posting_date"] = normalize_date(job.get("posting_date"))
    job["application_deadline"] = normalize_date(job.get("application_deadline"))


def _normalize_company(company: Dict[str, Any]):
    company["name"] = clean_string(company.get("name"))
    company["aka"] = normalize_string_array(company.get("aka"))

    for field in ("website", "linkedin_url", "wikipedia_url"):
        company[field] = normalize_url(company.get(field))

    _normalize_place(company.get("hq_location"))
    locations = company.get("locations")
    if locations is None:
        company["locations"] = []
    elif isinstance(locations, list):
        company["locations"] = [_normalize_place(loc) for loc in locations]

    culture = company.get("work_culture")
    if isinstance(culture, dict):
        culture["values"] = normalize_string_array(culture.get("values"))
        culture["benefits"] = normalize_string_array(culture.get("benefits"))
        culture["remote_policy"] = normalize_work_model(culture.get("remote_policy"))

    funding = company.get("funding")
    if isinstance(funding, dict):
        funding["status"] = clean_string(funding.get("status"))
        funding["latest_round"] = clean_string(funding.get("latest_round"))
        funding["investors"] = normalize_string_array(funding.get("investors"))

    _order_range(company.get("size_employees"), "min", "max")

    company["industry"] = _capitalize_first(company.get("industry"))
    company["company_type"] = clean_string(company.get("company_type"))
    ticker = clean_string(company.get("public_ticker"))
    company["public_ticker"] = ticker.upper() if isinstance(ticker, str) else ticker
    company["about_summary"] = clean_string(company.get("about_summary"))
    company["data_sources"] = normalize_string_array(company.get("data_sources"))


def _normalize_metadata(metadata: Dict[str, Any]):
    notes = metadata.get("notes")
    if notes is None:
        metadata["notes"] = []
    elif isinstance(notes, list):
        # Notes are an append-only log; only drop empties
        metadata["notes"] = [n for n in notes if not (isinstance(n, str) and not n.strip())]


def normalize(partial: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Build a complete, canonical JobData dict from a partial one.

    Args:
        partial: Any subset of {"job": {...}, "company": {...}, "metadata": {...}}

    Returns:
        Dict with every JobData field present; never raises
    """
    record = _merge(default_record(), partial or {})

    if isinstance(record.get("job"), dict):
        _normalize_job(record["job"])
    if isinstance(record.get("company"), dict):
        _normalize_company(record["company"])
    if isinstance(record.get("metadata"), dict):
        _normalize_metadata(record["metadata"])

    return record
