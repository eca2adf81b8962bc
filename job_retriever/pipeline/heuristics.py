"""
Heuristic extractors.

DOM selector fallbacks and free-text pattern matching, used when a page has no
structured data or leaves fields empty. Two groups: job-page heuristics
(title, description, location, seniority, work model, skills, salary,
experience) and company heuristics (name, website, industry, size, founding
year, headquarters, culture values, benefits).
"""

import re
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from job_retriever.core.dom import element_text, select_first_text
from job_retriever.core.lexicons import (
    BENEFIT_KEYWORDS,
    COMPANY_NAME_SELECTORS,
    CULTURE_VALUE_KEYWORDS,
    DESCRIPTION_SELECTORS,
    INDUSTRY_KEYWORDS,
    LOCATION_SELECTORS,
    MAX_BENEFITS,
    MAX_CULTURE_VALUES,
    MAX_HARD_SKILLS,
    MAX_SOFT_SKILLS,
    MAX_TECH_SKILLS,
    SENIORITY_KEYWORDS,
    SKIPPED_LINK_PATTERNS,
    SOFT_SKILL_KEYWORDS,
    TECH_KEYWORDS,
    TITLE_SELECTORS,
    WEBSITE_DOMAIN_HINTS,
    WEBSITE_LINK_WORDS,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]

# Salary patterns
_NUM = r"\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?"
_CUR = r"\$|€|£|¥|\b(?:USD|EUR|GBP|CAD|AUD|CHF|JPY)"
_SEP = r"\s*(?:-|–|—|to)\s*"
_PERIOD = (
    r"per\s+(?:year|annum|month|week|day|hour)|/\s*(?:year|yr|month|mo|week|day|hour|hr)"
    r"|annually|monthly|weekly|daily|hourly|an?\s+(?:year|month|week|day|hour)"
)
_K = r"k(?![a-z])"

SALARY_CURRENCY_FIRST = re.compile(
    rf"(?P<currency>{_CUR})\s*(?P<min>{_NUM})\s*(?P<min_k>{_K})?"
    rf"{_SEP}(?:(?:{_CUR})\s*)?(?P<max>{_NUM})\s*(?P<max_k>{_K})?"
    rf"\s*(?P<period>{_PERIOD})?",
    re.IGNORECASE,
)
SALARY_CURRENCY_LAST = re.compile(
    rf"(?P<min>{_NUM})\s*(?P<min_k>{_K})?{_SEP}(?P<max>{_NUM})\s*(?P<max_k>{_K})?"
    rf"\s*(?P<currency>{_CUR})\s*(?P<period>{_PERIOD})?",
    re.IGNORECASE,
)

YEARS_PATTERNS = [
    re.compile(r"(\d+)\s*-\s*(\d+)\s*years?", re.IGNORECASE),
    re.compile(r"(\d+)\+?\s*years?", re.IGNORECASE),
    re.compile(r"minimum\s+(\d+)\s*years?", re.IGNORECASE),
    re.compile(r"at\s+least\s+(\d+)\s*years?", re.IGNORECASE),
]

SKILL_PHRASE_RE = re.compile(
    r"(?:experience with|knowledge of|proficient in|skilled in)\s+([^.]+)", re.IGNORECASE
)
SKILL_SPLIT_RE = re.compile(r"[,;&]+")

SIZE_RANGE_RE = re.compile(r"(\d[\d,]*)\s*-\s*(\d[\d,]*)\s*employees", re.IGNORECASE)
SIZE_MIN_RE = re.compile(r"(\d[\d,]*)\+?\s*employees", re.IGNORECASE)
SIZE_WORD_RE = re.compile(r"\b(small|medium|large)\s*company", re.IGNORECASE)
TEAM_OF_RE = re.compile(r"team\s+of\s+(\d[\d,]*)", re.IGNORECASE)
SIZE_WORDS = {"small": (1, 50), "medium": (51, 500), "large": (501, None)}

FOUNDED_PATTERNS = [
    re.compile(r"founded[:\s]+(?:in\s+)?(\d{4})", re.IGNORECASE),
    re.compile(r"established[:\s]+(?:in\s+)?(\d{4})", re.IGNORECASE),
    re.compile(r"since[:\s]+(\d{4})", re.IGNORECASE),
    re.compile(r"(\d{4})[^\d]*founded", re.IGNORECASE),
]

_PLACE = r"[A-Z][a-zA-Z'\-]+(?:\s[A-Z][a-zA-Z'\-]+)*"
HQ_RE = re.compile(
    r"(?i:headquartered\s+in|headquarters\s+(?:is\s+)?in|headquarters[:]|based\s+in|located\s+in)"
    rf"\s*(?P<place>{_PLACE}(?:,\s*{_PLACE}){{0,2}})"
)

WIKIPEDIA_INDUSTRY_RE = re.compile(r"industry[:\s]+([^.\n]+)", re.IGNORECASE)


def _contains_word(text: str, keyword: str) -> bool:
    return re.search(r"(?<![a-z0-9])" + re.escape(keyword) + r"(?![a-z0-9])", text) is not None


def parse_amount(raw: str, thousands: Optional[str] = None) -> Optional[Number]:
    """'90,000' -> 90000, '85.5' + 'k' -> 85500."""
    try:
        value = float(raw.replace(",", ""))
    except (TypeError, ValueError):
        return None
    if thousands:
        value *= 1000
    return int(value) if value.is_integer() else value


def parse_int(raw: str) -> Optional[int]:
    try:
        return int(raw.replace(",", ""))
    except (TypeError, ValueError):
        return None


def salary_period(raw: Optional[str]) -> str:
    if not raw:
        return "year"
    p = raw.lower()
    if "year" in p or "annum" in p or "annual" in p or "yr" in p:
        return "year"
    if "month" in p or "/mo" in p.replace(" ", ""):
        return "month"
    if "week" in p:
        return "week"
    if "day" in p or "daily" in p:
        return "day"
    if "hour" in p or "hr" in p:
        return "hour"
    return "year"


class HeuristicExtractor:
    """Job-page fallbacks: DOM selectors first, then free-text patterns."""

    def extract_title(self, soup: BeautifulSoup) -> str:
        return select_first_text(soup, TITLE_SELECTORS, lambda t: 5 < len(t) < 200)

    def extract_description(self, soup: BeautifulSoup) -> str:
        return select_first_text(soup, DESCRIPTION_SELECTORS, lambda t: len(t) > 100)

    def extract_location(self, soup: BeautifulSoup) -> Optional[Dict[str, str]]:
        text = select_first_text(soup, LOCATION_SELECTORS)
        if not text:
            return None
        return self.parse_location(text)

    def parse_location(self, text: str) -> Dict[str, str]:
        """
        Split "City, Region, Country" text.

        Any mention of "remote" sets remote_policy.
        """
        location = {"city": "", "region": "", "country": "", "remote_policy": ""}
        if "remote" in text.lower():
            location["remote_policy"] = "remote"
        parts = [p.strip() for p in text.split(",")]
        for key, part in zip(("city", "region", "country"), parts):
            location[key] = part
        return location

    def extract_seniority(self, title: str) -> str:
        """First level (intern ... c-level) whose keyword appears in the title."""
        lower = (title or "").lower()
        for level, keywords in SENIORITY_KEYWORDS:
            if any(_contains_word(lower, keyword) for keyword in keywords):
                return level
        return ""

    def extract_work_model(self, text: str) -> str:
        lower = (text or "").lower()
        if "remote" in lower and "office" in lower:
            return "hybrid"
        if "remote" in lower or "work from home" in lower or "wfh" in lower:
            return "remote"
        if "on-site" in lower or "office" in lower:
            return "on-site"
        return ""

    def extract_skills(self, text: str) -> Dict[str, List[str]]:
        """
        Lexicon and phrase based skill discovery.

        Returns:
            {"hard": [...], "soft": [...], "tech": [...]}, deduplicated and capped
        """
        lower = (text or "").lower()
        tech = [skill for skill in TECH_KEYWORDS if skill in lower]
        soft = [skill for skill in SOFT_SKILL_KEYWORDS if skill in lower]

        hard = list(tech)
        for match in SKILL_PHRASE_RE.finditer(text or ""):
            phrase = match.group(1).strip()
            if len(phrase) >= 100:
                continue
            for part in SKILL_SPLIT_RE.split(phrase):
                part = part.strip()
                if len(part) > 2:
                    hard.append(part)

        return {
            "hard": _dedupe(hard)[:MAX_HARD_SKILLS],
            "soft": _dedupe(soft)[:MAX_SOFT_SKILLS],
            "tech": _dedupe(tech)[:MAX_TECH_SKILLS],
        }

    def extract_salary(self, text: str) -> Optional[Dict[str, Union[Number, str, None]]]:
        """Salary range from free text, currency-first then currency-last."""
        for pattern in (SALARY_CURRENCY_FIRST, SALARY_CURRENCY_LAST):
            match = pattern.search(text or "")
            if not match:
                continue
            low = parse_amount(match.group("min"), match.group("min_k"))
            high = parse_amount(match.group("max"), match.group("max_k") or match.group("min_k"))
            if low is None and high is None:
                continue
            return {
                "min": low,
                "max": high,
                "currency": match.group("currency"),
                "period": salary_period(match.group("period")),
            }
        return None

    def extract_years(self, text: str) -> Dict[str, Optional[int]]:
        for pattern in YEARS_PATTERNS:
            match = pattern.search(text or "")
            if not match:
                continue
            low = int(match.group(1))
            high = int(match.group(2)) if pattern.groups > 1 else None
            return {"min_years": low, "max_years": high}
        return {"min_years": None, "max_years": None}


class CompanyHeuristics:
    """Company-profile heuristics over job pages, company sites and reference pages."""

    def extract_company_name(self, soup: BeautifulSoup) -> str:
        return select_first_text(soup, COMPANY_NAME_SELECTORS, lambda t: 1 < len(t) < 100)

    def find_company_website(self, soup: BeautifulSoup, company_name: str, base_url: str) -> str:
        """
        First outbound link that looks like the company's own site.

        A link qualifies when its text mentions website/company/visit and its
        href carries a .com/.org/.io domain, or when its href contains the
        company name with whitespace removed.
        """
        squashed = re.sub(r"\s+", "", company_name or "").lower()
        for link in soup.find_all("a", href=True):
            href = link["href"].strip()
            href_lower = href.lower()
            if not href or href.startswith("#"):
                continue
            if any(pattern in href_lower for pattern in SKIPPED_LINK_PATTERNS):
                continue
            text = element_text(link).lower()
            if any(word in text for word in WEBSITE_LINK_WORDS) and any(
                hint in href_lower for hint in WEBSITE_DOMAIN_HINTS
            ):
                return urljoin(base_url, href)
            if squashed and squashed in href_lower:
                return urljoin(base_url, href)
        return ""

    def extract_industry(self, text: str) -> str:
        lower = (text or "").lower()
        for industry in INDUSTRY_KEYWORDS:
            if industry in lower:
                return industry[0].upper() + industry[1:]
        return ""

    def extract_wikipedia_industry(self, text: str) -> str:
        match = WIKIPEDIA_INDUSTRY_RE.search(text or "")
        if match:
            return match.group(1).strip()[:100]
        return ""

    def extract_size(self, text: str) -> Optional[Tuple[Optional[int], Optional[int]]]:
        """Employee range as (min, max); None when nothing matched."""
        text = text or ""
        match = SIZE_RANGE_RE.search(text)
        if match:
            return parse_int(match.group(1)), parse_int(match.group(2))
        match = SIZE_MIN_RE.search(text)
        if match:
            return parse_int(match.group(1)), None
        match = SIZE_WORD_RE.search(text)
        if match:
            return SIZE_WORDS[match.group(1).lower()]
        match = TEAM_OF_RE.search(text)
        if match:
            return parse_int(match.group(1)), None
        return None

    def extract_founded_year(self, text: str) -> Optional[int]:
        current_year = datetime.now().year
        for pattern in FOUNDED_PATTERNS:
            for match in pattern.finditer(text or ""):
                year = int(match.group(1))
                if 1800 <= year <= current_year:
                    return year
        return None

    def extract_headquarters(self, text: str) -> Optional[Dict[str, str]]:
        """
        "Headquartered in Austin, Texas, USA" -> city/region/country.

        Two parts are read as city and country.
        """
        match = HQ_RE.search(text or "")
        if not match:
            return None
        parts = [p.strip() for p in match.group("place").split(",") if p.strip()]
        hq = {"city": "", "region": "", "country": ""}
        if len(parts) == 1:
            hq["city"] = parts[0]
        elif len(parts) == 2:
            hq["city"], hq["country"] = parts
        else:
            hq["city"], hq["region"], hq["country"] = parts[:3]
        return hq

    def extract_values(self, text: str) -> List[str]:
        lower = (text or "").lower()
        return [v for v in CULTURE_VALUE_KEYWORDS if v in lower][:MAX_CULTURE_VALUES]

    def extract_benefits(self, text: str) -> List[str]:
        lower = (text or "").lower()
        return [b for b in BENEFIT_KEYWORDS if b in lower][:MAX_BENEFITS]

    def extract_about_paragraph(self, soup: BeautifulSoup, min_len: int = 100, max_len: int = 500) -> str:
        for paragraph in soup.find_all("p"):
            text = element_text(paragraph)
            if min_len < len(text) < max_len:
                return text
        return ""


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
