"""
Fixed lookup tables used by extraction, enrichment and normalization.

Everything here is data: selector candidates in priority order, keyword
lexicons and alias tables. Keeping them in one place lets the heuristics stay
readable and lets tests assert against the same tables.
"""

# Browser defaults
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_VIEWPORT = {"width": 1920, "height": 1080}
BLOCKED_RESOURCE_TYPES = ("image", "media", "font", "stylesheet")

COOKIE_BANNER_SELECTORS = [
    '[id*="cookie"] button',
    '[class*="cookie"] button',
    '[class*="consent"] button',
    '[data-testid*="accept"]',
    'button[aria-label*="Accept"]',
    'button[aria-label*="Agree"]',
    '.gdpr-accept',
    '.accept-cookies',
    '#onetrust-accept-btn-handler',
    '.ot-floating-button__close',
]
COOKIE_ACCEPT_WORDS = ("accept", "agree", "ok")

# Job page selectors, most specific first
TITLE_SELECTORS = [
    'h1[data-testid*="job-title"]',
    'h1[class*="job-title"]',
    'h1[class*="position"]',
    '.job-title',
    '[data-test="job-title"]',
    'h1',
    '[class*="title"] h1',
    '[class*="header"] h1',
]

DESCRIPTION_SELECTORS = [
    '[data-testid*="job-description"]',
    '[class*="job-description"]',
    '[class*="description"]',
    '.job-details',
    '[data-test="job-description"]',
    '.content',
    '.body',
]

LOCATION_SELECTORS = [
    '[data-testid*="location"]',
    '[class*="location"]',
    '.job-location',
    '[data-test="location"]',
]

COMPANY_NAME_SELECTORS = [
    '[data-testid*="company"]',
    '[class*="company"]',
    '.employer',
    '[data-test="company"]',
    'a[href*="/company/"]',
    'a[href*="/companies/"]',
]

# Ordered: the first level whose keywords match the title wins
SENIORITY_KEYWORDS = [
    ("intern", ["intern", "internship", "stage"]),
    ("entry", ["entry", "graduate", "junior", "jr"]),
    ("mid", ["mid", "intermediate", "mid-level"]),
    ("senior", ["senior", "sr", "experienced"]),
    ("lead", ["lead", "team lead", "tech lead"]),
    ("principal", ["principal", "staff", "architect"]),
    ("director", ["director", "head of", "vp", "vice president"]),
    ("c-level", ["ceo", "cto", "cfo", "coo", "chief"]),
]

# Canonical seniority labels used in the normalized record
SENIORITY_CANONICAL = [
    ("internship", ["intern", "internship"]),
    ("junior", ["entry", "graduate", "junior", "jr"]),
    ("mid-level", ["mid", "intermediate", "mid-level"]),
    ("senior", ["senior", "sr"]),
    ("lead", ["lead", "team lead"]),
    ("principal", ["principal", "staff"]),
    ("director", ["director", "head", "vp", "vice president"]),
    ("executive", ["c-level", "ceo", "cto", "cfo", "chief"]),
]

TECH_KEYWORDS = [
    "javascript", "typescript", "python", "java", "react", "angular", "vue",
    "nodejs", "express", "django", "flask", "spring", "docker", "kubernetes",
    "aws", "azure", "gcp", "mysql", "postgresql", "mongodb", "redis", "git",
    "jenkins", "gitlab", "github", "jira", "confluence",
]

SOFT_SKILL_KEYWORDS = [
    "leadership", "communication", "teamwork", "problem solving", "analytical",
    "creative", "adaptable", "organized", "detail-oriented",
]

MAX_TECH_SKILLS = 15
MAX_HARD_SKILLS = 20
MAX_SOFT_SKILLS = 10

INDUSTRY_KEYWORDS = [
    "technology", "software", "fintech", "healthcare", "finance", "consulting",
    "retail", "e-commerce", "education", "manufacturing", "automotive",
    "aerospace", "telecommunications", "media", "entertainment", "energy",
    "utilities", "real estate", "logistics", "transportation", "hospitality",
    "travel", "insurance", "banking",
]

CULTURE_VALUE_KEYWORDS = [
    "innovation", "integrity", "excellence", "collaboration", "respect",
    "transparency", "quality", "customer focus", "teamwork", "accountability",
    "diversity", "sustainability", "growth", "trust", "passion",
]

BENEFIT_KEYWORDS = [
    "health insurance", "dental", "vision", "401k", "retirement", "remote work",
    "flexible hours", "pto", "vacation", "sick leave", "parental leave",
    "stock options", "equity", "bonus", "tuition reimbursement",
    "gym membership", "wellness", "commuter benefits", "lunch", "snacks",
]

MAX_CULTURE_VALUES = 8
MAX_BENEFITS = 10

COMPANY_SUBPAGES = ["/about", "/company", "/about-us", "/careers"]

WEBSITE_LINK_WORDS = ("website", "company", "visit")
WEBSITE_DOMAIN_HINTS = (".com", ".org", ".io")
SKIPPED_LINK_PATTERNS = (
    "mailto:",
    "tel:",
    "javascript:",
    "linkedin.com/in/",
    "twitter.com",
    "x.com/",
    "facebook.com",
)

WIKIPEDIA_BASE = "https://en.wikipedia.org/wiki/"
WIKIPEDIA_ACCEPT_WORDS = ("company", "corporation", "founded")
LINKEDIN_BASE = "https://www.linkedin.com/company/"
LINKEDIN_WALL_MARKERS = ("Sign In", "Join LinkedIn")
LINKEDIN_DESCRIPTION_SELECTORS = [
    '[data-test-id*="description"]',
    '.org-about-us-organization-description__text',
]

COUNTRY_CODES = {
    "usa": "US",
    "united states": "US",
    "america": "US",
    "uk": "GB",
    "united kingdom": "GB",
    "england": "GB",
    "britain": "GB",
    "canada": "CA",
    "germany": "DE",
    "deutschland": "DE",
    "france": "FR",
    "spain": "ES",
    "italy": "IT",
    "netherlands": "NL",
    "holland": "NL",
    "australia": "AU",
    "japan": "JP",
    "china": "CN",
    "india": "IN",
    "brazil": "BR",
    "mexico": "MX",
    "russia": "RU",
    "poland": "PL",
    "sweden": "SE",
    "norway": "NO",
    "denmark": "DK",
    "finland": "FI",
    "switzerland": "CH",
    "austria": "AT",
    "belgium": "BE",
    "ireland": "IE",
    "portugal": "PT",
    "czech republic": "CZ",
    "hungary": "HU",
    "romania": "RO",
    "greece": "GR",
    "turkey": "TR",
    "israel": "IL",
    "south africa": "ZA",
    "singapore": "SG",
    "hong kong": "HK",
    "south korea": "KR",
    "taiwan": "TW",
    "thailand": "TH",
    "malaysia": "MY",
    "indonesia": "ID",
    "philippines": "PH",
    "vietnam": "VN",
    "argentina": "AR",
    "chile": "CL",
    "colombia": "CO",
    "peru": "PE",
    "ukraine": "UA",
    "estonia": "EE",
    "latvia": "LV",
    "lithuania": "LT",
    "croatia": "HR",
    "slovenia": "SI",
    "slovakia": "SK",
    "bulgaria": "BG",
    "serbia": "RS",
    "bosnia": "BA",
    "montenegro": "ME",
    "north macedonia": "MK",
    "albania": "AL",
    "moldova": "MD",
    "belarus": "BY",
    "georgia": "GE",
    "armenia": "AM",
    "azerbaijan": "AZ",
    "kazakhstan": "KZ",
    "uzbekistan": "UZ",
    "kyrgyzstan": "KG",
    "tajikistan": "TJ",
    "turkmenistan": "TM",
    "afghanistan": "AF",
    "pakistan": "PK",
    "bangladesh": "BD",
    "sri lanka": "LK",
    "myanmar": "MM",
    "cambodia": "KH",
    "laos": "LA",
    "mongolia": "MN",
    "nepal": "NP",
    "bhutan": "BT",
    "maldives": "MV",
}

CURRENCY_CODES = {
    "$": "USD",
    "usd": "USD",
    "dollar": "USD",
    "dollars": "USD",
    "€": "EUR",
    "eur": "EUR",
    "euro": "EUR",
    "euros": "EUR",
    "£": "GBP",
    "gbp": "GBP",
    "pound": "GBP",
    "pounds": "GBP",
    "cad": "CAD",
    "aud": "AUD",
    "jpy": "JPY",
    "¥": "JPY",
    "yen": "JPY",
    "chf": "CHF",
    "sek": "SEK",
    "nok": "NOK",
    "dkk": "DKK",
    "pln": "PLN",
    "czk": "CZK",
    "huf": "HUF",
    "ron": "RON",
    "bgn": "BGN",
    "hrk": "HRK",
    "rub": "RUB",
    "inr": "INR",
    "cny": "CNY",
    "sgd": "SGD",
    "hkd": "HKD",
    "krw": "KRW",
    "twd": "TWD",
    "thb": "THB",
    "myr": "MYR",
    "idr": "IDR",
    "php": "PHP",
    "vnd": "VND",
    "brl": "BRL",
    "ars": "ARS",
    "clp": "CLP",
    "cop": "COP",
    "pen": "PEN",
    "mxn": "MXN",
    "uah": "UAH",
    "ils": "ILS",
    "zar": "ZAR",
    "try": "TRY",
}

TECH_CASE_MAP = {
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "nodejs": "Node.js",
    "reactjs": "React.js",
    "react": "React",
    "angular": "Angular",
    "vue": "Vue.js",
    "vuejs": "Vue.js",
    "html": "HTML",
    "css": "CSS",
    "sql": "SQL",
    "nosql": "NoSQL",
    "mysql": "MySQL",
    "postgresql": "PostgreSQL",
    "mongodb": "MongoDB",
    "redis": "Redis",
    "elasticsearch": "Elasticsearch",
    "docker": "Docker",
    "kubernetes": "Kubernetes",
    "aws": "AWS",
    "azure": "Microsoft Azure",
    "gcp": "Google Cloud Platform",
    "git": "Git",
    "github": "GitHub",
    "gitlab": "GitLab",
    "jira": "JIRA",
    "jenkins": "Jenkins",
    "python": "Python",
    "java": "Java",
    "php": "PHP",
    "ruby": "Ruby",
    "go": "Go",
    "rust": "Rust",
    "swift": "Swift",
    "kotlin": "Kotlin",
    "scala": "Scala",
    "c++": "C++",
    "c#": "C#",
}

MAX_STRING_ARRAY = 50
MAX_SKILLS_ARRAY = 30
MAX_TEXT_LENGTH = 1000
