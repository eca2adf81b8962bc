"""
JobData schema.

Every field carries a default, so any partial dict validates into a complete
record. Fields use strict types: a value of the wrong type is rejected instead
of being coerced (a number where a string is expected, a string where a list
is expected, and so on).
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from job_retriever.core.config import AGENT_SELF_HOSTED

Number = Optional[Union[StrictInt, StrictFloat]]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Location(_Record):
    city: StrictStr = ""
    region: StrictStr = ""
    country: StrictStr = ""
    remote_policy: StrictStr = ""


class Salary(_Record):
    min: Number = None
    max: Number = None
    currency: StrictStr = ""
    period: StrictStr = ""


class Experience(_Record):
    min_years: Number = None
    max_years: Number = None


class CompanyLocation(_Record):
    city: StrictStr = ""
    region: StrictStr = ""
    country: StrictStr = ""


class EmployeeSize(_Record):
    min: Number = None
    max: Number = None


class WorkCulture(_Record):
    values: List[StrictStr] = Field(default_factory=list)
    benefits: List[StrictStr] = Field(default_factory=list)
    remote_policy: StrictStr = ""


class Funding(_Record):
    status: StrictStr = ""
    latest_round: StrictStr = ""
    investors: List[StrictStr] = Field(default_factory=list)


class Job(_Record):
    source_url: StrictStr = ""
    title: StrictStr = ""
    role_seniority: StrictStr = ""
    department_function: StrictStr = ""
    contract_type: StrictStr = ""
    work_model: StrictStr = ""
    location: Location = Field(default_factory=Location)
    salary: Salary = Field(default_factory=Salary)
    required_experience: Experience = Field(default_factory=Experience)
    required_education: StrictStr = ""
    languages: List[StrictStr] = Field(default_factory=list)
    hard_skills: List[StrictStr] = Field(default_factory=list)
    soft_skills: List[StrictStr] = Field(default_factory=list)
    tech_stack: List[StrictStr] = Field(default_factory=list)
    responsibilities: List[StrictStr] = Field(default_factory=list)
    nice_to_have: List[StrictStr] = Field(default_factory=list)
    visa_sponsorship: Optional[StrictBool] = None
    relocation: Optional[StrictBool] = None
    posting_date: StrictStr = ""
    application_deadline: StrictStr = ""
    description_text: StrictStr = ""
    raw_schema_org: Dict[str, Any] = Field(default_factory=dict)
    detected_duplicates: List[StrictStr] = Field(default_factory=list)


class Company(_Record):
    name: StrictStr = ""
    aka: List[StrictStr] = Field(default_factory=list)
    website: StrictStr = ""
    linkedin_url: StrictStr = ""
    wikipedia_url: StrictStr = ""
    industry: StrictStr = ""
    company_type: StrictStr = ""
    founded_year: Optional[StrictInt] = None
    size_employees: EmployeeSize = Field(default_factory=EmployeeSize)
    hq_location: CompanyLocation = Field(default_factory=CompanyLocation)
    locations: List[CompanyLocation] = Field(default_factory=list)
    work_culture: WorkCulture = Field(default_factory=WorkCulture)
    funding: Funding = Field(default_factory=Funding)
    public_ticker: StrictStr = ""
    about_summary: StrictStr = ""
    data_sources: List[StrictStr] = Field(default_factory=list)


class Metadata(_Record):
    scraped_at: StrictStr = Field(default_factory=utc_now_iso)
    agent: StrictStr = AGENT_SELF_HOSTED
    notes: List[StrictStr] = Field(default_factory=list)


class JobData(_Record):
    job: Job = Field(default_factory=Job)
    company: Company = Field(default_factory=Company)
    metadata: Metadata = Field(default_factory=Metadata)


def default_record() -> Dict[str, Any]:
    """A fully-defaulted JobData as plain dicts, ready to be overlaid."""
    return JobData().model_dump()


def validate_job_data(data: Dict[str, Any]) -> JobData:
    """
    Parse a (possibly partial) dict into a complete JobData.

    Raises:
        pydantic.ValidationError: a present field has the wrong type
    """
    return JobData.model_validate(data)


def minimal_job_data(source_url: str, notes: List[str], agent: str = AGENT_SELF_HOSTED) -> JobData:
    """The guaranteed-valid record returned when nothing better is available."""
    return JobData(
        job=Job(source_url=source_url),
        metadata=Metadata(agent=agent, notes=list(notes)),
    )
