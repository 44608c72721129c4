"""Data models for job application tracking."""

import uuid
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Who the contact represents."""

    COMPANY = "Company"
    VENDOR = "Vendor"


class Source(str, Enum):
    """Channel where the opening was found."""

    LINKEDIN = "Linkedin"
    INDEED = "Indeed"
    GLASSDOOR = "Glassdoor"
    COMPANY_WEBPAGE = "Company webpage"
    VENDOR_WEBPAGE = "Vendor webpage"


class Position(str, Enum):
    """Role titles being applied for. Extend here to add new roles."""

    AI_ENGINEER = "AI Engineer"
    AI_DEVELOPER = "AI Developer"
    DATA_ANALYST = "Data Analyst"
    DATA_SCIENTIST = "Data Scientist"
    GEN_AI_ENGINEER = "Gen AI Engineer"
    GEN_AI_DEVELOPER = "Gen AI Developer"
    ML_ENGINEER = "ML Engineer"
    ML_DEVELOPER = "ML Developer"
    MLOPS_ENGINEER = "MLOps Engineer"
    LLMOPS_ENGINEER = "LLMOps Engineer"
    PYTHON_DEVELOPER = "Python Developer"
    DATA_ENGINEER = "Data Engineer"
    DEVOPS_ENGINEER = "DevOps Engineer"
    AGENTIC_AI_ROLE = "Agentic AI role"
    BACK_END_ENGINEER = "Back End Engineer"
    SOFTWARE_ENGINEER = "Software Engineer"
    AI_SOLUTIONS_DEVELOPER = "AI Solutions Developer"
    APPLIED_AI_ML_ENGINEER = "Applied AI/ML Engineer"
    AI_PRODUCT_ENGINEER = "AI Product Engineer"
    AI_DEPLOYMENT_ENGINEER = "AI Deployment Engineer"


class EmploymentType(str, Enum):
    FULL_TIME_HYBRID = "full-time-hybrid"
    CONTRACT_HYBRID = "contract-hybrid"
    PART_TIME = "part-time"
    FULL_TIME_REMOTE = "full-time-remote"
    CONTRACT_REMOTE = "contract-remote"


class Status(str, Enum):
    """Pipeline stage of an application."""

    APPLIED = "Applied"
    SUBMITTED_RESUME = "Submitted-Resume"
    INTERVIEW_SCHEDULED = "Interview-Scheduled"
    INITIAL_SCREENING = "Initial-Screening"
    SECOND_ROUND = "Second-Round"
    FINAL_ROUND = "Final-Round"
    FOR_FUTURE_POSITIONS = "For-Future-Positions"
    FOLLOWUP = "Followup"
    REJECTED = "Rejected"


# Suggested values for the location field; never enforced.
KNOWN_LOCATIONS = [
    "Montreal",
    "Toronto",
    "Winnipeg",
    "Waterloo",
    "Ottawa",
    "Missisauga",
    "Vancouver",
]


def new_record_id() -> str:
    """Generate a fresh opaque record id."""
    return str(uuid.uuid4())


class JobApplicationRecord(BaseModel):
    """A tracked job application.

    Attributes use snake_case; the stored and exported names are the
    camelCase aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=new_record_id)
    category: Category = Category.COMPANY
    source: Source = Source.LINKEDIN
    contact_name: str = Field(default="", alias="contactName")
    organization_name: str = Field(default="", alias="organizationName")
    end_client: str = Field(default="", alias="endClient")
    location: str = ""
    position: Position = Position.AI_ENGINEER
    employment_type: EmploymentType = Field(
        default=EmploymentType.FULL_TIME_HYBRID, alias="employmentType"
    )
    email: str = ""
    phone: str = ""
    applied_date: date = Field(default_factory=date.today, alias="appliedDate")
    invitation_link: str = Field(default="", alias="invitationLink")
    interview_time: str = Field(default="", alias="interviewTime")
    notes: str = ""
    status: Status = Status.APPLIED

    def to_dict(self) -> dict:
        """Convert to the stored JSON shape (camelCase keys, plain strings)."""
        return self.model_dump(mode="json", by_alias=True)

    def to_row(self) -> list:
        """Convert to spreadsheet row format, in ``EXPORT_COLUMNS`` order."""
        data = self.to_dict()
        return [data[column] for column in EXPORT_COLUMNS]


class ApplicationInput(BaseModel):
    """Form-level input for creating or editing a record.

    Carries no id. A missing ``applied_date`` means "today".
    """

    category: Category = Category.VENDOR
    source: Source = Source.INDEED
    contact_name: str = ""
    organization_name: str = ""
    end_client: str = ""
    location: str = ""
    position: Position = Position.AI_ENGINEER
    employment_type: EmploymentType = EmploymentType.FULL_TIME_HYBRID
    email: str = ""
    phone: str = ""
    applied_date: Optional[date] = None
    invitation_link: str = ""
    interview_time: str = ""
    notes: str = ""
    status: Status = Status.APPLIED


# Attribute name -> stored name, in record field order.
FIELD_NAMES = {
    name: (info.alias or name)
    for name, info in JobApplicationRecord.model_fields.items()
}

EXPORT_COLUMNS = list(FIELD_NAMES.values())

# Free-text attributes, trimmed on create/update.
TEXT_FIELDS = [
    "contact_name",
    "organization_name",
    "end_client",
    "location",
    "email",
    "phone",
    "invitation_link",
    "interview_time",
    "notes",
]
