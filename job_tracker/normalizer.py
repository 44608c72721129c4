"""Coerce loosely-typed mappings into valid job application records.

Input comes from the stored snapshot (current or older schemas) and from
imported spreadsheet rows. For every field the aliases below are tried in
order and the first non-blank value wins; anything missing or unrecognized
falls back to the field default. ``normalize`` never raises.
"""

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from .models import (
    Category,
    EmploymentType,
    JobApplicationRecord,
    Position,
    Source,
    Status,
    new_record_id,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Current schema first, then the previous storage keys, the legacy narrower
# schema, and finally spreadsheet column headers.
FIELD_ALIASES: dict[str, list[str]] = {
    "id": ["id"],
    "category": ["category", "type", "resource", "Type", "Resource"],
    "source": ["source", "Source"],
    "contact_name": ["contactName", "fullName", "name", "Full Name", "Name"],
    "organization_name": [
        "organizationName",
        "companyName",
        "company",
        "Company",
        "Company Name",
    ],
    "end_client": ["endClient", "EndClient", "End Client"],
    "location": ["location", "Location"],
    "position": ["position", "Position"],
    "employment_type": ["employmentType", "jobType", "Job Type"],
    "email": ["email", "Email"],
    "phone": ["phone", "Phone"],
    "applied_date": ["appliedDate", "date", "Date"],
    "invitation_link": ["invitationLink", "InvitationLink"],
    "interview_time": ["interviewTime", "Interview Time"],
    "notes": ["notes", "Notes"],
    "status": ["status", "remarks", "Remarks"],
}

# Historical spellings that the slug comparison cannot recover.
ENUM_ALIASES: dict[str, Enum] = {
    "initial-screeing": Status.INITIAL_SCREENING,
}

DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%m-%d-%Y", "%B %d, %Y", "%b %d, %Y")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def pick(raw: Mapping[str, Any], field: str) -> Optional[Any]:
    """Return the first non-blank value among the aliases of ``field``."""
    for key in FIELD_ALIASES[field]:
        value = raw.get(key)
        if not _is_blank(value):
            return value
    return None


def slugify(value: str) -> str:
    """Lowercase and collapse every run of non-alphanumerics into ``-``."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def coerce_enum(value: Any, enum_cls: Type[E], default: E) -> E:
    """Match ``value`` against ``enum_cls`` tolerantly, else return ``default``."""
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value

    text = str(value).strip()
    try:
        return enum_cls(text)
    except ValueError:
        pass

    slug = slugify(text)
    for member in enum_cls:
        if slugify(member.value) == slug:
            return member

    alias = ENUM_ALIASES.get(slug)
    if isinstance(alias, enum_cls):
        return alias

    logger.debug(f"Unrecognized {enum_cls.__name__} value {text!r}, using {default.value!r}")
    return default


def coerce_date(value: Any) -> date:
    """Parse a date from a cell or string, falling back to today."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if value is not None:
        text = str(value).strip()
        # ISO timestamps such as "2024-01-10T00:00:00.000Z"
        text = text.split("T")[0] if re.match(r"^\d{4}-\d{2}-\d{2}T", text) else text
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        logger.debug(f"Unparseable date {text!r}, using today")

    return date.today()


def coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet cells hand back phone numbers as floats
        return str(int(value))
    return str(value)


def normalize(raw: Mapping[str, Any], new_id: bool = False) -> JobApplicationRecord:
    """Build a fully populated record from ``raw``.

    Args:
        raw: Mapping with any mix of current, previous, legacy or
            spreadsheet keys. Extra keys are ignored.
        new_id: Ignore any incoming id and generate a fresh one.

    Returns:
        A record satisfying every model invariant.
    """
    if not isinstance(raw, Mapping):
        raw = {}

    record_id = None if new_id else pick(raw, "id")

    return JobApplicationRecord(
        id=coerce_text(record_id) if record_id is not None else new_record_id(),
        category=coerce_enum(pick(raw, "category"), Category, Category.COMPANY),
        source=coerce_enum(pick(raw, "source"), Source, Source.LINKEDIN),
        contact_name=coerce_text(pick(raw, "contact_name")),
        organization_name=coerce_text(pick(raw, "organization_name")),
        end_client=coerce_text(pick(raw, "end_client")),
        location=coerce_text(pick(raw, "location")),
        position=coerce_enum(pick(raw, "position"), Position, Position.AI_ENGINEER),
        employment_type=coerce_enum(
            pick(raw, "employment_type"), EmploymentType, EmploymentType.FULL_TIME_HYBRID
        ),
        email=coerce_text(pick(raw, "email")),
        phone=coerce_text(pick(raw, "phone")),
        applied_date=coerce_date(pick(raw, "applied_date")),
        invitation_link=coerce_text(pick(raw, "invitation_link")),
        interview_time=coerce_text(pick(raw, "interview_time")),
        notes=coerce_text(pick(raw, "notes")),
        status=coerce_enum(pick(raw, "status"), Status, Status.APPLIED),
    )
