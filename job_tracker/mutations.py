"""Create, update, delete and bulk import over the record collection.

Every operation returns a new list; the input collection is never modified.
"""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from .models import TEXT_FIELDS, ApplicationInput, JobApplicationRecord, new_record_id
from .normalizer import normalize

logger = logging.getLogger(__name__)


class RecordValidationError(Exception):
    """Raised when form input is missing a required field."""


def clean_input(data: ApplicationInput) -> dict[str, Any]:
    """Validate form input and return trimmed record fields (without id)."""
    values = data.model_dump()
    for name in TEXT_FIELDS:
        values[name] = values[name].strip()

    if not values["contact_name"]:
        raise RecordValidationError("Full name is required.")
    if not values["organization_name"]:
        raise RecordValidationError("Company is required.")

    if values["applied_date"] is None:
        values["applied_date"] = date.today()
    return values


def find(records: Sequence[JobApplicationRecord], record_id: str) -> Optional[JobApplicationRecord]:
    for record in records:
        if record.id == record_id:
            return record
    return None


def to_input(record: JobApplicationRecord) -> ApplicationInput:
    """Form input pre-filled from an existing record."""
    return ApplicationInput(**record.model_dump(exclude={"id"}))


def create(
    records: Sequence[JobApplicationRecord], data: ApplicationInput
) -> tuple[JobApplicationRecord, list[JobApplicationRecord]]:
    """Validate ``data`` and prepend a new record with a fresh id."""
    values = clean_input(data)
    record = JobApplicationRecord(id=new_record_id(), **values)
    logger.info(f"Created entry {record.id}: {record.contact_name} - {record.organization_name}")
    return record, [record, *records]


def update(
    records: Sequence[JobApplicationRecord], record_id: str, data: ApplicationInput
) -> list[JobApplicationRecord]:
    """Replace the fields of ``record_id`` in place; unknown ids are a no-op."""
    values = clean_input(data)

    if find(records, record_id) is None:
        logger.warning(f"Cannot update unknown entry {record_id}")
        return list(records)

    logger.info(f"Updated entry {record_id}")
    return [
        record.model_copy(update=values) if record.id == record_id else record
        for record in records
    ]


def remove(records: Sequence[JobApplicationRecord], record_id: str) -> list[JobApplicationRecord]:
    """Drop ``record_id``; unknown ids are a no-op."""
    result = [record for record in records if record.id != record_id]
    if len(result) == len(records):
        logger.warning(f"Cannot delete unknown entry {record_id}")
    else:
        logger.info(f"Deleted entry {record_id}")
    return result


def bulk_import(
    records: Sequence[JobApplicationRecord], rows: Iterable[Mapping[str, Any]]
) -> tuple[int, list[JobApplicationRecord]]:
    """Normalize ``rows`` into new records placed ahead of ``records``.

    Imported rows keep their source order. Missing fields never reject a row.
    """
    imported = [normalize(row, new_id=True) for row in rows]
    logger.info(f"Imported {len(imported)} entries")
    return len(imported), [*imported, *records]
