"""Snapshot sync between the record collection and the key-value store."""

import json
import logging
import math
from collections.abc import Mapping
from typing import Sequence

from pydantic import BaseModel

from .models import JobApplicationRecord, new_record_id
from .normalizer import normalize
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "job_tracker_entries"

# Soft capacity threshold for the warning, 4.5 MiB
STORAGE_WARNING_BYTES = int(4.5 * 1024 * 1024)


class StorageUsage(BaseModel):
    """Serialized size of the collection."""

    bytes: int
    kb: int
    warning: bool


def serialize(records: Sequence[JobApplicationRecord]) -> str:
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False)


def load_all(store: KeyValueStore, key: str = STORAGE_KEY) -> list[JobApplicationRecord]:
    """Read and normalize the stored snapshot.

    Any failure is logged and yields an empty collection.
    """
    try:
        stored = store.get(key)
    except Exception as e:
        logger.error(f"Failed to read stored entries: {e}")
        return []

    if stored is None:
        logger.info("No stored entries found")
        return []

    try:
        parsed = json.loads(stored)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to parse stored entries: {e}")
        return []

    if not isinstance(parsed, list):
        logger.error(f"Stored entries are not a list (got {type(parsed).__name__})")
        return []

    records = []
    seen_ids = set()
    for index, item in enumerate(parsed):
        if not isinstance(item, Mapping):
            logger.warning(f"Skipping stored entry {index}: not an object")
            continue

        record = normalize(item)
        if record.id in seen_ids:
            logger.warning(f"Duplicate id {record.id} in stored entries, assigning a new one")
            record = record.model_copy(update={"id": new_record_id()})
        seen_ids.add(record.id)
        records.append(record)

    logger.info(f"Loaded {len(records)} entries from storage")
    return records


def save_all(
    store: KeyValueStore,
    records: Sequence[JobApplicationRecord],
    key: str = STORAGE_KEY,
) -> bool:
    """Write the full collection as one snapshot.

    Returns False if the write failed. The caller's in-memory state is left
    as is and nothing is retried.
    """
    try:
        store.set(key, serialize(records))
    except Exception as e:
        logger.error(f"Failed to save entries to storage: {e}")
        return False

    logger.debug(f"Saved {len(records)} entries to storage")
    return True


def estimate_storage_footprint(records: Sequence[JobApplicationRecord]) -> int:
    """Size in bytes of the serialized snapshot."""
    return len(serialize(records).encode("utf-8"))


def storage_usage(
    records: Sequence[JobApplicationRecord],
    warning_bytes: int = STORAGE_WARNING_BYTES,
) -> StorageUsage:
    size = estimate_storage_footprint(records)
    return StorageUsage(bytes=size, kb=math.ceil(size / 1024), warning=size > warning_bytes)
