"""State container holding the record collection."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, Optional

from . import mutations
from .models import ApplicationInput, JobApplicationRecord
from .persistence import (
    STORAGE_KEY,
    STORAGE_WARNING_BYTES,
    StorageUsage,
    load_all,
    save_all,
    storage_usage,
)
from .query import ViewState, view
from .spreadsheet import DEFAULT_SHEET_NAME, export_filename, read_file_rows, write_rows
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class JobTracker:
    """Owns the collection and keeps the store in sync with it.

    The stored snapshot is read once, on construction. Each successful
    mutation installs a whole new list and then writes the full snapshot.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = STORAGE_KEY,
        warning_bytes: int = STORAGE_WARNING_BYTES,
        sheet_name: str = DEFAULT_SHEET_NAME,
    ):
        self.store = store
        self.storage_key = storage_key
        self.warning_bytes = warning_bytes
        self.sheet_name = sheet_name
        self._records: list[JobApplicationRecord] = load_all(store, storage_key)
        self.last_save_ok = True

    @property
    def records(self) -> tuple[JobApplicationRecord, ...]:
        return tuple(self._records)

    def _install(self, records: list[JobApplicationRecord]) -> None:
        self._records = records
        self.last_save_ok = save_all(self.store, records, self.storage_key)

    def get(self, record_id: str) -> Optional[JobApplicationRecord]:
        return mutations.find(self._records, record_id)

    def visible(self, state: Optional[ViewState] = None) -> list[JobApplicationRecord]:
        state = state or ViewState()
        return view(self._records, state.search_term, state.filters, state.sort)

    def create(self, data: ApplicationInput) -> JobApplicationRecord:
        record, records = mutations.create(self._records, data)
        self._install(records)
        return record

    def update(self, record_id: str, data: ApplicationInput) -> Optional[JobApplicationRecord]:
        """Edit ``record_id``; returns the new record, or None for unknown ids."""
        records = mutations.update(self._records, record_id, data)
        record = mutations.find(records, record_id)
        if record is not None:
            self._install(records)
        return record

    def remove(self, record_id: str) -> bool:
        """Delete ``record_id``; confirmation is the caller's job."""
        records = mutations.remove(self._records, record_id)
        removed = len(records) != len(self._records)
        if removed:
            self._install(records)
        return removed

    def import_rows(self, rows: Iterable[Mapping[str, Any]]) -> int:
        count, records = mutations.bulk_import(self._records, rows)
        if count:
            self._install(records)
        return count

    def import_file(self, path: Path) -> int:
        """Import every row of a workbook or CSV file; a file that fails to parse adds nothing."""
        path = Path(path)
        logger.info(f"Importing entries from {path}")
        rows = read_file_rows(path)
        return self.import_rows(rows)

    def export_file(self, directory: Path = Path(".")) -> Path:
        """Write the full collection to a dated workbook in ``directory``."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / export_filename()
        path.write_bytes(write_rows(self._records, self.sheet_name))
        logger.info(f"Exported {len(self._records)} entries to {path}")
        return path

    def usage(self) -> StorageUsage:
        return storage_usage(self._records, self.warning_bytes)
