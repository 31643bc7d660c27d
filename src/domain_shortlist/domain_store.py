"""
Domain Store module for the shared domain shortlist.

This module provides the persisted list of DomainSuggestion records:
- A `DomainStore` protocol that request handlers depend on
- A JSON file implementation storing one array, newest record first

Every mutation runs its full read-modify-write under a lock shared by all
stores that point at the same file, and writes through a temporary file
that atomically replaces the original. Unreadable or corrupt storage is
reinitialized to an empty list instead of failing the caller.
"""

import json
import os
import tempfile
import threading
from abc import abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol, runtime_checkable

from .audit_logger import AuditLogger
from .enums import Availability
from .exceptions import PersistenceError
from .models import DomainSuggestion


COMPONENT = "DomainStore"

# Fields a re-verification may change
VERIFICATION_FIELDS = frozenset({"availability", "lastChecked"})
# Fields a single-record update may change
UPDATABLE_FIELDS = VERIFICATION_FIELDS | {"isFavorite"}

_FILE_LOCKS: dict[Path, threading.Lock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _lock_for(file_path: Path) -> threading.Lock:
    """Return the process-wide lock for a storage file."""
    key = file_path.resolve()
    with _FILE_LOCKS_GUARD:
        lock = _FILE_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _FILE_LOCKS[key] = lock
        return lock


def _coerce_availability(value: Mapping) -> dict[str, Availability]:
    return {
        str(tld): state if isinstance(state, Availability) else Availability.from_json(state)
        for tld, state in value.items()
    }


def apply_fields(record: DomainSuggestion, fields: Mapping, allowed: frozenset) -> DomainSuggestion:
    """
    Return a copy of `record` with the allowed camelCase fields applied.

    Unknown or disallowed keys are ignored, so `id`, `domain` and
    `timestamp` can never be rewritten through an update.
    """
    changes = {}
    if "availability" in allowed and isinstance(fields.get("availability"), Mapping):
        changes["availability"] = _coerce_availability(fields["availability"])
    if "lastChecked" in allowed and fields.get("lastChecked"):
        changes["last_checked"] = str(fields["lastChecked"])
    if "isFavorite" in allowed and "isFavorite" in fields:
        changes["is_favorite"] = bool(fields["isFavorite"])
    return replace(record, **changes) if changes else record


@runtime_checkable
class DomainStore(Protocol):
    """Protocol defining the persisted list operations."""

    @abstractmethod
    def get_all_domains(self) -> list[DomainSuggestion]:
        """Return every record, newest first."""
        ...

    @abstractmethod
    def add_domains(self, records: Iterable[DomainSuggestion]) -> list[DomainSuggestion]:
        """Prepend new records and return the full list."""
        ...

    @abstractmethod
    def toggle_favorite(self, suggestion_id: str) -> list[DomainSuggestion]:
        """Flip `isFavorite` of one record and return the full list."""
        ...

    @abstractmethod
    def remove_domain(self, suggestion_id: str) -> list[DomainSuggestion]:
        """Delete one record and return the full list."""
        ...

    @abstractmethod
    def update_multiple_domains(
        self, updates: Mapping[str, Mapping]
    ) -> list[DomainSuggestion]:
        """Apply verification updates keyed by base name."""
        ...

    @abstractmethod
    def clear_all_domains(self) -> bool:
        """Remove every record."""
        ...


class JSONFileDomainStore:
    """
    DomainStore backed by a single JSON array on disk.

    Read calls hand out freshly parsed records, so callers always work on
    copies and must route changes back through the mutating methods.
    """

    def __init__(self, file_path: Path, logger: Optional[AuditLogger] = None) -> None:
        """
        Initialize the store.

        Args:
            file_path: Path to the JSON file (created on first access)
            logger: Optional audit logger
        """
        self._file_path = Path(file_path)
        self._logger = logger
        self._lock = _lock_for(self._file_path)

    @property
    def file_path(self) -> Path:
        """Get the storage file path."""
        return self._file_path

    def _initialize(self) -> None:
        """Create the data directory and an empty list if missing."""
        if self._file_path.exists():
            return
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._write([])
        self._log_info(f"Created {self._file_path.name}", {"file_path": str(self._file_path)})

    def _read(self) -> list[DomainSuggestion]:
        """
        Load all records; caller must hold the lock.

        Storage that cannot be read or parsed is reset to an empty list.
        """
        try:
            self._initialize()
            with open(self._file_path, "r", encoding="utf-8") as f:
                raw_data = json.load(f)
            if not isinstance(raw_data, list):
                raise PersistenceError(
                    code="parse_error",
                    message="Storage root is not a JSON array",
                    details={"file_path": str(self._file_path)},
                )
        except (OSError, ValueError, PersistenceError) as e:
            self._log_error("Error reading domains, reinitializing storage", e)
            try:
                self._write([])
            except PersistenceError as write_error:
                self._log_error("Failed to reinitialize storage", write_error)
            return []

        records = []
        for index, item in enumerate(raw_data):
            try:
                records.append(DomainSuggestion.from_dict(item))
            except (KeyError, TypeError, AttributeError) as e:
                self._log_error(f"Skipping malformed record at index {index}", e)
        return records

    def _write(self, records: list) -> None:
        """
        Atomically replace the storage file; caller must hold the lock.

        Raises:
            PersistenceError: If the file cannot be written
        """
        payload = [r.to_dict() if isinstance(r, DomainSuggestion) else r for r in records]
        tmp_path = None
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._file_path.parent,
                prefix=f".{self._file_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._file_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(
                code="io_error",
                message=f"Failed to write domains file: {e}",
                details={"file_path": str(self._file_path)},
            ) from e

    def _save(self, records: list[DomainSuggestion]) -> bool:
        try:
            self._write(records)
        except PersistenceError as e:
            self._log_error("Error saving domains", e)
            return False
        self._log_debug(f"Saved {len(records)} domains to storage", {"count": len(records)})
        return True

    def get_all_domains(self) -> list[DomainSuggestion]:
        with self._lock:
            return self._read()

    def add_domains(self, records: Iterable[DomainSuggestion]) -> list[DomainSuggestion]:
        new_records = list(records)
        with self._lock:
            updated = new_records + self._read()
            self._save(updated)
        self._log_info(f"Added {len(new_records)} domains", {"count": len(new_records)})
        return updated

    def update_domain(self, suggestion_id: str, fields: Mapping) -> list[DomainSuggestion]:
        """Apply partial updates to the record with the given id."""
        with self._lock:
            updated = [
                apply_fields(r, fields, UPDATABLE_FIELDS) if r.id == suggestion_id else r
                for r in self._read()
            ]
            self._save(updated)
        return updated

    def toggle_favorite(self, suggestion_id: str) -> list[DomainSuggestion]:
        with self._lock:
            updated = [
                replace(r, is_favorite=not r.is_favorite) if r.id == suggestion_id else r
                for r in self._read()
            ]
            self._save(updated)
        return updated

    def remove_domain(self, suggestion_id: str) -> list[DomainSuggestion]:
        with self._lock:
            updated = [r for r in self._read() if r.id != suggestion_id]
            self._save(updated)
        return updated

    def update_multiple_domains(self, updates: Mapping[str, Mapping]) -> list[DomainSuggestion]:
        with self._lock:
            updated = [
                apply_fields(r, updates[r.domain], VERIFICATION_FIELDS) if r.domain in updates else r
                for r in self._read()
            ]
            self._save(updated)
        return updated

    def clear_all_domains(self) -> bool:
        with self._lock:
            cleared = self._save([])
        if cleared:
            self._log_info("Cleared all domains", {})
        return cleared

    def _log_debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug(COMPONENT, message, data)

    def _log_info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.info(COMPONENT, message, data)

    def _log_error(self, message: str, error: Exception) -> None:
        if self._logger:
            self._logger.log_error(
                COMPONENT,
                message,
                error=error,
                additional_data={"file_path": str(self._file_path)},
            )
