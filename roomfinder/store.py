"""JSON file storage for schedules and the active week.

The schedule document has the shape ``{"lastUpdated": ..., "schedules":
[...]}`` where each schedule entry is a ``RoomOccupancy``. Extra keys on
occupied slots (subject, batch, semester) are written back exactly as
they were read.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from .intervals import merge_slots
from .models import RoomOccupancy, ScheduleDocument, WeekConfig

logger = logging.getLogger(__name__)


class ScheduleStoreError(Exception):
    """Raised when a stored document exists but cannot be read."""


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _read_json(path: str) -> Optional[Any]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read %s: %s", path, exc)
        raise ScheduleStoreError(f"cannot read {path}: {exc}") from exc


def _write_json(path: str, payload: Dict[str, Any]) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
    os.replace(tmp_path, path)


def load_document(path: str) -> Optional[ScheduleDocument]:
    """Load the schedule document, or return None if there is none yet.

    Raises:
        ScheduleStoreError: if the file exists but is not a valid document.
    """
    raw = _read_json(path)
    if raw is None:
        return None
    try:
        return ScheduleDocument.model_validate(raw)
    except ValidationError as exc:
        logger.error("Schedule document %s is invalid: %s", path, exc)
        raise ScheduleStoreError(f"invalid schedule document {path}: {exc}") from exc


def save_document(path: str, schedules: List[RoomOccupancy]) -> ScheduleDocument:
    """Write ``schedules`` to ``path`` stamped with the current time."""
    document = ScheduleDocument(lastUpdated=_utcnow_iso(), schedules=schedules)
    _write_json(path, document.model_dump(mode="json"))
    return document


def parse_schedule_entries(raw: Any) -> List[RoomOccupancy]:
    """Validate a raw JSON list of schedule entries.

    Raises:
        ValueError: if ``raw`` is not a list or an entry is malformed. The
            message names the offending index.
    """
    if not isinstance(raw, list):
        raise ValueError("Schedule data must be an array")
    entries: List[RoomOccupancy] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict) or not item.get("room") or not item.get("day") \
                or not isinstance(item.get("occupied"), list):
            raise ValueError(f"Invalid schedule entry at index {index}")
        try:
            entries.append(RoomOccupancy.model_validate(item))
        except ValidationError as exc:
            raise ValueError(f"Invalid schedule entry at index {index}: {exc}") from exc
    return entries


def import_schedules(path: str, schedules: List[RoomOccupancy], merge: bool = True) -> int:
    """Store ``schedules``, optionally merged into what is already stored.

    When merging, stored and new entries sharing a room and day are
    combined and their occupied slots coalesced. Returns the number of stored entries.
    """
    final = list(schedules)
    if merge:
        existing = load_document(path)
        by_key: Dict[Tuple[str, str], RoomOccupancy] = {}
        for entry in list(existing.schedules if existing else []) + list(schedules):
            key = (entry.room, entry.day)
            if key in by_key:
                combined = list(by_key[key].occupied) + list(entry.occupied)
                by_key[key] = entry.model_copy(update={"occupied": merge_slots(combined)})
            else:
                by_key[key] = entry
        final = list(by_key.values())
    save_document(path, final)
    logger.info("Imported %d schedule entries into %s (merge=%s)", len(final), path, merge)
    return len(final)


def clear(path: str) -> None:
    """Delete the stored schedule document if there is one."""
    try:
        os.remove(path)
        logger.info("Cleared schedule data at %s", path)
    except FileNotFoundError:
        pass


def load_week_config(path: str) -> WeekConfig:
    """Return the stored week configuration, or an empty one."""
    raw = _read_json(path)
    if raw is None:
        return WeekConfig()
    try:
        return WeekConfig.model_validate(raw)
    except ValidationError as exc:
        raise ScheduleStoreError(f"invalid week config {path}: {exc}") from exc


def save_week_config(path: str, config: WeekConfig) -> None:
    _write_json(path, config.model_dump(mode="json"))
