"""HTTP entry point for the free classroom finder.

This module defines the FastAPI application, configures logging and keeps a
small in-memory cache of the schedule document so that every query does not
re-read the JSON file.

Endpoints:
  - ``/api/rooms``: free rooms for a day/time, or for "now".
  - ``/api/roster``: the configured rooms, days and operating window.
  - ``/api/schedules``: read, import or clear the stored schedules.
  - ``/api/config``: read or set the week the timetable applies to.
  - ``/healthz``: simple health check endpoint.

If the schedule file cannot be read but an earlier copy is cached, the
cached copy is served and the error is reported in ``meta.lastError``.
"""

from __future__ import annotations

import logging
import os
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .finder import RoomFinder
from .models import WEEK_DAYS, ImportRequest, ScheduleDocument, WeekConfig
from .store import (
    ScheduleStoreError,
    clear,
    import_schedules,
    load_document,
    load_week_config,
    parse_schedule_entries,
    save_week_config,
)
from .timeutil import FormatError, to_minutes

logger = logging.getLogger("roomfinder")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

app = FastAPI(title="Free Classroom Finder")


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Report errors as ``{"success": false, "error": ...}``."""
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed query parameters and bodies as 400s."""
    messages = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"success": False, "error": "; ".join(messages)})


_cache_lock = threading.Lock()
_cache: Dict[str, Any] = {
    "document": None,
    "path": None,
    "mtime": None,
    "fetched_at": None,
    "last_error": None,
}


def _utcnow() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


def _cache_fresh(ts: Optional[datetime], max_age_seconds: int) -> bool:
    """Return True if the timestamp ``ts`` is within ``max_age_seconds`` of now."""
    if ts is None:
        return False
    return (_utcnow() - ts).total_seconds() < max_age_seconds


def _invalidate_cache() -> None:
    with _cache_lock:
        _cache.update(document=None, path=None, mtime=None, fetched_at=None, last_error=None)


def _get_document_cached() -> Optional[ScheduleDocument]:
    """Return the schedule document, re-reading the file when it changes.

    A cached document is reused for ``CACHE_SECONDS`` as long as the file's
    modification time has not moved.
    """
    path = settings.schedules_path
    try:
        mtime = os.path.getmtime(path)
    except OSError:
        mtime = None
    with _cache_lock:
        if (
            _cache["path"] == path
            and _cache["mtime"] == mtime
            and _cache_fresh(_cache["fetched_at"], settings.cache_seconds)
        ):
            return _cache["document"]
    try:
        document = load_document(path)
    except ScheduleStoreError as exc:
        logger.exception("Error loading schedules: %s", exc)
        with _cache_lock:
            _cache["last_error"] = f"SCHEDULES_ERROR: {exc}"
            if _cache["document"] is not None and _cache["path"] == path:
                return _cache["document"]
        raise
    with _cache_lock:
        _cache.update(document=document, path=path, mtime=mtime, fetched_at=_utcnow(), last_error=None)
    return document


def _week_config() -> WeekConfig:
    try:
        return load_week_config(settings.week_config_path)
    except ScheduleStoreError as exc:
        logger.warning("Ignoring unreadable week config: %s", exc)
        return WeekConfig()


def get_finder() -> RoomFinder:
    """Build the query engine from the current settings."""
    return RoomFinder.from_settings(settings)


@app.get("/api/rooms")
def api_rooms(
    day: Optional[str] = None,
    time: Optional[str] = None,
    minDuration: Optional[int] = Query(default=None, ge=0),
    freeNow: bool = False,
    finder: RoomFinder = Depends(get_finder),
) -> Dict[str, Any]:
    """Return free rooms for the requested day and time."""
    current_day, current_time = finder.clock.day_and_time()
    day_from_clock = freeNow or not day
    if freeNow:
        day, time = current_day, current_time
    else:
        day = day or current_day

    if day not in WEEK_DAYS:
        raise HTTPException(status_code=400, detail=f"Unknown day {day!r}")
    if time is not None:
        try:
            to_minutes(time)
        except FormatError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    # When the day comes from the clock, days without classes show the first
    # teaching day instead, for planning.
    status = "ok"
    requested_day = day
    operating_days = settings.days
    if day_from_clock and day not in operating_days and operating_days:
        status = "weekend"
        day = operating_days[0]
    elif freeNow and not finder.window.contains(current_time):
        status = "outside-hours"

    week = _week_config()
    meta: Dict[str, Any] = {
        "day": day,
        "requestedDay": requested_day,
        "time": time,
        "minDuration": minDuration,
        "currentTime": current_time,
        "status": status,
        "activeWeek": week.display(),
        "isCurrentWeek": week.is_current(finder.clock.now().date()),
        "weekStartDate": week.weekStartDate.isoformat() if week.weekStartDate else None,
    }

    try:
        document = _get_document_cached()
    except ScheduleStoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    with _cache_lock:
        meta["lastError"] = _cache.get("last_error")

    if document is None or not document.schedules:
        meta.update(hasData=False, message="No timetable data available. Please import schedule data.")
        return {"success": True, "data": [], "meta": meta}

    results = finder.find_free_rooms(document.schedules, day, time, minDuration)
    meta.update(hasData=True, totalSchedules=len(document.schedules), lastUpdated=document.lastUpdated)
    return {"success": True, "data": [r.model_dump() for r in results], "meta": meta}


@app.get("/api/roster")
def api_roster(finder: RoomFinder = Depends(get_finder)) -> Dict[str, Any]:
    """Return the rooms, days and operating window queries run against."""
    return {
        "rooms": finder.rooms,
        "days": settings.days,
        "operatingHours": finder.window.model_dump(),
    }


@app.get("/api/schedules")
def api_get_schedules() -> Dict[str, Any]:
    """Return the stored schedule entries."""
    try:
        document = _get_document_cached()
    except ScheduleStoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    document = document or ScheduleDocument()
    return {
        "success": True,
        "lastUpdated": document.lastUpdated,
        "count": len(document.schedules),
        "schedules": [entry.model_dump(mode="json") for entry in document.schedules],
    }


@app.post("/api/schedules")
def api_import_schedules(body: ImportRequest) -> Dict[str, Any]:
    """Import schedule entries, merging into existing data unless ``merge`` is false."""
    try:
        entries = parse_schedule_entries(body.schedules)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    try:
        count = import_schedules(settings.schedules_path, entries, merge=body.merge)
    except (ScheduleStoreError, OSError) as exc:
        logger.exception("Error importing schedules: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    finally:
        _invalidate_cache()
    return {"success": True, "message": f"Imported {count} schedule entries", "count": count}


@app.delete("/api/schedules")
def api_clear_schedules() -> Dict[str, Any]:
    """Remove all stored schedule data."""
    try:
        clear(settings.schedules_path)
    except OSError as exc:
        logger.exception("Error clearing schedules: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    finally:
        _invalidate_cache()
    return {"success": True, "message": "Schedule data cleared"}


def _week_payload(week: WeekConfig, finder: RoomFinder) -> Dict[str, Any]:
    return {
        "weekStartDate": week.weekStartDate.isoformat() if week.weekStartDate else "",
        "weekEndDate": week.weekEndDate.isoformat() if week.weekEndDate else "",
        "activeWeekDisplay": week.display(),
        "isCurrentWeek": week.is_current(finder.clock.now().date()),
    }


@app.get("/api/config")
def api_get_config(finder: RoomFinder = Depends(get_finder)) -> Dict[str, Any]:
    """Return the week the timetable applies to."""
    return _week_payload(_week_config(), finder)


@app.post("/api/config")
def api_set_config(week: WeekConfig, finder: RoomFinder = Depends(get_finder)) -> Dict[str, Any]:
    """Set the week the timetable applies to."""
    if week.weekStartDate is None or week.weekEndDate is None:
        raise HTTPException(status_code=400, detail="weekStartDate and weekEndDate are required")
    try:
        save_week_config(settings.week_config_path, week)
    except OSError as exc:
        logger.exception("Error writing week config: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True, **_week_payload(week, finder)}


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    """Health check endpoint for monitoring."""
    return {"ok": True, "time": _utcnow().isoformat().replace("+00:00", "Z")}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("roomfinder.main:app", host="127.0.0.1", port=int(os.environ.get("PORT", "8000")))
