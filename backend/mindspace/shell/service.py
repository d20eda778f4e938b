"""Entry Service - Use cases shared by the MCP tools and the HTTP API.

Every function receives the data store and the authenticated user id as
arguments; nothing here reads request or session state.
"""

import logging
from datetime import date
from typing import Any, Optional, Protocol

from ..core.models import (
    ENTRY_MODELS,
    CorrelationResult,
    Entry,
    EntryBundle,
    EntryKind,
    InsightsReport,
)
from ..core.reports import TimeRange, build_insights_report, pick_highlight, report_window
from ..core.validation import sanitize_input, validate_entry_date


logger = logging.getLogger(__name__)

# Free-text fields that are sanitized before storage
TEXT_FIELDS: dict[EntryKind, tuple[str, ...]] = {
    EntryKind.MOOD: ("note",),
    EntryKind.SLEEP: (),
    EntryKind.WATER: (),
    EntryKind.FOOD: ("meals", "feeling_after"),
    EntryKind.GRATITUDE: ("gratitude_items",),
}


class EntryStore(Protocol):
    """Data access needed by the service functions."""

    def save_entry(self, user_id: str, entry: Entry) -> bool: ...

    def get_entry(self, user_id: str, kind: EntryKind, date: str) -> Optional[Entry]: ...

    def delete_entry(self, user_id: str, kind: EntryKind, date: str) -> bool: ...

    def fetch_all(self, user_id: str, start_date: str, end_date: str) -> EntryBundle: ...


def new_entry(
    kind: EntryKind, today: date, entry_date: Optional[str] = None, **fields: Any
) -> Entry:
    """Build a validated entry from user input.

    Args:
        kind: Entry kind
        today: The current date (entries default to it and may not be after it)
        entry_date: Optional day in YYYY-MM-DD format
        **fields: Kind-specific fields

    Returns:
        The entry model instance

    Raises:
        ValueError: If the date is malformed or in the future
        pydantic.ValidationError: If a field is missing or out of range
    """
    if entry_date:
        validate_entry_date(entry_date, today)
    else:
        entry_date = today.isoformat()

    for name in TEXT_FIELDS[kind]:
        if isinstance(fields.get(name), str):
            fields[name] = sanitize_input(fields[name])

    return ENTRY_MODELS[kind](date=entry_date, **fields)


def log_entry(store: EntryStore, user_id: str, entry: Entry) -> bool:
    """Persist an entry for a user."""
    return store.save_entry(user_id, entry)


def get_day(store: EntryStore, user_id: str, day: str) -> dict[str, Optional[Entry]]:
    """Fetch every kind of entry a user logged on one day."""
    return {kind.value: store.get_entry(user_id, kind, day) for kind in EntryKind}


def remove_entry(store: EntryStore, user_id: str, kind: EntryKind, day: str) -> bool:
    """Delete one entry; False if there was nothing to delete."""
    return store.delete_entry(user_id, kind, day)


def load_insights(
    store: EntryStore, user_id: str, time_range: TimeRange, today: date
) -> dict[str, Any]:
    """Fetch a reporting window of entries and analyze it.

    Args:
        store: Data store
        user_id: Authenticated user's ID
        time_range: Reporting window length
        today: Last day of the window

    Returns:
        JSON-ready report for the chart components
    """
    start_date, end_date = report_window(time_range, today)
    logger.info("Building insights for %s from %s to %s", user_id[:8], start_date, end_date)

    bundle = store.fetch_all(user_id, start_date, end_date)
    report = build_insights_report(
        bundle.mood,
        bundle.sleep,
        bundle.water,
        bundle.food,
        bundle.gratitude,
    )
    return serialize_report(report, start_date, end_date)


# (value, bucket, optimal, best day) keys per factor in the chart payload
CHART_KEYS: dict[str, tuple[str, str, str, str]] = {
    "sleep": ("sleepHours", "hours", "optimalSleepHours", "bestMoodAfterSleep"),
    "water": ("waterCups", "cups", "optimalWaterCups", "bestMoodAfterWater"),
}


def _correlation_payload(result: CorrelationResult) -> dict[str, Any]:
    """Chart payload for one factor, with the factor named in its keys."""
    value_key, bucket_key, optimal_key, best_key = CHART_KEYS[result.factor]
    best = result.best_record.model_dump(by_alias=True, mode="json") if result.best_record else None
    return {
        "hasEnoughData": result.has_enough_data,
        "correlation": result.correlation,
        optimal_key: result.optimal_value,
        best_key: best,
        "dataPoints": [
            {
                "date": point.date,
                "mood": point.mood.value if point.mood else None,
                "moodScore": point.mood_score,
                value_key: point.value,
            }
            for point in result.data_points
        ],
        "averages": [
            {bucket_key: average.value, "avgMood": average.average_mood, "count": average.count}
            for average in result.averages
        ],
    }


def serialize_report(report: InsightsReport, start_date: str, end_date: str) -> dict[str, Any]:
    """Render a report with the field names the charts expect."""
    highlight = pick_highlight(report)
    return {
        "startDate": start_date,
        "endDate": end_date,
        "daysLogged": len(report.days),
        "sleep": _correlation_payload(report.sleep),
        "water": _correlation_payload(report.water),
        "gratitude": report.gratitude.model_dump(by_alias=True, mode="json"),
        "meals": report.meals.model_dump(by_alias=True, mode="json"),
        "highlight": highlight.model_dump(by_alias=True) if highlight else None,
    }
