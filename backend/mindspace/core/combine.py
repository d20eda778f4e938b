"""Entry Combiner - Merge per-kind entry lists into one record per day.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Any, Optional

from .models import (
    CombinedDay,
    FoodEntry,
    GratitudeEntry,
    MoodEntry,
    SleepEntry,
    WaterEntry,
)


def _as_list(entries: Any) -> list:
    """Treat anything that is not a list or tuple as no entries."""
    if isinstance(entries, (list, tuple)):
        return list(entries)
    return []


def count_meals(meals: Optional[str]) -> int:
    """Count comma-separated meal segments.

    Empty or missing text counts as zero meals.
    """
    if not meals:
        return 0
    return len(meals.split(","))


def count_gratitude_items(text: Optional[str]) -> int:
    """Count non-blank lines of a gratitude entry."""
    if not text:
        return 0
    return len([line for line in text.split("\n") if line.strip()])


def combine_daily_entries(
    mood_entries: Optional[list[MoodEntry]],
    sleep_entries: Optional[list[SleepEntry]],
    water_entries: Optional[list[WaterEntry]],
    food_entries: Optional[list[FoodEntry]],
    gratitude_entries: Optional[list[GratitudeEntry]],
) -> list[CombinedDay]:
    """Combine independently fetched entry lists into one record per date.

    Each list only sets the fields it owns. When a list holds more than one
    entry for a date, the later one wins.

    Args:
        mood_entries: Mood entries (None or a non-list counts as empty)
        sleep_entries: Sleep entries
        water_entries: Water entries
        food_entries: Food entries
        gratitude_entries: Gratitude entries

    Returns:
        CombinedDay records sorted ascending by date
    """
    days: dict[str, dict[str, Any]] = {}

    def day(date: str) -> dict[str, Any]:
        return days.setdefault(date, {"date": date})

    for entry in _as_list(mood_entries):
        record = day(entry.date)
        record["mood"] = entry.mood
        record["mood_score"] = entry.score

    for entry in _as_list(sleep_entries):
        record = day(entry.date)
        record["sleep_hours"] = entry.hours_slept
        record["sleep_quality"] = entry.sleep_quality

    for entry in _as_list(water_entries):
        day(entry.date)["water_cups"] = entry.cups

    for entry in _as_list(food_entries):
        day(entry.date)["meal_count"] = count_meals(entry.meals)

    for entry in _as_list(gratitude_entries):
        record = day(entry.date)
        record["has_gratitude"] = True
        record["gratitude_item_count"] = count_gratitude_items(entry.gratitude_items)

    return [CombinedDay(**days[date]) for date in sorted(days)]
