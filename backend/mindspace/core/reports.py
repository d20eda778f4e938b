"""Report Generation - Pure functions for building the insights report.

All functions are pure: same input always produces same output, no side effects.
"""

import calendar
from datetime import date
from enum import Enum
from typing import Optional

from .combine import combine_daily_entries
from .models import (
    FoodEntry,
    GratitudeEntry,
    Insight,
    InsightsReport,
    MoodEntry,
    SleepEntry,
    WaterEntry,
)
from .stats import (
    gratitude_impact,
    meal_impact,
    mood_sleep_correlation,
    mood_water_correlation,
)


# Thresholds for a finding to be worth highlighting
MIN_HIGHLIGHT_CORRELATION = 0.4
MIN_HIGHLIGHT_GRATITUDE_IMPACT = 0.5
MIN_HIGHLIGHT_MEAL_MOOD = 4


class TimeRange(str, Enum):
    """Reporting windows offered to the user."""

    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"


_MONTHS_BACK = {
    TimeRange.ONE_MONTH: 1,
    TimeRange.THREE_MONTHS: 3,
    TimeRange.SIX_MONTHS: 6,
    TimeRange.ONE_YEAR: 12,
}


def months_before(day: date, months: int) -> date:
    """Step back whole calendar months, clamping to the end of shorter months.

    Args:
        day: Starting date
        months: Number of months to go back

    Returns:
        The same day-of-month `months` earlier, or that month's last day
    """
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def report_window(time_range: TimeRange, today: date) -> tuple[str, str]:
    """Inclusive (start, end) ISO dates for a reporting window ending today."""
    start = months_before(today, _MONTHS_BACK[TimeRange(time_range)])
    return start.isoformat(), today.isoformat()


def build_insights_report(
    mood_entries: list[MoodEntry],
    sleep_entries: list[SleepEntry],
    water_entries: list[WaterEntry],
    food_entries: list[FoodEntry],
    gratitude_entries: list[GratitudeEntry],
) -> InsightsReport:
    """Combine a period's entries and run every analysis over them.

    Args:
        mood_entries: Mood entries in the window
        sleep_entries: Sleep entries in the window
        water_entries: Water entries in the window
        food_entries: Food entries in the window
        gratitude_entries: Gratitude entries in the window

    Returns:
        InsightsReport with the combined days and all four analyses
    """
    days = combine_daily_entries(
        mood_entries,
        sleep_entries,
        water_entries,
        food_entries,
        gratitude_entries,
    )

    return InsightsReport(
        days=days,
        sleep=mood_sleep_correlation(days),
        water=mood_water_correlation(days),
        gratitude=gratitude_impact(days),
        meals=meal_impact(days, food_entries),
    )


def pick_highlight(report: InsightsReport) -> Optional[Insight]:
    """Choose the single strongest finding in a report.

    Each analysis contributes at most one candidate, scored so that findings
    of different kinds can be compared.

    Args:
        report: A built insights report

    Returns:
        The highest-strength Insight, or None if nothing stands out
    """
    candidates: list[Insight] = []

    sleep = report.sleep
    if (
        sleep.has_enough_data
        and sleep.correlation >= MIN_HIGHLIGHT_CORRELATION
        and sleep.optimal_value
    ):
        candidates.append(Insight(
            title=f"Best mood after {sleep.optimal_value}h sleep",
            description=(
                f"You tend to feel your best after sleeping around "
                f"{sleep.optimal_value} hours"
            ),
            strength=sleep.correlation * 5,
        ))

    water = report.water
    if (
        water.has_enough_data
        and water.correlation >= MIN_HIGHLIGHT_CORRELATION
        and water.optimal_value
    ):
        candidates.append(Insight(
            title=f"Hydration hero: {water.optimal_value} cups",
            description=(
                f"Your mood improves significantly with {water.optimal_value} "
                f"cups of water daily"
            ),
            strength=water.correlation * 5,
        ))

    gratitude = report.gratitude
    if gratitude.has_enough_data and gratitude.impact >= MIN_HIGHLIGHT_GRATITUDE_IMPACT:
        candidates.append(Insight(
            title="Gratitude boosts your mood",
            description="On days when you practice gratitude, your mood is noticeably better",
            strength=gratitude.impact * 4,
        ))

    meals = report.meals
    if meals.has_enough_data and meals.meal_patterns:
        best = meals.meal_patterns[0]
        if best.average_mood >= MIN_HIGHLIGHT_MEAL_MOOD:
            candidates.append(Insight(
                title=f"Mood food: {best.meal}",
                description=f'"{best.meal}" appears to boost your mood consistently',
                strength=(best.average_mood - 2.5) * 3,
            ))

    if not candidates:
        return None

    # max() keeps the first of equal strengths
    return max(candidates, key=lambda insight: insight.strength)
