"""Mood Statistics - Pure functions relating mood to lifestyle factors.

All functions are pure: same input always produces same output, no side effects.
Insufficient data is reported through `has_enough_data`, never an exception;
numeric fields are zero whenever it is False.
"""

import math
import warnings
from typing import Any, Callable, Literal, Optional, Union

import numpy as np
from scipy import stats as sp_stats

from .models import (
    CombinedDay,
    CorrelationResult,
    FactorAverage,
    FoodEntry,
    GratitudeDataPoint,
    GratitudeImpact,
    MealImpact,
    MealPattern,
    MoodDataPoint,
)


MIN_CORRELATION_DAYS = 5
MIN_GRATITUDE_DAYS = 7
MIN_MEAL_DAYS = 14
MIN_MEAL_OCCURRENCES = 3

Factor = Literal["sleep", "water"]
Number = Union[int, float]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# Per factor: how to read the value off a day, and how to bucket it.
FACTORS: dict[str, tuple[Callable[[CombinedDay], Optional[Number]], Callable[[Number], int]]] = {
    "sleep": (lambda day: day.sleep_hours, _round_half_up),
    "water": (lambda day: day.water_cups, int),
}


def mean(values: list[Number]) -> float:
    """Arithmetic mean; 0 for an empty list."""
    if not values:
        return 0.0
    return float(np.mean(values))


def finite_or_zero(value: float) -> float:
    """Map NaN and infinities to 0."""
    if math.isfinite(value):
        return value
    return 0.0


def pearson_correlation(xs: list[Number], ys: list[Number]) -> float:
    """Pearson correlation coefficient of two paired series.

    A series with no spread makes r undefined; that is reported as 0.

    Args:
        xs: First series
        ys: Second series, same length as xs

    Returns:
        r in [-1, 1], or 0 when undefined
    """
    if len(xs) < 2 or len(xs) != len(ys):
        return 0.0

    # Constant input warns and yields NaN
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        r, _ = sp_stats.pearsonr(np.asarray(xs, dtype=float), np.asarray(ys, dtype=float))

    r = finite_or_zero(float(r))
    return max(-1.0, min(1.0, r))


def correlate_mood(days: list[CombinedDay], factor: Factor) -> CorrelationResult:
    """Relate mood score to one lifestyle factor.

    Args:
        days: Combined daily records
        factor: "sleep" (hours, bucketed to the nearest hour) or "water" (cups)

    Returns:
        CorrelationResult with Pearson r, the bucket with the best mean mood,
        the single best day, and the series used for charting
    """
    read_value, bucket_of = FACTORS[factor]

    qualifying = [
        day for day in days
        if day.mood_score is not None and read_value(day) is not None
    ]

    if len(qualifying) < MIN_CORRELATION_DAYS:
        return CorrelationResult(factor=factor, has_enough_data=False)

    # Buckets keep first-seen order
    buckets: dict[int, list[int]] = {}
    for day in qualifying:
        buckets.setdefault(bucket_of(read_value(day)), []).append(day.mood_score)

    averages = [
        FactorAverage(value=value, average_mood=mean(moods), count=len(moods))
        for value, moods in buckets.items()
    ]

    # Strictly greater replaces, so the first bucket wins ties
    optimal = averages[0]
    for candidate in averages[1:]:
        if candidate.average_mood > optimal.average_mood:
            optimal = candidate

    best_record = qualifying[0]
    for day in qualifying[1:]:
        if day.mood_score > best_record.mood_score or (
            day.mood_score == best_record.mood_score
            and read_value(day) > read_value(best_record)
        ):
            best_record = day

    moods = [day.mood_score for day in qualifying]
    values = [read_value(day) for day in qualifying]

    return CorrelationResult(
        factor=factor,
        has_enough_data=True,
        correlation=pearson_correlation(moods, values),
        optimal_value=optimal.value,
        best_record=best_record,
        data_points=[
            MoodDataPoint(
                date=day.date,
                mood=day.mood,
                mood_score=day.mood_score,
                value=read_value(day),
            )
            for day in qualifying
        ],
        averages=averages,
    )


def mood_sleep_correlation(days: list[CombinedDay]) -> CorrelationResult:
    """Correlate mood with hours slept."""
    return correlate_mood(days, "sleep")


def mood_water_correlation(days: list[CombinedDay]) -> CorrelationResult:
    """Correlate mood with cups of water."""
    return correlate_mood(days, "water")


def gratitude_impact(days: list[CombinedDay]) -> GratitudeImpact:
    """Compare mean mood on days with and without a gratitude entry.

    Needs at least MIN_GRATITUDE_DAYS days with a mood, and at least one day
    on each side of the split.

    Args:
        days: Combined daily records

    Returns:
        GratitudeImpact where impact = mean(with) - mean(without)
    """
    with_mood = [day for day in days if day.mood_score is not None]
    with_gratitude = [day for day in with_mood if day.has_gratitude]
    without_gratitude = [day for day in with_mood if not day.has_gratitude]

    if (
        len(with_mood) < MIN_GRATITUDE_DAYS
        or not with_gratitude
        or not without_gratitude
    ):
        return GratitudeImpact(has_enough_data=False)

    avg_with = mean([day.mood_score for day in with_gratitude])
    avg_without = mean([day.mood_score for day in without_gratitude])

    return GratitudeImpact(
        has_enough_data=True,
        impact=avg_with - avg_without,
        avg_mood_with_gratitude=avg_with,
        avg_mood_without_gratitude=avg_without,
        with_gratitude_days=len(with_gratitude),
        without_gratitude_days=len(without_gratitude),
        with_gratitude=[
            GratitudeDataPoint(
                date=day.date,
                mood=day.mood,
                mood_score=day.mood_score,
                item_count=day.gratitude_item_count,
            )
            for day in with_gratitude
        ],
        without_gratitude=[
            GratitudeDataPoint(date=day.date, mood=day.mood, mood_score=day.mood_score)
            for day in without_gratitude
        ],
    )


def split_meals(meals: str) -> list[str]:
    """Normalize a comma-separated meal list to lower-case names.

    Blank segments (from stray commas) are dropped.
    """
    names = [segment.strip().lower() for segment in meals.split(",")]
    return [name for name in names if name]


def meal_impact(days: list[CombinedDay], food_entries: Any) -> MealImpact:
    """Rank meals by the mean mood of the days they were eaten.

    Needs at least MIN_MEAL_DAYS days with both a mood and at least one meal.
    Meals seen fewer than MIN_MEAL_OCCURRENCES times are left out.

    Args:
        days: Combined daily records
        food_entries: Raw food entries for the same period

    Returns:
        MealImpact with patterns sorted by average mood, best first
    """
    qualifying = {
        day.date: day.mood_score
        for day in days
        if day.mood_score is not None and day.meal_count
    }

    if len(qualifying) < MIN_MEAL_DAYS:
        return MealImpact(has_enough_data=False)

    entries: list[FoodEntry] = (
        list(food_entries) if isinstance(food_entries, (list, tuple)) else []
    )

    moods_by_meal: dict[str, list[int]] = {}
    for entry in entries:
        score = qualifying.get(entry.date)
        if score is None:
            continue
        for name in split_meals(entry.meals):
            moods_by_meal.setdefault(name, []).append(score)

    patterns = [
        MealPattern(meal=name, occurrences=len(moods), average_mood=mean(moods))
        for name, moods in moods_by_meal.items()
        if len(moods) >= MIN_MEAL_OCCURRENCES
    ]
    patterns.sort(key=lambda pattern: pattern.average_mood, reverse=True)

    return MealImpact(has_enough_data=True, meal_patterns=patterns)
