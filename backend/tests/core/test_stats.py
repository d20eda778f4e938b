"""Unit tests for mood statistics - pure functions, no mocks needed."""

import math

import pytest

from mindspace.core.combine import combine_daily_entries
from mindspace.core.models import CombinedDay, FoodEntry, MoodEntry, SleepEntry, WaterEntry
from mindspace.core.stats import (
    correlate_mood,
    finite_or_zero,
    gratitude_impact,
    meal_impact,
    mood_sleep_correlation,
    mood_water_correlation,
    pearson_correlation,
    split_meals,
)


SCORE_TO_MOOD = {1: "awful", 2: "bad", 3: "neutral", 4: "good", 5: "great"}


def _date(i: int) -> str:
    return f"2024-12-{i + 1:02d}"


def _days(**series) -> list[CombinedDay]:
    """Build combined days from parallel lists, e.g. _days(mood_score=[...], water_cups=[...])."""
    length = len(next(iter(series.values())))
    days = []
    for i in range(length):
        fields = {name: values[i] for name, values in series.items()}
        if fields.get("mood_score") is not None:
            fields["mood"] = SCORE_TO_MOOD[fields["mood_score"]]
        days.append(CombinedDay(date=_date(i), **fields))
    return days


class TestPearsonCorrelation:
    """Tests for pearson_correlation."""

    def test_perfect_positive(self):
        assert pearson_correlation([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_zero_variance_is_zero(self):
        """No spread in one series gives 0 instead of NaN."""
        assert pearson_correlation([3, 3, 3], [1, 2, 3]) == 0
        assert pearson_correlation([1, 2, 3], [5, 5, 5]) == 0

    def test_empty_is_zero(self):
        assert pearson_correlation([], []) == 0

    def test_single_pair_or_mismatched_is_zero(self):
        assert pearson_correlation([4], [7]) == 0
        assert pearson_correlation([1, 2, 3], [1, 2]) == 0

    def test_constant_fractional_series_is_exactly_zero(self):
        """Constant 7.3h sleep against varying moods has no correlation."""
        assert pearson_correlation([1, 3, 5, 2, 4], [7.3] * 5) == 0.0

    def test_known_value(self):
        """r for a small hand-checked series."""
        assert pearson_correlation([1, 2, 3, 4, 5], [2, 1, 4, 3, 5]) == pytest.approx(0.8)

    def test_finite_or_zero(self):
        assert finite_or_zero(math.nan) == 0
        assert finite_or_zero(math.inf) == 0
        assert finite_or_zero(0.25) == 0.25


class TestMoodSleepCorrelation:
    """Tests for mood_sleep_correlation."""

    def test_below_floor(self):
        """Fewer than 5 qualifying days is not enough data."""
        days = _days(mood_score=[1, 2, 3, 4], sleep_hours=[5, 6, 7, 8])
        result = mood_sleep_correlation(days)

        assert result.has_enough_data is False
        assert result.correlation == 0
        assert result.optimal_value == 0
        assert result.best_record is None
        assert result.data_points == []

    def test_days_missing_a_value_do_not_qualify(self):
        """Days without both mood and sleep are ignored."""
        days = _days(
            mood_score=[1, 2, 3, 4, None, 5],
            sleep_hours=[5, 6, 7, 8, 9, None],
        )
        assert mood_sleep_correlation(days).has_enough_data is False

    def test_increasing_sleep_scenario(self):
        """Mood rising with sleep from 4h to 9h gives a strong positive r."""
        hours = [4, 5, 6, 6, 7, 7, 8, 8, 9, 9]
        scores = [1, 2, 2, 2, 3, 3, 4, 4, 5, 5]
        mood = [MoodEntry(date=_date(i), mood=SCORE_TO_MOOD[s]) for i, s in enumerate(scores)]
        sleep = [
            SleepEntry(date=_date(i), hours_slept=h, sleep_quality=5)
            for i, h in enumerate(hours)
        ]
        days = combine_daily_entries(mood, sleep, [], [], [])

        result = mood_sleep_correlation(days)

        assert result.has_enough_data is True
        assert result.correlation > 0.8
        assert result.optimal_value == 9
        assert len(result.averages) == 6
        assert len(result.data_points) == 10

    def test_hours_round_half_up(self):
        """Sleep hours are bucketed to the nearest hour, .5 rounding up."""
        days = _days(mood_score=[3, 4, 3, 4, 5], sleep_hours=[6.5, 6.4, 7.2, 5.6, 8.5])
        result = mood_sleep_correlation(days)

        assert [a.value for a in result.averages] == [7, 6, 9]
        seven = result.averages[0]
        assert seven.count == 2
        assert seven.average_mood == pytest.approx(3.0)

    def test_best_record_prefers_more_sleep_on_tie(self):
        """Equal moods break ties toward the higher factor value."""
        days = _days(mood_score=[5, 3, 5, 2, 1], sleep_hours=[7, 6, 8.5, 5, 4])
        result = mood_sleep_correlation(days)

        assert result.best_record.date == _date(2)
        assert result.best_record.sleep_hours == 8.5

    def test_data_points_in_date_order(self):
        days = _days(mood_score=[3, 4, 3, 4, 5], sleep_hours=[6, 7, 6, 7, 8])
        result = mood_sleep_correlation(days)
        assert [p.date for p in result.data_points] == [_date(i) for i in range(5)]
        assert [p.value for p in result.data_points] == [6, 7, 6, 7, 8]


class TestMoodWaterCorrelation:
    """Tests for mood_water_correlation."""

    def test_constant_mood_is_zero(self):
        """Identical moods clamp the correlation to 0 whatever the cups."""
        days = _days(mood_score=[3] * 10, water_cups=[1, 4, 2, 8, 6, 3, 9, 5, 7, 0])
        result = mood_water_correlation(days)

        assert result.has_enough_data is True
        assert result.correlation == 0

    def test_constant_cups_is_zero(self):
        days = _days(mood_score=[1, 2, 3, 4, 5], water_cups=[8] * 5)
        assert mood_water_correlation(days).correlation == 0

    def test_correlation_in_range(self):
        """Any spread-out data yields r within [-1, 1]."""
        days = _days(
            mood_score=[2, 5, 1, 4, 3, 5, 2, 4],
            water_cups=[3, 9, 1, 7, 2, 8, 4, 6],
        )
        r = mood_water_correlation(days).correlation
        assert -1 <= r <= 1
        assert r > 0

    def test_optimal_first_seen_wins_tie(self):
        """Buckets with equal mean mood keep the first one seen."""
        days = _days(mood_score=[4, 4, 1, 1, 1], water_cups=[6, 2, 3, 3, 3])
        result = mood_water_correlation(days)

        assert [a.value for a in result.averages] == [6, 2, 3]
        assert result.optimal_value == 6

    def test_factor_label(self):
        days = _days(mood_score=[1, 2, 3, 4, 5], water_cups=[1, 2, 3, 4, 5])
        assert correlate_mood(days, "water").factor == "water"


class TestGratitudeImpact:
    """Tests for gratitude_impact."""

    def test_impact_sign(self):
        """Great gratitude days vs awful other days gives impact 4."""
        days = _days(
            mood_score=[5, 1] * 4,
            has_gratitude=[True, None] * 4,
            gratitude_item_count=[2, None] * 4,
        )
        result = gratitude_impact(days)

        assert result.has_enough_data is True
        assert result.avg_mood_with_gratitude == 5
        assert result.avg_mood_without_gratitude == 1
        assert result.impact == 4
        assert result.with_gratitude_days == 4
        assert result.without_gratitude_days == 4
        assert result.with_gratitude[0].item_count == 2

    def test_below_floor(self):
        """Fewer than 7 mood days is not enough."""
        days = _days(mood_score=[5, 1] * 3, has_gratitude=[True, None] * 3)
        result = gratitude_impact(days)

        assert result.has_enough_data is False
        assert result.impact == 0
        assert result.avg_mood_with_gratitude == 0

    def test_all_with_gratitude(self):
        """One side of the split being empty is not enough."""
        days = _days(mood_score=[4] * 8, has_gratitude=[True] * 8)
        assert gratitude_impact(days).has_enough_data is False

    def test_all_without_gratitude(self):
        days = _days(mood_score=[4] * 8)
        assert gratitude_impact(days).has_enough_data is False

    def test_days_without_mood_ignored(self):
        days = _days(
            mood_score=[5, 1, 5, 1, 5, 1, None, None],
            has_gratitude=[True, None, True, None, True, None, True, True],
        )
        assert gratitude_impact(days).has_enough_data is False


def _meal_fixture():
    """14 days of mood and meals: oats good, pizza poor, sushi rare."""
    plan = [
        ("oats", 5), ("Oats ", 5), ("oats, toast", 4),
        ("pizza", 2), ("pizza", 3), ("PIZZA", 2),
        ("sushi", 5), ("sushi", 5),
        ("toast", 3), ("toast", 3), ("toast", 3),
        ("toast", 3), ("toast", 3), ("toast", 3),
    ]
    mood = [MoodEntry(date=_date(i), mood=SCORE_TO_MOOD[s]) for i, (_, s) in enumerate(plan)]
    food = [FoodEntry(date=_date(i), meals=meals) for i, (meals, _) in enumerate(plan)]
    return mood, food


class TestMealImpact:
    """Tests for meal_impact."""

    def test_ranking(self):
        """Meals sort best first; names are trimmed and lower-cased."""
        mood, food = _meal_fixture()
        days = combine_daily_entries(mood, [], [], food, [])
        result = meal_impact(days, food)

        assert result.has_enough_data is True
        assert [p.meal for p in result.meal_patterns] == ["oats", "toast", "pizza"]

        oats = result.meal_patterns[0]
        assert oats.occurrences == 3
        assert oats.average_mood == pytest.approx(4.67, abs=0.01)

        pizza = result.meal_patterns[-1]
        assert pizza.average_mood == pytest.approx(2.33, abs=0.01)

    def test_rare_meals_dropped(self):
        """A meal seen only twice is left out even with the best mood."""
        mood, food = _meal_fixture()
        days = combine_daily_entries(mood, [], [], food, [])
        names = [p.meal for p in meal_impact(days, food).meal_patterns]
        assert "sushi" not in names

    def test_below_floor(self):
        """Fewer than 14 days with mood and meals is not enough."""
        mood, food = _meal_fixture()
        days = combine_daily_entries(mood[:13], [], [], food, [])
        result = meal_impact(days, food)

        assert result.has_enough_data is False
        assert result.meal_patterns == []

    def test_food_on_days_without_mood_ignored(self):
        mood, food = _meal_fixture()
        extra = [FoodEntry(date="2024-12-20", meals="cake")] * 3
        days = combine_daily_entries(mood, [], [], food + extra, [])
        names = [p.meal for p in meal_impact(days, food + extra).meal_patterns]
        assert "cake" not in names

    def test_non_list_food_entries(self):
        """Malformed raw food entries contribute no patterns."""
        mood, food = _meal_fixture()
        days = combine_daily_entries(mood, [], [], food, [])
        result = meal_impact(days, None)

        assert result.has_enough_data is True
        assert result.meal_patterns == []

    def test_split_meals(self):
        assert split_meals(" Oats, ,Salad ,") == ["oats", "salad"]
