"""Core Data Models - Pydantic models for type safety.

Entry models are validated once at the data-access boundary; everything in the
core operates on these typed values. Result models serialize with the camelCase
field names the chart components read (hasEnoughData, mealPatterns, ...).
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class Mood(str, Enum):
    """The five mood labels a user can pick."""

    GREAT = "great"
    GOOD = "good"
    NEUTRAL = "neutral"
    BAD = "bad"
    AWFUL = "awful"


MOOD_SCORES: dict[Mood, int] = {
    Mood.GREAT: 5,
    Mood.GOOD: 4,
    Mood.NEUTRAL: 3,
    Mood.BAD: 2,
    Mood.AWFUL: 1,
}


class EntryKind(str, Enum):
    """Entry types, one store collection each."""

    MOOD = "mood"
    SLEEP = "sleep"
    WATER = "water"
    FOOD = "food"
    GRATITUDE = "gratitude"


# ==================== Entries ====================


class MoodEntry(BaseModel):
    """How the user felt on a given day."""

    date: str = Field(pattern=DATE_PATTERN, description="Calendar date (YYYY-MM-DD)")
    mood: Mood
    note: Optional[str] = Field(default=None, description="Free-text note")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def score(self) -> int:
        return MOOD_SCORES[self.mood]


class SleepEntry(BaseModel):
    """Hours slept and subjective quality for the night ending on `date`."""

    date: str = Field(pattern=DATE_PATTERN)
    hours_slept: float = Field(ge=0, le=24, description="Hours slept")
    sleep_quality: int = Field(ge=1, le=10, description="Quality from 1 to 10")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class WaterEntry(BaseModel):
    """Cups of water drunk on a day."""

    date: str = Field(pattern=DATE_PATTERN)
    cups: int = Field(ge=0, le=30)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class FoodEntry(BaseModel):
    """Meals eaten on a day, comma separated."""

    date: str = Field(pattern=DATE_PATTERN)
    meals: str = Field(min_length=1, description="Comma-separated meal names")
    feeling_after: Optional[str] = Field(default=None, description="How the user felt after eating")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class GratitudeEntry(BaseModel):
    """Things the user was grateful for, one per line."""

    date: str = Field(pattern=DATE_PATTERN)
    gratitude_items: str = Field(min_length=1, description="Newline-separated items")
    created_at: datetime = Field(default_factory=datetime.utcnow)


Entry = Union[MoodEntry, SleepEntry, WaterEntry, FoodEntry, GratitudeEntry]

ENTRY_MODELS: dict[EntryKind, type[BaseModel]] = {
    EntryKind.MOOD: MoodEntry,
    EntryKind.SLEEP: SleepEntry,
    EntryKind.WATER: WaterEntry,
    EntryKind.FOOD: FoodEntry,
    EntryKind.GRATITUDE: GratitudeEntry,
}


def entry_kind(entry: Entry) -> EntryKind:
    """Return the kind of an entry instance.

    Raises:
        TypeError: If `entry` is not one of the entry models
    """
    for kind, model in ENTRY_MODELS.items():
        if type(entry) is model:
            return kind
    raise TypeError(f"Not an entry: {type(entry).__name__}")


class EntryBundle(BaseModel):
    """All five entry lists fetched for one user and date range."""

    mood: list[MoodEntry] = Field(default_factory=list)
    sleep: list[SleepEntry] = Field(default_factory=list)
    water: list[WaterEntry] = Field(default_factory=list)
    food: list[FoodEntry] = Field(default_factory=list)
    gratitude: list[GratitudeEntry] = Field(default_factory=list)


# ==================== Analysis Results ====================


class ResultModel(BaseModel):
    """Base for results handed to the presentation layer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CombinedDay(ResultModel):
    """Sparse union of every entry recorded on one date."""

    date: str
    mood: Optional[Mood] = None
    mood_score: Optional[int] = None
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[int] = None
    water_cups: Optional[int] = None
    meal_count: Optional[int] = None
    has_gratitude: Optional[bool] = None
    gratitude_item_count: Optional[int] = None


class MoodDataPoint(ResultModel):
    """A (mood, factor value) pair for one day."""

    date: str
    mood: Optional[Mood]
    mood_score: int
    value: Union[int, float]


class FactorAverage(ResultModel):
    """Mean mood of the days sharing one factor value."""

    value: int
    average_mood: float
    count: int


class CorrelationResult(ResultModel):
    """Mood vs. one lifestyle factor."""

    factor: Literal["sleep", "water"]
    has_enough_data: bool
    correlation: float = 0
    optimal_value: int = 0
    best_record: Optional[CombinedDay] = None
    data_points: list[MoodDataPoint] = Field(default_factory=list)
    averages: list[FactorAverage] = Field(default_factory=list)


class GratitudeDataPoint(ResultModel):
    date: str
    mood: Optional[Mood]
    mood_score: int
    item_count: Optional[int] = None


class GratitudeImpact(ResultModel):
    """Mean mood on gratitude days vs. the rest."""

    has_enough_data: bool
    impact: float = 0
    avg_mood_with_gratitude: float = 0
    avg_mood_without_gratitude: float = 0
    with_gratitude_days: int = 0
    without_gratitude_days: int = 0
    with_gratitude: list[GratitudeDataPoint] = Field(default_factory=list)
    without_gratitude: list[GratitudeDataPoint] = Field(default_factory=list)


class MealPattern(ResultModel):
    meal: str
    occurrences: int
    average_mood: float


class MealImpact(ResultModel):
    """Meals ranked by the mood of the days they were eaten."""

    has_enough_data: bool
    meal_patterns: list[MealPattern] = Field(default_factory=list)


class Insight(ResultModel):
    """Headline finding shown above the charts."""

    title: str
    description: str
    strength: float


class InsightsReport(ResultModel):
    """Every analysis for one reporting window."""

    days: list[CombinedDay]
    sleep: CorrelationResult
    water: CorrelationResult
    gratitude: GratitudeImpact
    meals: MealImpact


class UserProfile(BaseModel):
    """The users/{user_id} document that owns every entry collection.

    The document id is the API key hash, so the profile doubles as the
    credential record.
    """

    name: str = Field(min_length=2, max_length=20)
    email: str
    api_key_hash: str = Field(description="SHA256 hash of API key - never store plaintext")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def user_id(self) -> str:
        return self.api_key_hash
