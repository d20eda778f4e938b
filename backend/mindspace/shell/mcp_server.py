"""MCP Server - Tool definitions for assistant integration.

Defines the MCP tools for logging wellness entries and reading insights.
The user id is resolved once per tool call from the authenticated request and
handed to the service layer explicitly.
"""

import logging
import os
from contextvars import ContextVar
from datetime import date

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from ..core.models import EntryKind
from ..core.reports import TimeRange
from ..core.validation import validate_entry_date
from . import service
from .firestore_client import FirestoreConfig, MindSpaceFirestoreClient


logger = logging.getLogger(__name__)

# Context variable to store current user_id per request
current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)

transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        "*.run.app:*",
        "*.run.app",
    ],
)

mcp = FastMCP(
    "mindspace",
    instructions="""MindSpace - Personal wellness tracking assistant.

Use these tools to help users record how they feel each day (mood, sleep,
water, meals and gratitude) and to explain how their mood relates to those
habits.

Dates are YYYY-MM-DD and default to today. Logging the same kind of entry
twice on one day replaces the earlier entry.
Insights need enough logged days; when hasEnoughData is false, encourage the
user to keep logging rather than reading the numbers.""",
    stateless_http=True,
    transport_security=transport_security,
)

# Lazy-initialized client
_firestore_client: MindSpaceFirestoreClient | None = None


def get_firestore_client() -> MindSpaceFirestoreClient:
    """Get or create Firestore client."""
    global _firestore_client
    if _firestore_client is None:
        config = FirestoreConfig(
            project_id=os.environ.get("GOOGLE_CLOUD_PROJECT"),
            database=os.environ.get("FIRESTORE_DATABASE", "mindspace"),
        )
        _firestore_client = MindSpaceFirestoreClient(config)
    return _firestore_client


def get_user_id() -> str:
    """Get current authenticated user ID.

    Raises:
        RuntimeError: If no user is authenticated
    """
    user_id = current_user_id.get()
    if user_id is None:
        raise RuntimeError("No authenticated user. Ensure API key is provided.")
    return user_id


def _log(kind: EntryKind, entry_date: str | None, **fields) -> dict:
    """Validate and store an entry for the current user."""
    user_id = get_user_id()

    try:
        entry = service.new_entry(kind, date.today(), entry_date, **fields)
    except ValueError as e:
        return {"error": str(e)}

    if not service.log_entry(get_firestore_client(), user_id, entry):
        return {"error": f"Failed to save {kind.value} entry. Please try again."}

    return {"saved": kind.value, "entry": entry.model_dump(mode="json")}


# ==================== Logging Tools ====================


@mcp.tool()
def log_mood(mood: str, note: str | None = None, date_str: str | None = None) -> dict:
    """Record how the user feels.

    Args:
        mood: One of great, good, neutral, bad, awful
        note: Optional free-text note
        date_str: Day in YYYY-MM-DD format (defaults to today)

    Returns:
        The saved entry, or an error message
    """
    return _log(EntryKind.MOOD, date_str, mood=mood, note=note)


@mcp.tool()
def log_sleep(hours_slept: float, sleep_quality: int, date_str: str | None = None) -> dict:
    """Record last night's sleep.

    Args:
        hours_slept: Hours slept, 0 to 24
        sleep_quality: Subjective quality, 1 to 10
        date_str: Day in YYYY-MM-DD format (defaults to today)
    """
    return _log(EntryKind.SLEEP, date_str, hours_slept=hours_slept, sleep_quality=sleep_quality)


@mcp.tool()
def log_water(cups: int, date_str: str | None = None) -> dict:
    """Record cups of water drunk (0 to 30)."""
    return _log(EntryKind.WATER, date_str, cups=cups)


@mcp.tool()
def log_food(meals: str, feeling_after: str | None = None, date_str: str | None = None) -> dict:
    """Record the day's meals.

    Args:
        meals: Comma-separated meal names (e.g., "oats, salad, pasta")
        feeling_after: Optional note on how the user felt after eating
        date_str: Day in YYYY-MM-DD format (defaults to today)
    """
    return _log(EntryKind.FOOD, date_str, meals=meals, feeling_after=feeling_after)


@mcp.tool()
def log_gratitude(gratitude_items: str, date_str: str | None = None) -> dict:
    """Record things the user is grateful for, one per line."""
    return _log(EntryKind.GRATITUDE, date_str, gratitude_items=gratitude_items)


# ==================== Query Tools ====================


@mcp.tool()
def get_day(date_str: str | None = None) -> dict:
    """Get every entry logged on one day.

    Args:
        date_str: Day in YYYY-MM-DD format (defaults to today)

    Returns:
        Dictionary with one key per entry kind (null when not logged)
    """
    user_id = get_user_id()

    try:
        day = validate_entry_date(date_str or date.today().isoformat(), date.today())
    except ValueError as e:
        return {"error": str(e)}

    entries = service.get_day(get_firestore_client(), user_id, day)
    return {
        "date": day,
        **{
            kind: entry.model_dump(mode="json") if entry else None
            for kind, entry in entries.items()
        },
    }


@mcp.tool()
def delete_entry(kind: str, date_str: str) -> dict:
    """Delete one entry.

    Args:
        kind: One of mood, sleep, water, food, gratitude
        date_str: Day in YYYY-MM-DD format
    """
    user_id = get_user_id()

    try:
        entry_kind = EntryKind(kind)
    except ValueError:
        return {"error": f"Unknown entry kind: {kind}"}

    try:
        validate_entry_date(date_str, date.today())
    except ValueError as e:
        return {"error": str(e)}

    if not service.remove_entry(get_firestore_client(), user_id, entry_kind, date_str):
        return {"error": "Entry not found or delete failed."}
    return {"success": True, "deleted": kind, "date": date_str}


@mcp.tool()
def get_insights(time_range: str = "3m") -> dict:
    """Analyze how mood relates to sleep, water, gratitude and meals.

    Args:
        time_range: Window ending today: 1m, 3m, 6m or 1y

    Returns:
        Correlations, gratitude impact, meal ranking and the headline insight.
        Each section carries hasEnoughData; its numbers are 0 when false.
    """
    user_id = get_user_id()

    try:
        window = TimeRange(time_range)
    except ValueError:
        return {"error": "Invalid time range. Use 1m, 3m, 6m or 1y."}

    return service.load_insights(get_firestore_client(), user_id, window, date.today())
