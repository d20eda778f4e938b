"""Firestore Client - Persistence for wellness entries.

This module handles all database I/O for entry logging and retrieval.
All I/O is contained here; business logic is in the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

from google.cloud import firestore
from pydantic import ValidationError

from ..core.models import ENTRY_MODELS, Entry, EntryBundle, EntryKind, UserProfile, entry_kind


logger = logging.getLogger(__name__)


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
    """

    project_id: str | None = None
    database: str | None = None


class MindSpaceFirestoreClient:
    """Client for persisting wellness entries to Firestore.

    Document structure per user, one document per kind and day:
        users/{user_id}: { name, email, api_key_hash, created_at }
        users/{user_id}/
            mood/{YYYY-MM-DD}: { date, mood, note, created_at }
            sleep/{YYYY-MM-DD}: { date, hours_slept, sleep_quality, created_at }
            water/{YYYY-MM-DD}: { date, cups, created_at }
            food/{YYYY-MM-DD}: { date, meals, feeling_after, created_at }
            gratitude/{YYYY-MM-DD}: { date, gratitude_items, created_at }

    Keying by date keeps at most one entry of each kind per day; logging the
    same kind again on a day replaces the earlier entry.
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _user_ref(self, user_id: str) -> firestore.DocumentReference:
        """Get reference to user document."""
        return self.client.collection("users").document(user_id)

    def _entries_ref(self, user_id: str, kind: EntryKind) -> firestore.CollectionReference:
        """Get reference to one entry collection of a user."""
        return self._user_ref(user_id).collection(kind.value)

    def _entry_ref(self, user_id: str, kind: EntryKind, date: str) -> firestore.DocumentReference:
        """Get reference to the entry document for a day."""
        return self._entries_ref(user_id, kind).document(date)

    def _to_entry(self, kind: EntryKind, data: dict[str, Any]) -> Entry | None:
        """Validate a stored document, or None if it no longer fits the model."""
        try:
            return ENTRY_MODELS[kind](**data)
        except ValidationError as e:
            logger.warning("Skipping invalid %s entry %s: %s", kind.value, data.get("date"), e)
            return None

    # ==================== Profile Operations ====================

    def save_profile(self, profile: UserProfile) -> bool:
        """Create or replace the profile document of a user.

        Returns:
            True if successful
        """
        logger.info("Saving profile for %s", profile.user_id[:8])
        try:
            self._user_ref(profile.user_id).set(profile.model_dump())
            return True
        except Exception as e:
            logger.error("Failed to save profile: %s", str(e))
            return False

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Fetch a user's profile, or None if missing or unreadable."""
        try:
            doc = self._user_ref(user_id).get()
            if not doc.exists:
                return None
            return UserProfile(**doc.to_dict())
        except ValidationError as e:
            logger.warning("Invalid profile for %s: %s", user_id[:8], e)
            return None
        except Exception as e:
            logger.error("Failed to fetch profile: %s", str(e))
            return None

    # ==================== Entry Operations ====================

    def save_entry(self, user_id: str, entry: Entry) -> bool:
        """Save an entry, replacing any entry of the same kind on that day.

        Args:
            user_id: The user's ID
            entry: The entry to save

        Returns:
            True if successful
        """
        kind = entry_kind(entry)
        logger.info("Saving %s entry for %s on %s", kind.value, user_id[:8], entry.date)
        try:
            self._entry_ref(user_id, kind, entry.date).set(entry.model_dump(mode="json"))
            return True
        except Exception as e:
            logger.error("Failed to save %s entry: %s", kind.value, str(e))
            return False

    def get_entry(self, user_id: str, kind: EntryKind, date: str) -> Entry | None:
        """Fetch the entry of one kind for a day.

        Args:
            user_id: The user's ID
            kind: Entry kind
            date: Day in YYYY-MM-DD format

        Returns:
            The entry if found, None otherwise
        """
        logger.debug("Fetching %s entry for %s on %s", kind.value, user_id[:8], date)
        try:
            doc = self._entry_ref(user_id, kind, date).get()
            if not doc.exists:
                return None
            return self._to_entry(kind, doc.to_dict())
        except Exception as e:
            logger.error("Failed to fetch %s entry: %s", kind.value, str(e))
            return None

    def delete_entry(self, user_id: str, kind: EntryKind, date: str) -> bool:
        """Delete the entry of one kind for a day.

        Args:
            user_id: The user's ID
            kind: Entry kind
            date: Day in YYYY-MM-DD format

        Returns:
            True if an entry existed and was deleted
        """
        logger.info("Deleting %s entry for %s on %s", kind.value, user_id[:8], date)
        try:
            ref = self._entry_ref(user_id, kind, date)
            if not ref.get().exists:
                logger.warning("Entry not found: %s on %s", kind.value, date)
                return False
            ref.delete()
            return True
        except Exception as e:
            logger.error("Failed to delete %s entry: %s", kind.value, str(e))
            return False

    def fetch_entries(
        self, user_id: str, kind: EntryKind, start_date: str, end_date: str
    ) -> list[Entry]:
        """Fetch entries of one kind for a date range.

        Args:
            user_id: The user's ID
            kind: Entry kind
            start_date: Start of range (inclusive, YYYY-MM-DD)
            end_date: End of range (inclusive, YYYY-MM-DD)

        Returns:
            Entries found, ascending by date (may be empty)
        """
        logger.debug(
            "Fetching %s entries for %s from %s to %s",
            kind.value, user_id[:8], start_date, end_date,
        )
        entries: list[Entry] = []

        try:
            query = (
                self._entries_ref(user_id, kind)
                .where("date", ">=", start_date)
                .where("date", "<=", end_date)
                .order_by("date")
            )

            for doc in query.stream():
                entry = self._to_entry(kind, doc.to_dict())
                if entry is not None:
                    entries.append(entry)

            logger.debug("Found %d %s entries in range", len(entries), kind.value)
            return entries
        except Exception as e:
            logger.error("Failed to fetch %s entries: %s", kind.value, str(e))
            return []

    def fetch_all(self, user_id: str, start_date: str, end_date: str) -> EntryBundle:
        """Fetch every kind of entry for a date range.

        Args:
            user_id: The user's ID
            start_date: Start of range (inclusive, YYYY-MM-DD)
            end_date: End of range (inclusive, YYYY-MM-DD)

        Returns:
            EntryBundle with one list per kind
        """
        return EntryBundle(**{
            kind.value: self.fetch_entries(user_id, kind, start_date, end_date)
            for kind in EntryKind
        })
