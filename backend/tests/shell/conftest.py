"""Shared fixtures for shell tests."""

import pytest

from mindspace.core.models import EntryBundle, EntryKind, entry_kind


class MemoryStore:
    """Dict-backed stand-in for the Firestore client.

    Entries are keyed by (user_id, kind, date) like the real document paths.
    Every fetch_all window is recorded in `ranges`.
    """

    def __init__(self):
        self.entries = {}
        self.profiles = {}
        self.ranges = []

    def save_profile(self, profile):
        self.profiles[profile.user_id] = profile
        return True

    def get_profile(self, user_id):
        return self.profiles.get(user_id)

    def save_entry(self, user_id, entry):
        self.entries[(user_id, entry_kind(entry), entry.date)] = entry
        return True

    def get_entry(self, user_id, kind, date):
        return self.entries.get((user_id, kind, date))

    def delete_entry(self, user_id, kind, date):
        return self.entries.pop((user_id, kind, date), None) is not None

    def fetch_all(self, user_id, start_date, end_date):
        self.ranges.append((start_date, end_date))
        lists = {kind.value: [] for kind in EntryKind}
        for (owner, kind, day), entry in sorted(self.entries.items(), key=lambda item: item[0][2]):
            if owner == user_id and start_date <= day <= end_date:
                lists[kind.value].append(entry)
        return EntryBundle(**lists)


@pytest.fixture
def memory_store():
    return MemoryStore()
