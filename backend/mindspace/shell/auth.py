"""Authentication - API keys bound to MindSpace user profiles.

A user registers with a name and email and receives an `msp_` API key once.
Only the key's hash is kept: it is the id of the `users/{user_id}` profile
document under which all of the user's entries live. Presenting the key later
resolves back to that profile.
"""

import hashlib
import logging
import secrets
from typing import Protocol

from ..core.models import UserProfile
from ..core.validation import validate_email, validate_name


logger = logging.getLogger(__name__)

API_KEY_PREFIX = "msp_"
MIN_API_KEY_LENGTH = 40


class ProfileStore(Protocol):
    """Profile persistence needed for registration and sign-in."""

    def save_profile(self, profile: UserProfile) -> bool: ...

    def get_profile(self, user_id: str) -> UserProfile | None: ...


class RegistrationError(RuntimeError):
    """The profile could not be stored."""


def generate_api_key() -> str:
    """Random key in the form msp_<urlsafe chars>."""
    return f"{API_KEY_PREFIX}{secrets.token_urlsafe(32)}"


def hash_api_key(api_key: str) -> str:
    """SHA256 of the key, truncated to 32 hex chars; used as the user id."""
    return hashlib.sha256(api_key.encode()).hexdigest()[:32]


def validate_api_key_format(api_key: str | None) -> bool:
    """Reject empty, wrong-prefix or too-short keys without a lookup."""
    return bool(api_key) and api_key.startswith(API_KEY_PREFIX) and len(api_key) >= MIN_API_KEY_LENGTH


def bearer_token(authorization: str) -> str | None:
    """Extract the token from an `Authorization: Bearer ...` header value."""
    if not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None


def register(store: ProfileStore, name: str | None, email: str | None) -> tuple[str, UserProfile]:
    """Create a profile and the API key that unlocks it.

    Args:
        store: Profile persistence
        name: Display name (2-20 letters, spaces or hyphens)
        email: Contact address

    Returns:
        (api_key, profile). The key is not stored and cannot be shown again.

    Raises:
        ValueError: If the name or email is invalid
        RegistrationError: If the profile could not be saved
    """
    profile_name = validate_name(name)
    profile_email = validate_email(email)

    api_key = generate_api_key()
    profile = UserProfile(
        name=profile_name,
        email=profile_email,
        api_key_hash=hash_api_key(api_key),
    )

    if not store.save_profile(profile):
        raise RegistrationError("Profile could not be saved")

    logger.info("Registered %s", profile.user_id[:8])
    return api_key, profile


def authenticate(store: ProfileStore, authorization: str) -> UserProfile | None:
    """Resolve an Authorization header to the caller's profile.

    Returns:
        The profile, or None for a missing, malformed or unknown key
    """
    api_key = bearer_token(authorization)
    if not validate_api_key_format(api_key):
        return None

    profile = store.get_profile(hash_api_key(api_key))
    if profile is None:
        logger.warning("API key not found in database")
        return None

    logger.debug("Authenticated user: %s", profile.user_id[:8])
    return profile
