"""Persisted user profile and dietary preferences."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import UserProfile

if TYPE_CHECKING:
    from .db import KeyValueStore

logger = logging.getLogger(__name__)

PROFILE_KEY = "spicesync_profile"


class ProfileStore:
    """Reads and writes the whole user profile under one key."""

    def __init__(self, store: KeyValueStore, key: str = PROFILE_KEY) -> None:
        self._store = store
        self._key = key

    def load(self) -> UserProfile:
        data = self._store.get(self._key)
        if data is None:
            return UserProfile()
        return UserProfile.from_dict(data)

    def save(self, profile: UserProfile) -> None:
        self._store.set(self._key, profile.to_dict())
        logger.info("Saved profile for %s", profile.name)
