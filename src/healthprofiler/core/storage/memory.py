"""In-memory profile store: used when no encrypted data bank is configured.

State lives on the store instance, not at module level, so each server
(and each test) owns its own store.
"""

from __future__ import annotations

import copy
import logging

from healthprofiler.domains.lifestyle.domain_logic.models import (
    FullProfile,
    PersonalizationWeights,
)

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = 50


class MemoryProfileStore:
    """ProfileStore backed by plain Python containers.

    Profiles are kept newest first and capped at ``retention``. Values are
    copied on the way in and out so callers never share state with the store.
    """

    def __init__(self, retention: int = DEFAULT_RETENTION) -> None:
        if retention < 1:
            raise ValueError("retention must be at least 1")
        self._retention = retention
        self._profiles: list[FullProfile] = []
        self._weights: dict[str, PersonalizationWeights] = {}

    @property
    def backend(self) -> str:
        return "memory"

    def get_weights(self, session_id: str) -> PersonalizationWeights:
        weights = self._weights.get(session_id)
        if weights is None:
            weights = PersonalizationWeights()
            self._weights[session_id] = weights
            logger.debug("Created default weights for session %s", session_id)
        return copy.deepcopy(weights)

    def set_weights(self, session_id: str, weights: PersonalizationWeights) -> None:
        self._weights[session_id] = copy.deepcopy(weights)

    def save_profile(self, profile: FullProfile) -> None:
        self._profiles.insert(0, copy.deepcopy(profile))
        del self._profiles[self._retention:]
        logger.info("Saved profile %s (memory, %d retained)", profile.id, len(self._profiles))

    def list_profiles(self) -> list[FullProfile]:
        return copy.deepcopy(self._profiles)

    def count_profiles(self) -> int:
        return len(self._profiles)

    def get_profile(self, profile_id: str) -> FullProfile | None:
        for profile in self._profiles:
            if profile.id == profile_id:
                return copy.deepcopy(profile)
        return None
