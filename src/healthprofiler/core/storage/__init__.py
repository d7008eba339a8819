"""Profile storage: abstraction layer for profiles and session weights."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from healthprofiler.domains.lifestyle.domain_logic.models import (
    FullProfile,
    PersonalizationWeights,
)


@runtime_checkable
class ProfileStore(Protocol):
    """Abstract interface for profile and personalization persistence.

    The pipeline and tools call these methods without knowing whether
    data lives in process memory or in the encrypted SQLite data bank.
    Concurrent writes for the same session are last-write-wins.
    """

    def get_weights(self, session_id: str) -> PersonalizationWeights:
        """Weights for a session, created empty (and retained) on first access."""
        ...

    def set_weights(self, session_id: str, weights: PersonalizationWeights) -> None:
        """Replace the stored weights for a session."""
        ...

    def save_profile(self, profile: FullProfile) -> None:
        """Persist a profile, keeping only the most recent retained entries."""
        ...

    def list_profiles(self) -> list[FullProfile]:
        """Stored profiles, newest first."""
        ...

    def get_profile(self, profile_id: str) -> FullProfile | None:
        """A retained profile by id, or None."""
        ...

    def count_profiles(self) -> int:
        """Number of profiles currently retained."""
        ...

    @property
    def backend(self) -> str:
        """Label for the active backend: 'memory' or 'sqlite'."""
        ...
