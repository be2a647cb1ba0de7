"""
ChainContext - versioned snapshot of the process-wide connection state.

Components never mutate the context; every change produces a new instance
with a bumped version, so anything holding an old reference keeps a
consistent (if stale) view.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .binding import ContractBinding
from .provider import MODE_PROFILES, AccessMode, AccessProvider, ModeProfile
from .session import EMPTY_SESSION, Session


@dataclass(frozen=True)
class ChainContext:
    version: int
    mode: AccessMode
    provider: Optional[AccessProvider] = None
    session: Session = EMPTY_SESSION
    binding: Optional[ContractBinding] = None

    @property
    def profile(self) -> ModeProfile:
        return MODE_PROFILES[self.mode]

    def evolve(self, **changes) -> "ChainContext":
        return replace(self, version=self.version + 1, **changes)
