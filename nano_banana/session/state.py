"""Single owned session state object."""

from __future__ import annotations

from dataclasses import dataclass, field

from .artifacts import ArtifactTracker
from .credentials import CredentialResolver


@dataclass
class SessionState:
    credentials: CredentialResolver = field(default_factory=CredentialResolver)
    artifacts: ArtifactTracker = field(default_factory=ArtifactTracker)

    @classmethod
    def start(cls, credentials: CredentialResolver | None = None) -> SessionState:
        state = cls(credentials=credentials or CredentialResolver())
        state.credentials.resolve()
        return state
