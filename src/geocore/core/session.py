"""Session state shared by every operation.

A `Session` is created once from configuration and handed to the request
engine. `token` and `user_id` are written only by `Geocore.login` and
`Geocore.logout`, from the caller's own flow, never from request completions:
a single-writer invariant, not a lock.
"""

from __future__ import annotations

from dataclasses import dataclass

from geocore.core.config import GeocoreSettings


@dataclass
class Session:
    base_url: str | None = None
    project_id: str | None = None
    user_id: str | None = None
    token: str | None = None

    @classmethod
    def from_settings(cls, settings: GeocoreSettings) -> "Session":
        base_url = settings.base_url.rstrip("/") if settings.base_url else None
        return cls(base_url=base_url, project_id=settings.project_id)

    @property
    def logged_in(self) -> bool:
        return self.token is not None

    def authenticate(self, user_id: str, token: str) -> None:
        self.user_id = user_id
        self.token = token

    def clear(self) -> None:
        self.token = None
        self.user_id = None
