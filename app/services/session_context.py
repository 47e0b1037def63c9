# app/services/session_context.py
"""
Authentication context for calls to the upstream pass-request API.

Constructed explicitly and handed to whatever needs it (the API client, the
request dependency). Whoever owns the session decides what "expired" means
for them through the on_expired callback.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AuthSession:
    access_token: Optional[str] = None
    on_expired: Optional[Callable[[], None]] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def headers(self) -> dict:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def expire(self) -> None:
        """Drop the token and notify the owner. Safe to call more than once."""
        was_authenticated = self.is_authenticated
        self.access_token = None
        if was_authenticated:
            logger.warning("Upstream API rejected the session token, session expired")
        if self.on_expired is not None:
            self.on_expired()
