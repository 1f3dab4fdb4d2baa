from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.exceptions import Unauthenticated


class IdentityProvider(Protocol):
    def current_user_id(self) -> Optional[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class AttendanceContext:
    """Who is acting. Identity is resolved by the caller, never by the core."""

    user_id: Optional[str]

    @classmethod
    def from_identity(cls, identity: IdentityProvider) -> "AttendanceContext":
        user_id = identity.current_user_id()
        return cls(user_id=str(user_id) if user_id else None)

    def require_user_id(self) -> str:
        if not self.user_id:
            raise Unauthenticated()
        return self.user_id
