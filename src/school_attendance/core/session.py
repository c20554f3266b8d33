from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Role
from .exceptions import AuthorizationError

HOME_PATHS = {
    Role.ADMIN: "/admin",
    Role.PARENT: "/parent",
    Role.TEACHER: "/teacher",
}


@dataclass(frozen=True)
class SessionContext:
    """Who is calling, resolved once per request and passed to every service call.

    `user_id` is None only for the configured admin, which has no directory record.
    """

    role: Role
    user_id: Optional[str] = None

    @property
    def home_path(self) -> str:
        return HOME_PATHS[self.role]

    def require(self, *roles: Role) -> None:
        if self.role not in roles:
            raise AuthorizationError("You do not have permission for this action")
