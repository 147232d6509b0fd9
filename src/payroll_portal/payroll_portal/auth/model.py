from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import Role
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Principal:
    """Authenticated identity, independent of its authorization profile."""

    uid: str
    email: str


@dataclass(frozen=True)
class Account:
    """Identity provider record.

    Note: password_hash is a werkzeug hash, never the raw password.
    """

    uid: str
    email: str
    password_hash: str
    is_active: bool = True


@dataclass(frozen=True)
class UserProfile:
    role: Role
    team_id: Optional[str] = None

    def __post_init__(self):
        if self.role == Role.TEAM and not self.team_id:
            raise ValidationError("Team profile without teamId")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role.value}
        if self.role == Role.TEAM:
            data["teamId"] = self.team_id
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        try:
            role = Role(data.get("role"))
        except ValueError:
            raise ValidationError(f"Unknown role: {data.get('role')!r}")
        team_id = data.get("teamId")
        return cls(role=role, team_id=str(team_id) if role == Role.TEAM and team_id not in (None, "") else None)


@dataclass(frozen=True)
class UserSession:
    principal: Principal
    profile: UserProfile
