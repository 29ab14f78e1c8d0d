from dataclasses import dataclass

from .config import ADMIN_USERS, APPROVED_USERS, OPEN_ACCESS


@dataclass(frozen=True)
class Profile:
    user_id: str
    email: str | None = None
    is_approved: bool = False
    is_admin: bool = False

    @property
    def may_chat(self) -> bool:
        return self.is_approved or self.is_admin


class ProfileDirectory:
    """In-process view of the account system's approval flags.

    Unknown users are treated as pending approval unless open access is on.
    """

    def __init__(self, profiles: list[Profile] | None = None, open_access: bool = False) -> None:
        self._profiles = {p.user_id: p for p in profiles or []}
        self._open_access = open_access

    @classmethod
    def from_config(cls) -> "ProfileDirectory":
        profiles = [
            Profile(user_id=uid, is_approved=True, is_admin=uid in ADMIN_USERS)
            for uid in sorted(APPROVED_USERS | ADMIN_USERS)
        ]
        return cls(profiles, open_access=OPEN_ACCESS)

    def register(self, profile: Profile) -> None:
        self._profiles[profile.user_id] = profile

    def may_chat(self, user_id: str) -> bool:
        if self._open_access:
            return True
        profile = self._profiles.get(user_id)
        return profile is not None and profile.may_chat
