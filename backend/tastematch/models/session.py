from __future__ import annotations

from dataclasses import dataclass

from .profile import TasteProfile


@dataclass(slots=True)
class ComparisonSession:
    session_id: str
    user1_profile: TasteProfile
    created_at: float
    expires_at: float

    # Bearer tokens stay in memory only, so refreshes fetch each side with its own grant
    user1_token: str | None = None
    user2_profile: TasteProfile | None = None
    user2_token: str | None = None

    time_range: str = "medium_term"

    @property
    def has_user2(self) -> bool:
        return self.user2_profile is not None

    @property
    def participant_ids(self) -> tuple[str, ...]:
        ids = [self.user1_profile.user.id]
        if self.user2_profile is not None:
            ids.append(self.user2_profile.user.id)
        return tuple(ids)

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at

    def to_dict(self) -> dict[str, object]:
        """JSON-safe summary; tokens and full profiles are never serialised."""
        return {
            "sessionId": self.session_id,
            "user1": self.user1_profile.user.to_dict(),
            "user2": self.user2_profile.user.to_dict() if self.user2_profile else None,
            "hasUser2": self.has_user2,
            "timeRange": self.time_range,
            "createdAt": self.created_at,
            "expiresAt": self.expires_at,
        }
