from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class SpotifyUser:
    id: str
    display_name: str
    images: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "images": [{"url": url} for url in self.images],
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SpotifyUser":
        user_id = data.get("id") or ""
        images = tuple(img["url"] for img in data.get("images") or [] if img and img.get("url"))
        return cls(
            id=user_id,
            # Spotify returns null display names for some accounts
            display_name=data.get("display_name") or user_id,
            images=images,
        )
