from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Artist:
    id: str
    name: str
    genres: tuple[str, ...] = ()
    images: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "genres": list(self.genres),
            "images": [{"url": url} for url in self.images],
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Artist":
        images = tuple(img["url"] for img in data.get("images") or [] if img and img.get("url"))
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            genres=tuple(data.get("genres") or ()),
            images=images,
        )
