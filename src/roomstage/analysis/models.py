"""Room analysis and grouping records."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

EmbeddingVector = list[float]

UNKNOWN_ROOM_TYPE = "Unknown Room"


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _dedupe(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        values = [values]
    seen: dict[str, None] = {}
    for value in values:
        text = str(value).strip()
        if text:
            seen.setdefault(text, None)
    return tuple(seen)


def _as_int(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class RoomDimensions:
    size: str | None = None
    estimated_sq_ft: str | None = None
    ceiling_height: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> RoomDimensions | None:
        if not data or not isinstance(data, Mapping):
            return None
        return cls(
            size=_pick(data, "size", "estimated"),
            estimated_sq_ft=_pick(data, "estimated_sq_ft", "estimatedSqFt"),
            ceiling_height=_pick(data, "ceiling_height", "ceilingHeight"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class RoomAnalysis:
    image_id: str
    room_type: str
    flooring: str = ""
    windows: int = 0
    lighting: str = ""
    features: tuple[str, ...] = ()
    dimensions: RoomDimensions | None = None
    project_id: str | None = None
    confidence: float | None = None

    @classmethod
    def from_dict(cls, image_id: str, data: Mapping[str, Any]) -> RoomAnalysis:
        """Build a record from a model response or stored row.

        Accepts camelCase and snake_case keys. Missing features become an
        empty tuple, missing windows become 0.
        """
        confidence = data.get("confidence")
        return cls(
            image_id=str(_pick(data, "image_id", "imageId") or image_id),
            room_type=str(_pick(data, "room_type", "roomType") or UNKNOWN_ROOM_TYPE),
            flooring=str(data.get("flooring") or ""),
            windows=_as_int(data.get("windows")),
            lighting=str(data.get("lighting") or ""),
            features=_dedupe(data.get("features")),
            dimensions=RoomDimensions.from_dict(data.get("dimensions")),
            project_id=_pick(data, "project_id", "projectId"),
            confidence=float(confidence) if confidence is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "image_id": self.image_id,
            "project_id": self.project_id,
            "room_type": self.room_type,
            "flooring": self.flooring,
            "windows": self.windows,
            "lighting": self.lighting,
            "features": list(self.features),
            "dimensions": self.dimensions.to_dict() if self.dimensions else {},
            "confidence": self.confidence,
        }


@dataclass
class RoomGroup:
    image_ids: list[str]
    room_type: str
    similarity: float
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def primary_image_id(self) -> str:
        return self.image_ids[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "image_ids": list(self.image_ids),
            "room_type": self.room_type,
            "primary_image_id": self.primary_image_id,
            "similarity": self.similarity,
        }
