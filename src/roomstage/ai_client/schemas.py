"""Structured output schemas for the room analysis call."""

from __future__ import annotations

ROOM_SIZES = ["small", "medium", "large"]

CEILING_HEIGHTS = ["standard", "high", "vaulted"]


def room_analysis_schema() -> dict:
    return {
        "name": "room_analysis",
        "schema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "roomType": {"type": "string"},
                "dimensions": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "estimated": {"type": "string", "enum": ROOM_SIZES},
                        "estimatedSqFt": {"type": "string"},
                        "ceilingHeight": {"type": "string", "enum": CEILING_HEIGHTS},
                    },
                    "required": ["estimated", "estimatedSqFt", "ceilingHeight"],
                },
                "features": {"type": "array", "items": {"type": "string"}},
                "lighting": {"type": "string"},
                "flooring": {"type": "string"},
                "windows": {"type": "integer", "minimum": 0},
            },
            "required": ["roomType", "dimensions", "features", "lighting", "flooring", "windows"],
        },
        "strict": True,
    }
