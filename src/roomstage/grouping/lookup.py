"""Helpers for resolving staging rooms from groups."""

from __future__ import annotations

from typing import Iterable, Sequence

from roomstage.analysis.models import RoomGroup


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def generate_room_seed(group_id: str) -> int:
    """Deterministic seed in [0, 1_000_000) so furniture stays consistent across views."""
    value = 0
    for char in group_id:
        value = _to_int32((value << 5) - value + ord(char))
    return abs(value) % 1_000_000


def find_group(image_id: str, groups: Iterable[RoomGroup]) -> RoomGroup | None:
    return next((group for group in groups if image_id in group.image_ids), None)


def get_room_config_id(image_id: str, groups: Iterable[RoomGroup]) -> str:
    group = find_group(image_id, groups)
    return group.id if group else image_id


def get_room_images(room_id: str, image_ids: Sequence[str], groups: Iterable[RoomGroup]) -> list[str]:
    group = next((group for group in groups if group.id == room_id), None)
    if group:
        members = set(group.image_ids)
        return [image_id for image_id in image_ids if image_id in members]
    return [image_id for image_id in image_ids if image_id == room_id]
