"""Room grouping: partition analyzed images into physical rooms.

Both variants make a single greedy pass. Each unvisited image founds a group
and absorbs every later unvisited image that matches the founder. Members are
compared with the founder only, never with each other, so the grouping is not
a transitive closure and depends on input order.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, TYPE_CHECKING

from roomstage.analysis.models import RoomAnalysis, RoomGroup
from roomstage.grouping.similarity import FEATURE_GATE, is_same_room, score_breakdown

if TYPE_CHECKING:
    from roomstage.grouping.embeddings import EmbeddingGenerator

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.65
SINGLETON_SIMILARITY = 1.0

MatchFn = Callable[[str, str], bool]


def _check_mapping(analyses: object) -> None:
    if not isinstance(analyses, Mapping):
        raise TypeError(f"analyses must be a mapping of image id to RoomAnalysis, got {type(analyses).__name__}")


def _greedy_partition(
    analyses: Mapping[str, RoomAnalysis],
    matches: MatchFn,
    group_similarity: float,
) -> list[RoomGroup]:
    image_ids = list(analyses)
    processed: set[str] = set()
    groups: list[RoomGroup] = []

    for i, founder in enumerate(image_ids):
        if founder in processed:
            continue
        members = [founder]
        processed.add(founder)

        for candidate in image_ids[i + 1:]:
            if candidate in processed:
                continue
            if matches(founder, candidate):
                members.append(candidate)
                processed.add(candidate)

        groups.append(
            RoomGroup(
                image_ids=members,
                room_type=analyses[founder].room_type,
                similarity=group_similarity if len(members) > 1 else SINGLETON_SIMILARITY,
            )
        )

    return groups


def group_rooms(analyses: Mapping[str, RoomAnalysis]) -> list[RoomGroup]:
    """Group rooms with the basic feature/flooring/window verdict."""
    _check_mapping(analyses)

    def matches(founder: str, candidate: str) -> bool:
        return is_same_room(analyses[founder], analyses[candidate])

    groups = _greedy_partition(analyses, matches, FEATURE_GATE)
    logger.info("Grouped %d images into %d rooms", len(analyses), len(groups))
    return groups


async def group_rooms_with_embeddings(
    analyses: Mapping[str, RoomAnalysis],
    generator: EmbeddingGenerator,
    threshold: float = SIMILARITY_THRESHOLD,
) -> list[RoomGroup]:
    """Group rooms with the weighted score, embeddings included where available."""
    _check_mapping(analyses)
    embeddings = await generator.generate_all(analyses)

    def matches(founder: str, candidate: str) -> bool:
        breakdown = score_breakdown(
            analyses[founder],
            analyses[candidate],
            embeddings.get(founder),
            embeddings.get(candidate),
        )
        if breakdown.score >= threshold:
            logger.debug(
                "Matched %s with %s (score %.3f: flooring %.2f, windows %.2f, features %.2f, embedding %s)",
                candidate,
                founder,
                breakdown.score,
                breakdown.flooring,
                breakdown.windows,
                breakdown.features,
                "n/a" if breakdown.embedding is None else f"{breakdown.embedding:.2f}",
            )
            return True
        return False

    groups = _greedy_partition(analyses, matches, threshold)
    logger.info("Grouped %d images into %d rooms using embeddings", len(analyses), len(groups))
    return groups
