"""Pairwise room similarity.

Two scorers share the same hard gate: rooms with different room types are
never the same room.

* ``is_same_room`` is the basic verdict used when no embeddings exist. The
  feature overlap must exceed ``FEATURE_GATE``, then flooring must match
  exactly and the window counts may differ by at most ``WINDOW_TOLERANCE``.
* ``calculate_room_similarity`` is the weighted score in [0, 1]. Signals that
  cannot be computed (missing or unusable embeddings) drop out of both the
  numerator and the denominator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from roomstage.analysis.models import RoomAnalysis

FEATURE_GATE = 0.6
WINDOW_TOLERANCE = 1
WINDOW_DECAY = 3

FLOORING_WEIGHT = 0.30
WINDOWS_WEIGHT = 0.25
FEATURES_WEIGHT = 0.25
EMBEDDING_WEIGHT = 0.20


@dataclass(frozen=True)
class SimilarityBreakdown:
    flooring: float
    windows: float
    features: float
    embedding: float | None
    score: float


def _feature_set(analysis: RoomAnalysis) -> set[str]:
    return {feature.lower() for feature in analysis.features}


def feature_overlap(a: RoomAnalysis, b: RoomAnalysis) -> float:
    features_a = _feature_set(a)
    features_b = _feature_set(b)
    union = features_a | features_b
    if not union:
        return 0.0
    return len(features_a & features_b) / len(union)


def window_score(a: RoomAnalysis, b: RoomAnalysis) -> float:
    diff = abs(a.windows - b.windows)
    return max(0.0, 1.0 - diff / WINDOW_DECAY)


def is_same_room(a: RoomAnalysis, b: RoomAnalysis) -> bool:
    if a.room_type != b.room_type:
        return False
    if feature_overlap(a, b) <= FEATURE_GATE:
        return False
    same_flooring = a.flooring == b.flooring
    similar_windows = abs(a.windows - b.windows) <= WINDOW_TOLERANCE
    return same_flooring and similar_windows


def _norms(u: np.ndarray, v: np.ndarray) -> tuple[float, float]:
    return float(np.linalg.norm(u)), float(np.linalg.norm(v))


def embedding_available(u: Sequence[float] | None, v: Sequence[float] | None) -> bool:
    if u is None or v is None or len(u) == 0 or len(v) == 0 or len(u) != len(v):
        return False
    norm_u, norm_v = _norms(np.asarray(u, dtype=float), np.asarray(v, dtype=float))
    return norm_u > 0 and norm_v > 0


def cosine_similarity(u: Sequence[float], v: Sequence[float]) -> float:
    """Cosine similarity, or 0.0 for empty, mismatched or zero-norm vectors."""
    if len(u) == 0 or len(u) != len(v):
        return 0.0
    a = np.asarray(u, dtype=float)
    b = np.asarray(v, dtype=float)
    norm_a, norm_b = _norms(a, b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def score_breakdown(
    a: RoomAnalysis,
    b: RoomAnalysis,
    embedding_a: Sequence[float] | None = None,
    embedding_b: Sequence[float] | None = None,
) -> SimilarityBreakdown:
    if a.room_type != b.room_type:
        return SimilarityBreakdown(flooring=0.0, windows=0.0, features=0.0, embedding=None, score=0.0)

    flooring = 1.0 if a.flooring == b.flooring else 0.0
    windows = window_score(a, b)
    features = feature_overlap(a, b)

    total = FLOORING_WEIGHT * flooring + WINDOWS_WEIGHT * windows + FEATURES_WEIGHT * features
    weights = FLOORING_WEIGHT + WINDOWS_WEIGHT + FEATURES_WEIGHT

    embedding = None
    if embedding_available(embedding_a, embedding_b):
        # Kept signed: photos of the same room embed with strongly positive similarity
        embedding = cosine_similarity(embedding_a, embedding_b)
        total += EMBEDDING_WEIGHT * embedding
        weights += EMBEDDING_WEIGHT

    return SimilarityBreakdown(
        flooring=flooring,
        windows=windows,
        features=features,
        embedding=embedding,
        score=total / weights,
    )


def calculate_room_similarity(
    a: RoomAnalysis,
    b: RoomAnalysis,
    embedding_a: Sequence[float] | None = None,
    embedding_b: Sequence[float] | None = None,
) -> float:
    return score_breakdown(a, b, embedding_a, embedding_b).score
