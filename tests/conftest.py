"""
Pytest configuration and fixtures for roomstage tests.
"""
import pytest

from roomstage.analysis.models import RoomAnalysis


@pytest.fixture
def make_analysis():
    """Factory for RoomAnalysis records with sensible defaults."""
    def _make(image_id, room_type="Living Room", flooring="hardwood", windows=2, features=(), lighting="bright"):
        return RoomAnalysis(
            image_id=image_id,
            room_type=room_type,
            flooring=flooring,
            windows=windows,
            lighting=lighting,
            features=tuple(features),
        )
    return _make


@pytest.fixture
def living_room_a(make_analysis):
    return make_analysis("img-a", features=["fireplace", "bay window"])


@pytest.fixture
def living_room_b(make_analysis):
    return make_analysis("img-b", features=["fireplace", "bay window", "crown molding"])


class FakeEmbedder:
    """Deterministic stand-in for an embedding backend, keyed by room type."""

    def __init__(self, vectors=None, fail_for=()):
        self.vectors = vectors or {}
        self.fail_for = set(fail_for)
        self.calls = []

    def __call__(self, text):
        self.calls.append(text)
        for marker in self.fail_for:
            if marker in text:
                raise RuntimeError("quota exceeded")
        for marker, vector in self.vectors.items():
            if marker in text:
                return list(vector)
        return []


@pytest.fixture
def fake_embedder():
    return FakeEmbedder
