"""
Tests for the greedy room grouping engine.
"""
import logging

import pytest

from roomstage.grouping.embeddings import EmbeddingGenerator
from roomstage.grouping.engine import (
    SIMILARITY_THRESHOLD,
    SINGLETON_SIMILARITY,
    group_rooms,
    group_rooms_with_embeddings,
)
from roomstage.grouping.similarity import FEATURE_GATE, calculate_room_similarity


def _member_ids(groups):
    return [image_id for group in groups for image_id in group.image_ids]


class TestGroupRooms:

    def test_matching_angles_share_a_group(self, living_room_a, living_room_b, make_analysis):
        kitchen = make_analysis("img-k", room_type="Kitchen", flooring="tile", features=["island"])
        analyses = {"img-a": living_room_a, "img-k": kitchen, "img-b": living_room_b}

        groups = group_rooms(analyses)

        assert [group.image_ids for group in groups] == [["img-a", "img-b"], ["img-k"]]
        assert groups[0].room_type == "Living Room"
        assert groups[0].primary_image_id == "img-a"
        assert groups[0].similarity == FEATURE_GATE
        assert groups[1].similarity == SINGLETON_SIMILARITY

    def test_partition_covers_every_image_once(self, make_analysis):
        analyses = {
            f"img-{i}": make_analysis(
                f"img-{i}",
                room_type=["Kitchen", "Bedroom", "Bathroom"][i % 3],
                windows=i % 4,
                features=["window seat", "closet", "tub"][: (i % 3) + 1],
            )
            for i in range(12)
        }

        groups = group_rooms(analyses)
        members = _member_ids(groups)

        assert sorted(members) == sorted(analyses)
        assert len(members) == len(set(members))
        for group in groups:
            assert {analyses[image_id].room_type for image_id in group.image_ids} == {group.room_type}

    def test_empty_input(self):
        assert group_rooms({}) == []

    def test_group_ids_are_unique(self, make_analysis):
        analyses = {f"img-{i}": make_analysis(f"img-{i}", room_type=f"Room {i}") for i in range(4)}
        groups = group_rooms(analyses)
        assert len({group.id for group in groups}) == 4

    def test_rejects_non_mapping(self, living_room_a):
        with pytest.raises(TypeError):
            group_rooms([living_room_a])


class TestGroupRoomsWithEmbeddings:

    @pytest.mark.asyncio
    async def test_founder_only_comparison_is_not_transitive(self, make_analysis, fake_embedder):
        image1 = make_analysis("image1", room_type="Kitchen", flooring="tile", windows=0, features=["a", "b"])
        image2 = make_analysis("image2", room_type="Kitchen", flooring="tile", windows=1, features=["a", "b", "c"])
        image3 = make_analysis("image3", room_type="Kitchen", flooring="tile", windows=2, features=["b", "c"])
        assert calculate_room_similarity(image1, image2) >= SIMILARITY_THRESHOLD
        assert calculate_room_similarity(image2, image3) >= SIMILARITY_THRESHOLD
        assert calculate_room_similarity(image1, image3) < SIMILARITY_THRESHOLD

        generator = EmbeddingGenerator(fake_embedder())
        groups = await group_rooms_with_embeddings(
            {"image1": image1, "image2": image2, "image3": image3}, generator
        )

        assert [group.image_ids for group in groups] == [["image1", "image2"], ["image3"]]

    @pytest.mark.asyncio
    async def test_room_types_never_mix_and_singletons_report_sentinel(self, make_analysis, fake_embedder):
        analyses = {
            "living-1": make_analysis("living-1", features=["fireplace", "bay window"]),
            "bed-1": make_analysis("bed-1", room_type="Bedroom", flooring="carpet", windows=1, features=["closet"]),
            "living-2": make_analysis("living-2", features=["fireplace", "bay window"]),
            "bed-2": make_analysis("bed-2", room_type="Bedroom", flooring="hardwood", windows=4, features=["skylight"]),
            "living-3": make_analysis("living-3", flooring="tile", windows=6, features=["built-in shelves"]),
        }
        embedder = fake_embedder({"Living Room": [1.0, 0.0, 0.0], "Bedroom": [0.0, 1.0, 0.0]})

        groups = await group_rooms_with_embeddings(analyses, EmbeddingGenerator(embedder))

        assert [group.image_ids for group in groups] == [
            ["living-1", "living-2"],
            ["bed-1"],
            ["bed-2"],
            ["living-3"],
        ]
        for group in groups:
            assert {analyses[image_id].room_type for image_id in group.image_ids} == {group.room_type}
        assert groups[0].similarity == SIMILARITY_THRESHOLD
        assert [group.similarity for group in groups[1:]] == [1.0, 1.0, 1.0]

    @pytest.mark.asyncio
    async def test_embeddings_can_lift_a_pair_over_the_threshold(self, make_analysis, fake_embedder):
        a = make_analysis("img-a", flooring="hardwood", features=["fireplace"])
        b = make_analysis("img-b", flooring="oak hardwood", features=["fireplace"])
        analyses = {"img-a": a, "img-b": b}
        # Without embeddings: (0.25 + 0.25) / 0.8 = 0.625
        assert calculate_room_similarity(a, b) < SIMILARITY_THRESHOLD

        embedder = fake_embedder({"Living Room": [0.5, 0.5]})
        groups = await group_rooms_with_embeddings(analyses, EmbeddingGenerator(embedder))

        assert [group.image_ids for group in groups] == [["img-a", "img-b"]]

    @pytest.mark.asyncio
    async def test_embedding_failures_degrade_instead_of_failing(self, make_analysis, fake_embedder):
        a = make_analysis("img-a", flooring="hardwood", features=["fireplace"])
        b = make_analysis("img-b", flooring="oak hardwood", features=["fireplace"])
        embedder = fake_embedder(fail_for=["Living Room"])

        groups = await group_rooms_with_embeddings({"img-a": a, "img-b": b}, EmbeddingGenerator(embedder))

        assert [group.image_ids for group in groups] == [["img-a"], ["img-b"]]
        assert len(embedder.calls) == 2

    @pytest.mark.asyncio
    async def test_rejects_non_mapping(self, living_room_a, fake_embedder):
        with pytest.raises(TypeError):
            await group_rooms_with_embeddings([living_room_a], EmbeddingGenerator(fake_embedder()))

    @pytest.mark.asyncio
    async def test_match_log_includes_signal_breakdown(self, living_room_a, living_room_b, fake_embedder, caplog):
        embedder = fake_embedder({"Living Room": [1.0, 0.0]})

        with caplog.at_level(logging.DEBUG, logger="roomstage.grouping.engine"):
            await group_rooms_with_embeddings(
                {"img-a": living_room_a, "img-b": living_room_b}, EmbeddingGenerator(embedder)
            )

        matched = [record.getMessage() for record in caplog.records if record.getMessage().startswith("Matched")]
        assert matched == [
            "Matched img-b with img-a (score 0.917: flooring 1.00, windows 1.00, features 0.67, embedding 1.00)"
        ]
