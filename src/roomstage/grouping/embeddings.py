"""Room embeddings for semantic similarity."""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from typing import Callable, Mapping, TYPE_CHECKING

from roomstage.analysis.models import EmbeddingVector, RoomAnalysis

if TYPE_CHECKING:
    from roomstage.utils.request_queue import RequestQueue

logger = logging.getLogger(__name__)

EmbedFn = Callable[[str], EmbeddingVector]


def build_room_description(analysis: RoomAnalysis) -> str:
    dimensions = analysis.dimensions.to_dict() if analysis.dimensions else {}
    lines = [
        f"Room Type: {analysis.room_type}",
        f"Flooring: {analysis.flooring}",
        f"Windows: {analysis.windows}",
        f"Lighting: {analysis.lighting}",
        f"Features: {', '.join(analysis.features)}",
        f"Dimensions: {json.dumps(dimensions, sort_keys=True)}",
    ]
    return "\n".join(lines)


class EmbeddingGenerator:
    """Turns room analyses into embedding vectors.

    Failures never propagate: any error from ``embed`` yields an empty vector,
    which the scorer treats as "no embedding available". Successful vectors
    are cached by description text for the lifetime of the generator, and
    concurrent requests for the same description wait on a single call.
    Callers always get their own list.
    """

    def __init__(self, embed: EmbedFn, queue: RequestQueue | None = None) -> None:
        self._embed = embed
        self._queue = queue
        self._cache: dict[str, tuple[float, ...]] = {}
        self._pending: dict[str, asyncio.Task] = {}

    @staticmethod
    def _cache_key(text: str) -> str:
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _call(self, text: str, request_id: str) -> EmbeddingVector:
        if self._queue is not None:
            return await self._queue.submit(self._embed, text, request_id=request_id)
        return await asyncio.to_thread(self._embed, text)

    async def _fetch(self, key: str, text: str, image_id: str) -> tuple[float, ...]:
        try:
            vector = tuple(float(value) for value in await self._call(text, f"embed-{image_id}"))
        except Exception as exc:  # noqa: BLE001 - degrade to "no embedding"
            logger.warning("Error generating embedding for %s: %s", image_id, exc)
            return ()

        if vector:
            self._cache[key] = vector
        else:
            logger.warning("Empty embedding returned for %s", image_id)
        return vector

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    async def generate(self, analysis: RoomAnalysis) -> EmbeddingVector:
        text = build_room_description(analysis)
        key = self._cache_key(text)
        cached = self._cache.get(key)
        if cached is not None:
            return list(cached)

        # Identical descriptions already in flight share one model call
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key, text, analysis.image_id))
            self._pending[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        return list(await asyncio.shield(task))

    async def generate_all(self, analyses: Mapping[str, RoomAnalysis]) -> dict[str, EmbeddingVector]:
        image_ids = list(analyses)
        vectors = await asyncio.gather(*(self.generate(analyses[image_id]) for image_id in image_ids))
        embeddings = dict(zip(image_ids, vectors))
        logger.info(
            "Generated embeddings for %d/%d images",
            sum(1 for vector in vectors if vector),
            len(image_ids),
        )
        return embeddings
