"""Project processing pipeline: photos in, room groups out."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from roomstage.analysis.models import RoomAnalysis, RoomGroup
from roomstage.analysis.room_analysis import run_room_analysis
from roomstage.grouping.embeddings import EmbeddingGenerator
from roomstage.grouping.engine import group_rooms, group_rooms_with_embeddings
from roomstage.grouping.lookup import generate_room_seed
from roomstage.io.image_loader import list_image_files, load_images_as_data_urls
from roomstage.utils.request_queue import RequestQueue

if TYPE_CHECKING:
    from roomstage.ai_client.responses import LLMClient

logger = logging.getLogger(__name__)


async def _analyze_images(
    images_with_urls: list[tuple[Path, str]],
    project_id: str,
    client: LLMClient,
    queue: RequestQueue,
) -> dict[str, RoomAnalysis]:
    logger.info("Analyzing %d images (queued to respect rate limits)", len(images_with_urls))
    tasks = [
        queue.submit(
            run_room_analysis,
            client,
            path.name,
            data_url,
            project_id,
            request_id=f"analyze-{path.name}",
        )
        for path, data_url in images_with_urls
    ]
    results = await asyncio.gather(*tasks)
    # Keep folder order: it is the grouping order
    return {analysis.image_id: analysis for analysis in results}


def _group_entry(group: RoomGroup) -> dict:
    return {**group.to_dict(), "seed": generate_room_seed(group.id)}


async def _process_images(
    project_id: str,
    image_paths: list[Path],
    client: LLMClient,
    use_embeddings: bool,
    queue: RequestQueue,
) -> dict:
    if not image_paths:
        logger.warning("No images found for project %s", project_id)

    images_with_urls = load_images_as_data_urls(image_paths)
    analyses = await _analyze_images(images_with_urls, project_id, client, queue)

    if use_embeddings:
        generator = EmbeddingGenerator(client.embed, queue=queue)
        groups = await group_rooms_with_embeddings(analyses, generator)
    else:
        groups = group_rooms(analyses)

    for group in groups:
        if len(group.image_ids) > 1:
            logger.info("Room %s (%s): %s", group.id, group.room_type, ", ".join(group.image_ids))

    return {
        "project_id": project_id,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "grouping": "embeddings" if use_embeddings else "basic",
        "analyses": [analysis.to_dict() for analysis in analyses.values()],
        "groups": [_group_entry(group) for group in groups],
    }


async def process_project_from_folder(
    images_dir: Path | str,
    project_id: str,
    client: LLMClient,
    use_embeddings: bool = True,
    queue: RequestQueue | None = None,
) -> dict:
    """Analyze and group the room photos of a project stored in a local folder."""
    folder_path = Path(images_dir)
    image_paths = list_image_files(folder_path)
    logger.info("Found %d images in %s", len(image_paths), folder_path)
    return await _process_images(
        project_id,
        image_paths,
        client,
        use_embeddings,
        queue or RequestQueue(),
    )
