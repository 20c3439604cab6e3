"""Room analysis: one image in, one RoomAnalysis out."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from roomstage.analysis.models import RoomAnalysis

if TYPE_CHECKING:
    from roomstage.ai_client.responses import LLMClient

logger = logging.getLogger(__name__)


def fallback_analysis(image_id: str, project_id: str | None = None) -> RoomAnalysis:
    return RoomAnalysis(
        image_id=image_id,
        project_id=project_id,
        room_type="Room",
        flooring="Unknown",
        windows=0,
        lighting="Unknown",
        features=(),
    )


def run_room_analysis(
    client: LLMClient,
    image_id: str,
    image_data_url: str,
    project_id: str | None = None,
) -> RoomAnalysis:
    try:
        result = client.analyze_room(image_data_url)
    except Exception:
        logger.exception("Error analyzing image %s, using fallback analysis", image_id)
        return fallback_analysis(image_id, project_id)

    analysis = RoomAnalysis.from_dict(image_id, {**result, "image_id": image_id, "project_id": project_id})
    logger.info("Analyzed %s: %s", image_id, analysis.room_type)
    return analysis
