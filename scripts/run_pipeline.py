"""CLI to analyze a folder of room photos and group them into physical rooms."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from roomstage.ai_client.responses import create_client
from roomstage.config import load_config
from roomstage.io.results_writer import write_json, write_jsonl
from roomstage.pipeline.project_processor import process_project_from_folder
from roomstage.utils.logging import configure_logging
from roomstage.utils.request_queue import RequestQueue


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze room photos and group multiple angles of the same room.")
    parser.add_argument("images_dir", type=Path, help='Path to image folder (e.g. "/path/to/images")')
    parser.add_argument("--project-id", default=None, help="Project identifier (default: folder name)")
    parser.add_argument(
        "--out", type=Path, default=Path("out/groups.json"), help="Path to output JSON file (default: out/groups.json)"
    )
    parser.add_argument("--jsonl", type=Path, default=None, help="Also write one JSON line per room group")
    parser.add_argument(
        "--no-embeddings", action="store_true", help="Use the basic feature/flooring/window grouping only"
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    images_dir: Path = args.images_dir
    if not images_dir.exists() or not images_dir.is_dir():
        sys.exit(f"Error: image folder not found or not a directory: {images_dir}")

    try:
        config = load_config()
    except ValueError as exc:
        sys.exit(f"Error: {exc}")

    client = create_client(config)
    queue = RequestQueue(max_concurrency=config.max_concurrent_requests)
    project_id = args.project_id or images_dir.name

    result = asyncio.run(
        process_project_from_folder(
            images_dir,
            project_id,
            client,
            use_embeddings=not args.no_embeddings,
            queue=queue,
        )
    )

    write_json(args.out, result)
    if args.jsonl:
        write_jsonl(args.jsonl, result["groups"])

    multi_angle = sum(1 for group in result["groups"] if len(group["image_ids"]) > 1)
    print("Run complete.")
    print(f"Images analyzed: {len(result['analyses'])}")
    print(f"Rooms found: {len(result['groups'])} ({multi_angle} with multiple angles)")
    print(f"Output: {args.out.resolve()}")


if __name__ == "__main__":
    main()
