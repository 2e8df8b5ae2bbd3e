"""Application entrypoint.

Loads settings, configures logging and exposes a small CLI for admitting
document-processing tasks and creating query embeddings.
"""

from __future__ import annotations

import argparse
import base64
import json
import sys
from pathlib import Path

from docsearch.core.errors import ServiceError
from docsearch.core.settings import Settings, SettingsError, load_settings
from docsearch.core.trace import create_trace
from docsearch.core.types import DatasetConfiguration, UploadFileRequest
from docsearch.libs.embedding import DenseEmbeddingClient
from docsearch.observability.logger import get_logger
from docsearch.tasks import SQLiteAuditStore, TaskAdmission, TaskQueue


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="docsearch task admission")
    parser.add_argument("--settings", default="config/settings.yaml", help="Settings file path")
    subparsers = parser.add_subparsers(dest="command")

    submit = subparsers.add_parser("submit", help="Queue a file for processing")
    submit.add_argument("file", help="Path to the file to upload")
    submit.add_argument("--webhook-url", default=None, help="Optional completion webhook")

    embed = subparsers.add_parser("embed", help="Create a dense embedding for a text")
    embed.add_argument("text", help="Text to embed")
    embed.add_argument("--purpose", choices=["doc", "query"], default="query")
    embed.add_argument("--base-url", default="", help="Dataset embedding base URL")
    embed.add_argument("--query-prefix", default="", help="Dataset query prefix")
    return parser


def run_submit(args: argparse.Namespace, settings: Settings) -> None:
    file_path = Path(args.file)
    request = UploadFileRequest(
        file_name=file_path.name,
        base64_file=base64.b64encode(file_path.read_bytes()).decode("ascii"),
        webhook_url=args.webhook_url,
    )

    queue = TaskQueue(settings.queue)
    try:
        response = TaskAdmission(SQLiteAuditStore(settings.audit.db_path), queue).admit(request)
    finally:
        queue.close()

    print(json.dumps(response.to_dict()))


def run_embed(args: argparse.Namespace, settings: Settings) -> None:
    dataset = DatasetConfiguration(
        embedding_base_url=args.base_url,
        embedding_query_prefix=args.query_prefix,
    )
    trace = create_trace(settings.observability, user_query=args.text)
    try:
        with DenseEmbeddingClient(settings.server) as client:
            vector = client.embed(args.text, args.purpose, dataset, trace=trace)
    finally:
        if trace is not None:
            trace.finish()

    print(json.dumps({"dimensions": len(vector), "embedding": vector}))


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logger = get_logger()

    try:
        settings = load_settings(args.settings)
    except SettingsError as e:
        logger.error(str(e))
        raise SystemExit(1) from e

    get_logger(level=settings.observability.log_level)
    logger.info(
        "Settings loaded (queue=%s, audit=%s)",
        settings.queue.queue_name,
        settings.audit.db_path,
    )

    commands = {"submit": run_submit, "embed": run_embed}
    command = commands.get(args.command)
    if command is None:
        logger.info("Settings loaded. Use 'submit <file>' or 'embed <text>'")
        return

    try:
        command(args, settings)
    except ServiceError as e:
        logger.error("%s failed: %s", args.command, e.message)
        raise SystemExit(1) from e


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(130)
