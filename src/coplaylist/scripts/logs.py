"""Export or clear the user action log.

Usage::

    coplaylist-logs export --user-id user123 --format csv --output logs.csv
    coplaylist-logs clear --yes

Reads ``STORAGE_BACKEND``/``REDIS_URL`` like the service does; against the
in-memory backend there is nothing to export.
"""

import argparse
import asyncio
import csv
import io
import json
import logging
import sys
import time
from pathlib import Path

from coplaylist.actions.schemas import ActionLogEntry
from coplaylist.actions.service import ActionAnalytics
from coplaylist.logging import configure_logging
from coplaylist.settings import get_settings
from coplaylist.store.factory import create_store

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("timestamp", "userId", "action", "metadata")


def render_logs(entries: list[ActionLogEntry], output_format: str) -> str:
    """Serialize entries as a JSON array or as CSV with JSON-encoded metadata."""
    rows = [entry.model_dump(by_alias=True) for entry in entries]
    if output_format == "json":
        return json.dumps(rows, indent=2)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for row in rows:
        writer.writerow([row["timestamp"], row["userId"], row["action"], json.dumps(row["metadata"])])
    return buffer.getvalue()


async def export_logs(user_id: str | None, output_format: str, output: Path | None, limit: int) -> Path:
    store = create_store(get_settings())
    try:
        entries = await ActionAnalytics(store).get_raw_logs(user_id, limit)
    finally:
        await store.close()

    path = output or Path(f"action_logs_{user_id or 'all'}_{int(time.time() * 1000)}.{output_format}")
    path.write_text(render_logs(entries, output_format), encoding="utf-8")
    logger.info("Exported %d log entries to %s", len(entries), path)
    return path


async def clear_logs() -> int:
    store = create_store(get_settings())
    try:
        return await ActionAnalytics(store).clear_logs()
    finally:
        await store.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="coplaylist-logs", description="Manage the user action log.")
    subcommands = parser.add_subparsers(dest="command", required=True)

    export = subcommands.add_parser("export", help="Write log entries to a file")
    export.add_argument("--user-id", default=None, help="Only this user's actions")
    export.add_argument("--format", dest="output_format", choices=("json", "csv"), default="json")
    export.add_argument("--output", type=Path, default=None, help="Output path (default: generated name)")
    export.add_argument("--limit", type=int, default=1000, help="Maximum number of entries, newest first")

    clear = subcommands.add_parser("clear", help="Delete every action log key")
    clear.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().LOG_LEVEL)

    if args.command == "export":
        asyncio.run(export_logs(args.user_id, args.output_format, args.output, args.limit))
        return 0

    if not args.yes:
        answer = input("Delete ALL action logs? This cannot be undone. [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            logger.info("Aborted; nothing deleted")
            return 1
    removed = asyncio.run(clear_logs())
    logger.info("Deleted %d action log keys", removed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
