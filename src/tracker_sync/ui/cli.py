# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from tracker_sync.app import open_sync_service
from tracker_sync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from tracker_sync.domain.sync import SyncService

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tracker-sync",
        description="Synchronise Eventbrite registrations into the volunteer tracker",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("discover-events", help="Create sessions for live Eventbrite events")
    subparsers.add_parser("sync-attendees", help="Sync attendees of upcoming sessions")
    subparsers.add_parser("sync", help="Discover events, then sync attendees")
    subparsers.add_parser(
        "unmatched-events",
        help="List series events that have no group yet",
    )

    refresh = subparsers.add_parser("refresh-session", help="Re-sync one upcoming session")
    refresh.add_argument("session_id", type=int, help="Record store id of the session")

    check = subparsers.add_parser(
        "check-event",
        help="Check an Eventbrite event has the child ticket and consent questions",
    )
    check.add_argument("event_id", type=str, help="Eventbrite event id")

    return parser.parse_args(list(argv))


async def _dispatch(service: SyncService, args: argparse.Namespace) -> Any:
    match args.command:
        case "discover-events":
            return asdict(await service.run_event_discovery())
        case "sync-attendees":
            return asdict(await service.run_attendee_sync())
        case "sync":
            result = await service.run_combined_sync()
            return {
                "summary": result.summary,
                "sessions": asdict(result.sessions),
                "attendees": asdict(result.attendees),
            }
        case "unmatched-events":
            return [asdict(event) for event in await service.list_unmatched_events()]
        case "refresh-session":
            return asdict(await service.refresh_session(args.session_id))
        case "check-event":
            check = await service.check_event_config(args.event_id)
            return {**asdict(check), "ok": check.ok}
        case _:
            raise ValueError(f"Unsupported command: {args.command}")


async def _run(args: argparse.Namespace) -> Any:
    async with open_sync_service() as service:
        return await _dispatch(service, args)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        output = asyncio.run(_run(parsed_args))
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)

    print(json.dumps(output, indent=2, default=str))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
