from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from .bootstrap import configure_logging
from .data import CollaboratorsNotConfiguredError
from .domain import CacheDomain
from .services import RefreshOrchestrator, ServiceContext, run_runtime

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Daybook sync cache, reminder scheduler and booking checks.")
    parser.add_argument("--log-level", default=None, help="Override DAYBOOK_LOG_LEVEL.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="Run the refresh, digest and reminder scheduler.")

    api_parser = subparsers.add_parser("api", help="Serve the local HTTP API alongside the scheduler.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)
    api_parser.add_argument("--no-scheduler", action="store_true", help="Serve the API without periodic jobs.")

    subparsers.add_parser("refresh", help="Run one full snapshot refresh and exit.")

    invalidate_parser = subparsers.add_parser("invalidate", help="Re-fetch one cache domain and exit.")
    invalidate_parser.add_argument(
        "domain",
        nargs="?",
        default=CacheDomain.ALL.value,
        choices=[domain.value for domain in CacheDomain],
    )

    return parser


async def _refresh_once(context: ServiceContext) -> bool:
    context.store.load()
    return await RefreshOrchestrator(context).refresh_all()


async def _invalidate_once(context: ServiceContext, domain: str) -> tuple[CacheDomain, ...]:
    context.store.load()
    return await RefreshOrchestrator(context).invalidate(domain)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    logger.info("Daybook CLI starting: %s", args.command)

    try:
        context = ServiceContext.from_settings()
    except CollaboratorsNotConfiguredError as exc:
        logger.error("%s", exc)
        return 2

    if args.command == "run":
        try:
            asyncio.run(run_runtime(context))
        except KeyboardInterrupt:
            logger.info("Interrupted")
        return 0
    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(context, host=args.host, port=args.port, with_runtime=not args.no_scheduler)
        return 0
    if args.command == "refresh":
        return 0 if asyncio.run(_refresh_once(context)) else 1
    if args.command == "invalidate":
        refreshed = asyncio.run(_invalidate_once(context, args.domain))
        expected = CacheDomain.parse(args.domain).expand()
        return 0 if len(refreshed) == len(expected) else 1

    parser.print_help()  # pragma: no cover - argparse enforces choices
    return 2


if __name__ == "__main__":
    sys.exit(main())
