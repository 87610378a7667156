"""Operator CLI.

Responsibilities (and nothing more):
- Configure structlog
- Build AppState from Settings
- Dispatch the sub-commands and print their results as JSON on stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from git_updater import __version__
from git_updater.cache import RepoCache
from git_updater.config import Settings
from git_updater.errors import ErrorCode, GitUpdaterError
from git_updater.headers import HeaderRegistry
from git_updater.hooks import HookRegistry
from git_updater.messages import MessageCollector
from git_updater.resolver import parse_header_uri
from git_updater.state import AppState
from git_updater.store import OptionStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

log = structlog.get_logger()

PROVIDERS = ("GitHub",)


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr: stdout carries command output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


def build_state(settings: Settings) -> AppState:
    hooks = HookRegistry()
    headers = HeaderRegistry(hooks=hooks)
    for provider in PROVIDERS:
        headers.register_provider(provider)
    return AppState(
        settings=settings,
        hooks=hooks,
        headers=headers,
        messages=MessageCollector(),
    )


@asynccontextmanager
async def open_store(state: AppState) -> AsyncIterator[RepoCache]:
    """Attach the SQLite option store and repo cache for the duration of a command."""
    db_path = state.settings.cache.db_path
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        store = OptionStore(db, multisite=state.settings.cache.multisite)
        await store.init_db()
        cache = RepoCache(store, state.settings.cache, hooks=state.hooks)
        state.store = store
        state.cache = cache
        try:
            yield cache
        finally:
            state.store = None
            state.cache = None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _purge_cache(state: AppState, _args: argparse.Namespace) -> dict:
    async with open_store(state) as cache:
        deleted = await cache.purge_all()
    return {"deleted": deleted}


async def _cache_get(state: AppState, args: argparse.Namespace) -> dict:
    async with open_store(state) as cache:
        record = await cache.get(args.slug)
    if record is None:
        raise GitUpdaterError(
            code=ErrorCode.CACHE_NOT_FOUND,
            message=f"No fresh cache data for {args.slug!r}",
            suggestion="The repo has not been refreshed yet, or its cache expired.",
            recoverable=True,
        )
    return record.model_dump(mode="json")


async def _headers(state: AppState, args: argparse.Namespace) -> dict:
    try:
        contents = Path(args.file).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise GitUpdaterError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Cannot read {args.file}: {exc.strerror}",
            suggestion="Pass the plugin's main file or the theme's style.css.",
        ) from exc
    return state.headers.extract_file_headers(contents, args.kind)


async def _parse_uri(state: AppState, args: argparse.Namespace) -> dict:
    identity = parse_header_uri(args.url)
    if args.provider is None:
        return identity.model_dump()
    return state.headers.parse_extra_headers(identity, {}, args.provider)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-updater",
        description="Inspect and maintain the Git Updater repo cache.",
    )
    parser.add_argument("--version", action="version", version=f"git-updater {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    purge = subparsers.add_parser("purge-cache", help="Delete cached repo data")
    purge.set_defaults(handler=_purge_cache)

    cache_get = subparsers.add_parser("cache-get", help="Show the fresh cache row for a repo")
    cache_get.add_argument("slug")
    cache_get.set_defaults(handler=_cache_get)

    headers = subparsers.add_parser("headers", help="Parse file headers from a local file")
    headers.add_argument("file", type=Path)
    headers.add_argument("--kind", choices=("plugin", "theme"), default="plugin")
    headers.set_defaults(handler=_headers)

    parse_uri = subparsers.add_parser("parse-uri", help="Split a repository URL")
    parse_uri.add_argument("url")
    parse_uri.add_argument("--provider", choices=PROVIDERS, default=None)
    parse_uri.set_defaults(handler=_parse_uri)

    return parser


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    setup_logging(settings)
    state = build_state(settings)

    try:
        result = asyncio.run(args.handler(state, args))
    except GitUpdaterError as exc:
        log.error("command_failed", command=args.command, code=exc.code, message=exc.message)
        print(json.dumps(exc.to_dict(), indent=2))
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
