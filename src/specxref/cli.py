"""Command-line entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Build the shared HTTP client, cache and resolvers
- Dispatch to the collect pipeline or the transclusion renderer
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog
from lxml import etree

from specxref import __version__
from specxref.aggregator import SNAPSHOT_JSON, load_dataset
from specxref.cache import FileCache
from specxref.config import Settings
from specxref.errors import XrefError
from specxref.github import GitHubClient, build_http_client
from specxref.pipeline import collect_xrefs, load_specs_config
from specxref.state import build_state
from specxref.transclusion import transclude_html

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def setup_logging(settings: Settings, level: str | None = None) -> None:
    """Configure structlog once, before the first log statement.

    ``level`` (from ``--log-level``) overrides the configured level.
    """
    log_level = logging.getLevelNamesMapping()[level or settings.logging.level]

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
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def run_collect(settings: Settings, specs_path: Path) -> int:
    specs_config = load_specs_config(specs_path)
    cache = FileCache(Path(settings.cache.dir).expanduser())

    async with build_http_client(settings.github) as http_client:
        github = GitHubClient(http_client, settings.github)
        state = build_state(settings, github, cache)
        dataset = await collect_xrefs(state, specs_config, base_dir=specs_path.parent)

    unresolved = [xref for xref in dataset.xrefs if xref.content is None]
    if unresolved:
        log.warning("collect_unresolved", count=len(unresolved))
    return 0


def run_transclude(html_path: Path, dataset_path: Path, out: Path) -> int:
    dataset = load_dataset(dataset_path)
    if dataset is None:
        return 1
    try:
        html = transclude_html(html_path.read_text(encoding="utf-8"), dataset)
    except (OSError, etree.ParserError) as exc:
        log.error("transclude_input_invalid", input=str(html_path), error=str(exc))
        return 1
    out.write_text(html, encoding="utf-8")
    log.info("transclude_complete", input=str(html_path), output=str(out))
    return 0


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="specxref",
        description="Resolve and transclude external term references.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help=f"Override the configured log level (currently {settings.logging.level})",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    collect = commands.add_parser("collect", help="Resolve xrefs and write the dataset")
    collect.add_argument("--specs", type=Path, default=Path(settings.output.specs_file))

    transclude = commands.add_parser("transclude", help="Inline resolved terms into HTML")
    transclude.add_argument("html", type=Path)
    transclude.add_argument(
        "--dataset",
        type=Path,
        default=Path(settings.output.dir) / SNAPSHOT_JSON,
    )
    transclude.add_argument("--output", type=Path, default=None)
    return parser


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    args = _build_parser(settings).parse_args(argv)
    setup_logging(settings, args.log_level)

    try:
        if args.command == "collect":
            return asyncio.run(run_collect(settings, args.specs))
        return run_transclude(args.html, args.dataset, args.output or args.html)
    except XrefError as exc:
        log.error("command_failed", command=args.command, **exc.to_dict()["error"])
        return 2


if __name__ == "__main__":
    sys.exit(main())
