"""CLI entrypoint for random-walker."""

from __future__ import annotations

import argparse
import json
import logging
import os
import random
from collections.abc import Sequence

from .config import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_FAILURE_STREAK,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_START_URL,
    DEFAULT_STEPS,
    START_URL_ENV,
    WalkerConfig,
)
from .errors import ConfigError, InvalidURLError
from .io_csv import write_trail
from .logging_utils import configure_logging, get_logger
from .models import Fetcher, VisitedSet
from .payloads import error_to_payload, link_to_payload
from .session import StepOutcome, WalkSession
from .validation import build_visited_set, load_lines_from_file, validate_url
from .walker import LinkPicker, build_fetcher


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Random walker - hop from page to page along random outbound links."
    )
    parser.add_argument(
        "--url", help=f"Start URL (default: ${START_URL_ENV} or {DEFAULT_START_URL})."
    )
    parser.add_argument(
        "--steps", type=int, default=DEFAULT_STEPS, help="Number of links to follow."
    )
    parser.add_argument("--seed", type=int, help="Seed for reproducible link choice.")
    parser.add_argument(
        "--visited-file", help="File of already-visited URLs (one per line) to avoid."
    )
    parser.add_argument(
        "--max-redirects",
        type=int,
        default=DEFAULT_MAX_REDIRECTS,
        help="Redirect hop limit per fetched page.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_CONNECT_TIMEOUT,
        help="Connect and read timeout in seconds.",
    )
    parser.add_argument(
        "--max-failure-streak",
        type=int,
        default=DEFAULT_MAX_FAILURE_STREAK,
        help="Dead ends in a row before skipping back an extra page.",
    )
    parser.add_argument("--output", help="Write the walk trail to this CSV path.")
    parser.add_argument(
        "--json", action="store_true", help="Print the last step as a JSON payload."
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def namespace_to_config(args: argparse.Namespace) -> WalkerConfig:
    """Convert CLI args to validated WalkerConfig."""
    start_url = args.url or os.getenv(START_URL_ENV) or DEFAULT_START_URL
    try:
        validate_url(start_url)
    except InvalidURLError as exc:
        raise ConfigError(f"--url: {exc}") from exc

    visited: tuple[str, ...] = ()
    if args.visited_file:
        try:
            visited = tuple(load_lines_from_file(args.visited_file))
        except OSError as exc:
            raise ConfigError(f"Cannot read --visited-file: {exc}") from exc

    return WalkerConfig(
        start_url=start_url,
        connect_timeout=args.timeout,
        read_timeout=args.timeout,
        max_redirects=args.max_redirects,
        steps=args.steps,
        seed=args.seed,
        max_failure_streak=args.max_failure_streak,
        visited=visited,
        output=args.output,
        show_progress=not args.no_progress,
    )


def run_walk(
    config: WalkerConfig,
    *,
    logger: logging.Logger,
    fetcher: Fetcher | None = None,
) -> tuple[WalkSession, list[StepOutcome]]:
    """Walk ``config.steps`` links from the start URL, sharing one fetcher and RNG."""
    fetcher = fetcher or build_fetcher(config, logger=logger)
    rng = random.Random(config.seed)
    preloaded = build_visited_set(config.visited)

    def picker_factory(url: str, visited: VisitedSet) -> LinkPicker:
        return LinkPicker(
            url,
            fetcher=fetcher,
            visited=visited | preloaded,
            rng=rng,
            logger=logger,
        )

    session = WalkSession(
        config.start_url,
        picker_factory=picker_factory,
        max_failure_streak=config.max_failure_streak,
        logger=logger,
    )
    outcomes = session.run(config.steps, show_progress=config.show_progress)
    return session, outcomes


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger = get_logger()
    try:
        config = namespace_to_config(args)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    session, outcomes = run_walk(config, logger=logger)
    if config.output:
        write_trail(config.output, session.history)
        logger.info("Wrote walk trail to %s", config.output)

    last = outcomes[-1]
    if args.json:
        if last.link is not None:
            payload = link_to_payload(last.link)
        elif last.error is not None:
            payload = error_to_payload(last.error)
        else:
            payload = {}
        print(json.dumps(payload, ensure_ascii=False))
    else:
        for index, entry in enumerate(session.history):
            marker = "*" if index == session.position else " "
            label = entry.label or entry.url
            suffix = f"  ({entry.error})" if entry.error else ""
            print(f"{marker} {label} <{entry.url}>{suffix}")
    return 0 if last.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
