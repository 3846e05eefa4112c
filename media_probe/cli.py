"""Command-line entry point for media discovery."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Sequence

from .config import ProbeConfig
from .crawler import run_extractions
from .errors import LaunchError
from .models import ExtractionResult

logger = logging.getLogger("media_probe.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    defaults = ProbeConfig.from_env()
    parser = argparse.ArgumentParser(
        description=(
            "Load web pages in headless Chromium and list the video, audio "
            "and image resources they fetch or embed."
        ),
    )
    parser.add_argument("urls", nargs="+", help="One or more page URLs to inspect")
    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.navigation_timeout,
        help="Navigation timeout in seconds before falling back to partial results",
    )
    parser.add_argument(
        "--grace",
        type=float,
        default=defaults.grace_period,
        help="Seconds to keep listening for late network responses after load",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=defaults.max_concurrent_pages,
        help="Maximum number of pages open at the same time",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        default=not defaults.headless,
        help="Show the browser window instead of running headless",
    )
    parser.add_argument(
        "--no-formats",
        action="store_true",
        default=not defaults.inspect_player_response,
        help="Skip listing formats from embedded player responses",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON to this file instead of STDOUT",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(list(sys.argv[1:] if argv is None else argv))


def build_config(args: argparse.Namespace) -> ProbeConfig:
    return ProbeConfig(
        navigation_timeout=args.timeout,
        grace_period=args.grace,
        max_concurrent_pages=args.concurrency,
        headless=not args.headful,
        inspect_player_response=not args.no_formats,
    )


def render_json(results: List[ExtractionResult], multiple: bool) -> str:
    if multiple:
        payload = [result.to_dict() for result in results]
    else:
        payload = results[0].to_dict() if results else None
    return json.dumps(payload, indent=2, ensure_ascii=False)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    try:
        config = build_config(args)
    except ValueError as exc:
        logger.error("Invalid option: %s", exc)
        sys.exit(2)

    overall_start = time.perf_counter()
    try:
        results = asyncio.run(run_extractions(args.urls, config))
    except LaunchError as exc:
        logger.error("%s", exc)
        logger.error("Install the browser with `playwright install chromium`.")
        sys.exit(1)
    total_elapsed = time.perf_counter() - overall_start

    successes = len(results)
    total_urls = len(args.urls)
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        successes,
        total_urls,
        total_urls - successes,
    )

    output = render_json(results, multiple=total_urls > 1)
    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info("Saved results to %s", args.output)
    else:
        sys.stdout.write(output + "\n")
        sys.stdout.flush()

    if not results:
        sys.exit(1)


if __name__ == "__main__":
    main()
