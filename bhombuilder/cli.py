"""Command-line entry point for bhom-builder."""

from __future__ import annotations

import argparse
from pathlib import Path

from . import config
from .driver import build
from .loader import ListingError
from .logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bhom-builder",
        description="Generate Python models from the JSON schemas of a GitHub repository.",
    )
    parser.add_argument(
        "--pat",
        "-pat",
        default=None,
        help=f"GitHub personal access token (defaults to ${config.TOKEN_ENV_VAR}).",
    )
    parser.add_argument(
        "--owner",
        "-owner",
        default=config.DEFAULT_OWNER,
        help="GitHub organisation that owns the schema repository.",
    )
    parser.add_argument(
        "--repo",
        "-repo",
        default=config.DEFAULT_REPO,
        help="Name of the schema repository.",
    )
    parser.add_argument(
        "--branch",
        "-branch",
        default=config.DEFAULT_BRANCH,
        help="Branch or tag to read schemas from.",
    )
    parser.add_argument(
        "--package",
        "-p",
        dest="base_package",
        default=config.DEFAULT_BASE_PACKAGE,
        help="Base package for generated classes.",
    )
    parser.add_argument(
        "--dir",
        "-dir",
        dest="output_dir",
        type=Path,
        required=True,
        help="Directory the generated packages are written to.",
    )
    parser.add_argument(
        "--api-url",
        default=config.DEFAULT_API_URL,
        help="GitHub API root (for GitHub Enterprise).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=config.DEFAULT_TIMEOUT,
        help="HTTP timeout in seconds for listing calls.",
    )
    parser.add_argument(
        "--no-utf8-guard",
        dest="utf8_guard",
        action="store_false",
        help="Re-encode every file not detected as UTF-8, even if it already decodes as UTF-8.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write the log, with timestamps, to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run a build and return the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    settings = config.BuilderSettings.from_env(
        args.output_dir,
        token=args.pat,
        owner=args.owner,
        repo=args.repo,
        branch=args.branch,
        base_package=args.base_package,
        api_url=args.api_url,
        timeout=args.timeout,
        utf8_guard=args.utf8_guard,
    )
    if not settings.token:
        parser.error(f"a personal access token is required (--pat or ${config.TOKEN_ENV_VAR})")

    try:
        report = build(settings)
    except ListingError as exc:
        print(f"bhom-builder failed: {exc}")
        return 1

    # Individual schema failures don't change the exit code.
    print(report.summary())
    return 0
