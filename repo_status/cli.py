"""
Command-line interface for repo-status-check.

This module is responsible for argument parsing, merging the settings
file with command-line flags and delegating to the checker.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .checker import RepoStatusChecker
from .config import RunConfig, load_settings_file
from .errors import ConfigError, RepoStatusError
from .logging_utils import configure_logging
from .task import cron_line, sudoers_rule


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-status-check",
        description=(
            "Look for uncommitted changes in a git working directory and, "
            "optionally, for commits that differ from its upstream branch."
        ),
    )

    parser.add_argument(
        "path",
        nargs="?",
        help="Repository root to check (default: settings file, else current directory).",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        help="TOML settings file with a [repo_status] table.",
    )
    parser.add_argument(
        "--git",
        dest="executable",
        help="git executable to run (default: git).",
    )
    parser.add_argument(
        "--fetch",
        dest="fetch",
        action="store_true",
        default=None,
        help="Fetch the upstream remote and compare histories.",
    )
    parser.add_argument(
        "--no-fetch",
        dest="fetch",
        action="store_false",
        help="Only check the working directory status.",
    )
    parser.add_argument(
        "--sudo",
        dest="fetch_with_sudo",
        action="store_true",
        default=None,
        help="Run git fetch as the owner of the repository via sudo.",
    )
    parser.add_argument(
        "--no-sudo",
        dest="fetch_with_sudo",
        action="store_false",
        help="Run git fetch as the current user.",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=None,
        help="Stop at the first issue instead of running the remaining checks.",
    )
    parser.add_argument(
        "--ignore-untracked",
        action="store_true",
        default=None,
        help="Do not treat untracked files as an unclean status.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Copy progress lines to stderr, not only warnings.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Append log lines to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbosity",
        action="count",
        default=None,
        help="Increase verbosity (can be specified multiple times).",
    )
    parser.add_argument(
        "--print-cron",
        action="store_true",
        help="Print a crontab line for the default schedule and exit.",
    )
    parser.add_argument(
        "--print-sudoers",
        metavar="USER",
        help="Print the sudoers entry USER needs for elevated fetches and exit.",
    )

    return parser


def build_config(args: argparse.Namespace) -> RunConfig:
    """
    Merge defaults, the settings file and command-line flags, in that order.
    """

    config = RunConfig()
    if args.settings is not None:
        config = config.updated(load_settings_file(args.settings))

    overrides: Dict[str, Any] = {
        "repo_root": args.path,
        "executable": args.executable,
        "fetch": args.fetch,
        "fetch_with_sudo": args.fetch_with_sudo,
        "fail_fast": args.fail_fast,
        "ignore_untracked": args.ignore_untracked,
        "debug": args.debug,
        "log_file": args.log_file,
        "verbosity": args.verbosity,
    }
    config = config.updated(overrides)
    return config.updated({"repo_root": config.repo_root.resolve()})


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        configure_logging(
            verbosity=config.verbosity,
            debug=config.debug,
            log_file=config.log_file,
        )
    except (ConfigError, OSError) as exc:
        print(f"repo-status-check: error: {exc}", file=sys.stderr)
        return 2

    if args.print_cron:
        print(cron_line(config))
        return 0

    checker = RepoStatusChecker(config)

    if args.print_sudoers:
        try:
            info = checker.identify_branch()
            owner = checker.identify_owner()
        except RepoStatusError as exc:
            print(f"repo-status-check: error: {exc}", file=sys.stderr)
            return 1
        if info is None or owner is None:
            return 1
        print(sudoers_rule(config, args.print_sudoers, owner, info.remote))
        return 0

    try:
        report = checker.run()
    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        return 130

    return 0 if report.ok else 1


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
