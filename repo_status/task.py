"""
Scheduler-facing description of the check.

Hosts that register periodic tasks use NAME, DESCRIPTION and
DEFAULT_SCHEDULE; the helpers here render them for cron and produce
the sudoers entry that elevated fetches need.
"""

from __future__ import annotations

import shlex
import shutil
from typing import Mapping

from .config import RunConfig

NAME = "Git Status"

DESCRIPTION = (
    'Looks for "git status" issues (uncommitted changes, unfetched or '
    "unpushed commits) in the source folder."
)

DEFAULT_SCHEDULE: Mapping[str, str] = {
    "min": "20",
    "hour": "4",
    "day": "*",
    "month": "*",
    "weekday": "*",
}


def cron_line(config: RunConfig, program: str = "repo-status-check") -> str:
    """
    Return a crontab line that runs the check on the default schedule.
    """

    schedule = " ".join(
        DEFAULT_SCHEDULE[key] for key in ("min", "hour", "day", "month", "weekday")
    )
    args = [program]
    if config.executable != "git":
        args.extend(["--git", config.executable])
    if config.fetch:
        args.append("--fetch")
    if config.fetch_with_sudo:
        args.append("--sudo")
    if config.fail_fast:
        args.append("--fail-fast")
    if config.ignore_untracked:
        args.append("--ignore-untracked")
    if config.debug:
        args.append("--debug")
    if config.log_file is not None:
        args.extend(["--log-file", str(config.log_file)])
    args.append(str(config.repo_root))
    return f"{schedule} {shlex.join(args)}"


def sudoers_rule(config: RunConfig, user: str, owner: str, remote: str) -> str:
    """
    Return the sudoers entry letting ``user`` fetch ``remote`` as ``owner``.

    sudoers needs an absolute path, so a bare executable name is
    resolved through PATH when possible.
    """

    executable = config.executable
    if "/" not in executable:
        executable = shutil.which(executable) or f"/usr/bin/{executable}"
    return f"{user} ALL = ({owner}) NOPASSWD: {executable} fetch {remote}"
