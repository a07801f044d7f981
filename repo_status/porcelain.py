"""
Parsing of command output for repo-status-check.

Two formats are understood:

  - the branch header printed first by ``git status --branch --porcelain``:

        ## <branch>...<remote>/<remoteBranch>[ [<tracking>]]

    where ``<tracking>`` is an annotation such as ``ahead 1, behind 2``
    or ``gone`` and is ignored;

  - the first line of ``ls -ld <dir>``, whose third whitespace
    separated field is the owning user.

Anything else raises a PorcelainParseError subclass rather than
producing a half-filled result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import BranchParseError, OwnerParseError


_BRANCH_HEADER_RE = re.compile(
    r"^## (?P<branch>[^\s.](?:[^\s]*?[^\s.])?)"
    r"\.\.\.(?P<remote>[^\s/]+)/(?P<remote_branch>\S+)"
    r"(?: \[(?P<tracking>[^\]]*)\])?$"
)


@dataclass(frozen=True)
class BranchInfo:
    """
    The checked-out branch and the remote-tracking branch it follows.
    """

    branch: str
    remote: str
    remote_branch: str

    @property
    def upstream(self) -> str:
        return f"{self.remote}/{self.remote_branch}"


def parse_branch_header(line: str) -> BranchInfo:
    """
    Parse the ``## ...`` header line of branch-aware porcelain status.
    """

    line = line.rstrip("\n")
    if not line.startswith("## "):
        raise BranchParseError(f"not a branch header line: {line!r}")

    match = _BRANCH_HEADER_RE.match(line)
    if match is None:
        summary = line[3:]
        if "..." not in summary:
            # "## main", "## HEAD (no branch)", "## No commits yet on main"
            raise BranchParseError(f"current branch has no upstream: {summary!r}")
        raise BranchParseError(f"unrecognized branch header: {line!r}")

    return BranchInfo(
        branch=match.group("branch"),
        remote=match.group("remote"),
        remote_branch=match.group("remote_branch"),
    )


def parse_owner(line: str) -> str:
    """
    Return the owner name from one line of ``ls -ld`` output.
    """

    parts = line.split()
    if len(parts) < 3:
        raise OwnerParseError(f"cannot find owner in listing: {line!r}")
    return parts[2]
