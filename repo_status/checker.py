"""
The git status check itself.

RepoStatusChecker walks a fixed sequence of steps:

  - status:  is the working directory clean?
  - branch:  which remote branch does the current branch track?
  - fetch:   bring in the remote's commits (optionally via sudo);
  - behind:  does the remote have commits the workdir lacks?
  - ahead:   does the workdir have commits the remote lacks?

Each step logs what it saw and returns a plain success value. Nothing
is raised to the caller of run(); problems end up in the RunReport and
in the log.
"""

from __future__ import annotations

import enum
import getpass
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .config import RunConfig
from .errors import PorcelainParseError, RepoStatusError
from .executor import CommandExecutor, CommandResult, ElevatedExecutor, SubprocessExecutor
from .porcelain import BranchInfo, parse_branch_header, parse_owner
from .task import sudoers_rule

LOG = logging.getLogger(__name__)

UNTRACKED_HINT = (
    'HINT: If you see "untracked" files above, which should not be\n'
    '"officially" ignored, but you would rather ignore for local status\n'
    "checks, then edit your .git/info/exclude file."
)


class Stage(enum.Enum):
    INIT = "init"
    STATUS_CHECKED = "status checked"
    BRANCH_IDENTIFIED = "branch identified"
    FETCHED = "fetched"
    BEHIND_CHECKED = "behind checked"
    AHEAD_CHECKED = "ahead checked"
    DONE = "done"


@dataclass
class RunReport:
    """
    What a run got through and what it found along the way.
    """

    stage: Stage = Stage.INIT
    issues: List[str] = field(default_factory=list)
    branch: Optional[BranchInfo] = None

    @property
    def ok(self) -> bool:
        return not self.issues


class RepoStatusChecker:
    """
    Inspects one repository according to a RunConfig.
    """

    def __init__(self, config: RunConfig, executor: Optional[CommandExecutor] = None):
        self.config = config
        self.executor = executor or SubprocessExecutor(cwd=config.repo_root)
        self._issues: List[str] = []

    # -- individual steps -------------------------------------------------

    def check_status(self) -> bool:
        """
        Return True when ``git status --porcelain`` reports nothing.
        """

        args = ["status", "--porcelain"]
        if self.config.ignore_untracked:
            args.append("--untracked-files=no")
        result = self._git(args)

        if result.failed:
            self._fail("failed to check git status!")
            self._show_result(result)
            self._show_status()
            return False

        if result.output:
            self._fail("git status is not clean!")
            self._show_result(result)
            self._show_status()
            LOG.warning(UNTRACKED_HINT)
            return False

        LOG.info("git status is clean")
        return True

    def identify_branch(self) -> Optional[BranchInfo]:
        """
        Return the current branch and its upstream, or None on failure.
        """

        result = self._git(["status", "--branch", "--porcelain"])

        if result.failed:
            self._fail("failed to identify git branch!")
            self._show_status()
            return None

        if not result.output:
            self._fail("could not determine git branch!")
            self._show_status()
            return None

        try:
            info = parse_branch_header(result.output[0])
        except PorcelainParseError as exc:
            self._fail(f"could not parse git branch: {exc}")
            self._show_result(result)
            return None

        LOG.info("branch is: %s", info.branch)
        LOG.info("remote is: %s", info.remote)
        LOG.info("remote branch is: %s", info.remote_branch)
        return info

    def identify_owner(self) -> Optional[str]:
        """
        Return the user owning the repository root, or None on failure.
        """

        # The executor already runs inside repo_root.
        result = self.executor.execute("ls", ["-ld", "."])

        if result.failed:
            self._fail("failed to identify folder owner!")
            self._show_result(result)
            return None

        if not result.output:
            self._fail("got no output from folder list!")
            self._show_result(result)
            return None

        try:
            owner = parse_owner(result.output[0])
        except PorcelainParseError as exc:
            self._fail(f"could not parse folder owner: {exc}")
            self._show_result(result)
            return None

        LOG.info("folder owner is: %s", owner)
        return owner

    def fetch_remote(self, remote: str) -> bool:
        """
        Run ``git fetch <remote>``, as the folder owner when configured.
        """

        owner = None
        executor = self.executor
        if self.config.fetch_with_sudo:
            owner = self.identify_owner()
            if owner is None:
                return False
            executor = ElevatedExecutor(self.executor, owner)

        result = executor.execute(self.config.executable, ["fetch", remote])

        if result.failed:
            self._fail("failed to fetch remote!")
            self._show_result(result)
            if owner is not None:
                self._show_sudoers_hint(owner, remote)
            return False

        if result.output:
            self._fail("unexpected output when fetching remote!")
            self._show_result(result)
            return False

        LOG.info("remote commits were fetched")
        return True

    def check_behind(self, info: BranchInfo) -> Optional[bool]:
        """
        Return True when the upstream has commits missing from the workdir.

        None means the log query itself failed.
        """

        result = self._git(["log", f"..{info.upstream}"])

        if result.failed:
            self._fail("failed to check for unknown remote commits!")
            self._show_result(result)
            return None

        if result.output:
            self._fail(f"{info.upstream} has commits not present in workdir!")
            self._show_result(result)
            return True

        LOG.info("no remote commits missing from workdir")
        return False

    def check_ahead(self, info: BranchInfo) -> Optional[bool]:
        """
        Return True when the workdir has commits missing from the upstream.

        None means the log query itself failed.
        """

        result = self._git(["log", f"{info.upstream}.."])

        if result.failed:
            self._fail("failed to check for unknown local commits!")
            self._show_result(result)
            return None

        if result.output:
            self._fail(f"there are local commits not present in {info.upstream}!")
            self._show_result(result)
            return True

        LOG.info("no local commits missing from %s", info.upstream)
        return False

    # -- orchestration ----------------------------------------------------

    def run(self) -> RunReport:
        """
        Run every configured step and report how far the run got.
        """

        self._issues = []
        report = RunReport(issues=self._issues)
        LOG.info("git executable is: %s", self.config.executable)
        LOG.info("rootdir is: %s", self.config.repo_root)

        try:
            self._run_steps(report)
        except RepoStatusError as exc:
            self._fail(f"check aborted: {exc}")
        return report

    def _run_steps(self, report: RunReport) -> None:
        clean = self.check_status()
        report.stage = Stage.STATUS_CHECKED
        if not clean and self.config.fail_fast:
            return

        if not self.config.fetch:
            # Without fetching there is nothing left to compare.
            report.stage = Stage.DONE
            return

        info = self.identify_branch()
        if info is None:
            return
        report.branch = info
        report.stage = Stage.BRANCH_IDENTIFIED

        if not self.fetch_remote(info.remote):
            return
        report.stage = Stage.FETCHED

        behind = self.check_behind(info)
        if behind is None:
            return
        report.stage = Stage.BEHIND_CHECKED
        if behind and self.config.fail_fast:
            return

        if self.check_ahead(info) is None:
            return
        report.stage = Stage.AHEAD_CHECKED

        if report.ok:
            LOG.info("%s and workdir match", info.upstream)
        report.stage = Stage.DONE

    # -- helpers ----------------------------------------------------------

    def _git(self, args: List[str]) -> CommandResult:
        return self.executor.execute(self.config.executable, args)

    def _fail(self, message: str) -> None:
        self._issues.append(message)
        LOG.warning(message)

    def _show_result(self, result: CommandResult) -> None:
        LOG.warning(result.describe())

    def _show_status(self) -> None:
        # Plain status is easier to read than porcelain in a cron mail.
        self._show_result(self._git(["status"]))

    def _show_sudoers_hint(self, owner: str, remote: str) -> None:
        try:
            user = getpass.getuser()
        except (OSError, KeyError):
            user = "<this user>"
        rule = sudoers_rule(self.config, user, owner, remote)
        LOG.warning(
            "HINT: elevated fetch needs a passwordless sudoers entry, e.g. in "
            "/etc/sudoers.d/repo-status:\n    %s",
            rule,
        )
