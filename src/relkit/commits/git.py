"""Read-only git queries used by the commit linter."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Commit:
    sha: str
    message: str
    parent_count: int = 1

    @property
    def is_merge(self) -> bool:
        return self.parent_count > 1

    @property
    def lines(self) -> list[str]:
        return self.message.rstrip("\n").split("\n")


class GitRepo:
    """Query a git repository through the git CLI.

    Commands run with check=False: callers get whatever output came
    back, empty or not.
    """

    def __init__(self, repo_path: Path | str, git_cmd: str = "git") -> None:
        self.repo_path = Path(repo_path)
        self.git_cmd = git_cmd

    def _run_git(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        cmd = shlex.split(self.git_cmd) + args
        logger.debug("git %s", " ".join(args))
        return subprocess.run(
            cmd,
            cwd=self.repo_path,
            capture_output=True,
            text=True,
            check=False,
        )

    def rev_exists(self, rev: str) -> bool:
        result = self._run_git(["rev-parse", "--quiet", "--verify", rev])
        return result.returncode == 0

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        result = self._run_git(["merge-base", "--is-ancestor", ancestor, descendant])
        return result.returncode == 0

    def list_commits(self, initial: str, final: str) -> list[str]:
        """Abbreviated hashes reachable from final but not from initial."""
        result = self._run_git(["rev-list", "--abbrev-commit", f"{initial}..{final}"])
        return result.stdout.split()

    def parent_count(self, sha: str) -> int:
        result = self._run_git(["cat-file", "-p", sha])
        return sum(1 for line in result.stdout.splitlines() if line.startswith("parent "))

    def message_of(self, sha: str) -> str:
        result = self._run_git(["show", "-s", "--pretty=format:%B", sha])
        return result.stdout.rstrip("\n")

    def load_commit(self, sha: str) -> Commit:
        return Commit(
            sha=sha,
            message=self.message_of(sha),
            parent_count=self.parent_count(sha),
        )
