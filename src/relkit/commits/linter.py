"""Lint every commit message in a git revision range."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import click

from relkit.commits.git import Commit, GitRepo
from relkit.commits.rules import LintPolicy, Problem, check_commit, multiple_merges

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 30


@dataclass
class LintReport:
    problems: list[Problem] = field(default_factory=list)
    commits_checked: int = 0
    merge_commits: int = 0

    @property
    def total(self) -> int:
        return len(self.problems)

    @property
    def exit_code(self) -> int:
        # Exit statuses wrap at 256; never let a failing lint look clean
        return min(self.total, 255)


class LintReporter:
    """Write problem lines to stderr and, in debug mode, framing to stdout."""

    def __init__(self, debug: bool = False) -> None:
        self.debug = debug

    def commit_started(self, commit: Commit) -> None:
        if not self.debug:
            return
        click.echo(SEPARATOR)
        suffix = " (merge)" if commit.is_merge else ""
        click.echo(f"commit: {commit.sha}{suffix}, message:")
        click.echo(commit.message)
        click.echo()
        click.echo("Results:")

    def problem(self, problem: Problem) -> None:
        click.echo(problem.render(), err=True)

    def commit_finished(self, commit: Commit, problems: list[Problem]) -> None:
        if not self.debug:
            return
        if problems:
            click.echo(f"(found {len(problems)} problems)")
        else:
            click.echo("Ok")

    def finished(self, report: LintReport) -> None:
        if not self.debug:
            return
        click.echo()
        click.echo(f"Total number of problems found: {report.total} (used as exit code).")


class CommitLinter:
    """Check commits in initial..final against the message rules."""

    def __init__(
        self,
        repo: GitRepo,
        initial: str,
        final: str,
        policy: LintPolicy | None = None,
        issue_code: str | None = None,
        reporter: LintReporter | None = None,
    ) -> None:
        self.repo = repo
        self.initial = initial
        self.final = final
        self.policy = policy or LintPolicy()
        self.issue_code = issue_code or None
        self.reporter = reporter or LintReporter()

    def verify_range(self) -> None:
        """Raise ValueError unless both commits exist and are related."""
        if not self.repo.rev_exists(self.initial):
            raise ValueError(f"Error: initial commit does not exist ({self.initial})")
        if not self.repo.rev_exists(self.final):
            raise ValueError(f"Error: final commit does not exist ({self.final})")
        if not self.repo.is_ancestor(self.initial, self.final):
            raise ValueError(
                f"Error: unrelated commits are not comparable ({self.initial} and {self.final})"
            )

    def lint_commit(self, commit: Commit) -> list[Problem]:
        self.reporter.commit_started(commit)
        problems = check_commit(commit, self.policy, self.issue_code)
        for problem in problems:
            self.reporter.problem(problem)
        self.reporter.commit_finished(commit, problems)
        return problems

    def run(self) -> LintReport:
        self.verify_range()
        report = LintReport()
        for sha in self.repo.list_commits(self.initial, self.final):
            commit = self.repo.load_commit(sha)
            if commit.is_merge:
                report.merge_commits += 1
            report.problems.extend(self.lint_commit(commit))
            report.commits_checked += 1

        range_problem = multiple_merges(self.initial, self.final, report.merge_commits)
        if range_problem:
            self.reporter.problem(range_problem)
            report.problems.append(range_problem)

        logger.debug(
            "Checked %d commits (%d merges), %d problems",
            report.commits_checked, report.merge_commits, report.total,
        )
        self.reporter.finished(report)
        return report
