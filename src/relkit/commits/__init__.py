"""Commit message linting over git revision ranges."""

from relkit.commits.git import Commit, GitRepo
from relkit.commits.linter import CommitLinter, LintReport, LintReporter
from relkit.commits.rules import LintPolicy, Problem, Severity

__all__ = [
    "Commit",
    "CommitLinter",
    "GitRepo",
    "LintPolicy",
    "LintReport",
    "LintReporter",
    "Problem",
    "Severity",
]
