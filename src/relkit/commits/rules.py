"""Commit message rules.

Each rule is a pure function returning a Problem or None. Rules are
grouped by what they inspect (merge message, subject line, second
line, body lines, whole message) and run in list order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from relkit.commits.git import Commit
from relkit.config.schema import CommitsConfig


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Problem:
    ref: str
    severity: Severity
    description: str

    def render(self) -> str:
        return f"{self.ref}*{self.severity.value}*{self.description}"


@dataclass(frozen=True)
class LintPolicy:
    issue_prefix: str = "MDL"
    subject_max_length: int = 72
    body_max_length: int = 132
    area_max_length: int = 30

    @classmethod
    def from_config(cls, config: CommitsConfig) -> LintPolicy:
        return cls(
            issue_prefix=config.issue_prefix,
            subject_max_length=config.subject_max_length,
            body_max_length=config.body_max_length,
            area_max_length=config.area_max_length,
        )

    @property
    def template(self) -> str:
        """Generic issue code pattern, e.g. MDL-[0-9]{3,6}."""
        return f"{re.escape(self.issue_prefix)}-[0-9]{{3,6}}"


@dataclass(frozen=True)
class LineContext:
    """What a rule may know besides the line it checks."""

    commit: Commit
    number: int
    policy: LintPolicy
    issue_code: str | None = None

    @property
    def has_template_code(self) -> bool:
        return re.match(rf"{self.policy.template} ", self.commit.lines[0]) is not None

    @property
    def code_area(self) -> str | None:
        match = re.match(rf"{self.policy.template} ([^:]*): ", self.commit.lines[0])
        return match.group(1) if match else None

    def problem(self, severity: Severity, description: str) -> Problem:
        return Problem(self.commit.sha, severity, description)


LineRule = Callable[[str, LineContext], Problem | None]
CommitRule = Callable[[Commit, LineContext], Problem | None]


# Merge commits

def merge_branch_format(commit: Commit, ctx: LineContext) -> Problem | None:
    if re.match(r"Merge branch .* of (git|http)", commit.message):
        return None
    return ctx.problem(
        Severity.ERROR,
        "The merge commit does not match the expected 'Merge branch ... of ...' format.",
    )


def merge_template_code(commit: Commit, ctx: LineContext) -> Problem | None:
    if re.search(ctx.policy.template, commit.message):
        return None
    return ctx.problem(
        Severity.WARNING,
        f"The merge commit does not match the expected issue code {ctx.policy.template}.",
    )


def merge_issue_code(commit: Commit, ctx: LineContext) -> Problem | None:
    if not ctx.issue_code or ctx.issue_code in commit.message:
        return None
    return ctx.problem(
        Severity.WARNING,
        f"The merge commit does not match the expected issue code {ctx.issue_code}.",
    )


# Subject line

def subject_template_code(line: str, ctx: LineContext) -> Problem | None:
    if ctx.has_template_code:
        return None
    return ctx.problem(
        Severity.ERROR,
        f"The commit does not begin with the expected issue code {ctx.policy.template} and a space.",
    )


def subject_issue_code(line: str, ctx: LineContext) -> Problem | None:
    if not ctx.issue_code or line.startswith(f"{ctx.issue_code} "):
        return None
    if f"{ctx.issue_code} " in ctx.commit.message:
        return ctx.problem(
            Severity.WARNING,
            f"The commit contains the expected issue code {ctx.issue_code} but in wrong place. "
            "That is allowed only for epics or issues with subtasks. Verify it.",
        )
    return ctx.problem(
        Severity.ERROR,
        f"The commit does not contain the expected issue code {ctx.issue_code} and a space.",
    )


def subject_code_area(line: str, ctx: LineContext) -> Problem | None:
    # Skipped without an issue code, already reported above
    if not ctx.has_template_code or ctx.code_area is not None:
        return None
    return ctx.problem(
        Severity.WARNING,
        "The commit does not define a code area ending with a colon and a space after the issue code.",
    )


def code_area_length(line: str, ctx: LineContext) -> Problem | None:
    area = ctx.code_area if ctx.has_template_code else None
    if not area:
        return None
    # Reported length includes one trailing character
    length = len(area) + 1
    if length <= ctx.policy.area_max_length:
        return None
    return ctx.problem(
        Severity.WARNING,
        f"The commit code area '{area}' is too long ({length} > {ctx.policy.area_max_length})",
    )


def subject_length(line: str, ctx: LineContext) -> Problem | None:
    limit = ctx.policy.subject_max_length
    if len(line) <= limit:
        return None
    return ctx.problem(
        Severity.ERROR,
        f"The first line has more than {limit} characters (found: {len(line)})",
    )


# Second line

def second_line_empty(line: str, ctx: LineContext) -> Problem | None:
    if not line.strip():
        return None
    return ctx.problem(Severity.ERROR, f"The second line must be empty (found: '{line.strip()}')")


# Body lines

def body_line_length(line: str, ctx: LineContext) -> Problem | None:
    limit = ctx.policy.body_max_length
    if len(line) <= limit:
        return None
    return ctx.problem(
        Severity.ERROR,
        f"The line #{ctx.number} has more than {limit} characters (found: {len(line)})",
    )


# Whole message

def not_two_lines(commit: Commit, ctx: LineContext) -> Problem | None:
    if len(commit.lines) != 2:
        return None
    return ctx.problem(Severity.ERROR, "Commit message cannot have 2 lines.")


MERGE_RULES: list[CommitRule] = [merge_branch_format, merge_template_code, merge_issue_code]
SUBJECT_RULES: list[LineRule] = [
    subject_template_code,
    subject_issue_code,
    subject_code_area,
    code_area_length,
    subject_length,
]
SECOND_LINE_RULES: list[LineRule] = [second_line_empty]
BODY_RULES: list[LineRule] = [body_line_length]
MESSAGE_RULES: list[CommitRule] = [not_two_lines]


def _found(results: Iterable[Problem | None]) -> list[Problem]:
    return [p for p in results if p is not None]


def rules_for_line(number: int) -> list[LineRule]:
    if number == 1:
        return SUBJECT_RULES
    if number == 2:
        return SECOND_LINE_RULES
    return BODY_RULES


def check_commit(
    commit: Commit, policy: LintPolicy, issue_code: str | None = None,
) -> list[Problem]:
    """Run every applicable rule against a commit, in order."""
    problems: list[Problem] = []
    if commit.is_merge:
        ctx = LineContext(commit, 0, policy, issue_code)
        problems.extend(_found(rule(commit, ctx) for rule in MERGE_RULES))
        return problems

    for number, line in enumerate(commit.lines, start=1):
        ctx = LineContext(commit, number, policy, issue_code)
        problems.extend(_found(rule(line, ctx) for rule in rules_for_line(number)))

    ctx = LineContext(commit, len(commit.lines), policy, issue_code)
    problems.extend(_found(rule(commit, ctx) for rule in MESSAGE_RULES))
    return problems


def multiple_merges(
    initial: str, final: str, merge_count: int,
) -> Problem | None:
    if merge_count <= 1:
        return None
    return Problem(
        f"{initial}...{final}",
        Severity.WARNING,
        f"Multiple merge commits ({merge_count}) found. Please verify.",
    )
