"""Pydantic v2 models for Relkit configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class TrackerConfig(BaseModel):
    """Cycle tracker settings. Required fields default to None."""

    workspace: str | None = None
    cli_cmd: str | None = None
    server: str | None = None
    user: str | None = None
    password: str | None = None
    integration_date_field: str | None = None

    project: str = "Moodle"
    issue_prefix: str = "MDL"
    state_file: str = "count_delayed_last_cycle.csv"
    history_file: str = "count_delayed_all_cycles.csv"
    temp_file: str = "count_delayed_temp.csv"
    review_statuses: list[str] = Field(
        default_factory=lambda: [
            "Waiting for integration review",
            "Integration review in progress",
        ]
    )
    downstream_statuses: list[str] = Field(
        default_factory=lambda: [
            "Waiting for testing",
            "Testing in progress",
            "Tested",
            "Passed",
            "Reopened",
            "Closed",
        ]
    )
    delay_phrase: str = (
        "The integration of this issue has been delayed to next week because"
    )


class CommitsConfig(BaseModel):
    """Commit linter settings. Required fields default to None."""

    git_cmd: str | None = "git"
    git_dir: str | None = None
    initial_commit: str | None = None
    final_commit: str | None = None
    issue_code: str | None = None
    debug: bool = False

    issue_prefix: str = "MDL"
    subject_max_length: int = 72
    body_max_length: int = 132
    area_max_length: int = 30


class RelkitConfig(BaseModel):
    """Root configuration model for Relkit."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)


# Environment variable names understood for each required setting.
TRACKER_ENV_VARS: dict[str, str] = {
    "workspace": "WORKSPACE",
    "cli_cmd": "jiraclicmd",
    "server": "jiraserver",
    "user": "jirauser",
    "password": "jirapass",
    "integration_date_field": "integrationdate_cf",
}

COMMITS_ENV_VARS: dict[str, str] = {
    "git_cmd": "gitcmd",
    "git_dir": "gitdir",
    "initial_commit": "initialcommit",
    "final_commit": "finalcommit",
}
