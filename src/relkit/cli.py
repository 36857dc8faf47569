"""Relkit CLI entry point."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from relkit import __version__

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("relkit.yaml")


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(), default=None, help="Config file path")
@click.option("--log-level", default=None, help="Log level")
@click.option("--json-logs", is_flag=True, help="JSON log output")
@click.pass_context
def main(
    ctx: click.Context,
    config: str | None,
    log_level: str | None,
    json_logs: bool,
) -> None:
    """Relkit - release workflow helpers."""
    from relkit.config.loader import load_config
    from relkit.logging_config import setup_logging

    config_path = Path(config) if config else DEFAULT_CONFIG
    try:
        cfg = load_config(config_path)
    except ValueError as e:
        click.echo(str(e), err=True)
        ctx.exit(1)

    setup_logging(
        level=log_level or cfg.logging.level,
        json_output=json_logs or cfg.logging.json_output,
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = cfg


@main.command("count-delayed")
@click.option("--workspace", envvar="WORKSPACE", default=None, help="Directory holding the state files")
@click.option("--jira-cmd", envvar="jiraclicmd", default=None, help="Path of the jira CLI")
@click.option("--server", envvar="jiraserver", default=None, help="Tracker server URL")
@click.option("--user", envvar="jirauser", default=None, help="Tracker user")
@click.option("--password", envvar="jirapass", default=None, help="Tracker password")
@click.option("--field", envvar="integrationdate_cf", default=None, help="Integration date custom field id")
@click.pass_context
def count_delayed(
    ctx: click.Context,
    workspace: str | None,
    jira_cmd: str | None,
    server: str | None,
    user: str | None,
    password: str | None,
    field: str | None,
) -> None:
    """Detect a new integration cycle and count its delayed issues."""
    from relkit.config.loader import apply_overrides, require_settings
    from relkit.config.schema import TRACKER_ENV_VARS
    from relkit.tracker.cycle import CycleTracker
    from relkit.tracker.jira_cli import JiraCli
    from relkit.tracker.state import CycleStateStore

    tracker_cfg = apply_overrides(ctx.obj["config"].tracker, {
        "workspace": workspace,
        "cli_cmd": jira_cmd,
        "server": server,
        "user": user,
        "password": password,
        "integration_date_field": field,
    })
    try:
        require_settings(tracker_cfg, TRACKER_ENV_VARS)
    except ValueError as e:
        click.echo(str(e), err=True)
        ctx.exit(1)

    workspace_dir = Path(tracker_cfg.workspace)
    store = CycleStateStore(
        workspace_dir / tracker_cfg.state_file,
        workspace_dir / tracker_cfg.history_file,
    )
    tracker = CycleTracker(JiraCli(tracker_cfg), store, tracker_cfg.integration_date_field)
    state = tracker.run()
    click.echo(
        f"Cycle {state.marker} started on {state.detected_at}: "
        f"{state.delayed_count} delayed issues"
    )


@main.command("verify-commits")
@click.option("--git-cmd", envvar="gitcmd", default=None, help="Path of the git CLI")
@click.option("--git-dir", envvar="gitdir", default=None, help="Repository directory")
@click.option("--initial", envvar="initialcommit", default=None, help="Initial commit (excluded)")
@click.option("--final", envvar="finalcommit", default=None, help="Final commit (included)")
@click.option("--issue-code", envvar="issuecode", default=None, help="Issue code every commit must carry")
@click.option("--debug", is_flag=True, help="Human-readable framing on stdout")
@click.option("--debug-env", envvar="debug", default=None, hidden=True)
@click.pass_context
def verify_commits(
    ctx: click.Context,
    git_cmd: str | None,
    git_dir: str | None,
    initial: str | None,
    final: str | None,
    issue_code: str | None,
    debug: bool,
    debug_env: str | None,
) -> None:
    """Verify commit messages in initial..final.

    Exits with the number of problems found (0 when clean) or 1 when
    the range itself is invalid. Any non-empty ``debug`` environment
    value turns debug framing on.
    """
    from relkit.commits.git import GitRepo
    from relkit.commits.linter import CommitLinter, LintReporter
    from relkit.commits.rules import LintPolicy
    from relkit.config.loader import apply_overrides, require_settings
    from relkit.config.schema import COMMITS_ENV_VARS

    commits_cfg = apply_overrides(ctx.obj["config"].commits, {
        "git_cmd": git_cmd,
        "git_dir": git_dir,
        "initial_commit": initial,
        "final_commit": final,
        "issue_code": issue_code,
        "debug": (debug or bool(debug_env)) or None,
    })
    try:
        require_settings(commits_cfg, COMMITS_ENV_VARS)
    except ValueError as e:
        click.echo(str(e), err=True)
        ctx.exit(1)

    linter = CommitLinter(
        GitRepo(commits_cfg.git_dir, commits_cfg.git_cmd),
        commits_cfg.initial_commit,
        commits_cfg.final_commit,
        policy=LintPolicy.from_config(commits_cfg),
        issue_code=commits_cfg.issue_code,
        reporter=LintReporter(debug=commits_cfg.debug),
    )
    try:
        report = linter.run()
    except ValueError as e:
        click.echo(str(e), err=True)
        ctx.exit(1)
    except FileNotFoundError as e:
        click.echo(f"Error: cannot run git in {commits_cfg.git_dir} ({e.strerror})", err=True)
        ctx.exit(1)

    ctx.exit(report.exit_code)


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration and the current integration cycle."""
    from relkit.tracker.state import CycleStateStore

    cfg = ctx.obj["config"]
    click.echo(f"Relkit v{__version__}")
    click.echo(f"Config: {ctx.obj['config_path']}")

    if not cfg.tracker.workspace:
        click.echo("\nNo tracker workspace configured.")
        return

    workspace_dir = Path(cfg.tracker.workspace)
    store = CycleStateStore(
        workspace_dir / cfg.tracker.state_file,
        workspace_dir / cfg.tracker.history_file,
    )
    state = store.load_state()
    if state is None:
        click.echo("\nNo integration cycle recorded yet.")
        return
    click.echo(f"\nCycle: {state.marker} (since {state.detected_at})")
    click.echo(f"Delayed issues ({state.delayed_count}):")
    for issue in state.delayed_issues:
        click.echo(f"  {issue}")
