"""Shared test fixtures."""

import logging
from pathlib import Path

import pytest

ENV_VARS = [
    "WORKSPACE", "jiraclicmd", "jiraserver", "jirauser", "jirapass", "integrationdate_cf",
    "gitcmd", "gitdir", "initialcommit", "finalcommit", "issuecode", "debug",
]


@pytest.fixture(autouse=True)
def reset_relkit_logging():
    """Drop handlers bound to streams CliRunner has already closed."""
    yield
    logging.getLogger("relkit").handlers.clear()


@pytest.fixture
def clean_env() -> dict[str, None]:
    """CliRunner env mapping that unsets every setting read from the environment."""
    return {name: None for name in ENV_VARS}


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    """Create a minimal valid config YAML file."""
    config = tmp_path / "relkit.yaml"
    config.write_text(
        """\
logging:
  level: "DEBUG"

tracker:
  workspace: "/tmp/relkit-workspace"
  cli_cmd: "/opt/jira-cli/jira.sh"
  server: "https://tracker.example.org"
  user: "cibot"
  password: "secret"
  integration_date_field: "customfield_10210"

commits:
  git_dir: "/tmp/repo"
  issue_prefix: "MDL"
"""
    )
    return config


@pytest.fixture
def empty_config_yaml(tmp_path: Path) -> Path:
    """Create an empty config YAML file."""
    config = tmp_path / "relkit.yaml"
    config.write_text("{}\n")
    return config
