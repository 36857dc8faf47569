"""Issue tracker queries via the jira command-line client."""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from pathlib import Path

from relkit.config.schema import TrackerConfig

logger = logging.getLogger(__name__)


class JiraCli:
    """Run tracker queries through the jira CLI.

    The CLI writes every result to a temporary file in the workspace,
    which is read back after each call. Failures are not caught: a
    failing call raises CalledProcessError and aborts the caller.
    """

    def __init__(self, config: TrackerConfig) -> None:
        self.config = config
        self.temp_path = Path(config.workspace or ".") / config.temp_file
        self._key_re = re.compile(
            rf'^"({re.escape(config.issue_prefix)}-[0-9]*)"', re.MULTILINE,
        )

    def _base_cmd(self) -> list[str]:
        return shlex.split(self.config.cli_cmd or "") + [
            "--server", self.config.server or "",
            "--user", self.config.user or "",
            "--password", self.config.password or "",
        ]

    def _run_jira(self, args: list[str]) -> str:
        """Run an action and return what it wrote to the temp file."""
        self.temp_path.parent.mkdir(parents=True, exist_ok=True)
        self.temp_path.write_text("")
        cmd = self._base_cmd() + args + ["--file", str(self.temp_path)]
        logger.debug("Running tracker action %s", args[1] if len(args) > 1 else args)
        subprocess.run(cmd, capture_output=True, text=True, check=True)
        return self.temp_path.read_text()

    def _parse_keys(self, text: str) -> list[str]:
        return self._key_re.findall(text)

    def query_most_recent_closed(self) -> str | None:
        """Key of the closed issue with the latest integration date, or None."""
        jql = (
            f"project = '{self.config.project}' "
            "AND status = 'Closed' "
            "AND 'Integration date' IS NOT empty "
            "ORDER BY 'Integration date' DESC"
        )
        output = self._run_jira(
            ["--action", "getIssueList", "--search", jql, "--count", "1"]
        )
        keys = self._parse_keys(output)
        return keys[0] if keys else None

    def get_field(self, issue_key: str, field: str) -> str:
        """Value of a single field of an issue."""
        output = self._run_jira(
            ["--action", "getFieldValue", "--issue", issue_key, "--field", field]
        )
        return output.rstrip("\r\n")

    def build_delayed_jql(self, since: str) -> str:
        review = ", ".join(f"'{s}'" for s in self.config.review_statuses)
        downstream = ", ".join(f"'{s}'" for s in self.config.downstream_statuses)
        return (
            f"project = '{self.config.project}' "
            f"AND status WAS IN ({review}) AFTER '{since}' "
            f"AND status WAS NOT IN ({downstream}) AFTER '{since}' "
            f"AND comment ~ '\"{self.config.delay_phrase}\"'"
        )

    def query_delayed_candidates(self, since: str) -> list[str]:
        """Keys of issues delayed in integration review since a timestamp."""
        output = self._run_jira(
            ["--action", "getIssueList", "--search", self.build_delayed_jql(since)]
        )
        return self._parse_keys(output)

    def cleanup(self) -> None:
        """Remove the temporary results file."""
        self.temp_path.unlink(missing_ok=True)
