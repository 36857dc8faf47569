"""Tests for the jira CLI client."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from relkit.config.schema import TrackerConfig
from relkit.tracker.jira_cli import JiraCli


def _writes(output: str):
    """subprocess.run side effect that writes output to the --file argument."""
    def run(cmd, **kwargs):
        Path(cmd[cmd.index("--file") + 1]).write_text(output)
        return MagicMock(returncode=0, stdout="", stderr="")
    return run


class TestJiraCli:
    @pytest.fixture(autouse=True)
    def _client(self, tmp_path: Path):
        self.config = TrackerConfig(
            workspace=str(tmp_path),
            cli_cmd="java -jar /opt/jira-cli.jar",
            server="https://tracker.example.org",
            user="cibot",
            password="secret",
            integration_date_field="customfield_10210",
        )
        self.jira = JiraCli(self.config)
        self.tmp_path = tmp_path

    @patch("relkit.tracker.jira_cli.subprocess.run")
    def test_query_most_recent_closed(self, mock_run):
        mock_run.side_effect = _writes(
            '"Key","Summary"\n"MDL-70123","Fix the thing"\n'
        )
        assert self.jira.query_most_recent_closed() == "MDL-70123"
        cmd = mock_run.call_args[0][0]
        assert cmd[:3] == ["java", "-jar", "/opt/jira-cli.jar"]
        assert cmd[cmd.index("--action") + 1] == "getIssueList"
        assert cmd[cmd.index("--count") + 1] == "1"
        assert cmd[cmd.index("--password") + 1] == "secret"
        jql = cmd[cmd.index("--search") + 1]
        assert "project = 'Moodle'" in jql
        assert "ORDER BY 'Integration date' DESC" in jql
        assert mock_run.call_args.kwargs["check"] is True

    @patch("relkit.tracker.jira_cli.subprocess.run")
    def test_query_most_recent_closed_none(self, mock_run):
        mock_run.side_effect = _writes('"Key","Summary"\n')
        assert self.jira.query_most_recent_closed() is None

    @patch("relkit.tracker.jira_cli.subprocess.run")
    def test_get_field(self, mock_run):
        mock_run.side_effect = _writes("21/Mar/24\n")
        assert self.jira.get_field("MDL-70123", "customfield_10210") == "21/Mar/24"
        cmd = mock_run.call_args[0][0]
        assert cmd[cmd.index("--action") + 1] == "getFieldValue"
        assert cmd[cmd.index("--issue") + 1] == "MDL-70123"
        assert cmd[cmd.index("--field") + 1] == "customfield_10210"

    @patch("relkit.tracker.jira_cli.subprocess.run")
    def test_get_field_strips_crlf(self, mock_run):
        mock_run.side_effect = _writes("21/Mar/24 5:00 PM\r\n")
        assert self.jira.get_field("MDL-70123", "customfield_10210") == "21/Mar/24 5:00 PM"

    @patch("relkit.tracker.jira_cli.subprocess.run")
    def test_query_delayed_candidates(self, mock_run):
        mock_run.side_effect = _writes(
            '"Key","Summary"\n'
            '"MDL-80001","One"\n'
            '"MDL-80002","Two"\n'
            '"WP-1","Other project"\n'
        )
        keys = self.jira.query_delayed_candidates("2024/03/21 17:30")
        assert keys == ["MDL-80001", "MDL-80002"]
        jql = mock_run.call_args[0][0][mock_run.call_args[0][0].index("--search") + 1]
        assert "AFTER '2024/03/21 17:30'" in jql

    def test_delayed_jql(self):
        jql = self.jira.build_delayed_jql("2024/03/21 17:30")
        assert (
            "status WAS IN ('Waiting for integration review', 'Integration review in progress') "
            "AFTER '2024/03/21 17:30'"
        ) in jql
        assert (
            "status WAS NOT IN ('Waiting for testing', 'Testing in progress', 'Tested', "
            "'Passed', 'Reopened', 'Closed') AFTER '2024/03/21 17:30'"
        ) in jql
        assert (
            "comment ~ '\"The integration of this issue has been delayed to next week because\"'"
        ) in jql

    @patch("relkit.tracker.jira_cli.subprocess.run")
    def test_failure_propagates(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(1, "jira")
        with pytest.raises(subprocess.CalledProcessError):
            self.jira.query_most_recent_closed()

    @patch("relkit.tracker.jira_cli.subprocess.run")
    def test_cleanup_removes_temp_file(self, mock_run):
        mock_run.side_effect = _writes("21/Mar/24\n")
        self.jira.get_field("MDL-70123", "customfield_10210")
        assert (self.tmp_path / "count_delayed_temp.csv").exists()
        self.jira.cleanup()
        assert not (self.tmp_path / "count_delayed_temp.csv").exists()
        self.jira.cleanup()
