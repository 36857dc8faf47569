"""Integration cycle tracking against the issue tracker."""

from relkit.tracker.cycle import CycleTracker
from relkit.tracker.jira_cli import JiraCli
from relkit.tracker.state import CycleState, CycleStateStore

__all__ = ["CycleState", "CycleStateStore", "CycleTracker", "JiraCli"]
