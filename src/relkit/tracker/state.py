"""Persisted integration cycle state: one current block plus a history log."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

SENTINEL_MARKER = "01/Jan/14"
SENTINEL_DETECTED_AT = "2014/01/01 17:00"
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M"

_HEADER_RE = re.compile(r"^Cycle (?P<marker>.*) closed on (?P<detected_at>\S+ \S+)$")
_FOOTER_RE = re.compile(r"^Found (?P<count>\d+) delayed issues")


@dataclass
class CycleState:
    """The integration cycle currently open and its delayed issues."""

    marker: str
    detected_at: str
    delayed_count: int = 0
    delayed_issues: list[str] = field(default_factory=list)
    raw: str | None = None

    @classmethod
    def sentinel(cls) -> CycleState:
        return cls(marker=SENTINEL_MARKER, detected_at=SENTINEL_DETECTED_AT)

    def add_delayed(self, issue_key: str) -> None:
        self.delayed_issues.append(issue_key)
        self.delayed_count += 1


def render_state(state: CycleState) -> str:
    """Render a state block in the fixed textual layout."""
    lines = [
        f"Cycle {state.marker} closed on {state.detected_at}",
        "",
        f"Started new cycle on {state.detected_at}",
    ]
    lines.extend(f"    {issue}" for issue in state.delayed_issues)
    lines.append(
        f"Found {state.delayed_count} delayed issues since {state.detected_at}"
    )
    return "\n".join(lines) + "\n"


def parse_state(text: str) -> CycleState:
    """Parse a state block. Raises ValueError on a malformed header."""
    lines = text.splitlines()
    header = _HEADER_RE.match(lines[0]) if lines else None
    if header is None:
        raise ValueError("Malformed cycle state: missing 'Cycle ... closed on ...' header")

    count = 0
    footer = _FOOTER_RE.match(lines[-1])
    if footer:
        count = int(footer.group("count"))

    issues = [line.strip() for line in lines[3:-1] if line.startswith("    ")]
    return CycleState(
        marker=header.group("marker"),
        detected_at=header.group("detected_at"),
        delayed_count=count,
        delayed_issues=issues,
        raw=text,
    )


class CycleStateStore:
    """File-backed store for the current cycle and the history of past ones."""

    def __init__(self, state_path: Path, history_path: Path) -> None:
        self.state_path = Path(state_path)
        self.history_path = Path(history_path)

    def load_state(self) -> CycleState | None:
        """Load the current cycle, or None on a first run."""
        if not self.state_path.exists():
            return None
        return parse_state(self.state_path.read_text())

    def save_state(self, state: CycleState, history_append: str | None = None) -> None:
        """Append a finished cycle block to history, then rewrite the state file."""
        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        if history_append is not None:
            with self.history_path.open("a") as fh:
                fh.write(history_append)
                fh.write("\n")
        self.state_path.write_text(render_state(state))
