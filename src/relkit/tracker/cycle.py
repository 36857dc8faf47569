"""Integration cycle detection and delayed issue counting."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from relkit.tracker.jira_cli import JiraCli
from relkit.tracker.state import (
    TIMESTAMP_FORMAT,
    CycleState,
    CycleStateStore,
    render_state,
)

logger = logging.getLogger(__name__)


class CycleTracker:
    """Roll integration cycles over and recount their delayed issues.

    The state store is written once, after every tracker query has
    succeeded, so a failing run leaves the previous state untouched.
    """

    def __init__(
        self,
        client: JiraCli,
        store: CycleStateStore,
        integration_date_field: str,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.client = client
        self.store = store
        self.integration_date_field = integration_date_field
        self._now = now

    def current_marker(self) -> str | None:
        """Integration date of the most recently integrated closed issue."""
        issue_key = self.client.query_most_recent_closed()
        if issue_key is None:
            return None
        logger.info("Processing %s", issue_key)
        return self.client.get_field(issue_key, self.integration_date_field)

    def run(self) -> CycleState:
        stored = self.store.load_state()
        state = stored or CycleState.sentinel()
        logger.info(
            "Last integration cycle ended with info %s on %s with %d delayed issues since then",
            state.marker, state.detected_at, state.delayed_count,
        )

        history_append: str | None = None
        marker = self.current_marker()
        if marker is None:
            logger.warning("No closed issue with an integration date found, keeping cycle %s", state.marker)
        elif marker != state.marker:
            if stored is not None:
                history_append = stored.raw or render_state(stored)
            state = CycleState(
                marker=marker,
                detected_at=self._now().strftime(TIMESTAMP_FORMAT),
            )
            logger.info(
                "Detected integration cycle closed with info %s on %s",
                state.marker, state.detected_at,
            )

        # Recount from scratch: the query covers the whole cycle so far
        state = CycleState(marker=state.marker, detected_at=state.detected_at)
        for issue_key in self.client.query_delayed_candidates(state.detected_at):
            logger.info("Processing %s", issue_key)
            state.add_delayed(issue_key)

        self.store.save_state(state, history_append)
        self.client.cleanup()
        logger.info(
            "Found %d delayed issues since %s", state.delayed_count, state.detected_at,
        )
        return state
