"""Schedule run orchestration on top of a session store."""

import logging
import uuid
from typing import TYPE_CHECKING

from ..exceptions import TimetableError
from .algorithm import Allocator
from .config.constraints import ConstraintsConfig
from .models import ScheduleRun

if TYPE_CHECKING:
    from ..storage import SessionStore

logger = logging.getLogger(__name__)


class ScheduleRunner:
    """Runs the allocator for a session and records the outcome.

    A run moves from running to completed, or to failed when the input data
    cannot be scheduled at all (for example a lock on an unknown room).
    Failed runs keep no scheduled or unscheduled rows.
    """

    def __init__(self, store: "SessionStore") -> None:
        self.store = store

    def load_constraints(self, session_id: str) -> ConstraintsConfig:
        """Session constraints, substituting and saving the default when absent."""
        config = self.store.get_constraints(session_id)
        if config is None:
            logger.info(f"Session {session_id} has no constraints; saving the default")
            config = ConstraintsConfig.default()
            self.store.save_constraints(session_id, config)
        return config

    def generate(
        self,
        session_id: str,
        seed: int | None = None,
        candidate_limit: int | None = None,
    ) -> ScheduleRun:
        """Generate a schedule for a session.

        Args:
            session_id: Session to schedule
            seed: Recorded on the run
            candidate_limit: Top-K cut-off, defaults to the session limit

        Returns:
            The completed or failed run

        Raises:
            Exception: Unexpected errors are re-raised after the run is
                marked failed
        """
        config = self.load_constraints(session_id)
        run = ScheduleRun(
            id=str(uuid.uuid4()),
            session_id=session_id,
            seed=seed,
            candidate_limit=(
                candidate_limit
                if candidate_limit is not None
                else config.limits.candidate_limit_per_event
            ),
        )
        self.store.save_run(run)
        logger.info(f"Run {run.id} started for session {session_id}")

        try:
            allocator = Allocator(
                self.store.list_timeslots(session_id),
                self.store.list_rooms(session_id),
                self.store.list_blocked_times(session_id),
                config,
            )
            result = allocator.allocate(
                self.store.list_events(session_id),
                self.store.list_locks(session_id),
                seed=seed,
                candidate_limit=candidate_limit,
            )
        except TimetableError as e:
            run.fail(str(e))
            self.store.save_run(run)
            logger.error(f"Run {run.id} failed: {e}")
            return run
        except Exception as e:
            run.fail(str(e))
            self.store.save_run(run)
            logger.exception(f"Run {run.id} failed unexpectedly")
            raise

        self.store.save_run_results(run.id, result.scheduled, result.unscheduled)
        run.complete(result)
        self.store.save_run(run)

        logger.info(
            f"Run {run.id} completed: {run.scheduled_count} scheduled, "
            f"{run.unscheduled_count} unscheduled"
        )
        return run
