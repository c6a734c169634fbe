"""
Assessment session controller.

Drives one timed attempt through ``start -> in_progress -> completed``.

GOVERNANCE:
- Wrong-state operations are ignored, never raised: timer callbacks and
  UI events race, and a stale click must not crash the session
- Case time is closed out before the next case is entered and before any
  snapshot is written
- Snapshot failures never break the in-memory session
- The timer is stopped before session state is discarded
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Sequence

from assessment.definitions import AssessmentDefinition, select_cases
from assessment.grading import GradingRule, grade_session
from assessment.models import (
    AssessmentSession,
    AttemptResult,
    CaseAnswer,
    SessionSnapshot,
    SessionState,
    dedupe,
    utcnow,
)
from assessment.timer import CountdownTimer, Scheduler
from cases.models import Case, ImagingOption
from cases.repository import CaseRepository

if TYPE_CHECKING:
    from storage.snapshots import SnapshotStore

logger = logging.getLogger(__name__)


class AssessmentController:
    """
    Owns one assessment session.

    Typical usage::

        controller = AssessmentController.for_assessment(
            QUICK_QUIZ, repository, AsyncioScheduler(), store=store
        )
        controller.start()
        controller.select_imaging(controller.current_case_id, ["mri-lumbar"])
        controller.next()
        result = controller.submit()
    """

    def __init__(
        self,
        assessment_id: str,
        cases: Iterable[Case],
        scheduler: Scheduler,
        *,
        passing_score: int = 70,
        time_limit_seconds: int = 0,
        store: Optional[SnapshotStore] = None,
        imaging_options: Sequence[ImagingOption] = (),
        grading_rule: GradingRule = GradingRule.ANY_OVERLAP,
        session_id: Optional[str] = None,
        on_submit: Optional[Callable[[AttemptResult], None]] = None,
        tick_interval: float = 1.0,
    ):
        self._cases: dict[str, Case] = {c.id: c for c in cases}
        self._scheduler = scheduler
        self.passing_score = passing_score
        self.time_limit_seconds = time_limit_seconds
        self._store = store
        self._imaging_options = list(imaging_options)
        self.grading_rule = grading_rule
        self._on_submit = on_submit
        self._tick_interval = tick_interval

        # Case order used when start() is called without one
        self.planned_sequence: list[str] = list(self._cases)

        self.session = AssessmentSession(
            session_id=session_id or str(uuid.uuid4()),
            assessment_id=assessment_id,
        )
        self._timer: Optional[CountdownTimer] = None
        self._entered_at: Optional[float] = None
        self._result: Optional[AttemptResult] = None

    @classmethod
    def for_assessment(
        cls,
        definition: AssessmentDefinition,
        repository: CaseRepository,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
        **kwargs,
    ) -> "AssessmentController":
        """Build a controller for a catalog assessment with selected cases."""
        selected = select_cases(definition, repository, rng)
        controller = cls(
            definition.id,
            selected,
            scheduler,
            passing_score=definition.passing_score,
            time_limit_seconds=definition.time_limit_seconds,
            imaging_options=repository.get_imaging_options(),
            **kwargs,
        )
        controller.planned_sequence = [c.id for c in selected]
        return controller

    # Read-only views

    @property
    def session_id(self) -> str:
        return self.session.session_id

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def current_case_id(self) -> Optional[str]:
        if not self.session.case_sequence:
            return None
        return self.session.case_sequence[self.session.current_case_index]

    @property
    def current_case(self) -> Optional[Case]:
        case_id = self.current_case_id
        return self._cases.get(case_id) if case_id else None

    @property
    def answered_count(self) -> int:
        return sum(1 for a in self.session.answers.values() if a.selected_imaging)

    @property
    def result(self) -> Optional[AttemptResult]:
        return self._result

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and self._timer.running

    def snapshot(self) -> SessionSnapshot:
        """Current state as a recoverable snapshot."""
        return SessionSnapshot(
            assessment_id=self.session.assessment_id,
            case_sequence=list(self.session.case_sequence),
            answers=[
                (cid, answer.model_copy(deep=True))
                for cid, answer in self.session.answers.items()
            ],
            current_case_index=self.session.current_case_index,
            time_remaining_seconds=self.session.time_remaining_seconds,
            timestamp=utcnow(),
        )

    # State transitions

    def start(
        self,
        case_sequence: Optional[Sequence[str]] = None,
        time_limit_seconds: Optional[int] = None,
    ) -> bool:
        """
        Begin the attempt.

        Args:
            case_sequence: Ordered case ids, defaults to the planned sequence
            time_limit_seconds: Whole-attempt limit, 0 for untimed

        Returns:
            True if the session started
        """
        if self.state != SessionState.START:
            return self._ignore("start")

        sequence = dedupe(
            self.planned_sequence if case_sequence is None else case_sequence
        )
        if not sequence:
            logger.warning("cannot start session %s without cases", self.session_id)
            return False

        limit = self.time_limit_seconds if time_limit_seconds is None else time_limit_seconds
        self._begin(sequence, max(0, limit), max(0, limit), 0, {})
        logger.info(
            "session %s started: %d cases, %ds limit",
            self.session_id,
            len(sequence),
            self.session.time_limit_seconds,
        )
        self._persist()
        return True

    def resume(
        self,
        snapshot: SessionSnapshot,
        case_sequence: Optional[Sequence[str]] = None,
        time_limit_seconds: Optional[int] = None,
    ) -> bool:
        """
        Continue an interrupted attempt from a stored snapshot.

        The case order comes from ``case_sequence`` when given, then from
        the snapshot, then from the planned sequence. Ids this controller
        has no case for are dropped.
        """
        if self.state != SessionState.START:
            return self._ignore("resume")
        if snapshot.assessment_id != self.session.assessment_id:
            logger.warning(
                "snapshot for assessment %s cannot resume %s",
                snapshot.assessment_id,
                self.session.assessment_id,
            )
            return False

        if case_sequence is None:
            case_sequence = snapshot.case_sequence or self.planned_sequence
        sequence = [cid for cid in dedupe(case_sequence) if cid in self._cases]
        if not sequence:
            logger.warning("cannot resume session %s without cases", self.session_id)
            return False

        answers = {
            cid: answer.model_copy(deep=True)
            for cid, answer in snapshot.answers
            if cid in sequence
        }
        index = min(max(snapshot.current_case_index, 0), len(sequence) - 1)
        limit = self.time_limit_seconds if time_limit_seconds is None else time_limit_seconds

        self._begin(
            sequence, max(0, limit), max(0, snapshot.time_remaining_seconds), index, answers
        )
        logger.info(
            "session %s resumed at case %d with %ds remaining",
            self.session_id,
            index,
            self.session.time_remaining_seconds,
        )
        self._persist()
        return True

    def select_imaging(self, case_id: str, imaging_ids: Sequence[str]) -> bool:
        """Replace the selection for a case. Does not touch time tracking."""
        if not self._accepts("select_imaging", case_id):
            return False
        answer = self._ensure_answer(case_id)
        answer.selected_imaging = dedupe(imaging_ids)
        self._persist()
        return True

    def toggle_flag(self, case_id: str) -> bool:
        """Flip the review flag for a case."""
        if not self._accepts("toggle_flag", case_id):
            return False
        answer = self._ensure_answer(case_id)
        answer.flagged = not answer.flagged
        self._persist()
        return True

    def go_to_case(self, index: int) -> bool:
        """Move to a case by index. Out-of-range moves are ignored."""
        if self.state != SessionState.IN_PROGRESS:
            return self._ignore("go_to_case")
        if not 0 <= index < len(self.session.case_sequence):
            logger.debug("session %s: case index %d out of range", self.session_id, index)
            return False
        if index == self.session.current_case_index:
            return False

        self._close_out_case()
        self._enter_case(index)
        self._persist()
        return True

    def next(self) -> bool:
        return self.go_to_case(self.session.current_case_index + 1)

    def previous(self) -> bool:
        return self.go_to_case(self.session.current_case_index - 1)

    def submit(self) -> Optional[AttemptResult]:
        """
        Finish the attempt and grade it.

        Idempotent: once completed, every call returns the same result
        without re-counting time or scores.
        """
        if self.state == SessionState.COMPLETED:
            return self._result
        if self.state != SessionState.IN_PROGRESS:
            self._ignore("submit")
            return None

        self._close_out_case()
        self._stop_timer()
        self.session.state = SessionState.COMPLETED
        self.session.completed_at = utcnow()

        self._result = grade_session(
            self.session,
            self._cases,
            self.passing_score,
            imaging_options=self._imaging_options,
            rule=self.grading_rule,
            completed_at=self.session.completed_at,
        )
        logger.info(
            "session %s submitted: score %d%% (%s)",
            self.session_id,
            self._result.score,
            "passed" if self._result.passed else "failed",
        )

        self._discard_snapshot()
        if self._on_submit is not None:
            try:
                self._on_submit(self._result)
            except Exception:
                logger.exception("submission sink failed for session %s", self.session_id)
        return self._result

    def reset(self) -> None:
        """Discard this attempt and return to a fresh ``start`` session."""
        self._stop_timer()
        self._discard_snapshot()
        self.session = AssessmentSession(
            session_id=str(uuid.uuid4()),
            assessment_id=self.session.assessment_id,
        )
        self._entered_at = None
        self._result = None

    def retake(self) -> "AssessmentController":
        """A brand-new controller for the same assessment. This one is untouched."""
        controller = AssessmentController(
            self.session.assessment_id,
            self._cases.values(),
            self._scheduler,
            passing_score=self.passing_score,
            time_limit_seconds=self.time_limit_seconds,
            store=self._store,
            imaging_options=self._imaging_options,
            grading_rule=self.grading_rule,
            on_submit=self._on_submit,
            tick_interval=self._tick_interval,
        )
        controller.planned_sequence = list(self.planned_sequence)
        return controller

    def load_snapshot(self) -> Optional[SessionSnapshot]:
        """Stored snapshot for this session, or None if unavailable."""
        if self._store is None:
            return None
        try:
            return self._store.load(self.session_id)
        except Exception:
            logger.warning(
                "snapshot load failed for session %s", self.session_id, exc_info=True
            )
            return None

    # Internals

    def _begin(
        self,
        sequence: list[str],
        limit: int,
        remaining: int,
        index: int,
        answers: dict[str, CaseAnswer],
    ) -> None:
        session = self.session
        session.case_sequence = sequence
        session.answers = answers
        session.time_limit_seconds = limit
        session.time_remaining_seconds = remaining if limit > 0 else 0
        session.started_at = utcnow()
        session.state = SessionState.IN_PROGRESS
        self._enter_case(index)
        if limit > 0:
            self._timer = CountdownTimer(
                self._scheduler, session.time_remaining_seconds, self._tick_interval
            )
            self._timer.start(self._on_tick, self._on_expire)

    def _accepts(self, operation: str, case_id: str) -> bool:
        if self.state != SessionState.IN_PROGRESS:
            return self._ignore(operation)
        if case_id not in self.session.case_sequence:
            logger.debug(
                "session %s: %s for unknown case %s", self.session_id, operation, case_id
            )
            return False
        return True

    def _ignore(self, operation: str) -> bool:
        logger.debug(
            "session %s: ignoring %s in state %s",
            self.session_id,
            operation,
            self.state.value,
        )
        return False

    def _ensure_answer(self, case_id: str) -> CaseAnswer:
        answers = self.session.answers
        if case_id not in answers:
            answers[case_id] = CaseAnswer(case_id=case_id)
            # Keep answers in case order, not visit order
            self.session.answers = {
                cid: answers[cid] for cid in self.session.case_sequence if cid in answers
            }
        return self.session.answers[case_id]

    def _enter_case(self, index: int) -> None:
        self.session.current_case_index = index
        self._ensure_answer(self.session.case_sequence[index])
        self._entered_at = self._scheduler.now()

    def _close_out_case(self) -> None:
        if self._entered_at is None:
            return
        elapsed = int(max(0.0, self._scheduler.now() - self._entered_at))
        answer = self._ensure_answer(self.current_case_id)
        answer.time_spent += elapsed
        self._entered_at = None

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self.session.time_remaining_seconds = self._timer.remaining
            self._timer = None

    def _on_tick(self, remaining: int) -> None:
        if self.state != SessionState.IN_PROGRESS:
            return
        self.session.time_remaining_seconds = remaining
        self._persist()

    def _on_expire(self) -> None:
        logger.info("session %s: time expired, auto-submitting", self.session_id)
        self.submit()

    def _persist(self) -> None:
        if self._store is None or self.state != SessionState.IN_PROGRESS:
            return
        try:
            self._store.save(self.session_id, self.snapshot())
        except Exception:
            logger.warning(
                "snapshot save failed for session %s", self.session_id, exc_info=True
            )

    def _discard_snapshot(self) -> None:
        if self._store is None:
            return
        try:
            self._store.delete(self.session_id)
        except Exception:
            logger.warning(
                "snapshot delete failed for session %s", self.session_id, exc_info=True
            )
