"""
Assessment attempt routes.

GOVERNANCE:
- Wrong-state requests are answered with the unchanged attempt, not errors
- Case answers are revealed only in the submitted result
"""

import logging
import random
from typing import Optional

from fastapi import APIRouter, HTTPException

from api.models.attempts import (
    AttemptView,
    CaseView,
    CreateAttemptRequest,
    NavigateRequest,
    SelectionRequest,
)
from assessment import (
    AssessmentController,
    AssessmentDefinition,
    AsyncioScheduler,
    AttemptResult,
    GradingRule,
    SessionSnapshot,
    get_assessment,
    list_assessments,
)
from assessment.timer import Scheduler
from cases import CASES, IMAGING_OPTIONS, ImagingOption, InMemoryCaseRepository
from cases.repository import CaseRepository
from config import get_settings
from storage import SnapshotStore, SnapshotStoreError, get_snapshot_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["assessments"])


class AttemptRegistry:
    """
    Live attempts by session id.

    Completed attempts stay readable for ``retention_seconds`` of scheduler
    time, then are evicted on the next create or resume.
    """

    def __init__(
        self,
        repository: CaseRepository,
        scheduler: Scheduler,
        store: Optional[SnapshotStore] = None,
        grading_rule: GradingRule = GradingRule.ANY_OVERLAP,
        tick_interval: float = 1.0,
        retention_seconds: float = 3600.0,
    ):
        self.repository = repository
        self.scheduler = scheduler
        self.store = store
        self.grading_rule = grading_rule
        self.tick_interval = tick_interval
        self.retention_seconds = retention_seconds
        self._controllers: dict[str, AssessmentController] = {}
        # Scheduler time each attempt completed at
        self._completed: dict[str, float] = {}

    @property
    def live_count(self) -> int:
        return len(self._controllers)

    def create(
        self, definition: AssessmentDefinition, rng: Optional[random.Random] = None
    ) -> AssessmentController:
        self.evict_expired()
        controller = self._build(definition, rng)
        self._controllers[controller.session_id] = controller
        return controller

    def resume(self, session_id: str) -> Optional[AssessmentController]:
        """
        Rebuild an attempt from its stored snapshot and continue it.

        Returns:
            The resumed controller, or None if no usable snapshot exists
        """
        self.evict_expired()
        snapshot = self.load_snapshot(session_id)
        if snapshot is None:
            return None

        definition = get_assessment(snapshot.assessment_id)
        if definition is None:
            logger.warning(
                "snapshot %s names unknown assessment %s",
                session_id,
                snapshot.assessment_id,
            )
            return None
        if snapshot.case_sequence:
            definition = definition.model_copy(
                update={
                    "case_ids": list(snapshot.case_sequence),
                    "question_count": len(snapshot.case_sequence),
                }
            )

        controller = self._build(definition, session_id=session_id)
        if not controller.resume(snapshot):
            return None
        self._controllers[session_id] = controller
        return controller

    def load_snapshot(self, session_id: str) -> Optional[SessionSnapshot]:
        if self.store is None:
            return None
        try:
            return self.store.load(session_id)
        except SnapshotStoreError:
            logger.warning("snapshot %s could not be loaded", session_id, exc_info=True)
            return None

    def get(self, session_id: str) -> Optional[AssessmentController]:
        return self._controllers.get(session_id)

    def discard(self, session_id: str) -> None:
        self._controllers.pop(session_id, None)
        self._completed.pop(session_id, None)

    def evict_expired(self) -> int:
        """Drop completed attempts older than the retention window."""
        cutoff = self.scheduler.now() - self.retention_seconds
        expired = [sid for sid, at in self._completed.items() if at <= cutoff]
        for session_id in expired:
            self.discard(session_id)
        if expired:
            logger.debug("evicted %d completed attempts", len(expired))
        return len(expired)

    def _build(
        self,
        definition: AssessmentDefinition,
        rng: Optional[random.Random] = None,
        session_id: Optional[str] = None,
    ) -> AssessmentController:
        return AssessmentController.for_assessment(
            definition,
            self.repository,
            self.scheduler,
            rng=rng,
            store=self.store,
            grading_rule=self.grading_rule,
            tick_interval=self.tick_interval,
            session_id=session_id,
            on_submit=self._mark_completed,
        )

    def _mark_completed(self, result: AttemptResult) -> None:
        self._completed[result.session_id] = self.scheduler.now()


# Singleton registry instance
_registry: Optional[AttemptRegistry] = None


def get_registry() -> AttemptRegistry:
    """Get or create the attempt registry."""
    global _registry
    if _registry is None:
        settings = get_settings()
        _registry = AttemptRegistry(
            InMemoryCaseRepository(CASES, IMAGING_OPTIONS),
            AsyncioScheduler(),
            store=get_snapshot_store(),
            grading_rule=GradingRule(settings.grading_rule),
            tick_interval=settings.tick_interval_seconds,
            retention_seconds=settings.completed_attempt_retention_seconds,
        )
    return _registry


def _controller_or_404(session_id: str) -> AssessmentController:
    controller = get_registry().get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Attempt not found")
    return controller


def _view(controller: AssessmentController, applied: bool = True) -> AttemptView:
    session = controller.session
    case = controller.current_case
    return AttemptView(
        session_id=session.session_id,
        assessment_id=session.assessment_id,
        state=session.state,
        case_sequence=list(session.case_sequence),
        current_case_index=session.current_case_index,
        current_case=CaseView.from_case(case) if case is not None else None,
        answers=list(session.answers.values()),
        answered_count=controller.answered_count,
        time_limit_seconds=session.time_limit_seconds,
        time_remaining_seconds=session.time_remaining_seconds,
        applied=applied,
        result=controller.result,
    )


@router.get("/assessments", response_model=list[AssessmentDefinition])
async def get_assessments():
    """List the predefined assessments."""
    return list_assessments()


@router.get("/imaging-options", response_model=list[ImagingOption])
async def get_imaging_options():
    """List orderable imaging studies."""
    return get_registry().repository.get_imaging_options()


@router.post("/attempts", response_model=AttemptView)
async def create_attempt(request: CreateAttemptRequest):
    """Create an attempt for an assessment and start it."""
    definition = get_assessment(request.assessment_id)
    if definition is None:
        raise HTTPException(status_code=404, detail="Assessment not found")

    if request.case_ids:
        definition = definition.model_copy(
            update={
                "case_ids": list(request.case_ids),
                "question_count": len(request.case_ids),
            }
        )

    rng = random.Random(request.seed) if request.seed is not None else None
    registry = get_registry()
    controller = registry.create(definition, rng)

    if not controller.start():
        registry.discard(controller.session_id)
        raise HTTPException(status_code=400, detail="No cases available")

    logger.info("attempt %s created for %s", controller.session_id, definition.id)
    return _view(controller)


@router.get("/attempts/{session_id}", response_model=AttemptView)
async def get_attempt(session_id: str):
    return _view(_controller_or_404(session_id))


@router.put("/attempts/{session_id}/cases/{case_id}/selection", response_model=AttemptView)
async def select_imaging(session_id: str, case_id: str, request: SelectionRequest):
    """Replace the imaging selection for a case."""
    controller = _controller_or_404(session_id)
    applied = controller.select_imaging(case_id, request.imaging_ids)
    return _view(controller, applied)


@router.post("/attempts/{session_id}/cases/{case_id}/flag", response_model=AttemptView)
async def toggle_flag(session_id: str, case_id: str):
    controller = _controller_or_404(session_id)
    applied = controller.toggle_flag(case_id)
    return _view(controller, applied)


@router.post("/attempts/{session_id}/navigate", response_model=AttemptView)
async def navigate(session_id: str, request: NavigateRequest):
    controller = _controller_or_404(session_id)
    applied = controller.go_to_case(request.index)
    return _view(controller, applied)


@router.post("/attempts/{session_id}/next", response_model=AttemptView)
async def next_case(session_id: str):
    controller = _controller_or_404(session_id)
    applied = controller.next()
    return _view(controller, applied)


@router.post("/attempts/{session_id}/previous", response_model=AttemptView)
async def previous_case(session_id: str):
    controller = _controller_or_404(session_id)
    applied = controller.previous()
    return _view(controller, applied)


@router.post("/attempts/{session_id}/submit", response_model=AttemptView)
async def submit_attempt(session_id: str):
    """
    Submit an attempt for grading.

    Repeated submissions return the same result.
    """
    controller = _controller_or_404(session_id)
    result = controller.submit()
    return _view(controller, result is not None)


@router.post("/attempts/{session_id}/resume", response_model=AttemptView)
async def resume_attempt(session_id: str):
    """
    Continue an attempt from its stored snapshot.

    Used after a restart, when the attempt is no longer live. Resuming a
    live attempt returns it unchanged.
    """
    registry = get_registry()
    controller = registry.get(session_id)
    if controller is not None:
        return _view(controller, applied=False)

    controller = registry.resume(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="No resumable attempt found")

    logger.info("attempt %s resumed", session_id)
    return _view(controller)


@router.get("/attempts/{session_id}/snapshot", response_model=SessionSnapshot)
async def get_snapshot(session_id: str):
    """Latest stored snapshot of an in-progress attempt, live or not."""
    registry = get_registry()
    controller = registry.get(session_id)
    if controller is not None:
        snapshot = controller.load_snapshot()
    else:
        snapshot = registry.load_snapshot(session_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Snapshot not found")
    return snapshot
