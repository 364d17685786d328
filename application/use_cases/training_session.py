"""
Training Session state machine.

Drives a live workout through alternating training and rest phases across
every set of every exercise, then finalizes a session log with a baseline
calorie figure and asks the AI estimator for a refined one in the
background.

The machine is synchronous: tick() is called once per second by the host's
timer and user actions call the other operations directly. Invalid calls
(wrong phase, empty queue) are no-ops. Everything after finalization that
touches a store or the network (ledger entry, body metrics read, AI estimate,
ledger correction) runs in one background coroutine: on the host's event
loop when one is running, otherwise on a loop thread owned by the machine.
The result is merged back by session id, so a late answer can never patch a
newer session.
"""

import asyncio
import concurrent.futures
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Coroutine, List, Optional, Sequence, Set, Tuple, Union

from application.exceptions import CalorieEstimatorNotConfiguredError
from application.ports import (
    BodyMetricsSource,
    CalorieEstimationRequest,
    CalorieEstimator,
    CalorieLedger,
    ExerciseSource,
    TrainingCalorieEntry,
)
from application.use_cases.background_loop import BackgroundEventLoop
from domain.models import (
    DEFAULT_BODY_WEIGHT_KG,
    BodyMetrics,
    ExerciseSnapshot,
    SessionPhase,
    SessionState,
    TrainingSessionLog,
)
from domain.services import build_ai_calorie_detail, build_exercise_queue
from domain.services.session_transitions import (
    advance_from_training,
    apply_calorie_estimate,
    complete_session,
    create_session_log,
    elapse,
    has_completed_session,
    is_final_set,
    reset_session,
    resume_training_after_rest,
    set_calorie_estimate_pending,
    set_paused,
    start_session,
)

logger = logging.getLogger(__name__)

Scheduler = Callable[[Coroutine[Any, Any, None]], Any]
SessionListener = Callable[[SessionState], None]
EstimateFuture = Union[asyncio.Future, concurrent.futures.Future]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_session_id() -> str:
    return str(uuid.uuid4())


def schedule_on_running_loop(coro: Coroutine[Any, Any, None]) -> "asyncio.Task[None]":
    """
    Run coro as a task on the running event loop.

    Raises:
        RuntimeError: If no event loop is running in this thread
    """
    return asyncio.get_running_loop().create_task(coro)


class TrainingSessionMachine:
    """
    In-memory state machine for one training session at a time.

    Dependencies are injected via constructor for testability; the id
    generator and clock default to uuid4 and UTC now. Without a scheduler the
    background work goes to the running asyncio loop, or to a loop thread the
    machine starts on first use (stop it with close()).

    State changes are serialized by a lock, since a background estimate may
    merge its result from the loop thread while the host keeps ticking.

    Usage:
        >>> machine = TrainingSessionMachine(
        ...     exercise_source=exercise_source,
        ...     body_metrics_source=body_metrics_source,
        ...     ledger=ledger,
        ...     estimator=estimator,
        ... )
        >>> machine.start_session()
        >>> machine.phase
        <SessionPhase.TRAINING: 'training'>
        >>> machine.mark_set_complete()
        >>> machine.skip_rest()
    """

    def __init__(
        self,
        exercise_source: ExerciseSource,
        body_metrics_source: BodyMetricsSource,
        ledger: CalorieLedger,
        estimator: CalorieEstimator,
        *,
        id_generator: Callable[[], str] = _new_session_id,
        clock: Callable[[], datetime] = _utc_now,
        scheduler: Optional[Scheduler] = None,
        default_body_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
    ) -> None:
        """
        Initialize the machine in the idle phase with an empty history.

        Args:
            exercise_source: Active menu's exercises (read at session start)
            body_metrics_source: Latest body record (read after finalization)
            ledger: Calorie ledger that receives the session's burn entry
            estimator: AI calorie estimator
            id_generator: Produces unique session log ids
            clock: Returns the current time (timezone-aware)
            scheduler: Runs the background coroutine (default: running loop,
                else a machine-owned loop thread)
            default_body_weight_kg: Weight used when no body record exists
        """
        self._exercise_source = exercise_source
        self._body_metrics_source = body_metrics_source
        self._ledger = ledger
        self._estimator = estimator
        self._id_generator = id_generator
        self._clock = clock
        self._scheduler = scheduler or self._schedule_default
        self._default_body_weight_kg = default_body_weight_kg

        self._state = SessionState()
        self._lock = threading.RLock()
        self._listeners: List[SessionListener] = []
        self._estimate_tasks: Set[EstimateFuture] = set()
        self._background_loop: Optional[BackgroundEventLoop] = None

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Current (immutable) state snapshot."""
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def exercises(self) -> Tuple[ExerciseSnapshot, ...]:
        return self._state.exercises

    @property
    def exercise_index(self) -> int:
        return self._state.exercise_index

    @property
    def current_set(self) -> int:
        return self._state.current_set

    @property
    def phase_remaining_seconds(self) -> float:
        return self._state.phase_remaining_seconds

    @property
    def total_elapsed_seconds(self) -> float:
        return self._state.total_elapsed_seconds

    @property
    def session_started_at(self) -> Optional[datetime]:
        return self._state.session_started_at

    @property
    def completed_sessions(self) -> Tuple[TrainingSessionLog, ...]:
        return self._state.completed_sessions

    @property
    def last_completed_session(self) -> Optional[TrainingSessionLog]:
        return self._state.last_completed_session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a callback invoked with every new state.

        Intended for side observers such as timer sound cues or UI refresh.
        A merged AI estimate notifies from the thread that ran it.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def start_session(self, exercise_ids: Optional[Sequence[str]] = None) -> None:
        """
        Start a session on the active menu's enabled exercises.

        Args:
            exercise_ids: Optional ids restricting the session to those exercises
        """
        queue = build_exercise_queue(self._exercise_source.get_enabled_exercises(), exercise_ids)
        if not queue:
            logger.info("No eligible exercises; session not started")
            return
        with self._lock:
            self._set_state(start_session(self._state, queue, self._clock()))
        logger.info(f"Training session started with {len(queue)} exercises")

    def tick(self, seconds: float = 1) -> None:
        """
        Advance the session clock.

        At most one phase transition happens per call: time left over after
        a phase reaches zero is not carried into the next phase.

        Args:
            seconds: Elapsed time since the previous tick
        """
        with self._lock:
            state = self._state
            if not state.is_active or state.is_paused or seconds <= 0:
                return

            state = elapse(state, seconds)
            if state.phase_remaining_seconds > 0:
                self._set_state(state)
            elif state.phase == SessionPhase.TRAINING:
                self._finish_training_phase(state)
            else:
                self._set_state(resume_training_after_rest(state))

    def mark_set_complete(self) -> None:
        """Finish the current set early, as if its timer had run out."""
        with self._lock:
            if self._state.phase != SessionPhase.TRAINING:
                logger.debug(f"mark_set_complete ignored in phase {self._state.phase.value}")
                return
            self._finish_training_phase(self._state)

    def proceed_from_rest(self) -> None:
        """End the rest period and start the next training phase."""
        with self._lock:
            if self._state.phase != SessionPhase.REST:
                logger.debug(f"proceed_from_rest ignored in phase {self._state.phase.value}")
                return
            self._set_state(resume_training_after_rest(self._state))

    def skip_rest(self) -> None:
        """Skip the remaining rest. Same transition as proceed_from_rest."""
        self.proceed_from_rest()

    def pause(self) -> None:
        """Freeze the session clock without leaving the current phase."""
        with self._lock:
            self._set_state(set_paused(self._state, True))

    def resume(self) -> None:
        """Unfreeze the session clock."""
        with self._lock:
            self._set_state(set_paused(self._state, False))

    def reset_session(self) -> None:
        """Abandon the current session (if any). History is kept."""
        with self._lock:
            self._set_state(reset_session(self._state))

    async def wait_for_pending_estimates(self) -> None:
        """Wait until every dispatched AI estimate has been merged or dropped."""
        while True:
            pending = [task for task in list(self._estimate_tasks) if not task.done()]
            if not pending:
                return
            awaitables = [
                asyncio.wrap_future(task) if isinstance(task, concurrent.futures.Future) else task
                for task in pending
            ]
            await asyncio.gather(*awaitables, return_exceptions=True)

    def join_pending_estimates(self, timeout: Optional[float] = None) -> bool:
        """
        Block until estimates running on the machine's loop thread finish.

        For synchronous hosts. Tasks on the caller's own event loop cannot
        be waited on this way; use wait_for_pending_estimates() there.

        Returns:
            True when nothing is left in flight on the loop thread
        """
        pending = [
            task for task in list(self._estimate_tasks)
            if isinstance(task, concurrent.futures.Future)
        ]
        _, not_done = concurrent.futures.wait(pending, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Stop the machine-owned loop thread, if one was started."""
        if self._background_loop is not None:
            self._background_loop.shutdown()
            self._background_loop = None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception(f"Session listener {listener!r} failed")

    def _finish_training_phase(self, state: SessionState) -> None:
        if is_final_set(state):
            self._finalize(state)
        else:
            self._set_state(advance_from_training(state))

    def _finalize(self, state: SessionState) -> None:
        """
        Close the session: baseline log, then the background ledger and AI work.

        The baseline figure is final until (and unless) the AI estimate
        succeeds.
        """
        log = create_session_log(state, self._id_generator(), self._clock())
        self._set_state(complete_session(state, log))
        logger.info(
            f"Training session {log.id} completed: {len(log.exercises)} exercises, "
            f"{log.duration_seconds:.0f}s, {log.calories_burned} kcal (baseline)"
        )
        self._dispatch_estimate(log)

    def _schedule_default(self, coro: Coroutine[Any, Any, None]) -> EstimateFuture:
        try:
            return schedule_on_running_loop(coro)
        except RuntimeError:
            pass
        if self._background_loop is None or not self._background_loop.is_running:
            self._background_loop = BackgroundEventLoop()
        return self._background_loop.submit(coro)

    def _dispatch_estimate(self, log: TrainingSessionLog) -> None:
        self._set_state(set_calorie_estimate_pending(self._state, log.id, True))

        coro = self._estimate_and_merge(log)
        try:
            task = self._scheduler(coro)
        except RuntimeError as e:
            coro.close()
            logger.warning(f"Cannot dispatch AI calorie estimate for session {log.id}: {e}")
            self._set_state(set_calorie_estimate_pending(self._state, log.id, False))
            self._record_ledger_entry(log)
            return

        if isinstance(task, (asyncio.Future, concurrent.futures.Future)):
            self._estimate_tasks.add(task)
            task.add_done_callback(self._estimate_tasks.discard)

    def _clear_pending(self, session_id: str) -> None:
        with self._lock:
            self._set_state(set_calorie_estimate_pending(self._state, session_id, False))

    async def _estimate_and_merge(self, log: TrainingSessionLog) -> None:
        try:
            await asyncio.to_thread(self._record_ledger_entry, log)
            body = await asyncio.to_thread(self._latest_body_metrics)
            request = CalorieEstimationRequest.build(
                body=body,
                duration_seconds=log.duration_seconds,
                exercises=list(log.exercises),
                session_id=log.id,
            )
            estimate = await self._estimator.estimate(request)
        except CalorieEstimatorNotConfiguredError as e:
            logger.info(f"AI calorie estimation skipped: {e}")
            self._clear_pending(log.id)
            return
        except asyncio.CancelledError:
            self._clear_pending(log.id)
            raise
        except Exception:
            logger.exception(f"AI calorie estimation failed for session {log.id}")
            self._clear_pending(log.id)
            return

        with self._lock:
            if not has_completed_session(self._state, log.id):
                logger.info(f"Session {log.id} is no longer in history; AI estimate dropped")
                return
            detail = build_ai_calorie_detail(log.exercises, estimate)
            self._set_state(
                apply_calorie_estimate(self._state, log.id, estimate.total_calories, detail)
            )
        logger.info(
            f"AI calorie estimate for session {log.id}: {estimate.total_calories} kcal "
            f"(baseline {log.calories_burned})"
        )
        await asyncio.to_thread(self._correct_ledger_entry, log.id, estimate.total_calories)

    def _record_ledger_entry(self, log: TrainingSessionLog) -> None:
        entry = TrainingCalorieEntry(
            session_id=log.id,
            calories=log.calories_burned,
            finished_at=log.finished_at,
            exercise_count=len(log.exercises),
            duration_seconds=log.duration_seconds,
            label=log.label,
        )
        try:
            stored = self._ledger.add_training_entry(entry)
        except Exception:
            logger.exception(f"add_training_entry failed for session {log.id}")
            return
        if not stored:
            logger.error(f"Calorie ledger did not store entry for session {log.id}")

    def _latest_body_metrics(self) -> BodyMetrics:
        try:
            latest = self._body_metrics_source.get_latest()
        except Exception:
            logger.exception("Failed to read latest body metrics; using defaults")
            latest = None
        return latest or BodyMetrics(weight_kg=self._default_body_weight_kg)

    def _correct_ledger_entry(self, session_id: str, calories: int) -> None:
        try:
            updated = self._ledger.update_training_entry_calories(session_id, calories)
        except Exception:
            logger.exception(f"update_training_entry_calories failed for session {session_id}")
            return
        if not updated:
            logger.error(f"Calorie ledger did not update entry for session {session_id}")
