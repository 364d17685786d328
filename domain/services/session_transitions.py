"""
Pure transitions of the training session state machine.

Every function takes a SessionState and returns a new one; none of them
touch clocks, id generators, stores or the network. The stateful machine in
application.use_cases.training_session composes these and owns the side
effects.

Phase graph:
    idle -> training -> rest -> training -> ... -> completed
    any phase -> idle (reset)
"""

from datetime import datetime
from typing import Sequence

from domain.models.calories import CalorieDetail
from domain.models.exercise import DEFAULT_TRAINING_SECONDS, ExerciseSnapshot
from domain.models.session import SessionPhase, SessionState, TrainingSessionLog
from domain.services.baseline_calories import (
    build_baseline_calorie_detail,
    calculate_baseline_calories,
)


def _with_history(state: SessionState) -> SessionState:
    """Fresh initial state that keeps the completed-session history."""
    return SessionState(
        completed_sessions=state.completed_sessions,
        last_completed_session=state.last_completed_session,
    )


def start_session(
    state: SessionState,
    exercises: Sequence[ExerciseSnapshot],
    started_at: datetime,
) -> SessionState:
    """
    Begin a new session on the given queue.

    An empty queue leaves the state untouched. History is carried over.
    """
    if not exercises:
        return state
    return _with_history(state).model_copy(
        update={
            "phase": SessionPhase.TRAINING,
            "exercises": tuple(exercises),
            "exercise_index": 0,
            "current_set": 1,
            "phase_remaining_seconds": exercises[0].training_seconds,
            "total_elapsed_seconds": 0,
            "session_started_at": started_at,
        }
    )


def elapse(state: SessionState, seconds: float) -> SessionState:
    """Consume time from the current phase, floored at zero."""
    return state.model_copy(
        update={
            "phase_remaining_seconds": max(state.phase_remaining_seconds - seconds, 0),
            "total_elapsed_seconds": state.total_elapsed_seconds + seconds,
        }
    )


def is_final_set(state: SessionState) -> bool:
    """True when the current set is the last set of the last exercise."""
    exercise = state.current_exercise
    if exercise is None:
        return True
    has_more_sets = state.current_set < exercise.sets
    has_more_exercises = state.exercise_index < len(state.exercises) - 1
    return not has_more_sets and not has_more_exercises


def advance_from_training(state: SessionState) -> SessionState:
    """
    Move from a finished set into rest.

    Either the next set of the same exercise or the first set of the next
    exercise; the rest length comes from the exercise about to be trained.
    Returns the state unchanged on the final set, which is finalized instead.
    """
    exercise = state.current_exercise
    if exercise is None or is_final_set(state):
        return state

    if state.current_set < exercise.sets:
        return state.model_copy(
            update={
                "current_set": state.current_set + 1,
                "phase": SessionPhase.REST,
                "phase_remaining_seconds": exercise.rest_seconds,
            }
        )

    next_index = state.exercise_index + 1
    return state.model_copy(
        update={
            "exercise_index": next_index,
            "current_set": 1,
            "phase": SessionPhase.REST,
            "phase_remaining_seconds": state.exercises[next_index].rest_seconds,
        }
    )


def resume_training_after_rest(state: SessionState) -> SessionState:
    """Leave rest and start the next training phase. No-op outside rest."""
    if state.phase != SessionPhase.REST:
        return state
    exercise = state.current_exercise
    training_seconds = exercise.training_seconds if exercise else DEFAULT_TRAINING_SECONDS
    return state.model_copy(
        update={
            "phase": SessionPhase.TRAINING,
            "phase_remaining_seconds": training_seconds,
        }
    )


def set_paused(state: SessionState, paused: bool) -> SessionState:
    """Toggle the pause flag without touching phase or counters."""
    if state.is_paused == paused:
        return state
    return state.model_copy(update={"is_paused": paused})


def reset_session(state: SessionState) -> SessionState:
    """Drop the running session and return to idle, keeping history."""
    return _with_history(state)


def create_session_log(
    state: SessionState,
    session_id: str,
    finished_at: datetime,
) -> TrainingSessionLog:
    """Build the baseline log of the session held by state."""
    exercises = tuple(exercise.model_copy() for exercise in state.exercises)
    return TrainingSessionLog(
        id=session_id,
        finished_at=finished_at,
        duration_seconds=state.total_elapsed_seconds,
        exercises=exercises,
        calories_burned=calculate_baseline_calories(exercises),
        calorie_detail=build_baseline_calorie_detail(exercises),
        calorie_estimate_pending=False,
    )


def complete_session(state: SessionState, log: TrainingSessionLog) -> SessionState:
    """
    Record a finalized log and move to the completed phase.

    The live counters are zeroed; their values now live in the log.
    """
    return state.model_copy(
        update={
            "phase": SessionPhase.COMPLETED,
            "is_paused": False,
            "exercise_index": 0,
            "current_set": 0,
            "phase_remaining_seconds": 0,
            "completed_sessions": state.completed_sessions + (log,),
            "last_completed_session": log,
        }
    )


def _patch_logs(state: SessionState, session_id: str, update: dict) -> SessionState:
    if not has_completed_session(state, session_id):
        return state
    sessions = tuple(
        log.model_copy(update=update) if log.id == session_id else log
        for log in state.completed_sessions
    )
    last = state.last_completed_session
    if last is not None and last.id == session_id:
        last = last.model_copy(update=update)
    return state.model_copy(
        update={"completed_sessions": sessions, "last_completed_session": last}
    )


def has_completed_session(state: SessionState, session_id: str) -> bool:
    """True when a finalized log with this id is in the history."""
    return any(log.id == session_id for log in state.completed_sessions)


def set_calorie_estimate_pending(
    state: SessionState,
    session_id: str,
    pending: bool,
) -> SessionState:
    """Flag the log with session_id as waiting (or not) for an AI estimate."""
    return _patch_logs(state, session_id, {"calorie_estimate_pending": pending})


def apply_calorie_estimate(
    state: SessionState,
    session_id: str,
    calories: int,
    detail: CalorieDetail,
) -> SessionState:
    """
    Merge a refined calorie estimate into the log with session_id.

    Matches by id only, so a late result never touches a newer session. An
    unknown id returns the state unchanged.
    """
    return _patch_logs(
        state,
        session_id,
        {
            "calories_burned": calories,
            "calorie_detail": detail,
            "calorie_estimate_pending": False,
        },
    )
