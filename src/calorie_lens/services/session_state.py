"""State transitions for one browser session.

Every function returns a new ``AppState``; nothing here performs I/O.
"""

import math
from dataclasses import replace
from datetime import UTC, datetime
from uuid import uuid4

from calorie_lens.domain.history import AppState, HistoryEntry
from calorie_lens.domain.nutrition import NutritionEstimate


def start_analysis(state: AppState, image: str) -> tuple[AppState, str]:
    """Show a new image and mark it as being analyzed.

    The returned tag supersedes any analysis already in flight.
    """
    tag = uuid4().hex
    return (
        replace(
            state,
            preview=image,
            is_analyzing=True,
            analysis=None,
            error=None,
            pending_tag=tag,
        ),
        tag,
    )


def complete_analysis(  # noqa: PLR0913
    state: AppState,
    tag: str,
    estimate: NutritionEstimate,
    image: str,
    *,
    entry_id: str | None = None,
    captured_at: datetime | None = None,
) -> AppState:
    """Store a finished analysis and prepend it to the history."""
    if tag != state.pending_tag:
        return state
    entry = HistoryEntry(
        id=entry_id or uuid4().hex,
        estimate=estimate,
        image=image,
        captured_at=captured_at or datetime.now(tz=UTC),
    )
    return replace(
        state,
        is_analyzing=False,
        analysis=estimate,
        pending_tag=None,
        history=(entry, *state.history),
    )


def fail_analysis(state: AppState, tag: str, message: str) -> AppState:
    """Record a failed analysis without touching the history."""
    if tag != state.pending_tag:
        return state
    return replace(state, is_analyzing=False, error=message, pending_tag=None)


def clear_preview(state: AppState) -> AppState:
    """Drop the shown image and result, abandoning any analysis in flight."""
    return replace(
        state,
        preview=None,
        is_analyzing=False,
        analysis=None,
        error=None,
        pending_tag=None,
    )


def delete_history(state: AppState, entry_id: str) -> AppState:
    """Remove a history entry by id."""
    history = tuple(entry for entry in state.history if entry.id != entry_id)
    if len(history) == len(state.history):
        return state
    return replace(state, history=history)


def select_history(state: AppState, entry_id: str) -> AppState:
    """Show a past entry's image and analysis."""
    for entry in state.history:
        if entry.id == entry_id:
            return replace(
                state, preview=entry.image, analysis=entry.estimate, error=None
            )
    return state


def total_calories(state: AppState) -> float:
    """Sum the calories of every history entry."""
    return sum(entry.estimate.calories for entry in state.history)


def goal_progress(state: AppState, goal: int) -> float:
    """Return today's intake as a percentage of the goal, capped at 100."""
    if goal <= 0:
        return 0.0
    return min(total_calories(state) * 100 / goal, 100.0)


def share_of_goal(estimate: NutritionEstimate, goal: int) -> int:
    """Return one estimate's calories as a percentage of the goal, halves up."""
    if goal <= 0:
        return 0
    return math.floor(estimate.calories * 100 / goal + 0.5)


def show_error(state: AppState, message: str) -> AppState:
    """Show an error that did not come from an analysis, such as a bad upload."""
    return replace(state, error=message)
