"""Session-local presentation state."""

from dataclasses import dataclass
from datetime import datetime

from calorie_lens.domain.nutrition import NutritionEstimate


@dataclass(frozen=True)
class HistoryEntry:
    """An analyzed photo kept for the current browser session."""

    id: str
    estimate: NutritionEstimate
    image: str
    captured_at: datetime


@dataclass(frozen=True)
class AppState:
    """Everything one browser session sees on the page.

    History is ordered newest first. ``pending_tag`` identifies the analysis
    currently in flight; responses carrying any other tag are stale.
    """

    preview: str | None = None
    is_analyzing: bool = False
    analysis: NutritionEstimate | None = None
    error: str | None = None
    history: tuple[HistoryEntry, ...] = ()
    pending_tag: str | None = None
