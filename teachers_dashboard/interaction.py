"""
Chart interaction state: drag-to-select over a category axis, and hover
over pie slices.

Each draggable chart owns one ChartSelectionState. Handlers are pure: they
take the current state and the category index under the pointer and return
the next state. The UI stores the returned value (e.g. in
st.session_state) and feeds it back on the next event.

States
------
- idle:     no anchors; a committed selection may or may not exist.
- dragging: entered on pointer-down over a category; the right anchor
            follows pointer-move until pointer-up commits the range.
"""

import logging
from dataclasses import dataclass, replace

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartSelectionState:
    """Transient drag selection for one chart. Never persisted."""

    left: int | None = None
    right: int | None = None
    anchor_left: int | None = None
    anchor_right: int | None = None
    dragging: bool = False

    @property
    def phase(self) -> str:
        return "dragging" if self.dragging else "idle"

    @property
    def bounds(self) -> tuple[int, int] | None:
        """Committed (left, right) index range, or None if nothing is selected."""
        if self.left is None or self.right is None:
            return None
        return self.left, self.right

    @property
    def pending_bounds(self) -> tuple[int, int] | None:
        """Normalised anchor range while a drag is in progress."""
        if not self.dragging or self.anchor_left is None or self.anchor_right is None:
            return None
        return min(self.anchor_left, self.anchor_right), max(self.anchor_left, self.anchor_right)


@dataclass(frozen=True)
class HoverState:
    """Active slice of a pie chart while the pointer is over it."""

    active_index: int | None = None


# ---------------------------------------------------------------------------
# Drag selection handlers
# ---------------------------------------------------------------------------

def pointer_down(state: ChartSelectionState, index: int | None) -> ChartSelectionState:
    """Start a drag at the category under the pointer.

    A pointer-down outside any category (index None) is ignored. A second
    pointer-down without a pointer-up restarts the drag from the new anchor.
    """
    if index is None:
        return state
    if state.dragging:
        logger.debug("pointer-down while dragging, restarting drag at %s", index)
    return replace(state, anchor_left=index, anchor_right=None, dragging=True)


def pointer_move(state: ChartSelectionState, index: int | None) -> ChartSelectionState:
    """Track the category under the pointer while dragging; no-op when idle."""
    if not state.dragging or index is None:
        return state
    return replace(state, anchor_right=index)


def pointer_up(state: ChartSelectionState) -> ChartSelectionState:
    """Finish a drag.

    With both anchors set the range is normalised (left <= right) and
    committed. A press-and-release without movement only has a left anchor;
    it is dropped and the previous committed selection kept.
    """
    if not state.dragging:
        return state

    if state.anchor_left is None or state.anchor_right is None:
        return replace(state, anchor_left=None, anchor_right=None, dragging=False)

    left, right = state.anchor_left, state.anchor_right
    if left > right:
        left, right = right, left

    return ChartSelectionState(left=left, right=right)


def reset(state: ChartSelectionState | None = None) -> ChartSelectionState:
    """Clear committed bounds and any pending drag."""
    return ChartSelectionState()


def replay_drag(state: ChartSelectionState, start: int | None, end: int | None) -> ChartSelectionState:
    """Apply a complete down -> move -> up gesture.

    For front ends that report a finished box selection rather than raw
    pointer events.
    """
    state = pointer_down(state, start)
    state = pointer_move(state, end)
    return pointer_up(state)


def clamp_selection(state: ChartSelectionState, n_rows: int) -> ChartSelectionState:
    """Fit committed bounds to a chart that now has ``n_rows`` categories.

    The grouped rows can shrink after an edit or delete. A selection that
    starts past the last category is cleared; one that ends past it is cut
    back to the last category.
    """
    bounds = state.bounds
    if bounds is None:
        return state
    left, right = bounds
    if left >= n_rows:
        logger.debug("Selection %s no longer fits %d rows, clearing", bounds, n_rows)
        return replace(state, left=None, right=None)
    if right >= n_rows:
        return replace(state, right=n_rows - 1)
    return state


def select_window(rows: pd.DataFrame, state: ChartSelectionState) -> pd.DataFrame:
    """Return the rows covered by the committed selection.

    All rows are returned when nothing is selected. Bounds are first fitted
    to ``rows`` with clamp_selection(), so a selection left over from larger
    data also yields all rows rather than an empty frame.
    """
    bounds = clamp_selection(state, len(rows)).bounds
    if bounds is None:
        return rows.copy()
    left, right = bounds
    return rows.iloc[left:right + 1].copy()


def index_of_label(rows: pd.DataFrame, label) -> int | None:
    """Position of a category label on the axis, or None if not present."""
    if rows.empty or "label" not in rows.columns:
        return None
    matches = (rows["label"] == label).to_numpy().nonzero()[0]
    if len(matches) == 0:
        return None
    return int(matches[0])


# ---------------------------------------------------------------------------
# Hover handlers (subject pie)
# ---------------------------------------------------------------------------

def pointer_enter(hover: HoverState, index: int | None) -> HoverState:
    return HoverState(active_index=index)


def pointer_leave(hover: HoverState) -> HoverState:
    return HoverState()
