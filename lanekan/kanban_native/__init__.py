"""
Native Kanban Board Component for LaneKan

Bi-directional Streamlit component with HTML5 drag-and-drop API.
Uses components.declare_component() for proper event communication.

The frontend reports raw pointer events and never moves cards itself:
the Python side owns the board and re-renders it after every batch.
"""

import streamlit.components.v1 as components
from pathlib import Path
import os

# Default to production if build exists, otherwise dev mode
_build_dir = Path(__file__).parent / "frontend" / "build"
_has_build = _build_dir.exists() and (_build_dir / "index.js").exists()
_RELEASE = os.getenv("LANEKAN_COMPONENT_RELEASE", "true" if _has_build else "false").lower() == "true"
_DEV_URL = os.getenv("LANEKAN_COMPONENT_URL", "http://localhost:3001")

if not _RELEASE:
    # Development mode: use dev server
    _component_func = components.declare_component(
        "lanekan_board",
        url=_DEV_URL,
    )
else:
    # Production mode: use built files
    if not _build_dir.exists():
        raise RuntimeError(
            f"Frontend build directory not found: {_build_dir}\n"
            "Please run 'npm run build' in the frontend directory."
        )
    _component_func = components.declare_component(
        "lanekan_board",
        path=str(_build_dir),
    )


def kanban_board(lanes, dragging=None, highlighted=None, height=600, key=None):
    """
    Render the board with drag-and-drop support.

    Parameters
    ----------
    lanes : list of dict
        Lane snapshots, in display order. Each dict has:
        - id: str - Lane identifier
        - name: str - Display name
        - cards: list of dict with id, lane_id, name, description

    dragging : dict, optional
        Current drag ({card_id, from_lane_id}) so the frontend can keep
        the dragged card styled across reruns

    highlighted : list of str, optional
        Lane ids to draw as drop targets

    height : int, default=600
        Height of the board in pixels

    key : str, optional
        Unique key for component state management

    Returns
    -------
    dict or None
        The latest batch of browser events:
        - seq: int - Batch number, increasing per page load
        - events: list of dict - Events in the order they happened, each
          with a type (drag_start, drag_continue, pointer_enter,
          pointer_leave, drop, drag_end) and card_id / lane_id as
          applicable
    """
    return _component_func(
        lanes=lanes,
        dragging=dragging,
        highlighted=highlighted or [],
        height=height,
        key=key,
        default=None,
    )
