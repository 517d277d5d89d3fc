#!/usr/bin/env python3

import streamlit as st
from pathlib import Path
from typing import Optional, Dict, Any
import os
import sys
import logging

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lanekan.board_controller import BoardController
from lanekan.board_core import BoardError, Lane, Card
from lanekan.config import load_settings
from lanekan.logging_config import setup_logging

settings = load_settings()
setup_logging(settings.log_level, settings.log_file)

# The component module reads its mode from the environment at import time
os.environ["LANEKAN_COMPONENT_URL"] = settings.component_url
os.environ["LANEKAN_COMPONENT_RELEASE"] = "true" if settings.component_release else "false"

from lanekan.kanban_native import kanban_board

logger = logging.getLogger(__name__)


def get_controller() -> BoardController:
    """One controller per browser session."""
    if "controller" not in st.session_state:
        logger.info(f"New board session (seed: {settings.seed_file or 'default lanes'})")
        st.session_state["controller"] = BoardController(settings=settings)
        st.session_state["last_event_seq"] = -1
    return st.session_state["controller"]


def apply_event_batch(controller: BoardController, batch: Optional[Dict[str, Any]]) -> bool:
    """
    Feed a batch of browser events to the controller, once.
    Returns True if anything was applied.
    """
    if not batch:
        return False
    seq = batch.get("seq", -1)
    if seq <= st.session_state.get("last_event_seq", -1):
        return False
    st.session_state["last_event_seq"] = seq

    events = batch.get("events") or []
    logger.debug(f"Applying event batch {seq} ({len(events)} events)")
    for event in events:
        try:
            result = controller.dispatch(event)
        except BoardError as e:
            logger.warning(f"Ignoring browser event {event}: {e}")
            continue
        logger.debug(f"{event.get('type')} -> {result!r}")
    return bool(events)


def render_lane_header(controller: BoardController, lane: Lane) -> None:
    if lane.editing:
        with st.form(f"lane_form_{lane.id}"):
            new_name = st.text_input("Lane name", value=lane.name, key=f"lane_name_{lane.id}")
            save_col, cancel_col = st.columns(2)
            with save_col:
                saved = st.form_submit_button("Save", type="primary", use_container_width=True)
            with cancel_col:
                cancelled = st.form_submit_button("Cancel", use_container_width=True)
        if saved:
            controller.rename_lane(lane.id, new_name)
            st.rerun()
        if cancelled:
            controller.cancel_lane_edit(lane.id)
            st.rerun()
        return

    name_col, edit_col = st.columns([4, 1])
    with name_col:
        st.subheader(lane.name)
    with edit_col:
        if st.button("✏️", key=f"edit_lane_{lane.id}", help="Rename lane"):
            controller.begin_lane_edit(lane.id)
            st.rerun()
    if st.button("Add card", key=f"add_card_{lane.id}", use_container_width=True):
        controller.add_card(lane.id)
        st.rerun()


def render_card_editor(controller: BoardController, card: Card) -> None:
    with st.form(f"card_form_{card.id}"):
        new_name = st.text_input("Name", value=card.name, key=f"card_name_{card.id}")
        new_description = st.text_area(
            "Description", value=card.description, key=f"card_desc_{card.id}", height=80
        )
        st.caption(card.id)
        save_col, cancel_col = st.columns(2)
        with save_col:
            saved = st.form_submit_button("Save", type="primary", use_container_width=True)
        with cancel_col:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)
    if saved:
        controller.update_card(card.id, new_name, new_description)
        st.rerun()
    if cancelled:
        controller.cancel_card_edit(card.id)
        st.rerun()


def render_edit_panel(controller: BoardController) -> None:
    """Headers and edit forms; the drag surface itself is the component."""
    lanes = controller.session.lanes
    if not lanes:
        st.info("No lanes yet.")
        return

    for col, lane in zip(st.columns(len(lanes)), lanes):
        with col:
            render_lane_header(controller, lane)
            for card in lane.cards:
                if card.editing:
                    render_card_editor(controller, card)
                elif st.button(f"Edit {card.name}", key=f"edit_card_{card.id}", use_container_width=True):
                    controller.begin_card_edit(card.id)
                    st.rerun()


def main():
    st.set_page_config(page_title="LaneKan", layout="wide")
    controller = get_controller()

    title_col, button_col = st.columns([5, 1])
    with title_col:
        st.title(controller.session.name)
    with button_col:
        if st.button("Add lane", type="primary", use_container_width=True, key="add_lane_btn"):
            controller.add_lane()
            st.rerun()

    snapshot = controller.snapshot()
    try:
        batch = kanban_board(
            lanes=snapshot["lanes"],
            dragging=snapshot["dragging"],
            highlighted=snapshot["highlighted"],
            key="lanekan_board",
        )
    except Exception as e:
        logger.error(f"Error rendering kanban board: {e}", exc_info=True)
        st.error(f"Error rendering kanban board: {e}")
        batch = None

    if apply_event_batch(controller, batch):
        st.rerun()

    render_edit_panel(controller)

    with st.expander("Drag state", expanded=False):
        dragged = controller.dragged
        signal = controller.signal
        st.write(f"Dragging card: {dragged}" if dragged else "Not dragging any card")
        st.write(f"Dropped card: {signal}" if signal else "No dropped card")
        history = [r.to_dict() for r in controller.reconciler.history]
        if history:
            st.dataframe(history, use_container_width=True)


if __name__ == "__main__":
    main()
