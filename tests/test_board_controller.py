#!/usr/bin/env python3
"""
Tests for the UI-facing controller: pointer events, creation and edits.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lanekan.board_controller import BoardController
from lanekan.board_core import BoardError
from lanekan.board_events import ReconcileStatus
from lanekan.config import Settings
from lanekan.drag_state import DraggedCard


@pytest.fixture
def controller():
    ctrl = BoardController()
    ctrl.add_card("todo", "X", "card x", card_id="x")
    return ctrl


def lane_cards(ctrl: BoardController, lane_id: str) -> list[str]:
    return [c.id for c in ctrl.session.cards_in(lane_id)]


def test_default_session_has_two_seeded_lanes():
    ctrl = BoardController()
    assert [(lane.id, lane.name) for lane in ctrl.session.lanes] == [
        ("todo", "TODO"),
        ("inprogress", "In Progress"),
    ]
    assert ctrl.session.name == "LaneKan"


def test_board_name_from_settings():
    ctrl = BoardController(settings=Settings(board_name="Sprint 12"))
    assert ctrl.session.name == "Sprint 12"


def test_drag_into_another_lane_moves_card(controller):
    controller.on_drag_start("x", "todo")
    controller.on_drag_continue()
    result = controller.on_pointer_enter("inprogress")

    assert result.status is ReconcileStatus.MOVED
    assert lane_cards(controller, "todo") == []
    assert lane_cards(controller, "inprogress") == ["x"]
    assert controller.dragged == DraggedCard("x", "inprogress")
    assert "inprogress" in controller.highlighted

    dropped = controller.on_drop("inprogress")
    assert dropped == DraggedCard("x", "inprogress")
    assert controller.dragged is None
    assert controller.highlighted == set()


def test_continuous_drag_across_three_lanes(controller):
    done = controller.add_lane("Done", lane_id="done")

    controller.on_drag_start("x", "todo")
    controller.on_pointer_enter("inprogress")
    controller.on_pointer_leave("inprogress")
    controller.on_pointer_enter(done)
    controller.on_drop(done)

    assert lane_cards(controller, "todo") == []
    assert lane_cards(controller, "inprogress") == []
    assert lane_cards(controller, done) == ["x"]
    assert controller.session.find_card("x").lane_id == done
    assert controller.session.verify_partition() == []


def test_pointer_enter_without_drag_does_nothing(controller):
    assert controller.on_pointer_enter("inprogress") is None
    assert lane_cards(controller, "todo") == ["x"]
    assert controller.highlighted == set()


def test_pointer_leave_clears_highlight(controller):
    controller.on_drag_start("x", "todo")
    controller.on_pointer_enter("inprogress")
    assert controller.highlighted == {"inprogress"}

    controller.on_pointer_leave("inprogress")
    assert controller.highlighted == set()


def test_repeated_pointer_over_same_lane_is_harmless(controller):
    controller.add_card("todo", "Y", card_id="y")
    controller.on_drag_start("x", "todo")

    for _ in range(3):
        result = controller.on_pointer_enter("todo")
        assert result.status is ReconcileStatus.SAME_LANE

    assert lane_cards(controller, "todo") == ["x", "y"]


def test_drag_end_outside_lanes_clears_coordinator(controller):
    controller.on_drag_start("x", "todo")
    controller.on_pointer_enter("inprogress")

    ended = controller.on_drag_end()

    assert ended == DraggedCard("x", "inprogress")
    assert controller.dragged is None
    assert controller.highlighted == set()
    # A later pointer enter must not move anything
    assert controller.on_pointer_enter("todo") is None
    assert lane_cards(controller, "inprogress") == ["x"]


def test_add_lane_and_card_with_placeholder_names():
    ctrl = BoardController()
    lane_id = ctrl.add_lane()
    card_id = ctrl.add_card(lane_id)

    assert ctrl.session.find_lane(lane_id).name == "Lane 3"
    card = ctrl.session.find_card(card_id)
    assert card.name == "Card 1"
    assert card.description == "Description for Card 1"

    second = ctrl.session.find_card(ctrl.add_card(lane_id, description="given"))
    assert (second.name, second.description) == ("Card 2", "given")


def test_add_card_to_unknown_lane_returns_none(controller, caplog):
    with caplog.at_level("WARNING", logger="lanekan.board_controller"):
        assert controller.add_card("missing", "Task") is None
    assert "missing" in caplog.text
    assert lane_cards(controller, "todo") == ["x"]


def test_duplicate_lane_id_returns_none(controller):
    assert controller.add_lane("Again", lane_id="todo") is None
    assert len(controller.session.lanes) == 2


def test_edits_report_success(controller):
    assert controller.begin_lane_edit("todo")
    assert controller.rename_lane("todo", "Backlog")
    assert controller.session.find_lane("todo").name == "Backlog"

    assert controller.begin_card_edit("x")
    assert controller.update_card("x", "New", "desc")
    assert controller.session.find_card("x").name == "New"

    assert not controller.rename_lane("missing", "x")
    assert not controller.update_card("missing", "x", "y")
    assert not controller.rename_lane("todo", " ")
    assert controller.cancel_card_edit("x")
    assert not controller.cancel_lane_edit("missing")


def test_dispatch_routes_events(controller):
    controller.dispatch({"type": "drag_start", "card_id": "x", "lane_id": "todo"})
    result = controller.dispatch({"type": "pointer_enter", "lane_id": "inprogress"})
    controller.dispatch({"type": "drop", "lane_id": "inprogress"})
    lane_id = controller.dispatch({"type": "add_lane", "name": "Review"})
    card_id = controller.dispatch({"type": "add_card", "lane_id": lane_id, "name": "Task"})
    controller.dispatch({"type": "rename_lane", "lane_id": lane_id, "name": "QA"})
    controller.dispatch({"type": "update_card", "card_id": card_id, "name": "Bug", "description": "d"})

    assert result.status is ReconcileStatus.MOVED
    assert lane_cards(controller, "inprogress") == ["x"]
    assert controller.session.find_lane(lane_id).name == "QA"
    assert controller.session.find_card(card_id).description == "d"


def test_dispatch_rejects_bad_events(controller):
    with pytest.raises(BoardError):
        controller.dispatch({"type": "teleport"})
    with pytest.raises(BoardError):
        controller.dispatch({"type": "pointer_enter"})


def test_snapshot_includes_drag_state(controller):
    controller.on_drag_start("x", "todo")
    controller.on_pointer_enter("inprogress")
    snap = controller.snapshot()

    assert snap["dragging"] == {"card_id": "x", "from_lane_id": "inprogress"}
    assert snap["highlighted"] == ["inprogress"]
    assert snap["lanes"][1]["cards"][0]["id"] == "x"
