#!/usr/bin/env python3
"""
Tests for seeding a board session from defaults or a YAML seed file.
"""

import sys
from pathlib import Path

import pytest
import yaml

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lanekan.board_core import BoardError
from lanekan.board_init import init_session, DEFAULT_LANES


def write_seed(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    return path


def test_default_lanes():
    session = init_session()
    assert [lane.id for lane in session.lanes] == [lane["id"] for lane in DEFAULT_LANES]
    assert all(not lane.cards for lane in session.lanes)


def test_seed_file(tmp_path):
    seed = write_seed(tmp_path / "seed.yaml", {
        "name": "Release",
        "lanes": [
            {"id": "todo", "name": "To Do", "cards": [
                {"id": "c1", "name": "Write docs", "description": "README"},
                {"name": "Generated id"},
            ]},
            {"id": "done", "name": "Done"},
        ],
    })

    session = init_session(seed)

    assert session.name == "Release"
    assert [lane.name for lane in session.lanes] == ["To Do", "Done"]
    cards = session.cards_in("todo")
    assert cards[0].id == "c1"
    assert cards[0].description == "README"
    assert cards[1].name == "Generated id"
    assert cards[1].lane_id == "todo"
    assert session.verify_partition() == []


def test_name_argument_overrides_seed(tmp_path):
    seed = write_seed(tmp_path / "seed.yaml", {"name": "Seeded", "lanes": [{"id": "a", "name": "A"}]})
    assert init_session(seed, name="Override").name == "Override"


def test_missing_seed_file(tmp_path):
    with pytest.raises(BoardError):
        init_session(tmp_path / "missing.yaml")


def test_seed_file_failing_schema(tmp_path):
    seed = write_seed(tmp_path / "seed.yaml", {"lanes": [{"name": "No id"}]})
    with pytest.raises(BoardError) as exc:
        init_session(seed)
    assert "Invalid seed file" in str(exc.value)


def test_seed_with_duplicate_card_ids(tmp_path):
    seed = write_seed(tmp_path / "seed.yaml", {
        "lanes": [
            {"id": "a", "name": "A", "cards": [{"id": "dup", "name": "One"}]},
            {"id": "b", "name": "B", "cards": [{"id": "dup", "name": "Two"}]},
        ],
    })
    with pytest.raises(BoardError):
        init_session(seed)
