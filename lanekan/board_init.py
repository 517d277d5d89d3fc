# board_init.py

import logging
from pathlib import Path
from typing import Optional, List, Dict, Any

from lanekan.board_core import BoardSession, BoardError
from lanekan.utils import load_yaml, SEED_SCHEMA, YAMLError, SchemaValidationError

logger = logging.getLogger(__name__)


DEFAULT_LANES = [
    {"id": "todo", "name": "TODO"},
    {"id": "inprogress", "name": "In Progress"},
]


def seed_session(session: BoardSession, lanes: List[Dict[str, Any]]) -> BoardSession:
    """
    Add lanes (and their cards) to a session in order.

    Raises:
        BoardError: If a lane or card id is used twice
    """
    for lane in lanes:
        lane_id = session.add_lane(lane["name"], lane_id=lane["id"])
        for card in lane.get("cards") or []:
            session.add_card(
                lane_id,
                card["name"],
                card.get("description", ""),
                card_id=card.get("id"),
            )
    return session


def load_seed(seed_path: Path) -> Dict[str, Any]:
    """Read and validate a seed file."""
    seed_path = Path(seed_path)
    if not seed_path.exists():
        raise BoardError(f"Seed file {seed_path} does not exist")
    try:
        seed = load_yaml(seed_path, schema_path=SEED_SCHEMA)
    except (YAMLError, SchemaValidationError) as e:
        raise BoardError(f"Invalid seed file {seed_path}: {e}") from e
    if seed is None:
        raise BoardError(f"Seed file {seed_path} is empty")
    return seed


def init_session(
    seed_path: Optional[Path] = None,
    name: Optional[str] = None,
    activity_log: Optional[Path] = None,
) -> BoardSession:
    """
    Create a board session, seeded from a YAML file or with the default lanes.

    Args:
        seed_path: Optional seed file (see schemas/seed_schema.yaml)
        name: Board name; overrides the seed's name
        activity_log: Optional activity log file for the session

    Returns:
        The seeded BoardSession
    """
    if seed_path:
        seed = load_seed(seed_path)
        lanes = seed["lanes"]
        board_name = name or seed.get("name") or "LaneKan"
        logger.info(f"Seeding board from {seed_path} ({len(lanes)} lanes)")
    else:
        lanes = DEFAULT_LANES
        board_name = name or "LaneKan"

    session = BoardSession(name=board_name, activity_log=activity_log)
    return seed_session(session, lanes)
