# board_core.py

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, List, Dict, Any, Callable

from lanekan.utils import generate_id

# Set up logging
logger = logging.getLogger(__name__)

ACTIVITY_LOGGER_NAME = "lanekan.board_activity"


def get_board_activity_logger(log_file: Optional[Path] = None) -> logging.Logger:
    """
    Get the board activity logger, attaching a file handler the first time a
    log file is given.
    """
    activity_logger = logging.getLogger(ACTIVITY_LOGGER_NAME)
    activity_logger.setLevel(logging.INFO)

    # Don't propagate to root logger
    activity_logger.propagate = False

    if log_file is not None:
        log_file = Path(log_file).resolve()
        attached = [
            h for h in activity_logger.handlers
            if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file
        ]
        if not attached:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.INFO)

            # Format: timestamp | logger | level | ACTION:... | KEY:value
            formatter = logging.Formatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(formatter)
            activity_logger.addHandler(file_handler)

    if not activity_logger.handlers:
        activity_logger.addHandler(logging.NullHandler())

    return activity_logger


class BoardError(Exception):
    pass


class LaneNotFound(BoardError):
    def __init__(self, lane_id: str) -> None:
        super().__init__(f"Lane '{lane_id}' not found")
        self.lane_id = lane_id


class CardNotFound(BoardError):
    def __init__(self, card_id: str) -> None:
        super().__init__(f"Card '{card_id}' not found")
        self.card_id = card_id


class DuplicateId(BoardError):
    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind.capitalize()} id '{item_id}' already exists")
        self.item_id = item_id


@dataclass
class Card:
    """
    A unit of work on the board.

    lane_id is a back-reference that must always name the lane whose card
    list holds this card.
    """
    id: str
    lane_id: str
    name: str
    description: str = ""
    editing: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lane_id": self.lane_id,
            "name": self.name,
            "description": self.description,
        }


@dataclass
class Lane:
    """A named, ordered container of cards. Insertion order is display order."""
    id: str
    name: str
    cards: List[Card] = field(default_factory=list)
    editing: bool = False

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cards": [c.to_dict() for c in self.cards],
        }


class BoardSession:
    """
    Canonical in-memory state of one board: the lane sequence and, per lane,
    its card sequence. All mutations go through here.

    - name: display name of the board
    - activity_log: optional file that receives one line per mutation
    """

    def __init__(self, name: str = "Board", activity_log: Optional[Path] = None) -> None:
        self.name = name
        self._lanes: List[Lane] = []
        self.activity_logger = get_board_activity_logger(activity_log)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def lanes(self) -> tuple:
        return tuple(self._lanes)

    def cards_in(self, lane_id: str) -> tuple:
        lane = self.find_lane(lane_id)
        if lane is None:
            raise LaneNotFound(lane_id)
        return tuple(lane.cards)

    def find_lane(self, lane_id: str) -> Optional[Lane]:
        for lane in self._lanes:
            if lane.id == lane_id:
                return lane
        return None

    def find_card_in_lane(self, lane_id: str, card_id: str) -> Optional[Card]:
        lane = self.find_lane(lane_id)
        if lane is None:
            return None
        return lane.find_card(card_id)

    def find_card(self, card_id: str) -> Optional[Card]:
        """Locate a card anywhere on the board."""
        for lane in self._lanes:
            card = lane.find_card(card_id)
            if card is not None:
                return card
        return None

    def _require_lane(self, lane_id: str) -> Lane:
        lane = self.find_lane(lane_id)
        if lane is None:
            raise LaneNotFound(lane_id)
        return lane

    def _require_card(self, card_id: str) -> Card:
        card = self.find_card(card_id)
        if card is None:
            raise CardNotFound(card_id)
        return card

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def add_lane(self, name: str, lane_id: Optional[str] = None) -> str:
        """
        Append a new empty lane and return its id.

        An explicit lane_id is only used when seeding a session; a taken id
        raises DuplicateId.
        """
        if lane_id is None:
            lane_id = generate_id()
        elif self.find_lane(lane_id) is not None:
            raise DuplicateId("lane", lane_id)

        self._lanes.append(Lane(id=lane_id, name=name))
        logger.debug(f"Added lane {lane_id} ({name!r})")
        self.activity_logger.info(f"ACTION:add_lane | LANE:{lane_id} | NAME:{name[:50]}")
        return lane_id

    def add_card(
        self,
        lane_id: str,
        name: str,
        description: str = "",
        card_id: Optional[str] = None,
    ) -> str:
        """
        Append a new card to the end of a lane. Returns the new card id.

        Raises:
            LaneNotFound: lane_id does not reference an existing lane
            DuplicateId: an explicit card_id is already on the board
        """
        lane = self._require_lane(lane_id)
        if card_id is None:
            card_id = generate_id()
        elif self.find_card(card_id) is not None:
            raise DuplicateId("card", card_id)

        lane.cards.append(Card(id=card_id, lane_id=lane_id, name=name, description=description))
        logger.debug(f"Added card {card_id} to lane {lane_id}")
        self.activity_logger.info(f"ACTION:add_card | LANE:{lane_id} | CARD:{card_id} | NAME:{name[:50]}")
        return card_id

    # ------------------------------------------------------------------
    # In-place edits
    # ------------------------------------------------------------------

    def rename_lane(self, lane_id: str, new_name: str) -> None:
        lane = self._require_lane(lane_id)
        old_name = lane.name
        lane.name = new_name
        self.activity_logger.info(f"ACTION:rename_lane | LANE:{lane_id} | NAME:'{old_name}' -> '{new_name}'")

    def update_card(self, card_id: str, new_name: str, new_description: str) -> None:
        card = self._require_card(card_id)
        card.name = new_name
        card.description = new_description
        self.activity_logger.info(f"ACTION:update_card | CARD:{card_id} | NAME:{new_name[:50]}")

    def begin_lane_edit(self, lane_id: str) -> None:
        self._require_lane(lane_id).editing = True

    def commit_lane_edit(self, lane_id: str, new_name: str) -> bool:
        """
        Leave edit mode, keeping new_name. A blank name is discarded.
        Returns True if the lane was renamed.
        """
        lane = self._require_lane(lane_id)
        lane.editing = False
        if not new_name.strip():
            logger.debug(f"Discarded blank name for lane {lane_id}")
            return False
        self.rename_lane(lane_id, new_name.strip())
        return True

    def cancel_lane_edit(self, lane_id: str) -> None:
        self._require_lane(lane_id).editing = False

    def begin_card_edit(self, card_id: str) -> None:
        self._require_card(card_id).editing = True

    def commit_card_edit(self, card_id: str, new_name: str, new_description: str) -> None:
        card = self._require_card(card_id)
        card.editing = False
        self.update_card(card_id, new_name, new_description)

    def cancel_card_edit(self, card_id: str) -> None:
        self._require_card(card_id).editing = False

    # ------------------------------------------------------------------
    # Relocation
    # ------------------------------------------------------------------

    def remove_card(self, lane_id: str, card_id: str) -> None:
        """Drop every card with card_id from the lane's collection."""
        lane = self._require_lane(lane_id)
        lane.cards = [c for c in lane.cards if c.id != card_id]

    def append_card(self, lane_id: str, card: Card) -> None:
        self._require_lane(lane_id).cards.append(card)

    def move_card(
        self,
        card_id: str,
        from_lane_id: str,
        to_lane_id: str,
        before_insert: Optional[Callable[[Card], None]] = None,
    ) -> Card:
        """
        Relocate a card: remove it from the source lane by id and append a
        copy with lane_id rewritten to the target lane.

        Assumes both lanes exist and the card is in the source lane; the
        DropReconciler checks that before calling. before_insert, if given,
        is called with the copy between the removal and the append.
        Returns the new copy.
        """
        card = self.find_card_in_lane(from_lane_id, card_id)
        self.remove_card(from_lane_id, card_id)
        moved = replace(card, lane_id=to_lane_id)
        if before_insert is not None:
            before_insert(moved)
        self.append_card(to_lane_id, moved)
        self.activity_logger.info(f"ACTION:move_card | CARD:{card_id} | FROM:{from_lane_id} | TO:{to_lane_id}")
        return moved

    # ------------------------------------------------------------------
    # Consistency and views
    # ------------------------------------------------------------------

    def verify_partition(self) -> List[str]:
        """
        Check that every card sits in exactly one lane and that the lane
        agrees with the card's lane_id. Returns a list of problems.
        """
        problems = []
        seen: Dict[str, str] = {}
        for lane in self._lanes:
            for card in lane.cards:
                if card.id in seen:
                    problems.append(
                        f"Card {card.id} appears in lane '{seen[card.id]}' and lane '{lane.id}'"
                    )
                else:
                    seen[card.id] = lane.id
                if card.lane_id != lane.id:
                    problems.append(
                        f"Card {card.id} is in lane '{lane.id}' but its lane_id is '{card.lane_id}'"
                    )
        return problems

    def snapshot(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "lanes": [lane.to_dict() for lane in self._lanes],
        }

    def __str__(self) -> str:
        counts = ", ".join(f"{lane.name}: {len(lane.cards)} cards" for lane in self._lanes)
        return f"{self.name} ({counts})" if counts else f"{self.name} (no lanes)"
