#!/usr/bin/env python3

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, Any, List

from lanekan.board_core import BoardSession
from lanekan.board_controller import BoardController
from lanekan.board_events import ReconcileResult
from lanekan.config import load_settings, Settings
from lanekan.logging_config import setup_logging
from lanekan.utils import load_yaml, dump_yaml, SCRIPT_SCHEMA

# Set up logging
logger = logging.getLogger(__name__)

UI_SCRIPT = Path(__file__).resolve().parent / "lanekan_ui.py"


def load_script(path: Path) -> List[Dict[str, Any]]:
    script = load_yaml(Path(path), schema_path=SCRIPT_SCHEMA)
    if script is None:
        raise RuntimeError(f"No events found in {path}")
    return script["events"]


def make_controller(args: argparse.Namespace) -> BoardController:
    settings: Settings = args.settings
    if args.seed:
        settings.seed_file = Path(args.seed)
    return BoardController(settings=settings)


def print_board(session: BoardSession, fmt: str) -> None:
    if fmt == "yaml":
        print(dump_yaml(session.snapshot()), end="")
        return

    print(session.name)
    for lane in session.lanes:
        print(f"[{lane.id}] {lane.name} ({len(lane.cards)} cards)")
        if not lane.cards:
            print("    (empty)")
        for card in lane.cards:
            line = f"    {card.id:36} {card.name}"
            if card.description:
                line += f" - {card.description}"
            print(line)


def describe_result(result: ReconcileResult) -> str:
    c = result.crossing
    text = f"{result.status.value:22} {c.card_id}: {c.from_lane_id} -> {c.to_lane_id}"
    if result.error:
        text += f" ({result.error})"
    return text


# Commands

def cmd_show(args: argparse.Namespace) -> None:
    controller = make_controller(args)
    print_board(controller.session, args.format)


def cmd_validate(args: argparse.Namespace) -> int:
    controller = make_controller(args)
    problems = controller.session.verify_partition()
    for problem in problems:
        print(f"ERROR: {problem}")
    print(f"Validation complete. Errors: {len(problems)}")
    return 1 if problems else 0


def cmd_replay(args: argparse.Namespace) -> int:
    controller = make_controller(args)
    events = load_script(Path(args.script))

    for index, event in enumerate(events, start=1):
        result = controller.dispatch(event)
        logger.debug(f"Event {index} ({event['type']}) -> {result!r}")
        if isinstance(result, ReconcileResult):
            print(f"{index:4}: {describe_result(result)}")

    print()
    print_board(controller.session, args.format)

    problems = controller.session.verify_partition()
    for problem in problems:
        print(f"ERROR: {problem}", file=sys.stderr)
    if controller.dragged is not None:
        print(f"WARNING: drag still in progress: {controller.dragged}", file=sys.stderr)
    return 1 if problems else 0


def cmd_ui(args: argparse.Namespace) -> int:
    env = os.environ.copy()
    if args.seed:
        env["LANEKAN_SEED_FILE"] = str(Path(args.seed).resolve())
    if args.config:
        env["LANEKAN_CONFIG"] = str(Path(args.config).resolve())
    cmd = ["streamlit", "run", str(UI_SCRIPT), "--server.port", str(args.port)]
    logger.info(f"Starting UI: {' '.join(cmd)}")
    return subprocess.call(cmd, env=env)


def build_parser():
    parser = argparse.ArgumentParser(
        description="In-memory kanban board with lane-to-lane drag and drop."
    )
    parser.add_argument("--config", help="YAML settings file (default: $LANEKAN_CONFIG)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    def add_seed(p):
        p.add_argument("--seed", help="YAML seed file with the initial lanes and cards")

    def add_format(p):
        p.add_argument("--format", choices=["text", "yaml"], default="text", help="Board output format")

    p_show = sub.add_parser("show", help="Print the seeded board")
    add_seed(p_show)
    add_format(p_show)
    p_show.set_defaults(func=cmd_show)

    p_replay = sub.add_parser("replay", help="Replay a YAML script of UI events against the board")
    p_replay.add_argument("script", help="Script file with an 'events' list")
    add_seed(p_replay)
    add_format(p_replay)
    p_replay.set_defaults(func=cmd_replay)

    p_validate = sub.add_parser("validate", help="Check that every card sits in exactly one lane")
    add_seed(p_validate)
    p_validate.set_defaults(func=cmd_validate)

    p_ui = sub.add_parser("ui", help="Run the Streamlit board UI")
    add_seed(p_ui)
    p_ui.add_argument("--port", type=int, default=8501, help="Server port (default: 8501)")
    p_ui.set_defaults(func=cmd_ui)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.settings = load_settings(args.config)
        setup_logging(args.log_level or args.settings.log_level, args.settings.log_file)
        return args.func(args) or 0
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
