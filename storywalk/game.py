#!/usr/bin/env python3
"""
Enchanted Forest Adventure: terminal story walker.
- Shows a passage, offers numbered choices, follows the chosen link.
- Ends on a terminal node with a banner; the player may replay from the start.
Usage: python3 -m storywalk.game [world.json] [--settings PATH] [--debug]
"""

import argparse
import logging
import sys
from pathlib import Path

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from storywalk.presentation import Presenter
from storywalk.session import SessionController
from storywalk.settings import load_settings
from storywalk.story import DEFAULT_WORLD_PATH, IntegrityError, load_world

logger = logging.getLogger("storywalk")


def parse_args(argv):
    parser = argparse.ArgumentParser(description="Play the Enchanted Forest Adventure.")
    parser.add_argument(
        "world_path",
        nargs="?",
        default=str(DEFAULT_WORLD_PATH),
        help="Path to a world JSON file (defaults to the bundled story).",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Path to a display settings JSON file.",
    )
    parser.add_argument("--debug", action="store_true", help="Log traversal details to stderr.")
    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None, *, input_func=input, print_func=print) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.debug)

    try:
        graph = load_world(args.world_path)
    except FileNotFoundError:
        print(f"[!] World file not found: {args.world_path}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"[!] Could not read world file {args.world_path}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    except IntegrityError as exc:
        logger.error("Refusing to start with a broken world: %s", args.world_path)
        print(f"[!] {exc}", file=sys.stderr)
        return 1

    settings = load_settings(args.settings)
    presenter = Presenter(settings, print_func=print_func)
    controller = SessionController(graph, presenter, input_func=input_func)
    return controller.run()


def run() -> None:
    try:
        code = main()
    except KeyboardInterrupt:
        print("\n[Interrupted] Bye.")
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    run()
