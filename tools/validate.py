#!/usr/bin/env python3
"""Check a story world file before it ships.

Structural problems (missing fields, dangling targets, malformed endings) always
fail the run. Nodes that cannot be reached from ``start`` are reported as
warnings, or as failures when ``--strict`` is given.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_WORLD = REPO_ROOT / "storywalk" / "data" / "world.json"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from storywalk.schema import validate_world
from tools.list_unreachable import find_unreachable


@dataclass
class Report:
    world_path: Path
    errors: List[str] = field(default_factory=list)
    unreachable: List[str] = field(default_factory=list)
    start: Any = None

    def failed(self, strict: bool = False) -> bool:
        return bool(self.errors) or (strict and bool(self.unreachable))


def check_world(world_path: Path) -> Report:
    report = Report(world_path)
    try:
        with world_path.open("r", encoding="utf-8") as handle:
            world = json.load(handle)
    except (OSError, ValueError) as exc:
        report.errors.append(f"<file>: could not load JSON ({exc}).")
        return report

    report.errors.extend(validate_world(world))
    if not report.errors:
        report.start = world["start"]
        report.unreachable = find_unreachable(world)
    return report


def print_report(report: Report, *, strict: bool) -> None:
    if report.errors:
        print("Validation failed (path: message):")
        for err in report.errors:
            print(f" - {err}")
        return

    if report.unreachable:
        heading = "Unreachable node errors:" if strict else "Unreachable node warnings:"
        print(heading)
        for node_id in report.unreachable:
            print(f" - nodes.{node_id}: not reachable from '{report.start}'.")

    if not report.failed(strict):
        print(f"Validation passed for {report.world_path}.")


def parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate story world content.")
    parser.add_argument(
        "world_path",
        nargs="?",
        default=str(DEFAULT_WORLD),
        help="Path to the world JSON file.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat unreachable nodes as failures.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    report = check_world(Path(args.world_path).resolve())
    print_report(report, strict=args.strict)
    return 1 if report.failed(args.strict) else 0


if __name__ == "__main__":
    sys.exit(main())
