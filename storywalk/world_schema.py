"""Machine-readable schema specs for story worlds."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
import json
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Sequence, Set, Tuple


class EndingKind(str, Enum):
    """Closed set of terminal classifications."""

    VICTORY = "VICTORY"
    DEFEAT = "DEFEAT"
    MYSTERY = "MYSTERY"
    WISDOM = "WISDOM"
    THE_END = "THE_END"

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(member.value for member in cls)

    @classmethod
    def is_known(cls, value: Any) -> bool:
        return isinstance(value, str) and value.strip().upper() in cls.names()

    @classmethod
    def parse(cls, value: Any) -> "EndingKind":
        if isinstance(value, cls):
            return value
        if cls.is_known(value):
            return cls(value.strip().upper())
        return cls.THE_END


def path(*parts: object) -> str:
    """Render a dotted/indexed location such as ``nodes["two words"].choices[0]``."""
    pieces: List[str] = []
    for part in parts:
        if isinstance(part, int):
            pieces.append(f"[{part}]")
        elif str(part).isidentifier():
            pieces.append(f".{part}" if pieces else str(part))
        else:
            pieces.append(f"[{json.dumps(str(part))}]")
    return "".join(pieces)


def format_validation_message(path_str: str, context: str, message: str) -> str:
    prefix = f"{path_str}: {context}" if context else path_str
    return f"{prefix}: {message}"


def is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def walk_targets(start: Any, edges: Mapping[str, Iterable[str]]) -> Set[str]:
    """Depth-first closure over ``edges``; ids without an entry are never visited."""
    if start not in edges:
        return set()
    visited: Set[str] = set()
    pending = [start]
    while pending:
        current = pending.pop()
        if current in visited or current not in edges:
            continue
        visited.add(current)
        pending.extend(edges[current])
    return visited


ErrorSink = Callable[[str, Sequence[object], str], None]


def _keyed_nodes(raw_nodes: Mapping[Any, Any], report: ErrorSink) -> Iterator[Tuple[str, Any]]:
    for node_id, payload in raw_nodes.items():
        if not is_non_empty_str(node_id):
            report("Nodes", ("nodes",), "node identifiers must be non-empty strings.")
        elif not isinstance(payload, Mapping):
            report("Nodes", ("nodes", node_id), f"node '{node_id}' must be an object.")
        else:
            yield node_id, dict(payload)


def _listed_nodes(raw_nodes: List[Any], report: ErrorSink) -> Iterator[Tuple[str, Any]]:
    for position, entry in enumerate(raw_nodes):
        label = f"Node entry {position + 1}"
        if not isinstance(entry, Mapping):
            report(label, ("nodes", position), "must be an object.")
            continue
        payload = dict(entry)
        node_id = payload.pop("id", None)
        if not is_non_empty_str(node_id):
            report(label, ("nodes", position, "id"), "is missing a valid 'id'.")
            continue
        yield node_id, payload


def normalize_nodes(
    raw_nodes: Any, ctx: Any | None = None
) -> Tuple[Dict[str, Dict[str, Any]], List[str]]:
    """Accept either node layout and return ``(nodes_by_id, error_lines)``.

    When ``ctx`` is given every problem is also recorded on it.
    """
    errors: List[str] = []

    def report(context: str, path_parts: Sequence[object], message: str) -> None:
        location = path(*path_parts)
        errors.append(format_validation_message(location, context, message))
        if ctx is not None:
            ctx.add(context, location, message)

    if isinstance(raw_nodes, Mapping):
        entries = list(_keyed_nodes(raw_nodes, report))
    elif isinstance(raw_nodes, list):
        entries = list(_listed_nodes(raw_nodes, report))
    else:
        report(
            "World data",
            ("nodes",),
            "must be an object mapping IDs to node definitions or a list of node entries.",
        )
        entries = []

    seen = Counter(node_id for node_id, _ in entries)
    repeated = sorted(node_id for node_id, count in seen.items() if count > 1)
    if repeated:
        report("Nodes", ("nodes",), f"duplicate node IDs found: {', '.join(repeated)}.")

    return dict(entries), errors


@dataclass(frozen=True)
class RecordSpec:
    required_fields: Tuple[str, ...]
    optional_fields: Tuple[str, ...]

    @property
    def allowed_fields(self) -> Tuple[str, ...]:
        return self.required_fields + self.optional_fields

    def unknown_fields(self, record: Mapping[str, Any]) -> List[str]:
        return sorted(str(key) for key in record if key not in self.allowed_fields)


WORLD_SPEC = RecordSpec(
    required_fields=("title", "start", "nodes"),
    optional_fields=(),
)

NODE_SPEC = RecordSpec(
    required_fields=("text",),
    optional_fields=("title", "choices", "ending"),
)

CHOICE_SPEC = RecordSpec(
    required_fields=("text", "target"),
    optional_fields=(),
)
