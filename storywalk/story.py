"""Story graph model: nodes, choices, and the immutable graph built from a world file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set

from storywalk.schema import validate_world
from storywalk.world_schema import EndingKind, normalize_nodes, walk_targets

logger = logging.getLogger(__name__)

DEFAULT_WORLD_PATH = Path(__file__).resolve().parent / "data" / "world.json"


class IntegrityError(ValueError):
    """Raised when a world is malformed or a node reference does not resolve."""

    def __init__(self, errors: List[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("Invalid world:\n- " + "\n- ".join(self.errors))


@dataclass(frozen=True)
class Choice:
    text: str
    target: str


@dataclass(frozen=True)
class Node:
    node_id: str
    text: str
    choices: Mapping[int, Choice] = field(default_factory=lambda: MappingProxyType({}))
    ending: Optional[EndingKind] = None
    title: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.ending is not None

    def choice_range(self) -> str:
        """Human-readable span of valid indices, e.g. ``1-3``."""
        if not self.choices:
            return ""
        keys = list(self.choices)
        return f"{min(keys)}-{max(keys)}"

    @classmethod
    def from_dict(cls, node_id: str, data: Mapping[str, Any]) -> "Node":
        choices: Dict[int, Choice] = {}
        for index, entry in enumerate(data.get("choices") or [], start=1):
            choices[index] = Choice(text=entry["text"], target=entry["target"])
        ending = EndingKind.parse(data["ending"]) if "ending" in data else None
        return cls(
            node_id=node_id,
            text=data["text"],
            choices=MappingProxyType(choices),
            ending=ending,
            title=data.get("title"),
        )


class StoryGraph:
    """Read-only mapping of node IDs to nodes, with a designated start."""

    def __init__(self, title: str, start_id: str, nodes: Mapping[str, Node]) -> None:
        self.title = title
        self.start_id = start_id
        self._nodes = MappingProxyType(dict(nodes))

    @classmethod
    def from_dict(cls, world: Mapping[str, Any]) -> "StoryGraph":
        errors = validate_world(world)
        if errors:
            raise IntegrityError(errors)
        raw_nodes, _ = normalize_nodes(world["nodes"])
        nodes = {node_id: Node.from_dict(node_id, data) for node_id, data in raw_nodes.items()}
        graph = cls(world["title"], world["start"], nodes)
        logger.debug(
            "Loaded world %r: %d nodes, %d endings, start=%s",
            graph.title,
            len(graph),
            len(graph.endings()),
            graph.start_id,
        )
        return graph

    def lookup(self, node_id: str) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise IntegrityError(f"Story path not found: unknown node '{node_id}'.") from None

    def nodes(self) -> Mapping[str, Node]:
        return self._nodes

    def endings(self) -> Dict[str, EndingKind]:
        return {
            node_id: node.ending
            for node_id, node in self._nodes.items()
            if node.ending is not None
        }

    def reachable_from(self, start_id: Optional[str] = None) -> Set[str]:
        edges = {
            node_id: [choice.target for choice in node.choices.values()]
            for node_id, node in self._nodes.items()
        }
        return walk_targets(start_id or self.start_id, edges)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)


def load_world(path: Path | str = DEFAULT_WORLD_PATH) -> StoryGraph:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            world = json.load(handle)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise IntegrityError(f"{path}: could not parse JSON ({exc}).") from exc
    if not isinstance(world, dict):
        raise IntegrityError("World data must be a JSON object.")
    return StoryGraph.from_dict(world)
