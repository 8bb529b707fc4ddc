"""Traversal engine: the current-position cursor over a story graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from storywalk.story import EndingKind, IntegrityError, Node, StoryGraph

logger = logging.getLogger(__name__)

NOT_A_NUMBER = "not_a_number"
OUT_OF_RANGE = "out_of_range"


class InvalidChoice(ValueError):
    """The player's input does not select one of the current node's choices.

    Recoverable: callers re-prompt with ``message`` and keep the cursor where it is.
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


@dataclass(frozen=True)
class Transition:
    origin: str
    target: str
    choice: str


def parse_choice(raw: str, node: Node) -> int:
    """Turn raw player input into a choice index valid for ``node``."""
    try:
        index = int(str(raw).strip())
    except ValueError:
        raise InvalidChoice(NOT_A_NUMBER, "Please enter a valid number.") from None
    if index not in node.choices:
        raise InvalidChoice(
            OUT_OF_RANGE,
            f"Invalid choice. Please select a number between 1 and {len(node.choices)}",
        )
    return index


class TraversalEngine:
    def __init__(self, graph: StoryGraph, start_id: Optional[str] = None) -> None:
        self.graph = graph
        self.start_id = start_id or graph.start_id
        if self.start_id not in graph:
            raise IntegrityError(f"Start node '{self.start_id}' does not exist.")
        self._current = self.start_id
        self._history: List[Transition] = []

    @property
    def current_id(self) -> str:
        return self._current

    @property
    def history(self) -> Tuple[Transition, ...]:
        return tuple(self._history)

    @property
    def steps(self) -> int:
        return len(self._history)

    def current_node(self) -> Node:
        return self.graph.lookup(self._current)

    def is_terminal(self) -> bool:
        return self.current_node().is_terminal

    def ending_kind(self) -> Optional[EndingKind]:
        return self.current_node().ending

    def advance(self, index: int) -> str:
        node = self.current_node()
        choice = node.choices.get(index)
        if choice is None:
            if node.is_terminal:
                message = f"Node '{node.node_id}' is an ending and offers no choices."
            else:
                message = (
                    f"Invalid choice. Please select a number between 1 and {len(node.choices)}"
                )
            raise InvalidChoice(OUT_OF_RANGE, message)
        logger.debug("Transition %s -> %s via %r", node.node_id, choice.target, choice.text)
        self._history.append(Transition(node.node_id, choice.target, choice.text))
        self._current = choice.target
        return self._current

    def reset(self, start_id: Optional[str] = None) -> None:
        target = start_id or self.start_id
        if target not in self.graph:
            raise IntegrityError(f"Start node '{target}' does not exist.")
        self._current = target
        self._history.clear()
