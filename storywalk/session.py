"""Session controller: drives playthroughs and the replay loop."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from storywalk.presentation import Presenter
from storywalk.story import EndingKind, IntegrityError, Node, StoryGraph
from storywalk.traversal import InvalidChoice, TraversalEngine, parse_choice

logger = logging.getLogger(__name__)

InputFunc = Callable[[str], str]

REPLAY_TOKENS = frozenset({"yes", "y"})
REPLAY_PROMPT = "\nWould you like to try a different path? (yes/y or no/n): "


def wants_replay(raw: Optional[str]) -> bool:
    if raw is None:
        return False
    return raw.strip().lower() in REPLAY_TOKENS


def prompt_choice(node: Node, presenter: Presenter, input_func: InputFunc) -> int:
    """Ask until the player names one of ``node``'s choices; there is no retry limit."""
    while True:
        raw = input_func(presenter.choice_prompt(node))
        try:
            return parse_choice(raw, node)
        except InvalidChoice as exc:
            logger.debug("Rejected input %r at %s (%s)", raw, node.node_id, exc.reason)
            presenter.show_error(exc.message)


class SessionController:
    def __init__(
        self,
        graph: StoryGraph,
        presenter: Presenter | None = None,
        *,
        input_func: InputFunc = input,
    ) -> None:
        self.graph = graph
        self.presenter = presenter or Presenter()
        self.input_func = input_func
        self.engine = TraversalEngine(graph)

    def play_story(self) -> EndingKind:
        while True:
            node = self.engine.current_node()
            logger.debug("Entering node %s", node.node_id)
            self.presenter.show_text(node.text, title=node.title)
            if node.is_terminal:
                self.presenter.show_ending(node.ending)
                return node.ending

            self.presenter.show_choices(node)
            index = prompt_choice(node, self.presenter, self.input_func)
            self.presenter.show_selection(node.choices[index])
            self.engine.advance(index)

    def ask_to_play_again(self) -> bool:
        return wants_replay(self.input_func(REPLAY_PROMPT))

    def run(self) -> int:
        self.presenter.show_welcome(self.graph.title)
        exit_code = 0
        while True:
            try:
                ending = self.play_story()
                logger.debug("Playthrough ended with %s after %d choices", ending.value, self.engine.steps)
                replay = self.ask_to_play_again()
            except EOFError:
                logger.debug("Input closed; ending session.")
                break
            except IntegrityError as exc:
                logger.error("Story integrity failure at '%s': %s", self.engine.current_id, exc)
                self.presenter.show_error("Error: Story path not found. Game ending.")
                exit_code = 1
                break
            if not replay:
                break
            self.engine.reset()
            self.presenter.show_restart()
        self.presenter.show_farewell()
        return exit_code
