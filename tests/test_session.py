from typing import Iterable, List

import pytest

from storywalk.presentation import ENDING_BANNERS, Presenter
from storywalk.session import REPLAY_PROMPT, SessionController, prompt_choice, wants_replay
from storywalk.story import DEFAULT_WORLD_PATH, EndingKind, StoryGraph, load_world


class ScriptedInput:
    """Feeds canned answers to the session and remembers each prompt."""

    def __init__(self, answers: Iterable[str]) -> None:
        self.answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture(scope="module")
def graph() -> StoryGraph:
    return load_world(DEFAULT_WORLD_PATH)


def make_session(graph: StoryGraph, answers: Iterable[str]):
    output: List[str] = []
    scripted = ScriptedInput(answers)
    presenter = Presenter(print_func=output.append)
    return SessionController(graph, presenter, input_func=scripted), scripted, output


@pytest.mark.parametrize("raw", ["yes", "YES", " y ", "Y", "Yes\n"])
def test_wants_replay_accepts_yes_tokens(raw: str) -> None:
    assert wants_replay(raw) is True


@pytest.mark.parametrize("raw", ["no", "", "n", "quit", "yes please", "ye", None])
def test_wants_replay_rejects_everything_else(raw) -> None:
    assert wants_replay(raw) is False


def test_play_story_reaches_wisdom(graph: StoryGraph) -> None:
    session, scripted, output = make_session(graph, ["1", "3"])
    assert session.play_story() is EndingKind.WISDOM
    assert session.engine.current_id == "tree_climb"
    assert session.engine.steps == 2
    assert "> Follow the path deeper into the forest" in output
    assert "> Try to climb a tree to get a better view" in output
    assert any(ENDING_BANNERS[EndingKind.WISDOM] in line for line in output)
    assert scripted.prompts == ["\nEnter your choice (1-3): "] * 2


def test_invalid_input_reprompts_without_redisplaying_node(graph: StoryGraph) -> None:
    session, scripted, output = make_session(graph, ["abc", "4", "2", "1"])
    assert session.play_story() is EndingKind.VICTORY
    assert session.engine.current_id == "cottage_knock"

    assert "Please enter a valid number." in output
    assert "Invalid choice. Please select a number between 1 and 3" in output
    start_lines = [line for line in output if line.startswith("You find yourself standing")]
    assert len(start_lines) == 1
    assert len(scripted.prompts) == 4


def test_prompt_choice_retries_until_valid(graph: StoryGraph) -> None:
    output: List[str] = []
    scripted = ScriptedInput(["x"] * 25 + ["3"])
    index = prompt_choice(graph.lookup("start"), Presenter(print_func=output.append), scripted)
    assert index == 3
    assert output.count("Please enter a valid number.") == 25


def test_run_replays_from_start_then_stops(graph: StoryGraph) -> None:
    session, scripted, output = make_session(graph, ["1", "3", "Y", "2", "1", "no"])
    assert session.run() == 0
    assert session.engine.current_id == "cottage_knock"
    assert scripted.prompts.count(REPLAY_PROMPT) == 2
    assert "Starting a new adventure..." in output
    assert output[-1] == "Thank you for playing! May your real adventures be as exciting!"
    assert sum(1 for line in output if line.startswith("You find yourself standing")) == 2


def test_run_stops_on_empty_replay_answer(graph: StoryGraph) -> None:
    session, _scripted, output = make_session(graph, ["3", "1", ""])
    assert session.run() == 0
    assert "Starting a new adventure..." not in output
    assert any(ENDING_BANNERS[EndingKind.VICTORY] in line for line in output)


def test_run_ends_cleanly_when_input_closes(graph: StoryGraph) -> None:
    session, _scripted, output = make_session(graph, ["1"])
    assert session.run() == 0
    assert session.engine.current_id == "forest_path"
    assert output[-1].startswith("Thank you for playing!")


def test_run_stops_with_diagnostic_on_broken_graph() -> None:
    broken = StoryGraph(
        "Broken",
        "start",
        {"start": load_world(DEFAULT_WORLD_PATH).lookup("start")},
    )
    session, _scripted, output = make_session(broken, ["1"])
    assert session.run() == 1
    assert "Error: Story path not found. Game ending." in output


def test_node_title_is_shown_above_its_text() -> None:
    graph = StoryGraph.from_dict(
        {
            "title": "Titled",
            "start": "hall",
            "nodes": {
                "hall": {
                    "title": "The Great Hall",
                    "text": "Banners hang from the rafters.",
                    "choices": [{"text": "Leave", "target": "door"}],
                },
                "door": {"text": "Cold air outside.", "ending": "THE_END"},
            },
        }
    )
    session, _scripted, output = make_session(graph, ["1"])
    assert session.play_story() is EndingKind.THE_END
    heading = output.index("The Great Hall")
    assert output[heading + 1] == "Banners hang from the rafters."
    assert output[heading - 1] == "-" * 50
