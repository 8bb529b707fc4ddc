import pytest

from storywalk.story import DEFAULT_WORLD_PATH, EndingKind, IntegrityError, StoryGraph, load_world
from storywalk.traversal import (
    NOT_A_NUMBER,
    OUT_OF_RANGE,
    InvalidChoice,
    TraversalEngine,
    parse_choice,
)


@pytest.fixture(scope="module")
def graph() -> StoryGraph:
    return load_world(DEFAULT_WORLD_PATH)


@pytest.fixture
def engine(graph: StoryGraph) -> TraversalEngine:
    return TraversalEngine(graph)


def test_engine_starts_at_designated_start(engine: TraversalEngine) -> None:
    assert engine.current_id == "start"
    assert engine.current_node().node_id == "start"
    assert not engine.is_terminal()
    assert engine.ending_kind() is None
    assert engine.steps == 0


def test_follow_the_path(engine: TraversalEngine) -> None:
    assert engine.advance(1) == "forest_path"
    node = engine.current_node()
    assert engine.current_id == "forest_path"
    assert not node.is_terminal
    assert len(node.choices) == 3


def test_knock_at_the_cottage(engine: TraversalEngine) -> None:
    engine.advance(2)
    assert engine.current_id == "cottage"
    engine.advance(1)
    assert engine.current_id == "cottage_knock"
    assert engine.is_terminal()
    assert engine.ending_kind() is EndingKind.VICTORY


def test_tree_climb_ends_in_wisdom_after_two_choices(engine: TraversalEngine) -> None:
    engine.advance(1)
    engine.advance(3)
    assert engine.current_id == "tree_climb"
    assert engine.is_terminal()
    assert engine.ending_kind() is EndingKind.WISDOM
    assert engine.steps == 2
    assert [(t.origin, t.target) for t in engine.history] == [
        ("start", "forest_path"),
        ("forest_path", "tree_climb"),
    ]


@pytest.mark.parametrize("index", [0, 4, -1, 99])
def test_out_of_range_advance_keeps_position(engine: TraversalEngine, index: int) -> None:
    with pytest.raises(InvalidChoice) as excinfo:
        engine.advance(index)
    assert excinfo.value.reason == OUT_OF_RANGE
    assert engine.current_id == "start"
    assert engine.steps == 0


def test_advance_from_terminal_node_is_invalid(engine: TraversalEngine) -> None:
    engine.advance(1)
    engine.advance(3)
    with pytest.raises(InvalidChoice, match="offers no choices"):
        engine.advance(1)
    assert engine.current_id == "tree_climb"


def test_advance_never_alters_nodes(graph: StoryGraph, engine: TraversalEngine) -> None:
    snapshot = {node_id: node for node_id, node in graph.nodes().items()}
    engine.advance(3)
    engine.advance(1)
    assert dict(graph.nodes()) == snapshot


def test_reset_returns_to_start_from_anywhere(engine: TraversalEngine) -> None:
    engine.advance(1)
    engine.advance(2)
    engine.advance(3)
    assert engine.current_id == "river_follow"
    engine.reset()
    assert engine.current_id == "start"
    assert engine.history == ()


def test_reset_to_unknown_node_is_an_integrity_error(engine: TraversalEngine) -> None:
    with pytest.raises(IntegrityError):
        engine.reset("nowhere")
    assert engine.current_id == "start"


def test_unknown_start_is_rejected(graph: StoryGraph) -> None:
    with pytest.raises(IntegrityError, match="Start node 'gate'"):
        TraversalEngine(graph, start_id="gate")


@pytest.mark.parametrize("raw", ["1", " 2 ", "3\n", "+3"])
def test_parse_choice_accepts_valid_numbers(graph: StoryGraph, raw: str) -> None:
    assert parse_choice(raw, graph.lookup("start")) in {1, 2, 3}


@pytest.mark.parametrize("raw", ["abc", "", "  ", "1.5", "one", "1 2"])
def test_parse_choice_rejects_non_numbers(graph: StoryGraph, raw: str) -> None:
    with pytest.raises(InvalidChoice) as excinfo:
        parse_choice(raw, graph.lookup("start"))
    assert excinfo.value.reason == NOT_A_NUMBER
    assert excinfo.value.message == "Please enter a valid number."


def test_parse_choice_rejects_out_of_range(graph: StoryGraph) -> None:
    with pytest.raises(InvalidChoice) as excinfo:
        parse_choice("4", graph.lookup("start"))
    assert excinfo.value.reason == OUT_OF_RANGE
    assert excinfo.value.message == "Invalid choice. Please select a number between 1 and 3"


def test_unparsable_input_keeps_position(engine: TraversalEngine) -> None:
    with pytest.raises(InvalidChoice):
        engine.advance(parse_choice("abc", engine.current_node()))
    assert engine.current_id == "start"
