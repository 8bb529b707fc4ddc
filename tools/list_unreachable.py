import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_WORLD_PATH = REPO_ROOT / "storywalk" / "data" / "world.json"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from storywalk.world_schema import normalize_nodes, walk_targets


def load_world(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def build_graph(world: dict) -> tuple:
    nodes, _ = normalize_nodes(world.get("nodes", {}))
    graph = {node_id: [] for node_id in nodes}
    missing_targets = []
    for node_id, node in nodes.items():
        choices = node.get("choices") or []
        for index, choice in enumerate(choices, start=1):
            target = choice.get("target") if isinstance(choice, dict) else None
            if not isinstance(target, str):
                continue
            graph[node_id].append(target)
            if target not in nodes:
                missing_targets.append(f"{node_id} choice {index} points to missing node {target}")
    return graph, missing_targets


def find_unreachable(world: dict) -> list:
    graph, _ = build_graph(world)
    start = world.get("start")
    reached = walk_targets(start, graph) if isinstance(start, str) else set()
    return sorted(set(graph) - reached)


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    world_path = Path(args[0]) if args else DEFAULT_WORLD_PATH
    try:
        world = load_world(world_path)
    except (OSError, ValueError) as exc:
        print(f"Could not load {world_path}: {exc}")
        return 1
    if not isinstance(world, dict):
        print(f"Could not load {world_path}: world data must be a JSON object.")
        return 1

    graph, missing_targets = build_graph(world)
    unreachable = find_unreachable(world)

    print(f"World file: {world_path}")
    print(f"Total nodes: {len(graph)}")
    print(f"Reachable nodes: {len(graph) - len(unreachable)}")
    if missing_targets:
        print("Missing targets:")
        for message in missing_targets:
            print(f"  - {message}")
    if unreachable:
        print("Unreachable nodes:")
        for node_id in unreachable:
            print(f"  - {node_id}")
    else:
        print("All nodes reachable from the start node.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
