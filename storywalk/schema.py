"""Shared schema validation utilities for story worlds."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from storywalk.world_schema import (
    CHOICE_SPEC,
    NODE_SPEC,
    WORLD_SPEC,
    EndingKind,
    RecordSpec,
    format_validation_message,
    is_list,
    is_non_empty_str,
    normalize_nodes,
    path,
)


class ValidationContext:
    """Utility container for accumulating validation errors."""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def add(self, context: str, path_str: str, message: str) -> None:
        self.errors.append(format_validation_message(path_str, context, message))


def require(condition: bool, context: str, path_str: str, message: str, ctx: ValidationContext) -> None:
    if not condition:
        ctx.add(context, path_str, message)


def check_fields(
    record: Mapping[str, Any],
    spec: RecordSpec,
    context: str,
    path_parts: Sequence[object],
    ctx: ValidationContext,
) -> None:
    allowed = ", ".join(spec.allowed_fields)
    for field in spec.unknown_fields(record):
        ctx.add(
            context,
            path(*path_parts, field),
            f"unsupported field '{field}' (allowed: {allowed}).",
        )


def validate_choice(
    choice: Any,
    node_id: str,
    index: int,
    nodes: Mapping[str, Any],
    path_parts: Sequence[object],
    ctx: ValidationContext,
) -> None:
    context = f"Choice {index} in node '{node_id}'"
    if not isinstance(choice, Mapping):
        ctx.add(context, path(*path_parts), "must be an object.")
        return
    check_fields(choice, CHOICE_SPEC, context, path_parts, ctx)

    text = choice.get("text")
    if not is_non_empty_str(text):
        ctx.add(context, path(*path_parts, "text"), "requires non-empty 'text'.")

    target = choice.get("target")
    if target is None:
        ctx.add(context, path(*path_parts, "target"), "is missing a 'target'.")
    elif not is_non_empty_str(target):
        ctx.add(context, path(*path_parts, "target"), "must use a non-empty string 'target'.")
    elif target not in nodes:
        ctx.add(
            context,
            path(*path_parts, "target"),
            f"targets unknown destination '{target}'.",
        )


def validate_node(
    node_id: str,
    node: Mapping[str, Any],
    nodes: Mapping[str, Any],
    ctx: ValidationContext,
) -> None:
    context = f"Node '{node_id}'"
    node_path = ("nodes", node_id)
    check_fields(node, NODE_SPEC, context, node_path, ctx)

    require(
        is_non_empty_str(node.get("text")),
        context,
        path(*node_path, "text"),
        "requires non-empty 'text'.",
        ctx,
    )
    title = node.get("title")
    if title is not None and not isinstance(title, str):
        ctx.add(context, path(*node_path, "title"), "'title' must be a string if present.")

    choices = node.get("choices")
    if "ending" in node:
        ending = node.get("ending")
        if not EndingKind.is_known(ending):
            ctx.add(
                context,
                path(*node_path, "ending"),
                f"unknown ending kind '{ending}' (expected one of {', '.join(EndingKind.names())}).",
            )
        if choices:
            ctx.add(
                context,
                path(*node_path, "choices"),
                "terminal nodes must not offer choices.",
            )
        return

    if choices is None:
        ctx.add(
            context,
            path(*node_path, "choices"),
            "non-terminal nodes need at least one choice (or an 'ending').",
        )
        return
    if not is_list(choices):
        ctx.add(context, path(*node_path, "choices"), "choices must be provided as a list.")
        return
    if not choices:
        ctx.add(
            context,
            path(*node_path, "choices"),
            "non-terminal nodes need at least one choice (or an 'ending').",
        )
        return
    for index, choice in enumerate(choices, start=1):
        validate_choice(
            choice,
            node_id,
            index,
            nodes,
            (*node_path, "choices", index - 1),
            ctx,
        )


def validate_world(world: Mapping[str, Any]) -> List[str]:
    ctx = ValidationContext()
    if not isinstance(world, Mapping):
        ctx.add("World data", "<root>", "must be a JSON object.")
        return ctx.errors

    check_fields(world, WORLD_SPEC, "World data", (), ctx)
    require(
        is_non_empty_str(world.get("title")),
        "World data",
        path("title"),
        "must include a non-empty 'title'.",
        ctx,
    )
    require(
        "nodes" in world,
        "World data",
        path("nodes"),
        "must include a 'nodes' section.",
        ctx,
    )
    if "nodes" not in world:
        return ctx.errors

    nodes, _node_errors = normalize_nodes(world.get("nodes"), ctx)

    start = world.get("start")
    if not is_non_empty_str(start):
        ctx.add("World data", path("start"), "requires a non-empty 'start' node ID.")
    elif start not in nodes:
        ctx.add("World data", path("start"), f"references unknown node '{start}'.")

    for node_id, node in nodes.items():
        validate_node(node_id, node, nodes, ctx)

    return ctx.errors
