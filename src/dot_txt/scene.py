"""
Graph records handed over by a layout engine, and drawing them on a canvas.

Coordinates are already in one real-valued space; scaling to pixels is the
canvas's job.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .bitmap import CELL_WIDTH
from .canvas import Canvas, InputCoord

logger = logging.getLogger(__name__)


class SceneError(ValueError):
    """Raised for scene data that is missing fields or has the wrong types."""


@dataclass
class Node:
    name: str
    position: InputCoord  # centre
    size: InputCoord
    label: Optional[str] = None


@dataclass
class Edge:
    points: List[InputCoord]
    label: Optional[str] = None
    label_position: Optional[InputCoord] = None


@dataclass
class Graph:
    width: float
    height: float
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)


# -----------------------------
# Drawing
# -----------------------------
def draw_graph(
    graph: Graph,
    scale: Tuple[float, float] = (1.0, 1.0),
    width: Optional[float] = None,
) -> Canvas:
    """
    Draw nodes as boxes with centred labels and edges as polylines.

    width is the canvas width in pixels; by default the scaled graph width.
    """
    if width is None:
        width = graph.width * scale[0]
    canvas = Canvas(width, scale)
    logger.debug(
        "Drawing %d nodes and %d edges on a %d-column canvas",
        len(graph.nodes),
        len(graph.edges),
        canvas.width,
    )

    for node in graph.nodes:
        half_w, half_h = node.size.x / 2.0, node.size.y / 2.0
        canvas.draw_rect(
            (node.position.x - half_w, node.position.y - half_h),
            (node.position.x + half_w, node.position.y + half_h),
        )
        if node.label:
            # shift left by half the label, in input units
            offset = len(node.label) * CELL_WIDTH / 2.0 / canvas.scale.x
            canvas.draw_string((node.position.x - offset, node.position.y), node.label)

    for edge in graph.edges:
        canvas.draw_polyline(edge.points)
        if edge.label and edge.label_position is not None:
            canvas.draw_string(edge.label_position, edge.label)

    return canvas


# -----------------------------
# JSON loading
# -----------------------------
def _number(record: dict, key: str, where: str) -> float:
    value = record.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneError(f"{where}: '{key}' must be a number, got {value!r}")
    return float(value)


def _label(record: dict, where: str) -> Optional[str]:
    value = record.get("label")
    if value is not None and not isinstance(value, str):
        raise SceneError(f"{where}: 'label' must be a string, got {value!r}")
    return value


def _parse_node(record: Any, index: int) -> Node:
    where = f"node {index}"
    if not isinstance(record, dict):
        raise SceneError(f"{where}: expected an object")
    name = record.get("name", str(index))
    return Node(
        name=str(name),
        position=InputCoord(_number(record, "x", where), _number(record, "y", where)),
        size=InputCoord(_number(record, "width", where), _number(record, "height", where)),
        label=_label(record, where),
    )


def _parse_edge(record: Any, index: int) -> Edge:
    where = f"edge {index}"
    if not isinstance(record, dict):
        raise SceneError(f"{where}: expected an object")

    raw_points = record.get("points")
    if not isinstance(raw_points, list):
        raise SceneError(f"{where}: 'points' must be a list of [x, y] pairs")
    points = []
    for p in raw_points:
        if (
            not isinstance(p, (list, tuple))
            or len(p) != 2
            or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in p)
        ):
            raise SceneError(f"{where}: bad point {p!r}")
        points.append(InputCoord(float(p[0]), float(p[1])))

    label_position = None
    if "label_x" in record or "label_y" in record:
        label_position = InputCoord(
            _number(record, "label_x", where), _number(record, "label_y", where)
        )

    return Edge(points=points, label=_label(record, where), label_position=label_position)


def parse_scene(data: Any) -> Graph:
    """Build a Graph from decoded JSON data."""
    if not isinstance(data, dict):
        raise SceneError("scene: expected a JSON object at the top level")

    nodes = data.get("nodes", [])
    edges = data.get("edges", [])
    if not isinstance(nodes, list) or not isinstance(edges, list):
        raise SceneError("scene: 'nodes' and 'edges' must be lists")

    return Graph(
        width=_number(data, "width", "scene"),
        height=_number(data, "height", "scene"),
        nodes=[_parse_node(r, i) for i, r in enumerate(nodes)],
        edges=[_parse_edge(r, i) for i, r in enumerate(edges)],
    )


def load_scene(path: str) -> Graph:
    logger.debug("Loading scene from %s", path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SceneError(f"{path}: invalid JSON: {e}") from e
    return parse_scene(data)
