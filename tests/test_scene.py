"""Tests for scene module."""

import json

import pytest
from dot_txt.canvas import InputCoord, TextCell
from dot_txt.scene import (
    Edge,
    Graph,
    Node,
    SceneError,
    draw_graph,
    load_scene,
    parse_scene,
)

# --- Fixtures ---


@pytest.fixture
def scene_data():
    return {
        "width": 40,
        "height": 30,
        "nodes": [
            {"name": "a", "x": 15, "y": 15, "width": 10, "height": 10, "label": "ab"},
        ],
        "edges": [
            {"points": [[0, 0], [6, 0], [6, 10]], "label": "e", "label_x": 0, "label_y": 20},
        ],
    }


@pytest.fixture
def graph(scene_data):
    return parse_scene(scene_data)


# --- Tests ---


class TestParseScene:
    def test_records(self, graph):
        assert graph.width == 40.0
        assert graph.nodes == [
            Node(name="a", position=InputCoord(15.0, 15.0), size=InputCoord(10.0, 10.0), label="ab")
        ]
        assert graph.edges[0].points[-1] == InputCoord(6.0, 10.0)
        assert graph.edges[0].label_position == InputCoord(0.0, 20.0)

    def test_defaults(self):
        graph = parse_scene({"width": 1, "height": 2})
        assert graph.nodes == [] and graph.edges == []

    def test_unnamed_node_uses_index(self):
        graph = parse_scene(
            {"width": 1, "height": 1, "nodes": [{"x": 0, "y": 0, "width": 1, "height": 1}]}
        )
        assert graph.nodes[0].name == "0"
        assert graph.nodes[0].label is None

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"height": 1},
            {"width": True, "height": 1},
            {"width": 1, "height": 1, "nodes": {}},
            {"width": 1, "height": 1, "nodes": [{"x": 0, "y": 0, "width": 1}]},
            {"width": 1, "height": 1, "nodes": [{"x": 0, "y": 0, "width": 1, "height": 1, "label": 3}]},
            {"width": 1, "height": 1, "edges": [{"points": [[0, 0, 0]]}]},
            {"width": 1, "height": 1, "edges": [{"points": "nope"}]},
            {"width": 1, "height": 1, "edges": [{"points": [], "label_x": 1}]},
            {"width": 1, "height": 1, "edges": ["x"]},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(SceneError):
            parse_scene(data)


class TestLoadScene:
    def test_load(self, tmp_path, scene_data, graph):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(scene_data), encoding="utf-8")
        assert load_scene(str(path)) == graph

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(SceneError):
            load_scene(str(path))


class TestDrawGraph:
    def test_canvas_width(self, graph):
        assert draw_graph(graph).width == 14
        assert draw_graph(graph, scale=(2.0, 1.0)).width == 27
        assert draw_graph(graph, width=9.0).width == 4

    def test_node_box(self, graph):
        canvas = draw_graph(graph)
        assert canvas.pixel(10, 10)
        assert canvas.pixel(20, 20)
        assert canvas.pixel(10, 17)
        assert not canvas.pixel(14, 17)

    def test_node_label_centred(self, graph):
        canvas = draw_graph(graph)
        assert canvas.cell(4, 3) == TextCell("a")
        assert canvas.cell(5, 3) == TextCell("b")

    def test_edge(self, graph):
        canvas = draw_graph(graph)
        assert canvas.pixel(3, 0)
        assert canvas.pixel(6, 5)
        assert canvas.cell(0, 4) == TextCell("e")

    def test_edge_label_needs_position(self):
        graph = Graph(
            width=9,
            height=9,
            edges=[Edge(points=[InputCoord(0, 0), InputCoord(2, 0)], label="x")],
        )
        canvas = draw_graph(graph)
        assert canvas.pixel(1, 0)
        assert canvas.row_count == 1
        assert not isinstance(canvas.cell(0, 0), TextCell)
