import pygame
import pytest

from entity_registry import InputNode, OutputNode, Shape, WeightEdge
from perceptron import InvalidArgumentError, PerceptronModel
from scene_model import (
    SceneModel,
    build_perceptron_scene,
    build_shapes_scene,
    point_to_segment_distance,
)
from selection import SelectionController


def make_model():
    model = PerceptronModel(2, 0.1)
    model.set_weights([0.37, -0.12, 0.9])
    return model


def test_point_to_segment_distance():
    a = pygame.Vector2(0, 0)
    b = pygame.Vector2(10, 0)
    assert point_to_segment_distance(pygame.Vector2(5, 3), a, b) == pytest.approx(3.0)
    assert point_to_segment_distance(pygame.Vector2(-4, 3), a, b) == pytest.approx(5.0)
    assert point_to_segment_distance(pygame.Vector2(3, 4), a, a) == pytest.approx(5.0)


def test_perceptron_scene_layout():
    scene = build_perceptron_scene(make_model())
    roles = [record.role for record in scene.registry.records()]
    assert roles == [InputNode(0), InputNode(1), OutputNode(), WeightEdge(0), WeightEdge(1)]
    assert len(scene.nodes) == 3
    assert len(scene.edges) == 2
    assert scene.registry.weight_count == 3


def test_press_on_input_node_selects_node_not_edge():
    scene = build_perceptron_scene(make_model())
    node = scene.nodes[0]
    hits = scene.hits_at(pygame.Vector2(node.x, node.y))
    # The edge starts at the node centre, so both report a hit
    assert node.id in hits
    assert scene.edges[0].id in hits
    controller = SelectionController(scene.registry, make_model())
    controller.pick(hits)
    assert controller.state.selected == node.id
    assert controller.state.label == "Input 1"


def test_press_on_edge_shows_weight():
    model = make_model()
    scene = build_perceptron_scene(model)
    edge = scene.edges[1]
    a, b = scene.edge_endpoints(edge)
    hits = scene.hits_at((a + b) / 2)
    assert hits == [edge.id]
    controller = SelectionController(scene.registry, model)
    controller.pick(hits)
    assert controller.state.label == "-0.12"


def test_press_on_empty_canvas_hits_nothing():
    scene = build_perceptron_scene(make_model())
    assert scene.hits_at(pygame.Vector2(-500, -500)) == []


def test_shapes_scene():
    scene = build_shapes_scene()
    assert [r.role for r in scene.registry.records()] == [
        Shape("Sphere"),
        Shape("Cube"),
        Shape("Cone"),
        Shape("Cylinder"),
    ]
    controller = SelectionController(scene.registry)
    for node, name in zip(scene.nodes, ("Sphere", "Cube", "Cone", "Cylinder")):
        controller.pick(scene.hits_at(pygame.Vector2(node.x, node.y)))
        assert controller.state.label == name


def test_edge_needs_existing_nodes():
    scene = SceneModel()
    node = scene.add_node(0.0, 0.0, OutputNode())
    with pytest.raises(InvalidArgumentError):
        scene.add_edge(node.id, 99, WeightEdge(0))
