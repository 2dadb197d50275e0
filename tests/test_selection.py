import pytest

from entity_registry import EntityRegistry, InputNode, OutputNode, Shape, WeightEdge
from perceptron import InvalidArgumentError, PerceptronModel
from selection import (
    NEUTRAL_COLOR,
    SELECTED_COLOR,
    Hit,
    Miss,
    SelectionController,
    SelectionState,
)


def make_controller():
    registry = EntityRegistry()
    registry.register(10, InputNode(0))
    registry.register(20, OutputNode())
    return SelectionController(registry)


def test_starts_unselected():
    controller = make_controller()
    assert controller.state == SelectionState()
    display = controller.display()
    assert display.selected is None
    assert display.label is None
    assert display.text is None
    assert set(display.highlights.values()) == {NEUTRAL_COLOR}


def test_hit_miss_hit_sequence():
    controller = make_controller()

    display = controller.handle(Hit(10))
    assert controller.state == SelectionState(selected=10, label="Input 1")
    assert display.color_for(10) == SELECTED_COLOR
    assert display.color_for(20) == NEUTRAL_COLOR
    assert display.text == "Selected: Input 1"

    controller.handle(Miss())
    assert controller.state == SelectionState()

    display = controller.handle(Hit(20))
    assert controller.state == SelectionState(selected=20, label="Output Node")
    assert display.color_for(10) == NEUTRAL_COLOR
    assert display.color_for(20) == SELECTED_COLOR


def test_miss_when_unselected_is_idempotent():
    controller = make_controller()
    controller.handle(Miss())
    controller.handle(Miss())
    assert controller.state.selected is None
    assert controller.state.label is None


def test_unknown_id_falls_back_to_unselected():
    controller = make_controller()
    controller.handle(Hit(10))
    display = controller.handle(Hit(999))
    assert controller.state == SelectionState()
    assert SELECTED_COLOR not in display.highlights.values()


def test_at_most_one_entity_selected():
    registry = EntityRegistry()
    for i in range(6):
        registry.register(i, Shape(f"shape {i}"))
    controller = SelectionController(registry)
    for entity_id in (0, 3, 3, 5, 1):
        display = controller.handle(Hit(entity_id))
        selected = [k for k, c in display.highlights.items() if c == SELECTED_COLOR]
        assert selected == [entity_id]
        assert controller.state.is_selected
        assert (controller.state.label is None) == (controller.state.selected is None)


def test_pick_prefers_earliest_registered():
    registry = EntityRegistry()
    registry.register("first", Shape("First"))
    registry.register("second", Shape("Second"))
    controller = SelectionController(registry)
    for _ in range(3):
        controller.pick(["second", "first"])
        assert controller.state.selected == "first"
    controller.pick(["second"])
    assert controller.state.selected == "second"
    controller.pick([])
    assert controller.state == SelectionState()


def test_weight_edge_label():
    model = PerceptronModel(2, 0.1)
    model.set_weights([0.37, 0.1, 0.2])
    registry = EntityRegistry(weight_count=len(model.weights))
    registry.register(5, WeightEdge(0))
    controller = SelectionController(registry, model)
    controller.handle(Hit(5))
    assert controller.state.label == "0.37"


def test_refresh_label_tracks_weight_changes():
    model = PerceptronModel(2, 0.1)
    model.set_weights([0.37, 0.1, 0.2])
    registry = EntityRegistry()
    registry.register(5, WeightEdge(1))
    controller = SelectionController(registry, model)
    controller.handle(Hit(5))
    model.weights[1] = 0.5
    controller.refresh_label()
    assert controller.state == SelectionState(selected=5, label="0.5")


def test_clear_resets_selection():
    controller = make_controller()
    controller.handle(Hit(20))
    display = controller.clear()
    assert display.selected is None
    assert controller.state == SelectionState()


def test_controller_rejects_weight_index_past_the_model():
    model = PerceptronModel(2, 0.1)
    registry = EntityRegistry()
    registry.register(5, WeightEdge(3))
    with pytest.raises(InvalidArgumentError):
        SelectionController(registry, model)


def test_controller_needs_model_for_weight_edges():
    registry = EntityRegistry()
    registry.register(1, OutputNode())
    registry.register(5, WeightEdge(0))
    with pytest.raises(InvalidArgumentError):
        SelectionController(registry)
