from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple, Union

from entity_registry import EntityId, EntityRegistry, WeightEdge, label_for
from perceptron import InvalidArgumentError, PerceptronModel


logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

NEUTRAL_COLOR: Color = (128, 128, 128)
SELECTED_COLOR: Color = (255, 0, 0)


@dataclass(frozen=True)
class Hit:
    entity_id: EntityId


@dataclass(frozen=True)
class Miss:
    pass


PickResult = Union[Hit, Miss]


@dataclass(frozen=True)
class SelectionState:
    selected: Optional[EntityId] = None
    label: Optional[str] = None

    @property
    def is_selected(self) -> bool:
        return self.selected is not None


@dataclass(frozen=True)
class DisplayInstruction:
    """What the renderer should show after one pick event."""

    highlights: Dict[EntityId, Color] = field(default_factory=dict)
    selected: Optional[EntityId] = None
    label: Optional[str] = None

    def color_for(self, entity_id: EntityId) -> Color:
        return self.highlights.get(entity_id, NEUTRAL_COLOR)

    @property
    def text(self) -> Optional[str]:
        if self.label is None:
            return None
        return f"Selected: {self.label}"


class SelectionController:
    def __init__(self, registry: EntityRegistry, model: PerceptronModel | None = None) -> None:
        for record in registry.records():
            if not isinstance(record.role, WeightEdge):
                continue
            if model is None:
                raise InvalidArgumentError(f"entity {record.id!r} shows a weight but no model was given")
            if record.role.index >= len(model.weights):
                raise InvalidArgumentError(
                    f"entity {record.id!r} points at weight {record.role.index}, model has {len(model.weights)}"
                )
        self.registry = registry
        self.model = model
        self.state = SelectionState()

    def handle(self, event: PickResult) -> DisplayInstruction:
        # Every event starts from all-neutral
        self.state = SelectionState()
        if isinstance(event, Hit):
            role = self.registry.resolve(event.entity_id)
            if role is None:
                logger.debug("hit on unregistered entity %r, clearing selection", event.entity_id)
            else:
                self.state = SelectionState(selected=event.entity_id, label=label_for(role, self.model))
                logger.debug("selected %r (%s)", event.entity_id, self.state.label)
        else:
            logger.debug("miss, selection cleared")
        return self.display()

    def pick(self, hit_ids: Iterable[EntityId]) -> DisplayInstruction:
        """Reduce all entities under the pointer to one event, earliest registered first."""
        winner = self.registry.first_match(hit_ids)
        return self.handle(Miss() if winner is None else Hit(winner))

    def clear(self) -> DisplayInstruction:
        return self.handle(Miss())

    def refresh_label(self) -> None:
        """Recompute the label of the current selection, e.g. after the weights changed."""
        if self.state.selected is None:
            return
        role = self.registry.resolve(self.state.selected)
        if role is None:
            self.state = SelectionState()
        else:
            self.state = SelectionState(selected=self.state.selected, label=label_for(role, self.model))

    def display(self) -> DisplayInstruction:
        highlights = {entity_id: NEUTRAL_COLOR for entity_id in self.registry}
        if self.state.selected is not None:
            highlights[self.state.selected] = SELECTED_COLOR
        return DisplayInstruction(highlights=highlights, selected=self.state.selected, label=self.state.label)
