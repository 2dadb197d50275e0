from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Union

from perceptron import InvalidArgumentError, PerceptronModel


EntityId = Hashable


@dataclass(frozen=True)
class InputNode:
    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise InvalidArgumentError(f"input index must be >= 0, got {self.index}")


@dataclass(frozen=True)
class OutputNode:
    pass


@dataclass(frozen=True)
class WeightEdge:
    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise InvalidArgumentError(f"weight index must be >= 0, got {self.index}")


@dataclass(frozen=True)
class Shape:
    name: str


Role = Union[InputNode, OutputNode, WeightEdge, Shape]


@dataclass(frozen=True)
class EntityRecord:
    id: EntityId
    role: Role


def label_for(role: Role, model: Optional[PerceptronModel] = None) -> str:
    """Display text for a role. Weight edges show the live weight value."""
    if isinstance(role, InputNode):
        return f"Input {role.index + 1}"
    if isinstance(role, OutputNode):
        return "Output Node"
    if isinstance(role, WeightEdge):
        if model is None:
            raise InvalidArgumentError("a weight edge label needs a model")
        if role.index >= len(model.weights):
            raise InvalidArgumentError(f"weight index {role.index} out of range for {len(model.weights)} weights")
        return str(model.weights[role.index])
    if isinstance(role, Shape):
        return role.name
    raise InvalidArgumentError(f"unknown role {role!r}")


class EntityRegistry:
    """Ordered mapping of entity ids to roles.

    Registration order is the pick priority: when several entities are hit
    by one pointer press, the earliest registered one wins. Re-registering an
    id replaces its role but keeps its original position.
    """

    def __init__(self, weight_count: Optional[int] = None) -> None:
        self.weight_count = weight_count
        self._roles: Dict[EntityId, Role] = {}

    def register(self, entity_id: EntityId, role: Role) -> EntityRecord:
        if isinstance(role, WeightEdge) and self.weight_count is not None:
            if not 0 <= role.index < self.weight_count:
                raise InvalidArgumentError(
                    f"weight index {role.index} out of range for {self.weight_count} weights"
                )
        self._roles[entity_id] = role
        return EntityRecord(id=entity_id, role=role)

    def resolve(self, entity_id: EntityId) -> Optional[Role]:
        return self._roles.get(entity_id)

    def first_match(self, hit_ids: Iterable[EntityId]) -> Optional[EntityId]:
        hits = set(hit_ids)
        for entity_id in self._roles:
            if entity_id in hits:
                return entity_id
        return None

    def records(self) -> List[EntityRecord]:
        return [EntityRecord(id=i, role=r) for i, r in self._roles.items()]

    def ids(self) -> List[EntityId]:
        return list(self._roles)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._roles

    def __iter__(self) -> Iterator[EntityId]:
        return iter(self._roles)

    def __len__(self) -> int:
        return len(self._roles)
