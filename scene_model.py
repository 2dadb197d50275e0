from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pygame

from entity_registry import EntityRegistry, InputNode, OutputNode, Role, Shape, WeightEdge
from perceptron import InvalidArgumentError, PerceptronModel


NODE_RADIUS = 18.0
EDGE_PICK_THRESHOLD = 6.0

# World units per unit of the original 3-D layout
SHAPE_SCALE = 60.0
SHAPE_ORIGIN = (380.0, 220.0)

# name, kind, (x, y) in layout units
SHAPE_LAYOUT: Tuple[Tuple[str, str, Tuple[float, float]], ...] = (
    ("Sphere", "circle", (-3.0, 0.0)),
    ("Cube", "square", (1.5, 0.0)),
    ("Cone", "triangle", (1.2, -3.0)),
    ("Cylinder", "rect", (-3.3, -3.0)),
)


@dataclass
class NodeModel:
    id: int
    x: float
    y: float
    kind: str = "circle"  # circle | square | triangle | rect
    size: float = NODE_RADIUS

    def bounds(self) -> pygame.Rect:
        if self.kind == "rect":
            w, h = self.size * 1.4, self.size * 2.2
        else:
            w = h = self.size * 2
        return pygame.Rect(int(self.x - w / 2), int(self.y - h / 2), int(w), int(h))

    def hit_test(self, point: pygame.Vector2) -> bool:
        if self.kind == "circle":
            dx = self.x - point.x
            dy = self.y - point.y
            return (dx * dx + dy * dy) <= self.size * self.size
        return self.bounds().collidepoint(int(point.x), int(point.y))


@dataclass
class EdgeModel:
    id: int
    source_id: int
    target_id: int


def point_to_segment_distance(p: pygame.Vector2, a: pygame.Vector2, b: pygame.Vector2) -> float:
    span = (b - a).length_squared()
    t = 0.0 if span == 0 else min(1.0, max(0.0, (p - a).dot(b - a) / span))
    return p.distance_to(a.lerp(b, t))


@dataclass
class SceneModel:
    registry: EntityRegistry = field(default_factory=EntityRegistry)
    nodes: List[NodeModel] = field(default_factory=list)
    edges: List[EdgeModel] = field(default_factory=list)
    title: str = ""
    _next_id: int = 1

    def _allocate_id(self) -> int:
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def add_node(self, x: float, y: float, role: Role, kind: str = "circle", size: float = NODE_RADIUS) -> NodeModel:
        node = NodeModel(id=self._allocate_id(), x=x, y=y, kind=kind, size=size)
        self.registry.register(node.id, role)
        self.nodes.append(node)
        return node

    def add_edge(self, source_id: int, target_id: int, role: Role) -> EdgeModel:
        if self.find_node(source_id) is None or self.find_node(target_id) is None:
            raise InvalidArgumentError(f"edge endpoints {source_id}->{target_id} must be existing nodes")
        edge = EdgeModel(id=self._allocate_id(), source_id=source_id, target_id=target_id)
        self.registry.register(edge.id, role)
        self.edges.append(edge)
        return edge

    def find_node(self, node_id: int) -> Optional[NodeModel]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def edge_endpoints(self, edge: EdgeModel) -> Tuple[pygame.Vector2, pygame.Vector2]:
        src = self.find_node(edge.source_id)
        dst = self.find_node(edge.target_id)
        return pygame.Vector2(src.x, src.y), pygame.Vector2(dst.x, dst.y)

    def hits_at(self, point: pygame.Vector2, edge_threshold: float = EDGE_PICK_THRESHOLD) -> List[int]:
        """Ids of every entity whose geometry contains the world-space point."""
        hits = [n.id for n in self.nodes if n.hit_test(point)]
        for edge in self.edges:
            a, b = self.edge_endpoints(edge)
            if point_to_segment_distance(point, a, b) <= edge_threshold:
                hits.append(edge.id)
        return hits


# --- Scene builders for the two program variants ---

def build_perceptron_scene(
    model: PerceptronModel,
    origin: Tuple[float, float] = (260.0, 120.0),
    layer_gap: float = 260.0,
    spacing: float = 140.0,
) -> SceneModel:
    """
    One node per model input in a column, a single output node to the right,
    and one edge per input carrying that input's weight. Nodes register before
    edges so a press on a node never selects the edge underneath it.
    """
    scene = SceneModel(registry=EntityRegistry(weight_count=len(model.weights)), title="Perceptron Selection")
    ox, oy = origin
    count = model.num_inputs
    input_ids: List[int] = []
    for i in range(count):
        node = scene.add_node(ox, oy + i * spacing, InputNode(i))
        input_ids.append(node.id)
    out_y = oy + (count - 1) * spacing / 2.0
    output = scene.add_node(ox + layer_gap, out_y, OutputNode())
    for i, src_id in enumerate(input_ids):
        scene.add_edge(src_id, output.id, WeightEdge(i))
    return scene


def build_shapes_scene(
    origin: Tuple[float, float] = SHAPE_ORIGIN,
    scale: float = SHAPE_SCALE,
) -> SceneModel:
    scene = SceneModel(title="Multiple Shape Selection")
    ox, oy = origin
    for name, kind, (lx, ly) in SHAPE_LAYOUT:
        # Layout y points up, screen y points down
        scene.add_node(ox + lx * scale, oy - ly * scale, Shape(name), kind=kind, size=0.5 * scale)
    return scene
