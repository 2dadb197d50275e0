from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

import pygame

from scene_model import EDGE_PICK_THRESHOLD, EdgeModel, NodeModel, SceneModel
from selection import DisplayInstruction, SelectionController
from training import TrainingReport


logger = logging.getLogger(__name__)

SIDEBAR_WIDTH = 240
WINDOW_WIDTH = 1000
WINDOW_HEIGHT = 600
FPS = 60
GRID_SIZE = 24
MIN_ZOOM = 0.25
MAX_ZOOM = 4.0
MESSAGE_LIFETIME_MS = 2000
MESSAGE_FADE_MS = 600


@dataclass
class Message:
    text: str
    created_ms: int


class PygameSelectionApp:
    def __init__(
        self,
        scene: SceneModel,
        controller: SelectionController,
        report: Optional[TrainingReport] = None,
    ) -> None:
        pygame.init()
        pygame.display.set_caption(scene.title or "Selection")
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, 20)
        self.heading_font = pygame.font.SysFont(None, 26)

        self.sidebar_color = (30, 30, 35)
        self.canvas_bg = (255, 255, 255)
        self.grid_color = (235, 235, 240)
        self.zoom: float = 1.0

        self.scene = scene
        self.controller = controller
        self.report = report
        self.display: DisplayInstruction = controller.display()

        self.camera_offset = pygame.Vector2(0, 0)
        self.is_panning = False
        self.pan_start_mouse = pygame.Vector2(0, 0)
        self.pan_start_camera = pygame.Vector2(0, 0)
        self.messages: List[Message] = []

    def run(self) -> None:
        logger.info("starting %s with %d entities", self.scene.title, len(self.scene.registry))
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    logger.info("window closed")
                    pygame.quit()
                    sys.exit(0)
                self._handle_event(event)

            # Weight edges show live values
            self.controller.refresh_label()
            self.display = self.controller.display()
            self._draw()
            pygame.display.flip()
            self.clock.tick(FPS)

    def _canvas_rect(self) -> pygame.Rect:
        return pygame.Rect(SIDEBAR_WIDTH, 0, WINDOW_WIDTH - SIDEBAR_WIDTH, WINDOW_HEIGHT)

    def _handle_event(self, event: pygame.event.Event) -> None:
        mouse_pos = pygame.mouse.get_pos()
        mouse_pos_v = pygame.Vector2(mouse_pos)
        canvas_rect = self._canvas_rect()

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if not canvas_rect.collidepoint(mouse_pos):
                return
            world_mouse = self.screen_to_world(mouse_pos_v)
            # Edge pick distance stays constant in screen pixels
            hits = self.scene.hits_at(world_mouse, edge_threshold=EDGE_PICK_THRESHOLD / self.zoom)
            self.display = self.controller.pick(hits)
            if self.display.selected is None:
                # Empty canvas: start panning
                self.is_panning = True
                self.pan_start_mouse = mouse_pos_v
                self.pan_start_camera = self.camera_offset.copy()

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.is_panning = False

        elif event.type == pygame.MOUSEMOTION:
            if self.is_panning:
                delta = mouse_pos_v - self.pan_start_mouse
                self.camera_offset = self.pan_start_camera + delta

        elif event.type == pygame.MOUSEWHEEL:
            if canvas_rect.collidepoint(mouse_pos):
                self._apply_zoom(1.1 ** event.y, mouse_pos_v)

        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.display = self.controller.clear()
                self._add_message("selection cleared")

    def _draw(self) -> None:
        self.screen.fill(self.canvas_bg)

        canvas_rect = self._canvas_rect()
        prev_clip = self.screen.get_clip()
        self.screen.set_clip(canvas_rect)
        self._draw_grid()
        for edge in self.scene.edges:
            self._draw_edge(edge)
        for node in self.scene.nodes:
            self._draw_node(node)
        self.screen.set_clip(prev_clip)

        self._draw_sidebar()
        self._draw_messages()

    def _draw_sidebar(self) -> None:
        pygame.draw.rect(self.screen, self.sidebar_color, (0, 0, SIDEBAR_WIDTH, WINDOW_HEIGHT))
        heading = self.heading_font.render("Control Panel", True, (220, 220, 230))
        self.screen.blit(heading, (16, 14))
        y = 50
        if self.display.text is not None:
            surf = self.font.render(self.display.text, True, (255, 120, 120))
            self.screen.blit(surf, (16, y))
            y += 24
        if self.report is not None:
            y += 12
            for i, line in enumerate(self.report.summary_lines()):
                color = (210, 210, 220) if i == 0 else (170, 170, 180)
                surf = self.font.render(line, True, color)
                self.screen.blit(surf, (16, y))
                y += 18

    def _draw_node(self, node: NodeModel) -> None:
        color = self.display.color_for(node.id)
        pos = self.world_to_screen(pygame.Vector2(node.x, node.y))
        size = max(3, int(node.size * self.zoom))
        if node.kind == "circle":
            pygame.draw.circle(self.screen, color, (int(pos.x), int(pos.y)), size)
            pygame.draw.circle(self.screen, (60, 60, 60), (int(pos.x), int(pos.y)), size, 2)
            return
        if node.kind == "triangle":
            points = [
                (int(pos.x), int(pos.y - size)),
                (int(pos.x - size), int(pos.y + size)),
                (int(pos.x + size), int(pos.y + size)),
            ]
            pygame.draw.polygon(self.screen, color, points)
            pygame.draw.polygon(self.screen, (60, 60, 60), points, 2)
            return
        bounds = node.bounds()
        top_left = self.world_to_screen(pygame.Vector2(bounds.left, bounds.top))
        rect = pygame.Rect(int(top_left.x), int(top_left.y), int(bounds.width * self.zoom), int(bounds.height * self.zoom))
        pygame.draw.rect(self.screen, color, rect, border_radius=2)
        pygame.draw.rect(self.screen, (60, 60, 60), rect, width=2, border_radius=2)

    def _draw_edge(self, edge: EdgeModel) -> None:
        a, b = self.scene.edge_endpoints(edge)
        p = self.world_to_screen(a)
        q = self.world_to_screen(b)
        color = self.display.color_for(edge.id)
        width = 6 if self.display.selected == edge.id else 4
        pygame.draw.line(self.screen, color, (int(p.x), int(p.y)), (int(q.x), int(q.y)), width)

    def _draw_grid(self) -> None:
        canvas = self._canvas_rect()
        step = max(1, int(GRID_SIZE * self.zoom))
        x = canvas.left + int(self.camera_offset.x) % step
        while x < canvas.right:
            pygame.draw.line(self.screen, self.grid_color, (x, canvas.top), (x, canvas.bottom))
            x += step
        y = canvas.top + int(self.camera_offset.y) % step
        while y < canvas.bottom:
            pygame.draw.line(self.screen, self.grid_color, (canvas.left, y), (canvas.right, y))
            y += step

    def world_to_screen(self, world: pygame.Vector2) -> pygame.Vector2:
        return world * self.zoom + self.camera_offset

    def screen_to_world(self, screen: pygame.Vector2) -> pygame.Vector2:
        return (screen - self.camera_offset) / self.zoom

    def _apply_zoom(self, factor: float, anchor_screen: pygame.Vector2) -> None:
        zoom = min(MAX_ZOOM, max(MIN_ZOOM, self.zoom * factor))
        if zoom == self.zoom:
            return
        # The world point under the cursor stays put
        anchor_world = self.screen_to_world(anchor_screen)
        self.zoom = zoom
        self.camera_offset = anchor_screen - anchor_world * zoom

    def _add_message(self, text: str) -> None:
        self.messages.append(Message(text=text, created_ms=pygame.time.get_ticks()))

    def _draw_messages(self) -> None:
        now = pygame.time.get_ticks()
        self.messages = [m for m in self.messages if now - m.created_ms < MESSAGE_LIFETIME_MS]
        y = WINDOW_HEIGHT - 20
        for m in reversed(self.messages[-3:]):
            remaining = MESSAGE_LIFETIME_MS - (now - m.created_ms)
            fade = min(1.0, remaining / MESSAGE_FADE_MS)
            shade = int(220 * fade)
            self.screen.blit(self.font.render(m.text, True, (shade, shade, shade)), (12, y))
            y -= 18
