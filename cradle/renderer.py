import math
import numpy as np
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
import os

import cradle as C

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame


STROKE = 'stroke'
FILL = 'fill'


@dataclass
class AppearanceConfig:
    """Window and pixel settings. The kinematics never read them."""
    width: int = C.WIDTH
    height: int = C.HEIGHT
    bg_color: Tuple[int, int, int] = C.BG_COLOR
    line_width: int = C.LINE_WIDTH


@dataclass
class DrawCall:
    center: Tuple[float, float]
    radius: float
    start: float
    end: float
    colour: Tuple[int, int, int]
    mode: str
    opacity: float


class PygameSurface:
    """
    Canvas-style arc drawing on a pygame surface.

    Angles follow the canvas convention: radians, y axis pointing down,
    sweeping clockwise from start to end.

    Each distinct shape is drawn once, fully opaque, onto a layer cropped to
    the part of the circle it covers. Opacity is applied as surface alpha at
    blit time, so the per-frame cost is a blit per call.
    """

    max_layers = 512

    def __init__(self, surface: pygame.Surface, bg_color=C.BG_COLOR,
                 line_width: int = C.LINE_WIDTH):
        self.surface = surface
        self.bg_color = bg_color
        self.line_width = line_width
        self._layers: Dict[tuple, Tuple[pygame.Surface, Tuple[int, int]]] = {}

    def clear(self, region: Optional[pygame.Rect] = None):
        self.surface.fill(self.bg_color, region)

    def draw_arc(self, center, radius: float, start: float, end: float,
                 colour, mode: str, opacity: float):
        if mode not in (STROKE, FILL):
            raise ValueError(f"Unknown draw mode: {mode}")
        layer, origin = self._layer(radius, start, end, tuple(colour), mode)
        layer.set_alpha(int(round(min(max(opacity, 0.0), 1.0) * 255)))
        self.surface.blit(layer, (int(round(center[0])) - origin[0],
                                  int(round(center[1])) - origin[1]))

    def draw(self, call: DrawCall):
        self.draw_arc(call.center, call.radius, call.start, call.end,
                      call.colour, call.mode, call.opacity)

    def _layer(self, radius, start, end, colour, mode):
        key = (radius, start, end, colour, mode)
        if key in self._layers:
            return self._layers[key]
        if len(self._layers) >= self.max_layers:
            self._layers.clear()

        full_circle = end - start >= 2 * math.pi
        x0, y0, x1, y1 = _sweep_bounds(radius, start, end, full_circle,
                                       with_center=(mode == FILL))
        pad = self.line_width + 1
        left = int(math.floor(x0)) - pad
        top = int(math.floor(y0)) - pad
        width = max(int(math.ceil(x1)) + pad - left, 1)
        height = max(int(math.ceil(y1)) + pad - top, 1)
        layer = pygame.Surface((width, height), pygame.SRCALPHA)
        # Circle centre in layer coordinates
        local = (-left, -top)

        if mode == FILL:
            if full_circle:
                pygame.draw.circle(layer, colour, local, radius)
            else:
                pygame.draw.polygon(layer, colour, _sector_points(local, radius, start, end))
        else:
            if full_circle:
                pygame.draw.circle(layer, colour, local, radius, self.line_width)
            else:
                rect = pygame.Rect(0, 0, int(round(2 * radius)), int(round(2 * radius)))
                rect.center = local
                # canvas angle θ is pygame angle -θ, and the sweep reverses
                pygame.draw.arc(layer, colour, rect, (-end) % (2 * math.pi),
                                (-start) % (2 * math.pi), self.line_width)

        self._layers[key] = (layer, local)
        return self._layers[key]


def _sweep_bounds(radius: float, start: float, end: float, full_circle: bool,
                  with_center: bool = False) -> Tuple[float, float, float, float]:
    """Bounding box of a clockwise canvas sweep, relative to the circle centre."""
    if full_circle:
        return -radius, -radius, radius, radius
    angles = [start, end]
    quarter = math.pi / 2
    k = math.ceil(start / quarter)
    while k * quarter <= end:
        angles.append(k * quarter)
        k += 1
    xs = [radius * math.cos(a) for a in angles]
    ys = [radius * math.sin(a) for a in angles]
    if with_center:
        xs.append(0.0)
        ys.append(0.0)
    return min(xs), min(ys), max(xs), max(ys)


def _sector_points(center, radius: float, start: float, end: float,
                   n: int = 32) -> List[Tuple[float, float]]:
    angles = np.linspace(start, end, n)
    xs = center[0] + radius * np.cos(angles)
    ys = center[1] + radius * np.sin(angles)
    return [tuple(center)] + list(zip(xs.tolist(), ys.tolist()))


class Renderer:
    """Maps draw calls → pixel frames."""

    def __init__(self, config: Optional[AppearanceConfig] = None):
        self.config = config or AppearanceConfig()
        self._display_initialized = False
        self._canvas: Optional[PygameSurface] = None

    def new_canvas(self) -> PygameSurface:
        surface = pygame.Surface((self.config.width, self.config.height))
        return PygameSurface(surface, self.config.bg_color, self.config.line_width)

    def render(self, calls: List[DrawCall]) -> np.ndarray:
        """Render single frame → (height, width, 3) uint8."""
        # Reused so shape layers stay cached across frames
        if self._canvas is None:
            self._canvas = self.new_canvas()
        canvas = self._canvas
        canvas.clear()
        for call in calls:
            canvas.draw(call)
        return pygame.surfarray.array3d(canvas.surface).transpose(1, 0, 2)

    def render_trace(self, loop, times) -> np.ndarray:
        """Render a run of frames at the given timestamps → (T, H, W, 3) uint8.

        The loop's impact schedule advances between frames exactly as it
        does on screen.
        """
        frames = np.zeros((len(times), self.config.height, self.config.width, 3),
                          dtype=np.uint8)
        for t, now in enumerate(times):
            frames[t] = self.render(loop.frame_state(now))
            loop.engine.step(now)
        return frames

    def play(self, loop, fps: int = C.FPS, toggle=None):
        """Run the loop in a pygame window. Click toggles sound, Q exits."""
        from cradle.loop import PygameScheduler

        if not self._display_initialized:
            pygame.init()
            self._display_initialized = True

        screen = pygame.display.set_mode((self.config.width, self.config.height))

        def set_caption():
            pygame.display.set_caption(toggle.label if toggle else 'Arc Cradle')

        def on_click():
            if toggle is not None:
                toggle.toggle()
                set_caption()

        set_caption()
        loop.surface = PygameSurface(screen, self.config.bg_color, self.config.line_width)
        scheduler = PygameScheduler(fps=fps, on_click=on_click)
        loop.run(scheduler)

        pygame.quit()
        self._display_initialized = False


def save_frames_as_video(frames: np.ndarray, path: str, fps: int = C.FPS):
    """Save frames as individual PNGs."""
    os.makedirs(path, exist_ok=True)
    for t in range(len(frames)):
        surf = pygame.surfarray.make_surface(frames[t].transpose(1, 0, 2))
        pygame.image.save(surf, os.path.join(path, f'frame_{t:05d}.png'))
