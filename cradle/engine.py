"""
Arc cradle engine — wall-clock kinematics, no physics.

- N concentric half arcs, one swinging dot per arc
- Dot angle folds back and forth between π and 2π (bounce transform)
- Impacts are scheduled, not detected: every π / velocity seconds
- State per arc: (index, radius, velocity, colour, last_impact, next_impact)
"""

import math
import time
import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, Tuple

import cradle as C


Point = Tuple[float, float]


def wall_clock_ms() -> float:
    return time.time() * 1000.0


@dataclass(frozen=True)
class Settings:
    """Geometry and timing, derived once from the canvas size."""
    line_start: Point
    line_end: Point
    circle_center: Point
    line_length: float
    start_time: float
    center_arc_radius: float = C.CENTER_ARC_RADIUS
    max_angle: float = 2 * math.pi
    number_of_arcs: int = C.NUMBER_OF_ARCS
    moving_dot_radius: float = C.MOVING_DOT_RADIUS
    loops: int = C.LOOPS
    loop_time: float = C.LOOP_TIME
    pulse_duration: float = C.PULSE_DURATION
    base_opacity: float = C.BASE_OPACITY
    max_opacity: float = C.MAX_OPACITY
    colour: Tuple[int, int, int] = C.COLOUR

    @classmethod
    def from_canvas(cls, width: float = C.WIDTH, height: float = C.HEIGHT,
                    start_time: Optional[float] = None, **kwargs) -> 'Settings':
        p = C.LINE_PERCENTAGE_OF_TOTAL_WIDTH
        line_y = height * C.LINE_Y_INDEX
        x0 = width * ((1 - p) / 2)
        x1 = width * ((1 + p) / 2)
        if start_time is None:
            start_time = wall_clock_ms()
        return cls(
            line_start=(x0, line_y),
            line_end=(x1, line_y),
            circle_center=(width / 2, line_y),
            line_length=x1 - x0,
            start_time=start_time,
            **kwargs,
        )

    @property
    def half_line_length(self) -> float:
        return self.line_length / 2

    @property
    def spacing_divisor(self) -> int:
        # 13 for the default 15 arcs: the outermost arc (index N-1) overshoots
        # the line end by one spacing step.
        return max(self.number_of_arcs - 2, 1)


@dataclass
class RuntimeState:
    """The only values allowed to change after startup."""
    sound_enabled: bool = False
    colour: Tuple[int, int, int] = C.COLOUR


@dataclass
class Arc:
    index: int
    radius: float
    velocity: float
    colour: Tuple[int, int, int]
    last_impact: float = 0.0
    next_impact: float = 0.0


@dataclass
class Impact:
    arc_index: int
    time: float
    next_time: float
    observed: float


# ── Oscillator model ──

def bounce_angle(total_radian: float, max_angle: float = 2 * math.pi) -> float:
    """Fold a monotonically growing angle into a π → 2π → π sweep."""
    mod_radian = total_radian % max_angle
    return mod_radian if mod_radian >= math.pi else max_angle - mod_radian


def position_on_arc(radius: float, elapsed_seconds: float, velocity: float,
                    center: Point = (0.0, 0.0)) -> Point:
    angle = bounce_angle(math.pi + elapsed_seconds * velocity)
    x = radius * math.cos(angle) + center[0]
    y = radius * math.sin(angle) + center[1]
    return x, y


def positions_on_arcs(radii: np.ndarray, elapsed_seconds: float,
                      velocities: np.ndarray,
                      center: Point = (0.0, 0.0)) -> np.ndarray:
    """Vectorised position_on_arc → (N, 2)."""
    radii = np.asarray(radii, dtype=np.float64)
    total = np.pi + elapsed_seconds * np.asarray(velocities, dtype=np.float64)
    mod = np.mod(total, 2 * np.pi)
    angle = np.where(mod >= np.pi, mod, 2 * np.pi - mod)
    return np.stack([radii * np.cos(angle) + center[0],
                     radii * np.sin(angle) + center[1]], axis=-1)


# ── Impact scheduling and pulse ──

def next_impact_time(current_impact_time: float, velocity: float) -> float:
    """Half-circle traversal time added to the current impact, in ms."""
    if velocity <= 0:
        raise ValueError(f"Arc velocity must be positive, got {velocity}")
    return current_impact_time + (math.pi / velocity) * 1000


def decay_opacity(last_impact_time: float, base_opacity: float,
                  max_opacity: float, duration_ms: float,
                  now: Optional[float] = None) -> float:
    if now is None:
        now = wall_clock_ms()
    fraction = min((now - last_impact_time) / duration_ms, 1)
    if fraction >= 1:
        return base_opacity
    return max_opacity - (max_opacity - base_opacity) * fraction


# ── Arc registry ──

def build_arcs(settings: Settings) -> List[Arc]:
    arcs = []
    spacing = (settings.half_line_length - settings.center_arc_radius) / settings.spacing_divisor
    for index in range(settings.number_of_arcs):
        radius = settings.center_arc_radius + spacing * index
        # Every arc finishes (loops - index) full loops in loop_time seconds
        velocity = (2 * math.pi * (settings.loops - index)) / settings.loop_time
        if velocity <= 0:
            raise ValueError(
                f"Arc {index} has no loops left: loops={settings.loops}, "
                f"number_of_arcs={settings.number_of_arcs}")
        arcs.append(Arc(
            index=index,
            radius=radius,
            velocity=velocity,
            colour=settings.colour,
            last_impact=0.0,
            next_impact=next_impact_time(settings.start_time, velocity),
        ))
    return arcs


class CradleEngine:
    """
    Owns the arcs and advances their impact schedule.

    Step: for each arc, if now has passed next_impact → record one impact,
    advance the schedule by one half sweep, notify listeners.
    """

    def __init__(self, settings: Settings,
                 log_limit: Optional[int] = C.IMPACT_LOG_LIMIT):
        self.settings = settings
        self.log_limit = log_limit
        self.arcs: List[Arc] = []
        self.impact_log: Deque[Impact] = deque(maxlen=log_limit)
        self._listeners: List[Callable[[Impact], None]] = []

    def initialize(self) -> List[Arc]:
        self.arcs = build_arcs(self.settings)
        self.impact_log = deque(maxlen=self.log_limit)
        return self.arcs

    def subscribe(self, listener: Callable[[Impact], None]):
        self._listeners.append(listener)

    def elapsed_seconds(self, now: float) -> float:
        return (now - self.settings.start_time) / 1000

    def step(self, now: float) -> List[Impact]:
        # One catch-up step per arc per call; missed impacts drain over
        # the following frames.
        impacts = []
        for arc in self.arcs:
            if now >= arc.next_impact:
                arc.last_impact = arc.next_impact
                arc.next_impact = next_impact_time(arc.next_impact, arc.velocity)
                impacts.append(Impact(arc.index, arc.last_impact, arc.next_impact, now))

        self.impact_log.extend(impacts)
        for impact in impacts:
            for listener in self._listeners:
                listener(impact)
        return impacts

    # State access

    def opacity(self, arc: Arc, now: float) -> float:
        s = self.settings
        return decay_opacity(arc.last_impact, s.base_opacity, s.max_opacity,
                             s.pulse_duration, now=now)

    def get_radii(self) -> np.ndarray:
        return np.array([a.radius for a in self.arcs])

    def get_velocities(self) -> np.ndarray:
        return np.array([a.velocity for a in self.arcs])

    def get_positions(self, now: float) -> np.ndarray:
        """(n_arcs, 2) → [x, y] of every moving dot"""
        return positions_on_arcs(self.get_radii(), self.elapsed_seconds(now),
                                 self.get_velocities(),
                                 self.settings.circle_center)

    def get_opacities(self, now: float) -> np.ndarray:
        return np.array([self.opacity(a, now) for a in self.arcs])


def generate_trace(settings: Settings, n_frames: int, fps: float = C.FPS):
    """Run the engine headless at a fixed frame rate, keeping every impact."""
    engine = CradleEngine(settings, log_limit=None)
    engine.initialize()
    frame_ms = 1000.0 / fps

    times, positions, opacities = [], [], []
    for i in range(n_frames):
        now = settings.start_time + i * frame_ms
        positions.append(engine.get_positions(now))
        opacities.append(engine.get_opacities(now))
        engine.step(now)
        times.append(now)

    return {
        'times': np.array(times),
        'positions': np.array(positions),
        'opacities': np.array(opacities),
        'impacts': list(engine.impact_log),
        'arcs': engine.arcs,
        'settings': settings,
    }
