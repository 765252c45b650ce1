"""
Render loop — one self-rescheduling tick per display refresh.

Tick: clear → elapsed time → draw every arc → advance impacts → request next.
Frame pacing belongs to a FrameScheduler so the loop can be driven by hand.
"""

import math
import os
from collections import deque
from typing import Callable, Deque, List, Optional

from cradle.engine import CradleEngine, RuntimeState, position_on_arc, wall_clock_ms
from cradle.renderer import DrawCall, FILL, STROKE

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame


class FrameScheduler:
    """Runs a callback at the next display refresh."""

    def request_next(self, callback: Callable[[], None]):
        raise NotImplementedError

    def run(self):
        raise NotImplementedError


class ManualScheduler(FrameScheduler):
    """Holds requested frames until advance() is called."""

    def __init__(self):
        self.pending: Deque[Callable[[], None]] = deque()
        self.frames_run = 0

    def request_next(self, callback):
        self.pending.append(callback)

    def advance(self, n: int = 1) -> int:
        ran = 0
        for _ in range(n):
            if not self.pending:
                break
            self.pending.popleft()()
            ran += 1
        self.frames_run += ran
        return ran

    def run(self):
        # Nothing drives frames automatically
        pass


class PygameScheduler(FrameScheduler):
    """Pumps pygame events between frames, paced by a pygame Clock."""

    def __init__(self, fps: int = 60, on_click: Optional[Callable[[], None]] = None):
        self.fps = fps
        self.on_click = on_click
        self.clock = pygame.time.Clock()
        self.running = False
        self._next: Optional[Callable[[], None]] = None

    def request_next(self, callback):
        self._next = callback

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_q:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN and self.on_click is not None:
                self.on_click()

    def run(self):
        self.running = True
        while self.running and self._next is not None:
            # Input is handled between frames, never during one
            self._handle_events()
            if not self.running:
                break
            callback, self._next = self._next, None
            callback()
            pygame.display.flip()
            self.clock.tick(self.fps)


class RenderLoop:
    def __init__(self, engine: CradleEngine, surface=None,
                 state: Optional[RuntimeState] = None,
                 scheduler: Optional[FrameScheduler] = None,
                 clock: Callable[[], float] = wall_clock_ms):
        self.engine = engine
        self.surface = surface
        self.state = state or RuntimeState(colour=engine.settings.colour)
        self.scheduler = scheduler
        self.clock = clock
        self.ticks = 0

    def frame_state(self, now: float) -> List[DrawCall]:
        """Draw calls for one frame, in painting order."""
        s = self.engine.settings
        cx = s.circle_center[0]
        line_y = s.line_start[1]
        elapsed = self.engine.elapsed_seconds(now)
        # One colour for every arc, read from the shared runtime state
        colour = self.state.colour
        calls = []

        for arc in self.engine.arcs:
            # Stagger the stroke ends so neighbouring arcs don't line up
            offset = s.center_arc_radius * 0.4 / arc.radius
            opacity = self.engine.opacity(arc, now)

            calls.append(DrawCall(s.circle_center, arc.radius, math.pi + offset,
                                  s.max_angle - offset, colour, STROKE, opacity))

            # Impact points on the base line
            calls.append(DrawCall((cx - arc.radius, line_y), s.moving_dot_radius,
                                  0, s.max_angle, colour, FILL, opacity))
            calls.append(DrawCall((cx + arc.radius, line_y), s.moving_dot_radius,
                                  0, s.max_angle, colour, FILL, opacity))

            # Moving dot never fades
            dot = position_on_arc(arc.radius, elapsed, arc.velocity, s.circle_center)
            calls.append(DrawCall(dot, s.moving_dot_radius, 0, s.max_angle,
                                  colour, FILL, 1))
        return calls

    def draw(self, now: float) -> List[DrawCall]:
        calls = self.frame_state(now)
        self.surface.clear()
        for call in calls:
            self.surface.draw_arc(call.center, call.radius, call.start, call.end,
                                  call.colour, call.mode, call.opacity)
        return calls

    def tick(self, now: Optional[float] = None):
        if now is None:
            now = self.clock()
        self.draw(now)
        self.engine.step(now)
        self.ticks += 1
        if self.scheduler is not None:
            self.scheduler.request_next(self.tick)

    def run(self, scheduler: Optional[FrameScheduler] = None):
        if scheduler is not None:
            self.scheduler = scheduler
        self.scheduler.request_next(self.tick)
        self.scheduler.run()
