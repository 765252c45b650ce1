import math

import pygame
import pytest

from cradle.audio import SoundToggle
from cradle.engine import RuntimeState
from cradle.loop import ManualScheduler, PygameScheduler, RenderLoop
from cradle.renderer import FILL, STROKE


class RecordingSurface:
    def __init__(self):
        self.clears = 0
        self.calls = []

    def clear(self, region=None):
        self.clears += 1
        self.calls = []

    def draw_arc(self, center, radius, start, end, colour, mode, opacity):
        self.calls.append((center, radius, start, end, colour, mode, opacity))


class FakeClock:
    def __init__(self, times):
        self.times = list(times)

    def __call__(self):
        return self.times.pop(0)


class RecordingPlayer:
    def __init__(self):
        self.played = []

    def play(self, index):
        self.played.append(index)


def test_frame_layout(engine, settings):
    loop = RenderLoop(engine)
    calls = loop.frame_state(1234.0)
    assert len(calls) == 4 * len(engine.arcs)

    arc = engine.arcs[5]
    stroke, left, right, dot = calls[20:24]
    offset = settings.center_arc_radius * 0.4 / arc.radius
    assert stroke.mode == STROKE
    assert stroke.center == settings.circle_center
    assert stroke.radius == arc.radius
    assert stroke.start == pytest.approx(math.pi + offset)
    assert stroke.end == pytest.approx(2 * math.pi - offset)

    cx, line_y = settings.circle_center[0], settings.line_start[1]
    assert left.center == pytest.approx((cx - arc.radius, line_y))
    assert right.center == pytest.approx((cx + arc.radius, line_y))
    for call in (left, right, dot):
        assert call.mode == FILL
        assert call.radius == settings.moving_dot_radius
        assert call.end - call.start == pytest.approx(2 * math.pi)

    assert left.opacity == right.opacity == stroke.opacity
    assert dot.opacity == 1


def test_moving_dot_starts_at_left_impact_point(engine, settings):
    calls = RenderLoop(engine).frame_state(settings.start_time)
    for i in range(0, len(calls), 4):
        left, dot = calls[i + 1], calls[i + 3]
        assert dot.center == pytest.approx(left.center)


def test_base_dots_pulse_after_impact(engine):
    loop = RenderLoop(engine)
    t = engine.arcs[0].next_impact
    assert loop.frame_state(t)[0].opacity == pytest.approx(0.15)
    engine.step(t)
    calls = loop.frame_state(t)
    assert calls[0].opacity == pytest.approx(0.8)
    assert calls[1].opacity == pytest.approx(0.8)
    # Arcs that have not hit yet stay at rest
    assert calls[4].opacity == pytest.approx(0.15)


def test_manual_scheduler_drives_loop(engine):
    surface = RecordingSurface()
    scheduler = ManualScheduler()
    clock = FakeClock([0.0, 1000.0, 2600.0, 2700.0])
    loop = RenderLoop(engine, surface, clock=clock)

    loop.run(scheduler)
    assert loop.ticks == 0
    assert len(scheduler.pending) == 1

    assert scheduler.advance(3) == 3
    assert loop.ticks == 3
    assert surface.clears == 3
    assert len(surface.calls) == 4 * len(engine.arcs)
    # Arc 0 hits at 2500 ms, arc 1 at ~2586 ms
    assert [i.arc_index for i in engine.impact_log] == [0, 1]
    # Always exactly one frame queued
    assert len(scheduler.pending) == 1


def test_tick_without_scheduler(engine):
    surface = RecordingSurface()
    loop = RenderLoop(engine, surface)
    loop.tick(now=engine.arcs[0].next_impact)
    assert loop.ticks == 1
    assert len(engine.impact_log) == 1


def test_impacts_play_sound_only_when_enabled(engine):
    state = RuntimeState()
    player = RecordingPlayer()
    toggle = SoundToggle(state, player)
    engine.subscribe(toggle.on_impact)

    scheduler = ManualScheduler()
    t0, t1 = engine.arcs[0].next_impact, engine.arcs[1].next_impact
    loop = RenderLoop(engine, RecordingSurface(), clock=FakeClock([t0, t1]))
    loop.run(scheduler)

    scheduler.advance()
    assert player.played == []

    # Clicks land between frames
    toggle.toggle()
    scheduler.advance()
    assert player.played == [1]


def test_pygame_scheduler_handles_click_and_quit():
    pygame.display.init()
    try:
        pygame.display.set_mode((16, 16))
        clicks, frames = [], []
        scheduler = PygameScheduler(fps=1000, on_click=lambda: clicks.append(1))

        def frame():
            frames.append(1)
            pygame.event.post(pygame.event.Event(pygame.QUIT))
            scheduler.request_next(frame)

        pygame.event.post(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(1, 1)))
        scheduler.request_next(frame)
        scheduler.run()

        assert frames == [1]
        assert clicks == [1]
        assert not scheduler.running
    finally:
        pygame.display.quit()


def test_frames_use_runtime_colour(engine, settings):
    state = RuntimeState(colour=settings.colour)
    loop = RenderLoop(engine, state=state)
    assert {call.colour for call in loop.frame_state(0.0)} == {settings.colour}

    state.colour = (10, 200, 30)
    assert {call.colour for call in loop.frame_state(16.0)} == {(10, 200, 30)}


def test_default_state_takes_settings_colour(engine, settings):
    loop = RenderLoop(engine)
    assert loop.state.colour == settings.colour
    assert loop.state.sound_enabled is False
