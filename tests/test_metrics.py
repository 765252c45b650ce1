import math

import numpy as np
import pytest

from cradle.engine import Settings, generate_trace
from cradle.metrics import (impact_counts, impact_times, opacity_trace,
                            realignment_time, schedule_drift)


def test_impact_times_schedule():
    times = impact_times(math.pi, 0.0, 4500.0)
    assert times == pytest.approx(np.array([1000.0, 2000.0, 3000.0, 4000.0]))


def test_realignment_default(settings):
    assert realignment_time(settings) == pytest.approx(150.0)


def test_realignment_shared_factor():
    settings = Settings.from_canvas(800, 600, start_time=0.0, loops=12, number_of_arcs=3)
    # 12, 11, 10 share no factor
    assert realignment_time(settings) == pytest.approx(150.0)
    settings = Settings.from_canvas(800, 600, start_time=0.0, loops=12, number_of_arcs=1)
    assert realignment_time(settings) == pytest.approx(12.5)


def test_trace_matches_schedule(settings):
    trace = generate_trace(settings, n_frames=60 * 20, fps=60)
    end = trace['times'][-1]
    counts = impact_counts(trace['impacts'], settings.number_of_arcs)
    for arc, count in zip(trace['arcs'], counts):
        assert count == len(impact_times(arc.velocity, settings.start_time, end))
    drift = schedule_drift(trace['impacts'])
    assert np.all(drift >= 0)
    assert np.all(drift < 1000 / 60 + 1e-6)


def test_opacity_trace_shape():
    values = opacity_trace(0.0, 0.15, 0.8, 2000, np.linspace(0, 4000, 9))
    assert values[0] == pytest.approx(0.8)
    assert values[-1] == pytest.approx(0.15)
    assert np.all(np.diff(values) <= 0)
