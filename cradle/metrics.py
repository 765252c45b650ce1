import math
from functools import reduce
import numpy as np

from cradle.engine import decay_opacity


def impact_times(velocity, start_time, until):
    """Scheduled impact timestamps (ms) in (start_time, until]."""
    spacing = (math.pi / velocity) * 1000
    n = int(math.floor((until - start_time) / spacing))
    return start_time + spacing * np.arange(1, n + 1)


def realignment_time(settings):
    """Seconds until every dot is back at its starting point together."""
    # Arc i completes (loops - i) whole loops in loop_time
    g = reduce(math.gcd, [settings.loops - i for i in range(settings.number_of_arcs)])
    return settings.loop_time / g


def schedule_drift(impacts):
    """Per-impact lag (ms) of the frame that noticed it behind its schedule."""
    observed = np.array([i.observed for i in impacts], dtype=np.float64)
    scheduled = np.array([i.time for i in impacts], dtype=np.float64)
    return observed - scheduled


def opacity_trace(last_impact, base, max_, duration, times):
    return np.array([decay_opacity(last_impact, base, max_, duration, now=t)
                     for t in times])


def impact_counts(impacts, n_arcs):
    counts = np.zeros(n_arcs, dtype=int)
    for impact in impacts:
        counts[impact.arc_index] += 1
    return counts
