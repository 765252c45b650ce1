"""
Impact diagnostic — how well does a frame-driven loop keep the schedule?

Runs the engine headless at several frame rates and reports:
  1. Impacts per arc over one full loop
  2. Lag between the scheduled impact and the frame that noticed it
  3. Backlog left by single-step catch-up at low frame rates
Plots an impact raster and one pulse of the opacity decay.
"""
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import os
import cradle as C
from cradle.engine import Settings, generate_trace
from cradle.metrics import (impact_counts, impact_times, opacity_trace,
                            realignment_time, schedule_drift)


def evaluate():
    os.makedirs('results/plots', exist_ok=True)
    settings = Settings.from_canvas(start_time=0.0)
    period = realignment_time(settings)
    print(f"All arcs realign every {period:.1f} s")

    for fps in (60, 30, 5, 1):
        n_frames = int(period * fps) + 1
        trace = generate_trace(settings, n_frames, fps=fps)
        counts = impact_counts(trace['impacts'], settings.number_of_arcs)
        drift = schedule_drift(trace['impacts'])
        end = trace['times'][-1]
        expected = np.array([len(impact_times(a.velocity, settings.start_time, end))
                             for a in trace['arcs']])
        backlog = expected - counts
        print(f"fps={fps:3d}  impacts={counts.sum():5d}  "
              f"mean lag={drift.mean():8.2f} ms  max lag={drift.max():9.2f} ms  "
              f"backlog={backlog.sum()}")

    # Impact raster at 60 fps
    trace = generate_trace(settings, int(30 * C.FPS), fps=C.FPS)
    plt.figure(figsize=(12, 5))
    for impact in trace['impacts']:
        plt.plot([impact.time / 1000] * 2,
                 [impact.arc_index - 0.4, impact.arc_index + 0.4],
                 color='#6b21b6', linewidth=1)
    plt.xlabel('time (s)')
    plt.ylabel('arc index')
    plt.title('Impacts, first 30 s')
    plt.savefig('results/plots/impact_raster.png')
    plt.close()

    # One pulse
    times = np.linspace(0, settings.pulse_duration * 1.5, 400)
    pulse = opacity_trace(0.0, settings.base_opacity, settings.max_opacity,
                          settings.pulse_duration, times)
    plt.figure(figsize=(8, 4))
    plt.plot(times, pulse, color='#6b21b6')
    plt.axvline(settings.pulse_duration, color='gray', linestyle='--')
    plt.xlabel('ms since impact')
    plt.ylabel('opacity')
    plt.title('Opacity pulse')
    plt.savefig('results/plots/opacity_pulse.png')
    plt.close()

    print("Plots saved to results/plots/")


if __name__ == "__main__":
    evaluate()
