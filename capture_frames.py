"""
Render the animation headless and save PNG frames.
Run: venv/bin/python capture_frames.py --seconds 5 --out results/frames
"""
import argparse
import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')

import numpy as np
import cradle as C
from cradle.engine import CradleEngine, Settings
from cradle.loop import RenderLoop
from cradle.renderer import Renderer, AppearanceConfig, save_frames_as_video


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--seconds', type=float, default=5.0)
    parser.add_argument('--fps', type=int, default=30)
    parser.add_argument('--start', type=float, default=0.0,
                        help='seconds into the loop to start capturing')
    parser.add_argument('--out', default='results/frames')
    args = parser.parse_args()

    config = AppearanceConfig()
    settings = Settings.from_canvas(config.width, config.height, start_time=0.0)
    engine = CradleEngine(settings)
    engine.initialize()
    loop = RenderLoop(engine)

    n_frames = int(args.seconds * args.fps)
    times = args.start * 1000 + np.arange(n_frames) * (1000.0 / args.fps)
    frames = Renderer(config).render_trace(loop, times)
    save_frames_as_video(frames, args.out, fps=args.fps)

    print(f"Impacts: {len(engine.impact_log)}")
    print(f"Saved {n_frames} frames to {args.out}/")


if __name__ == "__main__":
    main()
