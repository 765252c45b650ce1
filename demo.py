"""
Quick demo — watch the arcs swing.
Run: venv/bin/python demo.py
Click anywhere to toggle sound, press Q or close window to exit.
Run generate_notes.py once first so the impact notes exist.
"""
from cradle.engine import CradleEngine, RuntimeState, Settings
from cradle.loop import RenderLoop
from cradle.renderer import Renderer, AppearanceConfig
from cradle.audio import SoundPlayer, SoundToggle
import cradle as C

# Geometry from the window size using centralized defaults
config = AppearanceConfig()
settings = Settings.from_canvas(config.width, config.height)
engine = CradleEngine(settings)
engine.initialize()

state = RuntimeState(sound_enabled=False, colour=settings.colour)
toggle = SoundToggle(state, SoundPlayer(C.AUDIO_DIR, C.SOUND_VOLUME))
engine.subscribe(toggle.on_impact)

print(f"Arcs: {len(engine.arcs)}")
print(f"Fastest: {engine.arcs[0].velocity:.4f} rad/s, slowest: {engine.arcs[-1].velocity:.4f} rad/s")
print(toggle.label)

loop = RenderLoop(engine, state=state)
Renderer(config).play(loop, fps=C.FPS, toggle=toggle)
print(f"Impacts: {len(engine.impact_log)}")
