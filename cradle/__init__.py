# ── Central defaults (tune here, not scattered across files) ──

# Layout
WIDTH = 1280
HEIGHT = 720
LINE_Y_INDEX = 0.6
LINE_PERCENTAGE_OF_TOTAL_WIDTH = 0.9
CENTER_ARC_RADIUS = 30
MOVING_DOT_RADIUS = 7
LINE_WIDTH = 2

# Timing
NUMBER_OF_ARCS = 15
LOOPS = 30
LOOP_TIME = 150          # seconds for every arc to finish its loops
PULSE_DURATION = 2000    # ms

# Pulse
BASE_OPACITY = 0.15
MAX_OPACITY = 0.8

# Rendering
COLOUR = (0x6b, 0x21, 0xb6)
BG_COLOR = (0, 0, 0)
FPS = 60

# Audio
AUDIO_DIR = 'audio'
SOUND_VOLUME = 0.15
SAMPLE_RATE = 44100
NOTE_SECONDS = 1.5

# Bookkeeping
IMPACT_LOG_LIMIT = 1000  # most recent impacts kept by a live engine
