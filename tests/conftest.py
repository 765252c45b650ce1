import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'

import pytest

from cradle.engine import CradleEngine, Settings


@pytest.fixture
def settings():
    return Settings.from_canvas(1280, 720, start_time=0.0)


@pytest.fixture
def engine(settings):
    engine = CradleEngine(settings)
    engine.initialize()
    return engine
