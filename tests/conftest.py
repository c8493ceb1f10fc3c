import pytest

from tests.helpers import FakeClock, make_settings
from video_agent.config import Settings


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return make_settings()
