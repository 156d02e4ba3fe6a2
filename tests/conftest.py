"""
Pytest configuration for test discovery and imports.

Provides fixtures for testing including:
- Database setup/teardown
- Game context and players
- In-memory fakes for the stat gateway, clock persistence and video player
"""

import sys
from pathlib import Path
import pytest
import tempfile
import os

# Run Qt headless so QApplication can start without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


# Determine paths
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
tests_path = project_root / "tests"


def pytest_configure(config):
    """Configure pytest - runs very early in startup.

    src MUST come before tests/ so tests/database cannot shadow the
    database package.
    """
    seen = set()
    new_path = []
    for p in sys.path:
        if p not in seen and p != str(tests_path):
            seen.add(p)
            new_path.append(p)

    for path in [str(src_path), str(project_root)]:
        if path in new_path:
            new_path.remove(path)

    new_path.insert(0, str(src_path))
    new_path.insert(1, str(project_root))

    sys.path[:] = new_path


# ============================================================================
# IN-MEMORY FAKES
# ============================================================================

class InMemoryStatGateway:
    """Stat gateway that keeps stats in a dict; can be told to fail."""

    def __init__(self):
        self.stats = {}
        self.record_calls = []
        self.delete_calls = []
        self.fail_record = False
        self.fail_delete = False
        self._next_id = 1

    def record_stat(self, event):
        self.record_calls.append(event)
        if self.fail_record:
            raise RuntimeError("store unavailable")
        stat_id = str(self._next_id)
        self._next_id += 1
        self.stats[stat_id] = event
        return stat_id

    def delete_stat(self, stat_id):
        self.delete_calls.append(stat_id)
        if self.fail_delete:
            raise RuntimeError("store unavailable")
        return self.stats.pop(stat_id, None) is not None

    def get_game_stats(self, game_id):
        return [event for event in self.stats.values() if event.game_id == game_id]


class InMemoryClockPersistence:
    """Clock sync persistence keyed by video id."""

    def __init__(self):
        self.saved = {}
        self.save_calls = 0
        self.fail_save = False
        self.fail_load = False

    def save_clock_sync(self, video_id, config):
        self.save_calls += 1
        if self.fail_save:
            raise RuntimeError("network down")
        self.saved[video_id] = config.copy()

    def get_clock_sync(self, video_id):
        if self.fail_load:
            raise RuntimeError("network down")
        config = self.saved.get(video_id)
        return config.copy() if config is not None else None


class FakePlayback:
    """Video player recording pause/seek calls."""

    def __init__(self):
        self.pauses = 0
        self.seeks = []

    def pause(self):
        self.pauses += 1

    def seek(self, seconds):
        self.seeks.append(seconds)


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture
def test_db_path():
    """
    Create temporary database for testing.

    Yields:
        Path to temporary database file

    Cleanup:
        Removes database (and WAL side files) after test
    """
    fd, path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    yield path

    for suffix in ("", "-wal", "-shm"):
        try:
            os.unlink(path + suffix)
        except OSError:
            pass


# ============================================================================
# GAME FIXTURES
# ============================================================================

@pytest.fixture
def game_context():
    from stat_recording.stat_event import GameContext
    return GameContext(game_id="game-1", team_a_id="team-a", team_b_id="team-b")


@pytest.fixture
def players():
    """Two players per team plus a custom-roster player on team A."""
    from stat_recording.stat_event import PlayerRef
    return {
        "a1": PlayerRef(player_id="p-a1", team_id="team-a", name="Avery"),
        "a2": PlayerRef(player_id="p-a2", team_id="team-a", name="Blake"),
        "b1": PlayerRef(player_id="p-b1", team_id="team-b", name="Casey"),
        "b2": PlayerRef(player_id="p-b2", team_id="team-b", name="Devon"),
        "custom": PlayerRef(player_id="custom-7", team_id="team-a", name="Walk-on"),
    }


@pytest.fixture
def memory_gateway():
    return InMemoryStatGateway()


@pytest.fixture
def clock_persistence():
    return InMemoryClockPersistence()


@pytest.fixture
def playback():
    return FakePlayback()


@pytest.fixture
def calibrated_config():
    """12-minute quarters, jumpball at the start of the video."""
    from game_clock.clock_sync_config import ClockSyncConfig
    return ClockSyncConfig(quarter_length_minutes=12, jumpball_ms=0)
