from datetime import datetime, timedelta
from pathlib import Path
import os
import sys
import pytest

# Run Qt headless unless a platform is explicitly configured
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Ensure src/ is on sys.path for direct test invocation without an editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from focus_tracker.database_manager import DBConfig, DatabaseManager


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def db(tmp_path: Path):
    config = DBConfig(path=tmp_path / "test.sqlite")
    manager = DatabaseManager(config)
    manager.init_db()
    yield manager
    manager.close()


@pytest.fixture()
def clock():
    return FakeClock(datetime(2025, 3, 12, 9, 0, 0))
