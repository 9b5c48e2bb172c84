import os
import sys
from pathlib import Path

# Configure environment for tests before importing package modules
TEST_DB_PATH = (Path(__file__).parent / "test.sqlite3").resolve()
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

os.environ.setdefault("BOT_TOKEN", "TEST_TOKEN")
os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{TEST_DB_PATH}"

sys.path.append(str(Path(__file__).resolve().parents[1]))
