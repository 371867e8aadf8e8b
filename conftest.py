import os

from dotenv import load_dotenv

# Optional overrides for running the suite against a real database.
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

# Settings are read at import time by libs.db.config; make sure they resolve
# to a throwaway database before any application module is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REDIS_URL", "memory://")

from libs.common.config import get_settings  # noqa: E402

get_settings.cache_clear()
