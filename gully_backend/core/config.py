import os

# =====================================
# Global configuration for Gully
# =====================================

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# DATABASE_URL:
# Any SQLAlchemy URL. Defaults to a SQLite file next to the package.
DATABASE_URL = os.environ.get(
    "GULLY_DATABASE_URL",
    f"sqlite:///{os.path.join(os.path.dirname(BASE_DIR), 'gully.db')}",
)

# Echo every SQL statement (noisy, handy while debugging aggregates)
SQL_ECHO = os.environ.get("GULLY_SQL_ECHO", "0") == "1"

LOG_LEVEL = os.environ.get("GULLY_LOG_LEVEL", "INFO").upper()

# TEST_MODE:
# When True, per-player settlement deltas are logged at INFO instead of DEBUG.
TEST_MODE = os.environ.get("TEST_MODE", "0") == "1"
