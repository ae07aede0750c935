"""Runtime configuration, read from the environment."""

import os
from os import getenv
from pathlib import Path

ENV_FILE_PATHS = [
    Path("/opt/pulse/.env"),
    Path(__file__).parent.parent / ".env",
]


def load_env_file_fallback() -> bool:
    """Load a .env file for variables not already set in the environment."""
    # Logging is not configured yet when this runs
    for env_file in ENV_FILE_PATHS:
        if env_file.exists() and env_file.is_file():
            try:
                loaded_count = 0
                with open(env_file, "r") as f:
                    for line in f:
                        line = line.strip()
                        if not line or line.startswith("#"):
                            continue
                        if "=" in line:
                            key, value = line.split("=", 1)
                            key = key.strip()
                            value = value.strip()
                            if value.startswith('"') and value.endswith('"'):
                                value = value[1:-1]
                            elif value.startswith("'") and value.endswith("'"):
                                value = value[1:-1]
                            if key and value and key not in os.environ:
                                os.environ[key] = value
                                loaded_count += 1
                if loaded_count > 0:
                    print(f"[Pulse] Loaded {loaded_count} environment variables from {env_file}")
                return True
            except OSError as e:
                print(f"[Pulse] Warning: Could not load .env file from {env_file}: {e}")
    return False


if not getenv("DATABASE_URL"):
    load_env_file_fallback()


DEBUG = getenv("APP_DEBUG", "false").lower() == "true"

# Default is a local SQLite file; production sets DATABASE_URL to PostgreSQL
DATABASE_URL = getenv("DATABASE_URL", "sqlite+aiosqlite:///./pulse.db")

ACCESS_CODE_LENGTH = int(getenv("ACCESS_CODE_LENGTH", "6"))

# Toast badges shown to professors when feedback arrives
TOAST_TTL_MS = int(getenv("TOAST_TTL_MS", "2000"))
