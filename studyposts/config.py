import os
from dotenv import load_dotenv

# Load overrides from the env file next to the working directory, if any
load_dotenv('studyposts.env')


def _number(var_name, default, cast=int):
    raw = os.getenv(var_name, str(default))
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{var_name} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{var_name} must not be negative, got {raw!r}")
    return value


# Storage
DB_FILE = os.getenv("DB_FILE", "db.json")

# Server
HOST = os.getenv("HOST", "127.0.0.1")
PORT = _number("PORT", 5000)

# Client
API_URL = os.getenv("API_URL", f"http://localhost:{PORT}").rstrip("/")
REQUEST_TIMEOUT = _number("REQUEST_TIMEOUT", 10, float)
NEW_FLAG_SECONDS = _number("NEW_FLAG_SECONDS", 0.5, float)

# Launcher
STARTUP_TIMEOUT = _number("STARTUP_TIMEOUT", 10, float)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "studyposts.log")
