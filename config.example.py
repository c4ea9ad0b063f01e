# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Local data (the SQLite store, logs) lives under CHECKOFF_DATA_DIR, which should stay gitignored.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "CHECKOFF_APP_NAME": "App display name (default: checkoff).",
    "CHECKOFF_LOG_LEVEL": "Console logging level (default: INFO).",
    "CHECKOFF_LOG_TO_FILE": "Also write full DEBUG logs to <data_dir>/checkoff.log (true/false).",
    # Paths (gitignored)
    "CHECKOFF_DATA_DIR": "Local data directory (default: .local/checkoff).",
    "CHECKOFF_STORAGE_PATH": "Key-value SQLite path (default: <data_dir>/storage.sqlite3).",
    # Persistence
    "CHECKOFF_STORAGE_KEY": "Key the task list is stored under (default: checkoff_tasks).",
    "CHECKOFF_BACKGROUND_WRITES": "Save from a background thread instead of inline (true/false).",
    "CHECKOFF_FLUSH_TIMEOUT": "Seconds shutdown waits for pending writes (default: 5.0).",
}
