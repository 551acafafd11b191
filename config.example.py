# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PREDICTED_APP_NAME": "App display name (default: predicted-processes).",
    "PREDICTED_LOG_LEVEL": "Console logging level (default: INFO).",
    "PREDICTED_DATA_DIR": "Local data directory, holds predicted.log (default: .local/predicted).",
    # Process executor
    "PREDICTED_SHELL": "Run commands through the system shell (true/false, default: true).",
    "PREDICTED_SHELL_EXECUTABLE": "Shell to use instead of /bin/sh (default: unset).",
    "PREDICTED_TERMINATE_SIGNAL": "Signal sent on cancel: name or number (default: SIGTERM).",
    "PREDICTED_NEW_SESSION": "Start each command in its own session so the whole process group is signalled (default: true).",
}
