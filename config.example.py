# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See .env.example for a ready-to-copy template.
"""

ENV_VARS = {
    # App / logging
    "TASKMINDER_APP_NAME": "App display name (default: taskminder).",
    "TASKMINDER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKMINDER_DATA_DIR": "Local data directory, also holds taskminder.log (default: .local/taskminder).",
    "TASKMINDER_TASKS_FILE": "Task file path (default: <data_dir>/tasks.txt).",
    # Reminders
    "TASKMINDER_REMINDERS_ENABLED": "Run the background reminder scheduler (true/false, default: true).",
    "TASKMINDER_REMINDER_INTERVAL": "Seconds between reminder checks (default: 30).",
}
