"""Runtime settings, read from the environment with sensible defaults."""

import os

PORT = int(os.environ.get("PORT", 5001))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Schedule file read by main.py when no path is given
SCHEDULE_FILE = os.environ.get("SCHEDULE_FILE", "schedule.txt")

# Default recurrence period (ISO-8601, UTC)
PERIOD_START = os.environ.get("PERIOD_START", "2025-03-10T00:00:00Z")
PERIOD_END = os.environ.get("PERIOD_END", "2025-06-10T23:59:59Z")
