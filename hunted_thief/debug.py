"""hunted_thief/debug.py — Debug flag from environment variable."""

import os

DEBUG = os.environ.get("HUNTED_THIEF_DEBUG", "") == "1"
