"""Runtime settings, read once from the environment at import time."""

import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Page fetching (POST /context, POST /execute/url)
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "10"))  # seconds
MAX_CONTENT_SIZE = int(os.getenv("MAX_CONTENT_SIZE", str(5 * 1024 * 1024)))  # bytes
MAX_REDIRECTS = int(os.getenv("MAX_REDIRECTS", "10"))

# slowapi limit strings
EXECUTE_RATE_LIMIT = os.getenv("EXECUTE_RATE_LIMIT", "60/minute")
CONTEXT_RATE_LIMIT = os.getenv("CONTEXT_RATE_LIMIT", "10/minute")
