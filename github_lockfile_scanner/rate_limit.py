"""Pause before the next request when the primary rate limit is spent."""

import threading
import time

from . import console
from .models import RateLimitState

# Extra seconds past X-RateLimit-Reset, since GitHub's clock and ours drift
SAFETY_MARGIN = 5

# GitHub resets the primary limit hourly; anything longer is a bogus header
MAX_WAIT = 3600 + SAFETY_MARGIN


class RateLimiter:
    """Blocks the caller until the rate limit window resets.

    One instance is shared by every thread that talks to the API. The lock is
    held for the whole sleep so that concurrent callers queue behind the first
    one instead of each firing a request into an exhausted window.
    """

    def __init__(self):
        self._lock = threading.Lock()

    def check(self, headers) -> float:
        """Sleep if the headers say no requests remain. Returns seconds slept."""
        state = RateLimitState.from_headers(headers)
        if state is None or state.remaining != 0:
            return 0

        with self._lock:
            wait = state.reset - int(time.time()) + SAFETY_MARGIN
            if wait <= 0:
                return 0
            wait = min(wait, MAX_WAIT)
            console.warning(f"Rate limit reached, sleeping for {wait} seconds...")
            time.sleep(wait)
            return wait
