"""System Clock — wall-clock `now` for note timestamps."""

import time

from notevault.core.domain_types import UnixTimestamp


class SystemClock:
    """Clock protocol adapter backed by time.time()."""

    def now(self) -> UnixTimestamp:
        return UnixTimestamp(int(time.time()))
