"""Time-seeded business code generation."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class CodeGenerator:
    """Issue `<prefix><epoch-millis>` codes that never repeat per prefix.

    Two requests in the same millisecond would otherwise produce the same
    code; the generator remembers the last stamp handed out for each
    prefix and bumps a stale or equal stamp to `last + 1`.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or _epoch_millis
        self._last: dict[str, int] = {}
        self._lock = threading.Lock()

    def next(self, prefix: str) -> str:
        with self._lock:
            stamp = self._clock()
            last = self._last.get(prefix)
            if last is not None and stamp <= last:
                stamp = last + 1
            self._last[prefix] = stamp
        return f"{prefix}{stamp}"


code_generator = CodeGenerator()
