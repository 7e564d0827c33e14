"""Thread-aware, timestamped line logging."""

from __future__ import annotations

import sys
import threading
import time
from typing import TextIO


class Logger:
    """Writes one timestamped line per call, tagged with the calling thread."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def set_stream(self, stream: TextIO | None) -> None:
        """Send further lines to another stream; None means standard output."""
        self._stream = stream

    def log(self, *args) -> None:
        """Write the arguments, joined without separators, as one line."""
        stamp = time.strftime("%H:%M:%S", time.localtime())
        if threading.current_thread() is threading.main_thread():
            tag = "[main]"
        else:
            tag = f"[Thread {threading.get_ident()}]"
        line = f"{stamp} {tag} {''.join(str(arg) for arg in args)}\n"
        with self._lock:
            stream = self._stream if self._stream is not None else sys.stdout
            stream.write(line)


_default = Logger()


def log(*args) -> None:
    """Log through the shared default logger."""
    _default.log(*args)