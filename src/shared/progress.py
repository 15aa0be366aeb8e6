import contextlib
import logging
import sys
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class SingleLineRenderer:
    """Thread-safe renderer that keeps redrawing a single console line."""

    def __init__(self, *, single_line: bool = True) -> None:
        self.single_line = single_line
        self._last_len = 0
        self._lock = threading.Lock()

    def clear_line(self) -> None:
        """Wipe the current progress line."""
        with self._lock:
            if self.single_line and self._last_len > 0:
                sys.stdout.write('\r' + ' ' * self._last_len + '\r')
                sys.stdout.flush()
                self._last_len = 0

    def write_line(self, msg: str) -> None:
        """Redraw the current progress line."""
        with self._lock:
            if self.single_line:
                pad = max(0, self._last_len - len(msg))
                sys.stdout.write('\r' + msg + (' ' * pad))
            else:
                sys.stdout.write('\r' + msg)
            sys.stdout.flush()
            self._last_len = len(msg)


DEFAULT_WRITER = SingleLineRenderer()


# Optional global callback for embedding (done, total, label)
class _CbStore:
    progress: Callable[[int, int, str], None] | None = None


def set_progress_callback(cb: Callable[[int, int, str], None] | None) -> None:
    _CbStore.progress = cb


class ConsoleProgress:
    """Progress bar for step-wise operations."""

    def __init__(
        self,
        total: int,
        label: str = 'Placing',
        writer: SingleLineRenderer | None = None,
    ) -> None:
        self.total = max(1, int(total))
        self.done = 0
        self.start = time.monotonic()
        self.label = label
        self._writer = writer or DEFAULT_WRITER
        self._writer.clear_line()
        self._render()  # show 0%

    def _format_eta(self, remaining: float) -> str:
        if remaining is None or remaining == float('inf'):
            return '--:--'
        m, s = divmod(int(remaining), 60)
        h, m = divmod(m, 60)
        if h > 0:
            return f'{h:02d}:{m:02d}:{s:02d}'
        return f'{m:02d}:{s:02d}'

    def _render(self) -> None:
        elapsed = max(1e-6, time.monotonic() - self.start)
        rps = self.done / elapsed
        remaining = (self.total - self.done) / rps if rps > 0 else float('inf')
        bar_len = 30
        filled = int(bar_len * self.done / self.total)
        bar = '█' * filled + '░' * (bar_len - filled)
        msg = (
            f'{self.label}: [{bar}] {self.done}/{self.total} | {rps:4.1f}/s | ETA'
            f' {self._format_eta(remaining)}'
        )
        self._writer.write_line(msg)
        if _CbStore.progress is not None:
            try:
                _CbStore.progress(self.done, self.total, self.label)
            except Exception:
                logger.debug('Progress callback failed', exc_info=True)

    def update_to(self, done: int, total: int | None = None) -> None:
        """Jump to an absolute position; matches the engine's (done, total) callback."""
        if total is not None:
            self.total = max(1, int(total))
        self.done = max(0, min(self.total, int(done)))
        self._render()

    def close(self) -> None:
        with contextlib.suppress(Exception):
            sys.stdout.write('\n')
            sys.stdout.flush()
