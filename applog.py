# applog.py
# Application logging: one "medtrack" logger feeding a ring buffer (shown in the
# settings screen) and an append-only log file.

import logging
from pathlib import Path
from threading import RLock
from typing import Optional

from config import LOG_RING_LINES

_LOG_LOCK = RLock()


class _RingLog:
    def __init__(self, max_lines=LOG_RING_LINES):
        self.max_lines = int(max_lines)
        self._lines = []
        self._lock = RLock()

    def add(self, line: str):
        line = (line or "").rstrip("\n")
        if not line:
            return
        with self._lock:
            self._lines.append(line)
            if len(self._lines) > self.max_lines:
                self._lines = self._lines[-self.max_lines:]

    def lines(self):
        with self._lock:
            return list(self._lines)

    def text(self) -> str:
        return "\n".join(self.lines())

    def clear(self):
        with self._lock:
            self._lines = []


RING = _RingLog()


class FileAndRingHandler(logging.Handler):
    def __init__(self, log_path: Optional[Path] = None, ring: _RingLog = RING):
        super().__init__()
        self.log_path = Path(log_path) if log_path else None
        self.ring = ring
        self.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))

    def emit(self, record):
        try:
            msg = self.format(record)
        except Exception:
            msg = str(record.getMessage())
        self.ring.add(msg)
        if self.log_path is None:
            return
        try:
            with _LOG_LOCK:
                self.log_path.parent.mkdir(parents=True, exist_ok=True)
                with self.log_path.open("a", encoding="utf-8") as f:
                    f.write(msg + "\n")
        except OSError:
            self.handleError(record)


logger = logging.getLogger("medtrack")


def setup_logging(log_path: Optional[Path] = None, level=logging.INFO) -> logging.Logger:
    logger.setLevel(level)
    if not any(isinstance(h, FileAndRingHandler) for h in logger.handlers):
        logger.addHandler(FileAndRingHandler(log_path))
    return logger


def clear_log(log_path: Optional[Path] = None):
    RING.clear()
    if log_path is not None:
        with _LOG_LOCK:
            Path(log_path).unlink(missing_ok=True)
