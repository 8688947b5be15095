import csv
import logging
import os
import tempfile
import threading

from collector.sample import NetworkSample
from config import LOG_DIR, LOG_FILE, LOG_HEADER

logger = logging.getLogger(__name__)


class LogStore:
    """
    Append-only CSV log of network samples.

    The file starts with LOG_HEADER, written before the first row and again by
    every reset. A missing or empty file gets the header on the next append.
    ``lock`` is re-entrant: each method takes it, and a caller can hold it
    across append -> line_count -> reset so the count it reads belongs to its
    own append.
    """

    def __init__(self, directory=LOG_DIR, filename=LOG_FILE, header=LOG_HEADER):
        self.path = os.path.join(directory, filename)
        self.header = header
        self.lock = threading.RLock()

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def _needs_header(self) -> bool:
        return not self.exists() or os.path.getsize(self.path) == 0

    def _write_header(self):
        # write-then-rename, the log is never seen half written
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".network_log.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(self.header + "\n")
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def append(self, sample: NetworkSample):
        with self.lock:
            if self._needs_header():
                logger.debug(f"Writing header to log file {self.path}")
                self._write_header()
            with open(self.path, "a", encoding="utf-8", newline="") as f:
                csv.writer(f, lineterminator="\n").writerow(sample.to_csv_fields())

    def line_count(self) -> int:
        with self.lock:
            if not self.exists():
                return 0
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                return len(f.read().splitlines())

    def read(self) -> str:
        with self.lock:
            if not self.exists():
                return ""
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                return f.read()

    def reset(self):
        with self.lock:
            logger.debug(f"Resetting log file {self.path}")
            self._write_header()
