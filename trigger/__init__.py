import enum
import logging
import socket
import threading
from typing import Callable, Optional
from urllib.parse import urlsplit

from controller import CycleResult
from config import (
    COLLECTION_INTERVAL_S,
    EXPORT_URL,
    REQUIRE_NETWORK,
    RETRY_BACKOFF_INITIAL_S,
    RETRY_BACKOFF_MAX_S,
)

logger = logging.getLogger(__name__)

CONNECTIVITY_POLL_S = 60
CONNECTIVITY_TIMEOUT_S = 3.0


def network_connected(url=EXPORT_URL, timeout=CONNECTIVITY_TIMEOUT_S) -> bool:
    """True when a TCP connection to the export host can be opened."""
    parts = urlsplit(url)
    port = parts.port or (443 if parts.scheme == "https" else 80)
    try:
        with socket.create_connection((parts.hostname, port), timeout=timeout):
            return True
    except OSError:
        return False


class ExistingWorkPolicy(str, enum.Enum):
    KEEP = "keep"
    REPLACE = "replace"


class PeriodicTrigger:
    """
    Calls ``work`` every ``interval_s`` seconds on a single worker thread.

    A run is skipped while ``connectivity_check`` fails and re-checked every
    ``connectivity_poll_s``. A retry result moves the next run to an
    exponential backoff delay; a success restores the regular interval.
    """

    def __init__(
        self,
        name: str,
        work: Callable[[], CycleResult],
        interval_s: float = COLLECTION_INTERVAL_S,
        require_network: bool = REQUIRE_NETWORK,
        connectivity_check: Callable[[], bool] = network_connected,
        connectivity_poll_s: float = CONNECTIVITY_POLL_S,
        backoff_initial_s: float = RETRY_BACKOFF_INITIAL_S,
        backoff_max_s: float = RETRY_BACKOFF_MAX_S,
    ):
        self.name = name
        self.work = work
        self.interval_s = interval_s
        self.require_network = require_network
        self.connectivity_check = connectivity_check
        self.connectivity_poll_s = connectivity_poll_s
        self.backoff_initial_s = backoff_initial_s
        self.backoff_max_s = backoff_max_s

        self._retry_attempt = 0
        self._run_counter = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # --- Retry policy ---
    def get_retry_attempt(self):
        return self._retry_attempt

    def get_run_counter(self):
        return self._run_counter

    def backoff_delay(self, attempt: int) -> float:
        return min(self.backoff_initial_s * (2 ** (attempt - 1)), self.backoff_max_s)

    def _next_delay(self, result: Optional[CycleResult]) -> float:
        if result is None:
            return self.connectivity_poll_s
        if result.is_success():
            self._retry_attempt = 0
            return self.interval_s
        self._retry_attempt += 1
        delay = self.backoff_delay(self._retry_attempt)
        logger.warning(
            f"[{self.name}] Cycle failed ({result.reason}), retry {self._retry_attempt} in {delay:.0f} s"
        )
        return delay

    # --- Execution ---
    def run_once(self) -> Optional[CycleResult]:
        """Run the work once if the precondition holds. Returns None when skipped."""
        if self.require_network and not self.connectivity_check():
            logger.info(f"[{self.name}] No network connection, postponing run")
            return None

        self._run_counter += 1
        logger.debug(f"[{self.name}] Starting run {self._run_counter}")
        try:
            return self.work()
        except Exception as e:
            logger.error(f"[{self.name}] Unexpected error in run: {e}", exc_info=True)
            return CycleResult.retry(str(e))

    def _loop(self):
        while not self._stop_event.is_set():
            result = self.run_once()
            delay = self._next_delay(result)
            self._stop_event.wait(delay)
        logger.info(f"[{self.name}] Stopped")

    def start(self):
        if self.is_running():
            logger.warning(f"[{self.name}] Already running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info(f"[{self.name}] Scheduled every {self.interval_s} s")

    def stop(self, timeout: Optional[float] = None):
        """Stop scheduling; waits for an in-flight run to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


# --- Unique periodic work registry ---
_unique_work = {}
_unique_work_mutex = threading.Lock()


def enqueue_unique_periodic_work(trigger: PeriodicTrigger, policy=ExistingWorkPolicy.KEEP) -> PeriodicTrigger:
    """
    Register and start ``trigger`` under its name.

    With KEEP an already running trigger of the same name is left alone and
    returned; with REPLACE it is stopped and ``trigger`` takes its place once
    its in-flight run has finished. The registry stays available meanwhile.
    """
    while True:
        with _unique_work_mutex:
            existing = _unique_work.get(trigger.name)
            if existing is None or existing is trigger or not existing.is_running():
                _unique_work[trigger.name] = trigger
                trigger.start()
                return trigger
            if policy == ExistingWorkPolicy.KEEP:
                logger.info(f"Work {trigger.name} already scheduled, keeping existing")
                return existing
        # joined outside the mutex; the old entry stays registered until it
        # stops, so nothing new can start alongside it
        logger.info(f"Replacing scheduled work {trigger.name}")
        existing.stop()


def cancel_unique_work(name: str) -> bool:
    with _unique_work_mutex:
        existing = _unique_work.pop(name, None)
    if existing is None:
        return False
    existing.stop()
    return True


def get_unique_work(name: str) -> Optional[PeriodicTrigger]:
    with _unique_work_mutex:
        return _unique_work.get(name)
