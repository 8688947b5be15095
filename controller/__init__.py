import enum
import logging
from typing import Optional
from pydantic import BaseModel

from collector import SampleCollector
from exporter import HttpExporter
from log_store import LogStore
from state_machine import CycleStateMachine
from config import EXPORT_THRESHOLD, RETAIN_LOG_ON_EXPORT_FAILURE

logger = logging.getLogger(__name__)


# --- Cycle Result ---
class CycleOutcome(str, enum.Enum):
    SUCCESS = "success"
    RETRY = "retry"


class CycleResult(BaseModel):
    outcome: CycleOutcome
    reason: Optional[str] = None
    line_count: int = 0
    exported: Optional[bool] = None  # None: no export attempted

    @classmethod
    def success(cls, line_count, exported=None):
        return cls(outcome=CycleOutcome.SUCCESS, line_count=line_count, exported=exported)

    @classmethod
    def retry(cls, reason, line_count=0):
        return cls(outcome=CycleOutcome.RETRY, reason=reason, line_count=line_count)

    def is_success(self) -> bool:
        return self.outcome == CycleOutcome.SUCCESS


# --- Collection Cycle Controller ---
class CollectionCycleController:
    """
    Runs one collect -> append -> threshold check -> export -> reset cycle.

    Failures while collecting or appending abort the cycle with a retry
    result. Export failures never abort it: the log is reset after every
    export attempt, unless ``retain_on_export_failure`` is set, in which case
    a failed export leaves the rows in place for the next cycle.
    """

    def __init__(
        self,
        collector: SampleCollector,
        store: LogStore,
        exporter: HttpExporter,
        threshold: int = EXPORT_THRESHOLD,
        retain_on_export_failure: bool = RETAIN_LOG_ON_EXPORT_FAILURE,
    ):
        self.collector = collector
        self.store = store
        self.exporter = exporter
        self.threshold = threshold
        self.retain_on_export_failure = retain_on_export_failure
        self._sm = CycleStateMachine()

    def get_state(self):
        return self._sm.state

    def run_cycle(self) -> CycleResult:
        with self.store.lock:
            if self._sm.state != 'idle':
                # a previous cycle was interrupted mid-flight
                self._sm.cycle_aborted_event()

            logger.info("Collecting network data...")
            self._sm.cycle_started_event()
            try:
                sample = self.collector.collect()
                self._sm.sample_collected_event()
                self.store.append(sample)
                self._sm.sample_appended_event()
                line_count = self.store.line_count()
            except Exception as e:
                logger.error(f"Failed to collect data: {e}", exc_info=True)
                self._sm.cycle_aborted_event()
                return CycleResult.retry(str(e))

            logger.info(f"Log has {line_count} lines")
            if line_count < self.threshold:
                self._sm.threshold_not_reached_event()
                return CycleResult.success(line_count)

            logger.info(f"Limit of {self.threshold} lines reached, exporting")
            self._sm.threshold_reached_event()
            exported = self._export()
            self._sm.export_finished_event()

            try:
                line_count = self._reset(exported)
            except OSError as e:
                logger.error(f"Failed to reset log: {e}", exc_info=True)
                self._sm.cycle_aborted_event()
                return CycleResult.retry(str(e), line_count=line_count)
            self._sm.reset_done_event()
            return CycleResult.success(line_count, exported=exported)

    def export_now(self) -> CycleResult:
        """Export and reset the current log without collecting a new sample."""
        with self.store.lock:
            line_count = self.store.line_count()
            if line_count <= 1:
                logger.info("Nothing to export")
                return CycleResult.success(line_count)
            exported = self._export()
            try:
                line_count = self._reset(exported)
            except OSError as e:
                logger.error(f"Failed to reset log: {e}", exc_info=True)
                return CycleResult.retry(str(e), line_count=line_count)
            return CycleResult.success(line_count, exported=exported)

    def _export(self) -> bool:
        try:
            return bool(self.exporter.export(self.store.read()))
        except Exception as e:
            logger.error(f"Failed to export data: {e}", exc_info=True)
            return False

    def _reset(self, exported: bool) -> int:
        if not exported and self.retain_on_export_failure:
            logger.warning("Export failed, keeping log rows for the next cycle")
            return self.store.line_count()
        logger.info("Resetting log file")
        self.store.reset()
        return self.store.line_count()
