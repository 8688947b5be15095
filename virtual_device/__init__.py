import logging
import threading
from typing import Optional

from collector.providers import LocationProvider, RadioInfoProvider
from collector.sample import LocationFix
from dataset import CellReadingHandler

logger = logging.getLogger(__name__)


class VirtualRadio(RadioInfoProvider):
    """Radio provider backed by recorded readings; every enumeration moves to the next snapshot."""

    def __init__(self, device):
        self.device = device

    def list_cells(self):
        if not self.device.get_permissions_granted():
            raise PermissionError("READ_PHONE_STATE not granted")
        return list(self.device.next_snapshot().cells)

    def network_type(self) -> int:
        return self.device.current_snapshot().network_type


class VirtualLocation(LocationProvider):
    """Location provider returning the fix recorded with the current snapshot."""

    def __init__(self, device):
        self.device = device

    def last_known_fix(self, timeout: float) -> Optional[LocationFix]:
        if not self.device.get_location_enabled():
            return None
        return self.device.current_snapshot().fix


class VirtualDevice:
    """
    A phone replaying a drive test.

    Holds the shared reading cursor so that the radio and location providers
    observe the same instant within one collection.
    """

    def __init__(self, name, handler: Optional[CellReadingHandler] = None):
        self.name = name
        self._handler = handler if handler is not None else CellReadingHandler()
        self._handler_mutex = threading.Lock()
        self._permissions_granted = True
        self._location_enabled = True

        self.radio = VirtualRadio(self)
        self.location = VirtualLocation(self)

    # --- Readings [MUST use the _handler_mutex] ---
    def next_snapshot(self):
        with self._handler_mutex:
            return self._handler.next()

    def current_snapshot(self):
        with self._handler_mutex:
            return self._handler.current()

    # --- Simulated device settings ---
    def get_permissions_granted(self):
        return self._permissions_granted

    def set_permissions_granted(self, value):
        logger.info(f"{self.name}: phone state permission {'granted' if value else 'revoked'}")
        self._permissions_granted = value

    def get_location_enabled(self):
        return self._location_enabled

    def set_location_enabled(self, value):
        logger.info(f"{self.name}: location {'enabled' if value else 'disabled'}")
        self._location_enabled = value
