"""
Sensor capabilities consumed by the sample collector.

A provider wraps whatever actually talks to the radio and the positioning
subsystem. The virtual device replays recorded readings; tests use fixtures.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from collector.sample import CellInfo, LocationFix


class RadioInfoProvider(ABC):
    """Read access to the modem's view of the visible cells."""

    @abstractmethod
    def list_cells(self) -> List[CellInfo]:
        """
        Return every currently visible cell, serving cell included.

        Raises:
            PermissionError: the process may not read radio information.
            Exception: any other failure of the radio subsystem.
        """
        pass

    @abstractmethod
    def network_type(self) -> int:
        """Return the data network type code (telephony numbering)."""
        pass


class LocationProvider(ABC):
    """Read access to the last position fix."""

    @abstractmethod
    def last_known_fix(self, timeout: float) -> Optional[LocationFix]:
        """
        Return the last known fix, waiting at most ``timeout`` seconds.

        Returns None when no fix is available.
        """
        pass
