import logging
from collector.providers import RadioInfoProvider, LocationProvider
from collector.sample import (
    CellFamily,
    CellIdentity,
    CellInfo,
    LocationFix,
    NetworkSample,
    SignalStrength,
)
from config import LOCATION_TIMEOUT_S

logger = logging.getLogger(__name__)

NR_TECHNOLOGY_LABEL = "5G (NR)"
UNKNOWN_TECHNOLOGY_LABEL = "Unknown"

# Telephony network type codes -> generation label
NETWORK_TYPE_NAMES = {
    1: "2G (GPRS)",
    2: "2G (EDGE)",
    4: "2G (CDMA)",
    7: "2G (1xRTT)",
    11: "2G (iDEN)",
    3: "3G (UMTS)",
    5: "3G (EVDO)",  # EVDO_0
    6: "3G (EVDO)",  # EVDO_A
    12: "3G (EVDO)",  # EVDO_B
    8: "3G (HSPA)",  # HSDPA
    9: "3G (HSPA)",  # HSUPA
    10: "3G (HSPA)",
    14: "3G (eHRPD)",
    15: "3G (HSPA+)",
    13: "4G (LTE)",
    20: NR_TECHNOLOGY_LABEL,
}

# Short labels used by the on-demand probe
PROBE_FAMILY_LABELS = {
    CellFamily.LTE: "LTE",
    CellFamily.NR: "NR",
}

# Scanned in list order, first registered cell of one of these families wins
SUPPORTED_FAMILIES = (CellFamily.LTE, CellFamily.NR)


class CollectionError(Exception):
    """The radio could not be enumerated (subsystem failure or permission denied)."""


class LocationError(Exception):
    """The location lookup failed (only raised by the on-demand probe)."""


def get_network_type_name(network_type: int) -> str:
    return NETWORK_TYPE_NAMES.get(network_type, UNKNOWN_TECHNOLOGY_LABEL)


class SampleCollector:
    def __init__(
        self,
        radio: RadioInfoProvider,
        location: LocationProvider,
        location_timeout_s: float = LOCATION_TIMEOUT_S,
    ):
        self.radio = radio
        self.location = location
        self.location_timeout_s = location_timeout_s

    # --- Radio ---
    def _list_cells(self):
        try:
            return self.radio.list_cells() or []
        except PermissionError as e:
            raise CollectionError(f"Permission denied reading cell info: {e}") from e
        except Exception as e:
            raise CollectionError(f"Failed to enumerate cell info: {e}") from e

    def serving_cell(self):
        """Return the first registered LTE/NR cell, or None."""
        for cell_info in self._list_cells():
            if cell_info.registered and cell_info.family in SUPPORTED_FAMILIES:
                return cell_info
        return None

    def _technology_label(self, cell_info: CellInfo) -> str:
        if cell_info.family == CellFamily.NR:
            return NR_TECHNOLOGY_LABEL
        try:
            network_type = self.radio.network_type()
        except Exception as e:
            raise CollectionError(f"Failed to read network type: {e}") from e
        return get_network_type_name(network_type)

    # --- Location ---
    def _last_known_fix(self, strict=False):
        try:
            return self.location.last_known_fix(self.location_timeout_s)
        except Exception as e:
            if strict:
                raise LocationError(f"Failed to get location: {e}") from e
            # location is best effort, the sample falls back to (0.0, 0.0)
            logger.warning(f"Failed to get location: {e}")
            return None

    # --- Collection ---
    def _read(self, strict_location=False):
        """Return (serving cell or None, location fix or None)."""
        cell_info = self.serving_cell()
        if cell_info is None:
            logger.debug("No registered LTE/NR cell found")
        fix = self._last_known_fix(strict=strict_location)
        if fix is None:
            logger.debug("No location fix available")
        return cell_info, fix

    def collect(self) -> NetworkSample:
        cell_info, fix = self._read()

        fields = {}
        if cell_info is not None:
            fields.update(
                rsrp=cell_info.signal.rsrp,
                rsrq=cell_info.signal.rsrq or 0,
                cell_id=cell_info.identity.cell_id or 0,
                technology=self._technology_label(cell_info),
            )
        if fix is not None:
            fields.update(latitude=fix.latitude, longitude=fix.longitude)

        sample = NetworkSample(**fields)
        logger.info(
            f"Collected sample: technology={sample.technology or '-'} rsrp={sample.rsrp} "
            f"rsrq={sample.rsrq} cell_id={sample.cell_id}"
        )
        return sample

    def probe(self) -> dict:
        """
        Snapshot of the current radio and location state, without logging it.

        Uses the short family label ("LTE"/"NR") instead of the generation label.
        A missing fix reads as (0.0, 0.0), but a failing location lookup raises
        LocationError instead of being absorbed as it is by collect().
        """
        cell_info, fix = self._read(strict_location=True)
        info = {
            "rsrp": 0,
            "rsrq": 0,
            "cellId": 0,
            "technology": "",
            "latitude": 0.0,
            "longitude": 0.0,
        }
        if cell_info is not None:
            info.update(
                rsrp=cell_info.signal.rsrp,
                rsrq=cell_info.signal.rsrq or 0,
                cellId=cell_info.identity.cell_id or 0,
                technology=PROBE_FAMILY_LABELS[cell_info.family],
            )
        if fix is not None:
            info.update(latitude=fix.latitude, longitude=fix.longitude)
        return info


__all__ = [
    "CellFamily",
    "CellIdentity",
    "CellInfo",
    "CollectionError",
    "LocationFix",
    "LocationError",
    "LocationProvider",
    "NetworkSample",
    "RadioInfoProvider",
    "SampleCollector",
    "SignalStrength",
    "get_network_type_name",
]
