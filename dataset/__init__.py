import os
import logging
from typing import List, Optional
import pandas as pd
from pydantic import BaseModel

from collector.sample import CellFamily, CellIdentity, CellInfo, LocationFix, SignalStrength
from config import PATH_TO_DATASET

logger = logging.getLogger(__name__)

# --- Recorded reading columns ---
COLUMN_NAMES = [
    "snapshot",
    "registered",
    "family",
    "rsrp",
    "rsrq",
    "cell_id",
    "network_type",
    "latitude",
    "longitude",
]

UNKNOWN_NETWORK_TYPE = 0


class ReadingSnapshot(BaseModel):
    """Everything the radio and the location subsystem reported at one instant."""
    cells: List[CellInfo] = []
    network_type: int = UNKNOWN_NETWORK_TYPE
    fix: Optional[LocationFix] = None


# --- Converters ---
def _optional_int(value):
    return None if pd.isna(value) else int(value)


def _row_to_cell_info(row) -> Optional[CellInfo]:
    # rows without a family only carry the snapshot's location
    if pd.isna(row["family"]) or pd.isna(row["rsrp"]):
        return None
    return CellInfo(
        registered=bool(int(row["registered"])),
        family=CellFamily(str(row["family"]).strip().lower()),
        signal=SignalStrength(rsrp=int(row["rsrp"]), rsrq=_optional_int(row["rsrq"])),
        identity=CellIdentity(cell_id=_optional_int(row["cell_id"])),
    )


def _rows_to_snapshot(rows) -> ReadingSnapshot:
    first = rows.iloc[0]
    fix = None
    if not pd.isna(first["latitude"]) and not pd.isna(first["longitude"]):
        fix = LocationFix(latitude=float(first["latitude"]), longitude=float(first["longitude"]))

    cells = []
    for _, row in rows.iterrows():
        cell_info = _row_to_cell_info(row)
        if cell_info is not None:
            cells.append(cell_info)

    network_type = _optional_int(first["network_type"])
    return ReadingSnapshot(
        cells=cells,
        network_type=UNKNOWN_NETWORK_TYPE if network_type is None else network_type,
        fix=fix,
    )


class CellReadingHandler:
    """Replays recorded drive-test readings, one snapshot per radio query."""

    def _init_snapshots(self):
        csv_files = sorted(f for f in os.listdir(self.path) if f.endswith('.csv'))

        self.snapshots = []
        for filename in csv_files:
            df = pd.read_csv(os.path.join(self.path, filename))

            missing = set(COLUMN_NAMES) - set(df.columns)
            if missing:
                raise ValueError(f"The readings file {filename} is missing columns {sorted(missing)}")

            # keep the recording order of the snapshots
            for _, rows in df.groupby("snapshot", sort=False):
                self.snapshots.append(_rows_to_snapshot(rows))

        if not self.snapshots:
            raise ValueError(f"No recorded readings found in {self.path}")
        logger.info(f"Loaded {len(self.snapshots)} snapshots from {len(csv_files)} files")

    def __init__(self, path=PATH_TO_DATASET) -> None:
        self.path = path
        self.counter = 0
        self._current = None
        self._init_snapshots()

    def next(self) -> ReadingSnapshot:
        if self.counter >= len(self.snapshots):
            self.counter = 0

        self._current = self.snapshots[self.counter]
        self.counter += 1
        return self._current

    def current(self) -> ReadingSnapshot:
        if self._current is None:
            return self.next()
        return self._current
