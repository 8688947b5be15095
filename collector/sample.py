import enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _now():
    return datetime.now().replace(microsecond=0)


# --- Provider Payloads ---
class CellFamily(str, enum.Enum):
    GSM = "gsm"
    CDMA = "cdma"
    WCDMA = "wcdma"
    TDSCDMA = "tdscdma"
    LTE = "lte"
    NR = "nr"


class SignalStrength(BaseModel):
    rsrp: int  # dBm, NR cells report their ss/csi power here
    rsrq: Optional[int] = None  # dB, NR csi-rsrq may be unavailable


class CellIdentity(BaseModel):
    cell_id: Optional[int] = Field(default=None, ge=0)  # ci for LTE, nci for NR


class CellInfo(BaseModel):
    registered: bool
    family: CellFamily
    signal: SignalStrength
    identity: CellIdentity = CellIdentity()


class LocationFix(BaseModel):
    latitude: float
    longitude: float


# --- Log Record ---
class NetworkSample(BaseModel):
    timestamp: datetime = Field(default_factory=_now)
    rsrp: int = 0
    rsrq: int = 0
    cell_id: int = Field(default=0, ge=0)
    technology: str = ""
    latitude: float = 0.0  # (0.0, 0.0) means no fix
    longitude: float = 0.0

    def has_location(self) -> bool:
        return (self.latitude, self.longitude) != (0.0, 0.0)

    def to_csv_fields(self) -> list:
        return [
            self.timestamp.strftime(TIMESTAMP_FORMAT),
            self.rsrp,
            self.rsrq,
            self.cell_id,
            self.technology,
            self.latitude,
            self.longitude,
        ]
