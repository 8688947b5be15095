import pytest

from collector import SampleCollector
from collector.providers import LocationProvider, RadioInfoProvider
from collector.sample import CellFamily, CellIdentity, CellInfo, LocationFix, SignalStrength
from controller import CollectionCycleController
from log_store import LogStore

LTE_NETWORK_TYPE = 13


def lte_cell(rsrp=-92, rsrq=-10, cell_id=12345, registered=True):
    return CellInfo(
        registered=registered,
        family=CellFamily.LTE,
        signal=SignalStrength(rsrp=rsrp, rsrq=rsrq),
        identity=CellIdentity(cell_id=cell_id),
    )


def nr_cell(rsrp=-84, rsrq=None, cell_id=551023, registered=True):
    return CellInfo(
        registered=registered,
        family=CellFamily.NR,
        signal=SignalStrength(rsrp=rsrp, rsrq=rsrq),
        identity=CellIdentity(cell_id=cell_id),
    )


class FakeRadio(RadioInfoProvider):
    def __init__(self, cells=None, network_type=LTE_NETWORK_TYPE, error=None):
        self.cells = cells if cells is not None else []
        self._network_type = network_type
        self.error = error

    def list_cells(self):
        if self.error is not None:
            raise self.error
        return list(self.cells)

    def network_type(self):
        return self._network_type


class FakeLocation(LocationProvider):
    def __init__(self, fix=None, error=None):
        self.fix = fix
        self.error = error
        self.timeouts = []

    def last_known_fix(self, timeout):
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return self.fix


class FakeExporter:
    def __init__(self, result=True, error=None):
        self.result = result
        self.error = error
        self.payloads = []

    def export(self, raw_contents):
        self.payloads.append(raw_contents)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def radio():
    return FakeRadio(cells=[lte_cell()])


@pytest.fixture
def location():
    return FakeLocation(fix=LocationFix(latitude=-23.5505, longitude=-46.6333))


@pytest.fixture
def collector(radio, location):
    return SampleCollector(radio=radio, location=location, location_timeout_s=5)


@pytest.fixture
def store(tmp_path):
    return LogStore(directory=str(tmp_path), filename="network_log.csv")


@pytest.fixture
def exporter():
    return FakeExporter()


@pytest.fixture
def controller(collector, store, exporter):
    return CollectionCycleController(
        collector=collector,
        store=store,
        exporter=exporter,
        threshold=10,
        retain_on_export_failure=False,
    )
