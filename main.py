import time
import logging
from collector import SampleCollector
from controller import CollectionCycleController
from exporter import HttpExporter
from log_store import LogStore
from logging_config import setup_logging
from trigger import PeriodicTrigger, ExistingWorkPolicy, enqueue_unique_periodic_work, cancel_unique_work
from virtual_device import VirtualDevice
from config import DEVICE_NAME, WORK_NAME, LOG_LEVEL, LOG_OUTPUT_FILE

logger = logging.getLogger(__name__)


def build_controller(device):
    collector = SampleCollector(radio=device.radio, location=device.location)
    return CollectionCycleController(
        collector=collector,
        store=LogStore(),
        exporter=HttpExporter(),
    )


def schedule_network_logger(controller, policy=ExistingWorkPolicy.KEEP):
    trigger = PeriodicTrigger(name=WORK_NAME, work=controller.run_cycle)
    return enqueue_unique_periodic_work(trigger, policy=policy)


if __name__ == "__main__":
    setup_logging(LOG_LEVEL, LOG_OUTPUT_FILE)

    device = VirtualDevice(DEVICE_NAME)
    controller = build_controller(device)
    trigger = schedule_network_logger(controller)
    logger.info(f"Network logger started for device {device.name}")

    try:
        while trigger.is_running():
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Exiting network logger...")
    finally:
        cancel_unique_work(WORK_NAME)
