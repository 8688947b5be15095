import sys
import json

from logging_config import setup_logging
from main import build_controller
from virtual_device import VirtualDevice
from config import DEVICE_NAME, LOG_LEVEL, LOG_OUTPUT_FILE

COMMANDS = {
    "once": "run one collection cycle and print its result",
    "probe": "print the current radio/location reading without logging it",
    "status": "print the log line count and the export threshold",
    "export": "export and reset the log now",
}


def usage():
    print("Usage: python3 cli_tool.py <command>")
    for name, description in COMMANDS.items():
        print(f"  {name:<8}{description}")


def run_command(command, controller):
    if command == "once":
        result = controller.run_cycle()
        print(json.dumps(result.model_dump(mode="json")))
        return 0 if result.is_success() else 1
    if command == "probe":
        print(json.dumps(controller.collector.probe()))
        return 0
    if command == "status":
        print(json.dumps({
            "path": controller.store.path,
            "line_count": controller.store.line_count(),
            "threshold": controller.threshold,
        }))
        return 0
    if command == "export":
        result = controller.export_now()
        print(json.dumps(result.model_dump(mode="json")))
        return 0 if result.is_success() else 1
    raise ValueError(f"Invalid command, expected one of {list(COMMANDS)}. Got {command}")


if __name__ == "__main__":
    if len(sys.argv) != 2 or sys.argv[1] not in COMMANDS:
        usage()
        sys.exit(1)

    setup_logging(LOG_LEVEL, LOG_OUTPUT_FILE)
    device = VirtualDevice(DEVICE_NAME)
    try:
        sys.exit(run_command(sys.argv[1], build_controller(device)))
    except Exception as e:
        print(f"An error occurred: {e}")
        sys.exit(1)
