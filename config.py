import os
from dotenv import load_dotenv

load_dotenv(override=True)

# Define the device details
DEVICE_NAME = os.getenv('DEVICE_NAME', 'virtual-phone')

# Define the periodic work details
WORK_NAME = os.getenv('WORK_NAME', 'NetworkLogger')
COLLECTION_INTERVAL_S = int(os.getenv('COLLECTION_INTERVAL_S', 15 * 60))  # 15 minutes
REQUIRE_NETWORK = bool(int(os.getenv('REQUIRE_NETWORK', 1)))

# retry policy (exponential backoff)
RETRY_BACKOFF_INITIAL_S = int(os.getenv('RETRY_BACKOFF_INITIAL_S', 30))
RETRY_BACKOFF_MAX_S = int(os.getenv('RETRY_BACKOFF_MAX_S', 5 * 60 * 60))  # 5 hours

# local log
LOG_DIR = os.getenv('LOG_DIR', 'data/')
LOG_FILE = os.getenv('LOG_FILE', 'network_log.csv')
LOG_HEADER = "timestamp,rsrp,rsrq,cellId,technology,latitude,longitude"

# export
EXPORT_THRESHOLD = int(os.getenv('EXPORT_THRESHOLD', 10))  # header line included
EXPORT_URL = os.getenv('EXPORT_URL', 'http://localhost:8080/upload-csv/')
EXPORT_TIMEOUT_S = float(os.getenv('EXPORT_TIMEOUT_S', 30))
RETAIN_LOG_ON_EXPORT_FAILURE = bool(int(os.getenv('RETAIN_LOG_ON_EXPORT_FAILURE', 0)))

# location
LOCATION_TIMEOUT_S = float(os.getenv('LOCATION_TIMEOUT_S', 10))

# dataset consumption (virtual device)
PATH_TO_DATASET = os.getenv('PATH_TO_DATASET', 'dataset/')

# diagnostics
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_OUTPUT_FILE = os.getenv('LOG_OUTPUT_FILE') or None
