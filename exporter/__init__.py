"""
This module POSTs the raw network log to the collection server, like this

curl -X 'POST' \
  'http://localhost:8080/upload-csv/' \
  -H 'Content-Type: text/csv' \
  --data-binary @network_log.csv

The response body is not processed and the status code is only logged: the
upload counts as done as soon as the request completes.
"""
import logging
import requests

from config import EXPORT_URL, EXPORT_TIMEOUT_S

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPE = "text/csv"


class HttpExporter:
    def __init__(self, url=EXPORT_URL, timeout=EXPORT_TIMEOUT_S):
        self.url = url
        self.timeout = timeout

    def export(self, raw_contents: str) -> bool:
        logger.info(f"Exporting {len(raw_contents.splitlines())} lines to {self.url}")
        try:
            response = requests.post(
                self.url,
                data=raw_contents.encode("utf-8"),
                headers={"Content-Type": CSV_CONTENT_TYPE},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Failed to export data: {e}")
            return False

        if response.ok:
            logger.info(f"Export completed with status {response.status_code}")
        else:
            logger.warning(f"Export completed with status {response.status_code}: {response.text[:200]}")
        return True
