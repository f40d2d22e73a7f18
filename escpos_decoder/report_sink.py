# Report uploader for ESC/POS Decoder
# Posts decode reports to an HTTP endpoint with retries

import logging
import time
from typing import Any, Dict, Optional

import requests

from . import __version__
from .report import Report

logger = logging.getLogger(__name__)


class ReportUploader:
    """REST client that delivers reports as JSON"""

    def __init__(self, url: str, api_key: Optional[str] = None, timeout: int = 30,
                 max_retries: int = 3, retry_delay: float = 2):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay  # seconds, multiplied by attempt number
        self.session = requests.Session()

        if api_key:
            self.session.headers.update({'Authorization': f'Bearer {api_key}'})

        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': f'ESCPOS-Decoder/{__version__}'
        })

    def upload(self, report: Report) -> Dict[str, Any]:
        """POST one report; never raises, returns a result dict"""
        payload = report.to_dict()

        for attempt in range(self.max_retries):
            try:
                response = self.session.post(self.url, json=payload, timeout=self.timeout)

                if 200 <= response.status_code < 300:
                    logger.info("Report uploaded to %s (%d items)", self.url, report.summary.total_items)
                    return {'success': True, 'status_code': response.status_code}

                if response.status_code < 500:
                    # Client error - retrying won't help
                    logger.error("Upload rejected with %d: %s", response.status_code, response.text)
                    return {
                        'success': False,
                        'error': response.text,
                        'status_code': response.status_code,
                        'retry': False
                    }

                logger.warning(f"Server error {response.status_code}, retry {attempt + 1}/{self.max_retries}")

            except requests.exceptions.Timeout:
                logger.warning(f"Timeout, retry {attempt + 1}/{self.max_retries}")

            except requests.exceptions.ConnectionError:
                logger.warning(f"Connection error, retry {attempt + 1}/{self.max_retries}")

            except requests.exceptions.RequestException as e:
                logger.error(f"Unexpected upload error: {e}")
                return {'success': False, 'error': str(e), 'status_code': 0, 'retry': False}

            if attempt + 1 < self.max_retries:
                time.sleep(self.retry_delay * (attempt + 1))

        logger.error("Giving up on %s after %d attempts", self.url, self.max_retries)
        return {
            'success': False,
            'error': 'Max retries exceeded',
            'status_code': 0,
            'retry': True
        }
