"""HTTP fetcher for the FOSDEM schedule XML."""
import logging
import time

import requests

logger = logging.getLogger(__name__)


class FosdemScheduleFetcher:
    """Downloads the schedule document published by fosdem.org."""

    DEFAULT_URL = "https://fosdem.org/2026/schedule/xml"

    def __init__(self, url: str = DEFAULT_URL, timeout: int = 30, max_retries: int = 3):
        """
        Initialize the schedule fetcher.

        Args:
            url: Schedule XML URL
            timeout: HTTP request timeout in seconds (default: 30)
            max_retries: Number of attempts before giving up (default: 3)
        """
        self.url = url
        self.timeout = timeout
        self.max_retries = max_retries

    def fetch_document(self) -> str:
        """
        Fetch the schedule XML with retry logic.

        Returns:
            Schedule XML as string

        Raises:
            requests.RequestException: If all retry attempts fail
        """
        base_delay = 1  # seconds

        for attempt in range(self.max_retries):
            try:
                logger.info(
                    f"Fetching schedule from {self.url} "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                response = requests.get(self.url, timeout=self.timeout)
                response.raise_for_status()
                return response.text

            except requests.RequestException as e:
                if attempt < self.max_retries - 1:
                    delay = base_delay * (2 ** attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{self.max_retries}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.max_retries} retry attempts failed. Last error: {e}"
                    )
                    raise
