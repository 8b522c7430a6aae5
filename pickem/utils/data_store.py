import json
import logging
import os
import time
from functools import wraps

import requests

from pickem.models import Entry, MalformedRecordError

logger = logging.getLogger(__name__)

POOLS_DOCUMENT = "pools.json"
RESULTS_DOCUMENT = "results.json"
ENTRIES_DOCUMENT = "entries.json"


class DataSourceError(Exception):
    """Raised when a data document cannot be fetched or parsed."""

    pass


def retry_decorator(max_retries=3, base_delay=1.0, backoff_factor=2.0):
    """
    Decorator to retry HTTP fetches with exponential backoff

    Retries on connection errors, timeouts, 429 and 5xx responses.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            for attempt in range(max_retries):
                delay = base_delay * (backoff_factor**attempt)
                try:
                    response = func(self, *args, **kwargs)
                except (
                    requests.exceptions.ConnectionError,
                    requests.exceptions.Timeout,
                ) as e:
                    logger.warning(
                        f"Request failed: {e}. Waiting {delay}s before retry {attempt + 1}/{max_retries}"
                    )
                    if attempt < max_retries - 1:
                        time.sleep(delay)
                        continue
                    raise DataSourceError(f"Request failed after {max_retries} attempts: {e}")

                if response.status_code == 429 or response.status_code >= 500:
                    logger.warning(
                        f"Server returned {response.status_code}. Waiting {delay}s before retry {attempt + 1}/{max_retries}"
                    )
                    if attempt < max_retries - 1:
                        time.sleep(delay)
                    continue

                return response

            raise DataSourceError(f"Max retries ({max_retries}) exceeded")

        return wrapper

    return decorator


class DataStore:
    """
    Read-only access to the pools, results and entries documents.

    Documents are read from a local directory, or fetched over HTTP when a
    base URL is configured. Nothing is ever written back.
    """

    def __init__(self, data_dir=None, base_url=None, timeout=10):
        self.data_dir = data_dir
        self.base_url = base_url.rstrip("/") + "/" if base_url else None
        self.timeout = timeout

        if not self.data_dir and not self.base_url:
            raise ValueError("DataStore needs a data_dir or a base_url")

        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "Pickem-Pool/1.0"})

    @classmethod
    def from_config(cls, config):
        """Build a store from a Flask config mapping"""
        return cls(
            data_dir=config.get("DATA_DIR"),
            base_url=config.get("DATA_BASE_URL"),
            timeout=config.get("DATA_REQUEST_TIMEOUT", 10),
        )

    @property
    def source(self):
        return self.base_url or self.data_dir

    @retry_decorator(max_retries=3, base_delay=1.0)
    def _make_request(self, url):
        # Cache-busting parameter so static hosts serve the latest document
        return self.session.get(
            url, params={"v": int(time.time() * 1000)}, timeout=self.timeout
        )

    def _fetch(self, name):
        url = self.base_url + name
        response = self._make_request(url)

        if response.status_code != 200:
            raise DataSourceError(f"HTTP error {response.status_code} fetching {url}")

        try:
            return response.json()
        except ValueError as e:
            raise DataSourceError(f"Invalid JSON in {url}: {e}")

    def _read(self, name):
        path = os.path.join(self.data_dir, name)
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            raise DataSourceError(f"Data file not found: {path}")
        except json.JSONDecodeError as e:
            raise DataSourceError(f"Invalid JSON in {path}: {e}")

    def load_raw(self, name):
        """
        Load one document as parsed JSON

        Args:
            name: Document file name, e.g. "pools.json"

        Returns:
            The parsed JSON value

        Raises:
            DataSourceError: If the document is missing, unreachable or not JSON
        """
        logger.debug(f"Loading {name} from {self.source}")
        if self.base_url:
            return self._fetch(name)
        return self._read(name)


def normalize_entries(data):
    """
    Normalize either entries-document shape into a flat list of entries

    The canonical shape is a list of {user, poolId, picks}. The pool-keyed
    shape {poolId: [{user, picks}]} is also accepted; its records take their
    pool id from the key.

    Args:
        data: Parsed entries.json

    Returns:
        list: Entry objects in document order
    """
    if data is None:
        return []

    if isinstance(data, list):
        return [Entry.from_dict(record) for record in data]

    if isinstance(data, dict):
        entries = []
        for pool_id, records in data.items():
            if not isinstance(records, list):
                raise MalformedRecordError(
                    f"Entries for pool {pool_id} must be a list"
                )
            entries.extend(
                Entry.from_dict(record, pool_id=str(pool_id)) for record in records
            )
        return entries

    raise MalformedRecordError("Entries document must be a list or an object keyed by pool id")
