"""HTTP helpers for reading the published CSV exports from a base URL.

Remote datasets are fetched through one pooled ``requests`` session whose
adapters retry transient failures (429 and 5xx) with exponential backoff.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry as URLRetry

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)


@dataclass(frozen=True)
class RetryStrategy:
    """How often and how patiently a failed GET is retried.

    With the default backoff of 0.5 the waits are 0.5s, 1s, 2s.
    """

    max_retries: int = 3
    backoff_factor: float = 0.5
    status_forcelist: Tuple[int, ...] = RETRY_STATUSES

    def get_retry_object(self) -> URLRetry:
        return URLRetry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=self.status_forcelist,
            allowed_methods=frozenset({"GET", "HEAD"}),
            raise_on_status=False,
        )


class SessionManager:
    """Lazily created session shared by the three concurrent loads.

    The first access builds the session under a lock, so threads that race
    for it all get the same one.

    Use as a context manager so the pool is closed once the join is done::

        with SessionManager(RetryStrategy(max_retries=5)) as sm:
            text = fetch_text(sm.session, url)
    """

    def __init__(self, retry_strategy: Optional[RetryStrategy] = None,
                 pool_size: int = 3):
        self.retry_strategy = retry_strategy or RetryStrategy()
        self.pool_size = pool_size
        self._session: Optional[requests.Session] = None
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        with self._lock:
            if self._session is None:
                adapter = HTTPAdapter(
                    max_retries=self.retry_strategy.get_retry_object(),
                    pool_connections=1,
                    pool_maxsize=self.pool_size,
                )
                session = requests.Session()
                for scheme in ("http://", "https://"):
                    session.mount(scheme, adapter)
                self._session = session
            return self._session

    def close(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def is_remote(location: str) -> bool:
    """True for http(s) URLs."""
    return location.lower().startswith(("http://", "https://"))


def fetch_text(session: requests.Session, url: str, timeout: float = 30,
               encoding: str = "utf-8-sig") -> str:
    """Download a CSV export and decode it.

    The default encoding strips the byte-order mark that spreadsheet exports
    put in front of the first header.

    Raises:
        requests.RequestException: On connection errors, or a non-2xx status
            once the retries are used up
    """
    logger.debug("GET %s", url)
    response = session.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content.decode(encoding)
