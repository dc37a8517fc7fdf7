import time
import threading
import logging
import requests

logger = logging.getLogger("tracker.http")


class ThrottledSession:
    """requests.Session wrapper that spaces calls by ``min_interval_sec``.

    Failed calls are logged and raised to the caller; there is no retry.
    """

    def __init__(
        self,
        min_interval_sec: float,
        headers: dict | None = None,
        timeout: float = 10.0,
    ):
        self.min_interval_sec = min_interval_sec
        self.timeout = timeout
        self._last_request_ts = 0.0
        self._lock = threading.Lock()
        self.session = requests.Session()
        if headers:
            self.session.headers.update(headers)

    def _wait_turn(self):
        with self._lock:
            now = time.time()
            sleep_for = self.min_interval_sec - (now - self._last_request_ts)
            if sleep_for > 0:
                time.sleep(sleep_for)
            self._last_request_ts = time.time()

    def get(self, url, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        self._wait_turn()

        try:
            resp = self.session.get(url, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error(
                "request_failed",
                extra={
                    "url": url,
                    "error": str(exc),
                },
            )
            raise

        return resp
