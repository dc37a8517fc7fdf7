import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def setup_logging():
    global _configured
    if _configured:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # requests/urllib3 are noisy at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _configured = True
