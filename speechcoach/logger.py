import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger("speechcoach.timed")


def configure_logging(level: Optional[str] = None) -> None:
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@contextmanager
def timed(label: str) -> Iterator[None]:
    t0 = time.time()
    try:
        yield
    finally:
        dt = int((time.time() - t0) * 1000)
        logger.debug("[timed] %s: %d ms", label, dt)
