import logging
import os
import sys


def configure_logging(default_level: str = "WARNING") -> None:
    level_name = os.environ.get("POSTERSEARCH_LOG_LEVEL", default_level).upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
