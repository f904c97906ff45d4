"""
Entry point for imports dispatched to a spawned OS process.

The child starts from a fresh interpreter: it reads config, opens its
own database engine and receives nothing but the JSON payload.
"""

import json
import logging
import sys

import config
from import_engine.errors import FatalImportError

logger = logging.getLogger(__name__)


def main(payload_json: str) -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(processName)s %(name)s %(levelname)s %(message)s",
    )
    from worker.tasks import execute

    try:
        execute(json.loads(payload_json))
    except FatalImportError:
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv[1])
