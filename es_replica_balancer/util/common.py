# Copyright (c) 2023, Crate.io Inc.
# Distributed under the terms of the AGPLv3 license, see LICENSE.
import logging
import os

import colorlog
from colorlog.escape_codes import escape_codes

from es_replica_balancer.util.data import asbool


def setup_logging(level=logging.INFO, verbose: bool = False, debug: bool = False, width: int = 36):
    reset = escape_codes["reset"]
    log_format = f"%(asctime)-15s [%(name)-{width}s] %(log_color)s%(levelname)-8s:{reset} %(message)s"

    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(log_format))

    logging.basicConfig(format=log_format, level=level, handlers=[handler])

    # Only show HTTP connection details when asked for.
    if debug and asbool(os.environ.get("DEBUG_URLLIB3")):
        logging.getLogger("urllib3.connectionpool").setLevel(logging.DEBUG)
    else:
        logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)

    if verbose:
        logging.getLogger("es_replica_balancer").setLevel(logging.DEBUG)
