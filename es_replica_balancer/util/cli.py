# Copyright (c) 2021-2023, Crate.io Inc.
# Distributed under the terms of the AGPLv3 license, see LICENSE.
import logging
import typing as t

import click

from es_replica_balancer.util.common import setup_logging

logger = logging.getLogger(__name__)


def boot_click(ctx: click.Context, verbose: bool = False, debug: bool = False):
    """
    Bootstrap the CLI application.
    """

    # Adjust log level according to `verbose` / `debug` flags.
    log_level = logging.INFO
    if debug:
        log_level = logging.DEBUG

    # Setup logging, according to `verbose` / `debug` flags.
    setup_logging(level=log_level, verbose=verbose, debug=debug)


def error_level_by_debug(debug: bool):
    if debug:
        return logger.exception
    else:
        return logger.error


def running_with_debug(ctx: click.Context) -> bool:
    return (
        (ctx.parent and ctx.parent.params.get("debug", False))
        or (ctx.parent and ctx.parent.parent and ctx.parent.parent.params.get("debug", False))
        or False
    )


def error_logger(about: t.Union[click.Context, bool]) -> t.Callable:
    if isinstance(about, click.Context):
        return error_level_by_debug(running_with_debug(about))
    if isinstance(about, bool):
        return error_level_by_debug(about)
    raise TypeError(f"Unknown type for argument: {about}")
