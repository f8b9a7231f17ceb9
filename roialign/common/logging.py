"""This module contains logging utility functions.

We provide utilities for setting up a logger with a colored console output and
an optional log file.
"""

from __future__ import annotations

import logging
import os
import sys

from ml_collections import ConfigDict
from termcolor import colored

from roialign.config import copy_and_resolve_references


class _ColorFormatter(logging.Formatter):
    """Formatter for terminal messages with colors."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        """Add appropriate color to log message."""
        log = super().formatMessage(record)
        if record.levelno == logging.WARNING:
            prefix = colored("WARNING", "red", attrs=["blink"])
        elif record.levelno in [logging.ERROR, logging.CRITICAL]:
            prefix = colored("ERROR", "red", attrs=["blink", "underline"])
        else:
            return log
        return prefix + " " + log


def setup_logger(
    logger: logging.Logger,
    filepath: None | str = None,
    color: bool = True,
    std_out_level: int = logging.INFO,
) -> None:
    """Configure logging for RoIAlign.

    Args:
        logger (logging.Logger): The logger instance to be configured.
        filepath (None | str, optional): The filepath to the log file that
            stores the console output. Defaults to None.
        color (bool, optional): Whether to use a colored console output.
            Defaults to True.
        std_out_level (int, optional): Which logging level to output to the
            console. Defaults to logging.INFO. Note that all levels will be
            logged to file.
    """
    # remove handlers to re-define behavior
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(logging.DEBUG if filepath is not None else std_out_level)

    plain_formatter = logging.Formatter(
        "[%(asctime)s] RoIAlign %(levelname)s: %(message)s",
        datefmt="%m/%d %H:%M:%S",
    )

    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setLevel(std_out_level)
    if color:
        formatter = _ColorFormatter(
            colored("[%(asctime)s RoIAlign]: ", "green") + "%(message)s",
            datefmt="%m/%d %H:%M:%S",
        )
        ch.setFormatter(formatter)
    else:
        ch.setFormatter(plain_formatter)
    logger.addHandler(ch)

    if filepath is not None:
        dirname = os.path.dirname(filepath)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        fh = logging.FileHandler(filepath)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(plain_formatter)
        logger.addHandler(fh)


def dump_config(config: ConfigDict, config_file: str) -> None:
    """Dump the configuration to a yaml file.

    Args:
        config (ConfigDict): The configuration to dump.
        config_file (str): The path to the file to dump the configuration to.
    """
    with open(config_file, "w", encoding="utf-8") as f:
        f.write(copy_and_resolve_references(config).to_yaml())
