"""Test logging."""

import logging
import os
import shutil
import tempfile
import unittest

from roialign.common.logging import dump_config, setup_logger
from roialign.config.default import get_config


class TestLogging(unittest.TestCase):
    """Test cases for logging."""

    def test_setup_logger(self) -> None:
        """Test the setup_logger function."""
        logger = logging.getLogger("roialign.common.logging")
        tmpdir = tempfile.mkdtemp()
        filepath = os.path.join(tmpdir, "logs", "test.log")
        setup_logger(
            logger, filepath=filepath, color=False, std_out_level=logging.DEBUG
        )
        logger.debug("This is a test")
        logger.info("This is a test")
        logger.warning("This is a test")
        logger.error("This is a test")

        with open(filepath, "r", encoding="utf-8") as f:
            lines = f.readlines()
        assert len(lines) == 4
        assert "DEBUG" in lines[0]
        assert "INFO" in lines[1]
        assert "WARNING" in lines[2]
        assert "ERROR" in lines[3]

        setup_logger(
            logger, filepath=filepath, color=True, std_out_level=logging.INFO
        )
        assert len(logger.handlers) == 2
        logger.critical("This is a test")

        with open(filepath, "r", encoding="utf-8") as f:
            lines = f.readlines()
        assert len(lines) == 5
        assert "CRITICAL" in lines[4]

        setup_logger(logger)
        assert len(logger.handlers) == 1
        shutil.rmtree(tmpdir)

    def test_dump_config(self) -> None:
        """Test the dump_config function."""
        tmpdir = tempfile.mkdtemp()
        filepath = os.path.join(tmpdir, "config.yaml")
        dump_config(get_config(), filepath)

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
        assert "pooled_width" in content
        assert "sampling_ratio" in content
        shutil.rmtree(tmpdir)
