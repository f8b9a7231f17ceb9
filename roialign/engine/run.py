"""CLI interface to run RoIAlign on feature maps stored as numpy arrays."""

from __future__ import annotations

import logging

import numpy as np
from absl import app, flags  # pylint: disable=no-name-in-module
from ml_collections import ConfigDict
from torch import Tensor

from roialign.common import ArgsType
from roialign.common.logging import dump_config, setup_logger
from roialign.config import instantiate_classes
from roialign.engine.flag import (
    _CONFIG,
    _DUMP_CONFIG,
    _FEATURES,
    _LOG_FILE,
    _OUTPUT,
    _ROI,
    _SHOW_CONFIG,
)
from roialign.op.roi_align import STATUS_OK, RoIAlign


def main(argv: ArgsType) -> int:
    """Main entry point for the CLI.

    Example to run this script:
    >>> python -m roialign.engine.run --features feat.npy --roi roi.npy \
    >>>     --output pooled.npy --config.pooled_width 7 \
    >>>     --config.pooled_height 7 --config.spatial_scale 0.0625

    Returns:
        int: Exit code, 0 on success.
    """
    del argv
    config: ConfigDict = _CONFIG.value

    logger = logging.getLogger("roialign")
    setup_logger(
        logger,
        _LOG_FILE.value,
        std_out_level=logging.getLevelName(config.log_level),
    )

    if _SHOW_CONFIG.value:
        logger.info("Config:\n%s", config)
    if _DUMP_CONFIG.value is not None:
        dump_config(config, _DUMP_CONFIG.value)
        logger.info("Config written to %s", _DUMP_CONFIG.value)

    features = np.load(_FEATURES.value)
    roi = np.load(_ROI.value)

    op: RoIAlign = instantiate_classes(config.roi_align)
    logger.info("Running %s on features of shape %s", op, features.shape)

    top_blobs: list[Tensor] = []
    status = op.forward_blobs([features, roi], top_blobs)
    if status != STATUS_OK:
        logger.error("RoIAlign failed with status %d", status)
        return 1

    output = top_blobs[0].cpu().numpy()
    np.save(_OUTPUT.value, output)
    logger.info(
        "Pooled features of shape %s written to %s",
        output.shape,
        _OUTPUT.value,
    )
    return 0


def entrypoint() -> None:
    """Entry point for the CLI."""
    flags.mark_flags_as_required(["features", "roi", "output"])
    app.run(main)


if __name__ == "__main__":
    entrypoint()
