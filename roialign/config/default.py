"""Default configuration of the RoIAlign operator."""

from __future__ import annotations

from ml_collections import ConfigDict

from .config_dict import class_config


def get_config() -> ConfigDict:
    """Returns the default RoIAlign configuration.

    The operator options are immutable for the lifetime of an operator
    instance. 'num_threads' sizes the worker pool of the pooling pass and
    'log_level' sets the console logging level of the command line tool.

    Returns:
        ConfigDict: The configuration with the operator options and a
            'roi_align' class config that can be passed to
            'instantiate_classes'.
    """
    config = ConfigDict()

    config.pooled_width = 0
    config.pooled_height = 0
    config.spatial_scale = 1.0
    config.sampling_ratio = 0
    config.aligned = True
    config.num_threads = 1
    config.log_level = "INFO"

    config.roi_align = class_config(
        "roialign.op.roi_align.RoIAlign",
        pooled_width=config.get_ref("pooled_width"),
        pooled_height=config.get_ref("pooled_height"),
        spatial_scale=config.get_ref("spatial_scale"),
        sampling_ratio=config.get_ref("sampling_ratio"),
        aligned=config.get_ref("aligned"),
        num_threads=config.get_ref("num_threads"),
    )
    return config
