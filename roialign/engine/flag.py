"""Engine Flags."""

from absl import flags
from ml_collections import config_flags

from roialign.config.default import get_config

_CONFIG = config_flags.DEFINE_config_dict(
    "config", get_config(), "RoIAlign configuration."
)
_FEATURES = flags.DEFINE_string(
    "features", default=None, help="Path to a .npy feature map (C, H, W)."
)
_ROI = flags.DEFINE_string(
    "roi", default=None, help="Path to a .npy RoI (x1, y1, x2, y2)."
)
_OUTPUT = flags.DEFINE_string(
    "output", default=None, help="Path of the pooled .npy output."
)
_LOG_FILE = flags.DEFINE_string(
    "log_file", default=None, help="If set, also write the log to this file."
)
_SHOW_CONFIG = flags.DEFINE_bool(
    "print-config", default=False, help="If set, prints the configuration."
)
_DUMP_CONFIG = flags.DEFINE_string(
    "dump_config",
    default=None,
    help="If set, writes the resolved configuration to this yaml file.",
)

__all__ = [
    "_CONFIG",
    "_FEATURES",
    "_ROI",
    "_OUTPUT",
    "_LOG_FILE",
    "_SHOW_CONFIG",
    "_DUMP_CONFIG",
]
