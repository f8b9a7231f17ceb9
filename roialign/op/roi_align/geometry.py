"""Region geometry in feature map coordinates."""

from __future__ import annotations

import math
from typing import NamedTuple

import torch
from torch import Tensor


class RoIGeometry(NamedTuple):
    """Geometry of a single RoI projected onto the feature map.

    All floating point values carry float32 precision.

    Attributes:
        roi_start_h (float): Top edge of the RoI.
        roi_start_w (float): Left edge of the RoI.
        roi_height (float): Height of the RoI.
        roi_width (float): Width of the RoI.
        bin_size_h (float): Height of one output bin.
        bin_size_w (float): Width of one output bin.
        roi_bin_grid_h (int): Number of sub-samples per bin along y.
        roi_bin_grid_w (int): Number of sub-samples per bin along x.
    """

    roi_start_h: float
    roi_start_w: float
    roi_height: float
    roi_width: float
    bin_size_h: float
    bin_size_w: float
    roi_bin_grid_h: int
    roi_bin_grid_w: int

    @property
    def count(self) -> int:
        """Number of samples averaged into one bin."""
        return max(self.roi_bin_grid_h * self.roi_bin_grid_w, 1)


def _bin_grid(sampling_ratio: int, roi_size: Tensor, pooled_size: int) -> int:
    """Number of sub-samples of a bin along one axis.

    Empty or inverted RoIs get no samples.
    """
    if sampling_ratio > 0:
        return sampling_ratio
    span = (roi_size / pooled_size).item()
    if not math.isfinite(span):
        return 0
    return max(math.ceil(span), 0)


def compute_roi_geometry(
    roi: Tensor,
    pooled_height: int,
    pooled_width: int,
    spatial_scale: float = 1.0,
    sampling_ratio: int = 0,
    aligned: bool = True,
) -> RoIGeometry:
    """Project an RoI into feature map space and derive its sampling grid.

    Args:
        roi (Tensor): RoI as (x1, y1, x2, y2) in input image coordinates.
        pooled_height (int): Number of output bins along y.
        pooled_width (int): Number of output bins along x.
        spatial_scale (float, optional): Scale from image to feature map
            coordinates. Defaults to 1.0.
        sampling_ratio (int, optional): Fixed number of sub-samples per bin
            and axis. Values <= 0 derive it from the bin size. Defaults to 0.
        aligned (bool, optional): Shift the box by -0.5 for pixel center
            alignment. If False, RoI width and height are at least 1.
            Defaults to True.

    Returns:
        RoIGeometry: The projected geometry.
    """
    roi = roi.detach().reshape(-1)[:4].to(device="cpu", dtype=torch.float32)
    offset = 0.5 if aligned else 0.0
    start_w, start_h, end_w, end_h = roi * spatial_scale - offset

    roi_width = end_w - start_w
    roi_height = end_h - start_h
    if not aligned:
        # force malformed RoIs to be 1x1
        roi_width = torch.clamp(roi_width, min=1.0)
        roi_height = torch.clamp(roi_height, min=1.0)

    bin_size_w = roi_width / pooled_width
    bin_size_h = roi_height / pooled_height

    return RoIGeometry(
        roi_start_h=start_h.item(),
        roi_start_w=start_w.item(),
        roi_height=roi_height.item(),
        roi_width=roi_width.item(),
        bin_size_h=bin_size_h.item(),
        bin_size_w=bin_size_w.item(),
        roi_bin_grid_h=_bin_grid(sampling_ratio, roi_height, pooled_height),
        roi_bin_grid_w=_bin_grid(sampling_ratio, roi_width, pooled_width),
    )
