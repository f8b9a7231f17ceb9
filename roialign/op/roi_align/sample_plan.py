"""Precomputed bilinear sampling plan of an RoI.

The plan only depends on the RoI geometry and the output grid, not on the
feature values, so it is built once per RoI and shared by all channels.
"""

from __future__ import annotations

from typing import NamedTuple

import torch
from torch import Tensor


class SamplingPlan(NamedTuple):
    """Table of bilinear sample descriptors.

    Row i holds the descriptor of one (ph, pw, iy, ix) sample, rows are
    ordered by (ph, pw, iy, ix) ascending. Samples outside of the feature map
    have all indices and weights set to zero.

    Attributes:
        indices (Tensor): Linear source pixel indices (N, 4) of the top-left,
            top-right, bottom-left and bottom-right neighbors.
        weights (Tensor): Bilinear weights (N, 4) in float32, matching
            indices.
        pooled_height (int): Number of output bins along y.
        pooled_width (int): Number of output bins along x.
        roi_bin_grid_h (int): Number of sub-samples per bin along y.
        roi_bin_grid_w (int): Number of sub-samples per bin along x.
    """

    indices: Tensor
    weights: Tensor
    pooled_height: int
    pooled_width: int
    roi_bin_grid_h: int
    roi_bin_grid_w: int

    @property
    def samples_per_bin(self) -> int:
        """Number of table rows belonging to one output bin."""
        return self.roi_bin_grid_h * self.roi_bin_grid_w

    @property
    def count(self) -> int:
        """Divisor of the accumulated bin value."""
        return max(self.samples_per_bin, 1)

    @property
    def num_samples(self) -> int:
        """Number of sample descriptors."""
        return self.indices.shape[0]


class _AxisLookup(NamedTuple):
    """Bilinear neighbors of sample positions along one axis."""

    valid: Tensor
    low: Tensor
    high: Tensor
    frac: Tensor


def _sample_positions(
    roi_start: float,
    bin_size: float,
    pooled_size: int,
    grid_size: int,
    device: torch.device,
) -> Tensor:
    """Continuous positions of the sub-bin centers along one axis.

    Returns:
        Tensor: Positions of shape (pooled_size, grid_size).
    """
    start = torch.tensor(roi_start, dtype=torch.float32, device=device)
    size = torch.tensor(bin_size, dtype=torch.float32, device=device)
    bins = torch.arange(pooled_size, dtype=torch.float32, device=device)
    grid = torch.arange(grid_size, dtype=torch.float32, device=device)
    # e.g. 0.5, 1.5 for two samples per bin
    return (start + bins[:, None] * size) + (
        grid[None, :] + 0.5
    ) * size / grid_size


def _axis_lookup(positions: Tensor, size: int) -> _AxisLookup:
    """Resolve positions into low/high pixel indices and fractional offsets.

    Positions more than one pixel outside of [0, size] are marked invalid.
    Positions in [-1, 0] snap to 0 and positions at or beyond the last pixel
    snap onto it.
    """
    valid = (positions >= -1.0) & (positions <= size)
    positions = torch.clamp(positions, min=0.0)
    positions = torch.where(valid, positions, torch.zeros_like(positions))

    low = positions.to(torch.int64)
    at_edge = low >= size - 1
    low = torch.where(at_edge, torch.full_like(low, size - 1), low)
    high = torch.where(at_edge, low, low + 1)
    positions = torch.where(at_edge, low.to(positions.dtype), positions)

    return _AxisLookup(valid, low, high, positions - low.to(positions.dtype))


def build_sampling_plan(
    height: int,
    width: int,
    pooled_height: int,
    pooled_width: int,
    roi_bin_grid_h: int,
    roi_bin_grid_w: int,
    roi_start_h: float,
    roi_start_w: float,
    bin_size_h: float,
    bin_size_w: float,
    device: torch.device | None = None,
) -> SamplingPlan:
    """Precompute indices and weights of all bilinear samples of an RoI.

    Each bin is sampled at the centers of a roi_bin_grid_h x roi_bin_grid_w
    sub-grid. Every sample is interpolated from its four neighboring pixels.
    A grid size of 0 gives an empty table.

    Args:
        height (int): Feature map height.
        width (int): Feature map width.
        pooled_height (int): Number of output bins along y.
        pooled_width (int): Number of output bins along x.
        roi_bin_grid_h (int): Number of sub-samples per bin along y.
        roi_bin_grid_w (int): Number of sub-samples per bin along x.
        roi_start_h (float): Top edge of the RoI in feature map coordinates.
        roi_start_w (float): Left edge of the RoI in feature map coordinates.
        bin_size_h (float): Height of one bin.
        bin_size_w (float): Width of one bin.
        device (torch.device | None, optional): Device of the table. Defaults
            to None (cpu).

    Raises:
        ValueError: If an output size is not positive or a grid size is
            negative.

    Returns:
        SamplingPlan: Table with roi_bin_grid_h * roi_bin_grid_w *
            pooled_height * pooled_width entries.
    """
    for name, value, minimum in (
        ("pooled_height", pooled_height, 1),
        ("pooled_width", pooled_width, 1),
        ("roi_bin_grid_h", roi_bin_grid_h, 0),
        ("roi_bin_grid_w", roi_bin_grid_w, 0),
    ):
        if value < minimum:
            raise ValueError(f"{name} must be >= {minimum}, got {value}.")

    y = _axis_lookup(
        _sample_positions(
            roi_start_h, bin_size_h, pooled_height, roi_bin_grid_h, device
        ),
        height,
    )
    x = _axis_lookup(
        _sample_positions(
            roi_start_w, bin_size_w, pooled_width, roi_bin_grid_w, device
        ),
        width,
    )

    # broadcast to (ph, pw, iy, ix)
    def _rows(t: Tensor) -> Tensor:
        return t[:, None, :, None]

    def _cols(t: Tensor) -> Tensor:
        return t[None, :, None, :]

    ly, lx = _rows(y.frac), _cols(x.frac)
    hy, hx = 1.0 - ly, 1.0 - lx
    weights = torch.stack(
        torch.broadcast_tensors(hy * hx, hy * lx, ly * hx, ly * lx), dim=-1
    )

    y_low, y_high = _rows(y.low) * width, _rows(y.high) * width
    x_low, x_high = _cols(x.low), _cols(x.high)
    indices = torch.stack(
        torch.broadcast_tensors(
            y_low + x_low, y_low + x_high, y_high + x_low, y_high + x_high
        ),
        dim=-1,
    )

    valid = (_rows(y.valid) & _cols(x.valid))[..., None]
    weights = torch.where(valid, weights, torch.zeros_like(weights))
    indices = torch.where(valid, indices, torch.zeros_like(indices))

    return SamplingPlan(
        indices=indices.reshape(-1, 4).contiguous(),
        weights=weights.reshape(-1, 4).contiguous(),
        pooled_height=pooled_height,
        pooled_width=pooled_width,
        roi_bin_grid_h=roi_bin_grid_h,
        roi_bin_grid_w=roi_bin_grid_w,
    )
