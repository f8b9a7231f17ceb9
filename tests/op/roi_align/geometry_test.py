"""RoI geometry test file."""

import math

import torch

from roialign.op.roi_align import compute_roi_geometry


def test_aligned_offset() -> None:
    """Aligned mode shifts by half a pixel and keeps the RoI size."""
    roi = torch.tensor([1.0, 2.0, 1.0, 2.0])
    geometry = compute_roi_geometry(roi, 2, 2, aligned=True)
    assert geometry.roi_start_w == 0.5
    assert geometry.roi_start_h == 1.5
    assert geometry.roi_width == 0.0
    assert geometry.roi_height == 0.0
    assert geometry.roi_bin_grid_h == 0
    assert geometry.roi_bin_grid_w == 0
    assert geometry.count == 1


def test_legacy_minimum_size() -> None:
    """Legacy mode enforces RoIs of at least 1x1."""
    roi = torch.tensor([1.0, 2.0, 1.0, 2.5])
    geometry = compute_roi_geometry(roi, 2, 4, aligned=False)
    assert geometry.roi_start_w == 1.0
    assert geometry.roi_start_h == 2.0
    assert geometry.roi_width == 1.0
    assert geometry.roi_height == 1.0
    assert geometry.bin_size_w == 0.25
    assert geometry.bin_size_h == 0.5
    assert math.isfinite(geometry.bin_size_w)


def test_spatial_scale() -> None:
    """Coordinates are scaled into feature map space."""
    roi = torch.tensor([16.0, 32.0, 80.0, 160.0])
    geometry = compute_roi_geometry(
        roi, 4, 2, spatial_scale=0.25, aligned=False
    )
    assert geometry.roi_start_w == 4.0
    assert geometry.roi_start_h == 8.0
    assert geometry.roi_width == 16.0
    assert geometry.roi_height == 32.0
    assert geometry.bin_size_w == 8.0
    assert geometry.bin_size_h == 8.0
    assert geometry.roi_bin_grid_w == 8
    assert geometry.roi_bin_grid_h == 8
    assert geometry.count == 64


def test_adaptive_bin_grid() -> None:
    """Sub-pixel bins still get one sample, larger bins are rounded up."""
    geometry = compute_roi_geometry(torch.tensor([0.0, 0.0, 1.0, 1.0]), 4, 4)
    assert geometry.roi_bin_grid_h == 1
    assert geometry.roi_bin_grid_w == 1

    geometry = compute_roi_geometry(torch.tensor([0.0, 0.0, 5.0, 3.0]), 2, 2)
    assert geometry.roi_bin_grid_w == 3
    assert geometry.roi_bin_grid_h == 2
    assert geometry.count == 6


def test_fixed_sampling_ratio() -> None:
    """A positive sampling ratio overrides the adaptive grid."""
    roi = torch.tensor([0.0, 0.0, 50.0, 50.0])
    geometry = compute_roi_geometry(roi, 2, 2, sampling_ratio=2)
    assert geometry.roi_bin_grid_h == 2
    assert geometry.roi_bin_grid_w == 2


def test_inverted_roi() -> None:
    """Inverted RoIs in aligned mode get no samples."""
    roi = torch.tensor([5.0, 5.0, 1.0, 1.0])
    geometry = compute_roi_geometry(roi, 2, 2, aligned=True)
    assert geometry.roi_width == -4.0
    assert geometry.roi_bin_grid_h == 0
    assert geometry.roi_bin_grid_w == 0
    assert geometry.count == 1

    geometry = compute_roi_geometry(roi, 2, 2, sampling_ratio=2)
    assert geometry.roi_bin_grid_h == 2
    assert geometry.roi_bin_grid_w == 2
