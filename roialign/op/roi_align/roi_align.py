"""RoIAlign operator."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableSequence, Sequence
from typing import Any

import torch
from torch import Tensor, nn

from roialign.common.array import array_to_tensor
from roialign.common.typing import Allocator, ArrayLikeFloat

from .executor import pool_channels
from .geometry import compute_roi_geometry
from .sample_plan import build_sampling_plan

logger = logging.getLogger(__name__)

STATUS_OK = 0
STATUS_ALLOC_FAILED = -100


class AllocationError(RuntimeError):
    """Raised when the output buffer can not be allocated."""


def default_allocator(
    shape: tuple[int, ...], dtype: torch.dtype, device: torch.device
) -> Tensor:
    """Allocate an uninitialized tensor with torch."""
    return torch.empty(shape, dtype=dtype, device=device)


class RoIAlign(nn.Module):
    """Average pool a fixed size feature grid out of a single RoI.

    Every output bin averages roi_bin_grid_h x roi_bin_grid_w bilinear
    samples of the feature map. The sample positions and interpolation
    weights are computed once per call and reused for all channels, which
    are pooled in parallel.
    """

    def __init__(
        self,
        pooled_width: int = 0,
        pooled_height: int = 0,
        spatial_scale: float = 1.0,
        sampling_ratio: int = 0,
        aligned: bool = True,
        num_threads: int = 1,
        allocator: Allocator | None = None,
    ) -> None:
        """Creates an instance of the class.

        Args:
            pooled_width (int, optional): Output grid width. Defaults to 0.
            pooled_height (int, optional): Output grid height. Defaults to 0.
            spatial_scale (float, optional): Scale from input image to feature
                map coordinates, e.g. 1 / stride. Defaults to 1.0.
            sampling_ratio (int, optional): Number of samples per bin and
                axis. If <= 0, it is derived from the bin size as
                ceil(roi_size / pooled_size). Defaults to 0.
            aligned (bool, optional): Shift the box coordinates by -0.5 for a
                better alignment with the two neighboring pixel indices. If
                False, the legacy behavior is used, which forces RoIs to be at
                least 1x1. Defaults to True.
            num_threads (int, optional): Number of workers of the channel
                parallel pooling pass. Defaults to 1.
            allocator (Allocator | None, optional): Supplies the output
                buffer. Defaults to None, which uses torch.empty.
        """
        super().__init__()
        self.pooled_width = pooled_width
        self.pooled_height = pooled_height
        self.spatial_scale = spatial_scale
        self.sampling_ratio = sampling_ratio
        self.aligned = aligned
        self.num_threads = num_threads
        self.allocator = allocator or default_allocator

    def load_param(self, param_dict: Mapping[int, Any]) -> int:  # type: ignore # pylint: disable=line-too-long
        """Load operator options from a parameter dictionary.

        The options are keyed by their parameter id: 0 pooled_width,
        1 pooled_height, 2 spatial_scale, 3 sampling_ratio, 4 aligned.
        Missing ids fall back to their defaults.

        Args:
            param_dict (Mapping[int, Any]): The parameters.

        Returns:
            int: STATUS_OK.
        """
        self.pooled_width = int(param_dict.get(0, 0))
        self.pooled_height = int(param_dict.get(1, 0))
        self.spatial_scale = float(param_dict.get(2, 1.0))
        self.sampling_ratio = int(param_dict.get(3, 0))
        self.aligned = bool(param_dict.get(4, True))
        return STATUS_OK

    def _allocate(
        self, shape: tuple[int, ...], dtype: torch.dtype, device: torch.device
    ) -> Tensor:
        """Request the output buffer from the allocator."""
        try:
            output = self.allocator(shape, dtype, device)
        except RuntimeError as e:
            raise AllocationError(
                f"Failed to allocate output of shape {shape}: {e}"
            ) from e
        if output is None or (output.numel() == 0 and 0 not in shape):
            raise AllocationError(
                f"Failed to allocate output of shape {shape}"
            )
        return output

    @torch.no_grad()
    def forward(self, features: ArrayLikeFloat, roi: ArrayLikeFloat) -> Tensor:
        """Pool the features inside the RoI.

        Args:
            features (ArrayLikeFloat): Feature map of shape (C, H, W) or
                (1, C, H, W).
            roi (ArrayLikeFloat): RoI as (x1, y1, x2, y2) in input image
                coordinates. Only the first four values are read.

        Raises:
            ValueError: If the inputs or the output size are malformed.
            AllocationError: If the output buffer can not be allocated.

        Returns:
            Tensor: Pooled features of shape (C, pooled_height, pooled_width)
                with the dtype of the feature map.
        """
        if self.pooled_height < 1 or self.pooled_width < 1:
            raise ValueError(
                "pooled_height and pooled_width must be positive, got "
                f"({self.pooled_height}, {self.pooled_width})."
            )
        features = array_to_tensor(features)
        if features.dim() == 4 and features.shape[0] == 1:
            features = features.squeeze(0)
        if features.dim() != 3:
            raise ValueError(
                "Expected features of shape (C, H, W), got "
                f"{tuple(features.shape)}."
            )
        channels, height, width = features.shape
        if height == 0 or width == 0:
            raise ValueError(f"Empty feature map of size {height}x{width}.")

        roi = array_to_tensor(roi, dtype=torch.float32).reshape(-1)
        if roi.numel() < 4:
            raise ValueError(
                f"Expected an RoI with 4 values, got {roi.numel()}."
            )

        geometry = compute_roi_geometry(
            roi,
            self.pooled_height,
            self.pooled_width,
            spatial_scale=self.spatial_scale,
            sampling_ratio=self.sampling_ratio,
            aligned=self.aligned,
        )
        logger.debug("RoI geometry: %s", geometry)

        plan = build_sampling_plan(
            height,
            width,
            self.pooled_height,
            self.pooled_width,
            geometry.roi_bin_grid_h,
            geometry.roi_bin_grid_w,
            geometry.roi_start_h,
            geometry.roi_start_w,
            geometry.bin_size_h,
            geometry.bin_size_w,
            device=features.device,
        )

        output = self._allocate(
            (channels, self.pooled_height, self.pooled_width),
            features.dtype,
            features.device,
        )
        return pool_channels(features, plan, output, self.num_threads)

    def forward_blobs(
        self,
        bottom_blobs: Sequence[ArrayLikeFloat],
        top_blobs: MutableSequence[Tensor],
    ) -> int:
        """Run the operator on a list of input blobs.

        Args:
            bottom_blobs (Sequence[ArrayLikeFloat]): The feature map and the
                RoI.
            top_blobs (MutableSequence[Tensor]): Receives the pooled output
                as its first element.

        Returns:
            int: STATUS_OK on success, STATUS_ALLOC_FAILED if the output
                buffer could not be allocated.
        """
        try:
            output = self(bottom_blobs[0], bottom_blobs[1])
        except AllocationError as e:
            logger.error("%s", e)
            return STATUS_ALLOC_FAILED

        if len(top_blobs) > 0:
            top_blobs[0] = output
        else:
            top_blobs.append(output)
        return STATUS_OK

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"RoIAlign(output_size=({self.pooled_height}, "
            f"{self.pooled_width}), spatial_scale={self.spatial_scale}, "
            f"sampling_ratio={self.sampling_ratio}, aligned={self.aligned}, "
            f"num_threads={self.num_threads})"
        )


def roi_align(
    features: ArrayLikeFloat,
    roi: ArrayLikeFloat,
    output_size: int | tuple[int, int],
    spatial_scale: float = 1.0,
    sampling_ratio: int = 0,
    aligned: bool = True,
    num_threads: int = 1,
) -> Tensor:
    """Functional RoIAlign on a single RoI.

    Args:
        features (ArrayLikeFloat): Feature map of shape (C, H, W).
        roi (ArrayLikeFloat): RoI as (x1, y1, x2, y2).
        output_size (int | tuple[int, int]): Output size as (height, width).
        spatial_scale (float, optional): Defaults to 1.0.
        sampling_ratio (int, optional): Defaults to 0.
        aligned (bool, optional): Defaults to True.
        num_threads (int, optional): Defaults to 1.

    Returns:
        Tensor: Pooled features of shape (C, height, width).
    """
    if isinstance(output_size, int):
        output_size = (output_size, output_size)
    pooled_height, pooled_width = output_size
    op = RoIAlign(
        pooled_width=pooled_width,
        pooled_height=pooled_height,
        spatial_scale=spatial_scale,
        sampling_ratio=sampling_ratio,
        aligned=aligned,
        num_threads=num_threads,
    )
    return op(features, roi)
