"""RoIAlign operator on a single region of interest."""

from .executor import partition_channels, pool_channels
from .geometry import RoIGeometry, compute_roi_geometry
from .roi_align import (
    STATUS_ALLOC_FAILED,
    STATUS_OK,
    AllocationError,
    RoIAlign,
    default_allocator,
    roi_align,
)
from .sample_plan import SamplingPlan, build_sampling_plan

__all__ = [
    "AllocationError",
    "RoIAlign",
    "RoIGeometry",
    "STATUS_ALLOC_FAILED",
    "STATUS_OK",
    "SamplingPlan",
    "build_sampling_plan",
    "compute_roi_geometry",
    "default_allocator",
    "partition_channels",
    "pool_channels",
    "roi_align",
]
