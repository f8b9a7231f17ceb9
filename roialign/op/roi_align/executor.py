"""Channel parallel pooling pass over a precomputed sampling plan."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import torch
from torch import Tensor

from .sample_plan import SamplingPlan

logger = logging.getLogger(__name__)


def partition_channels(
    num_channels: int, num_workers: int
) -> list[tuple[int, int]]:
    """Split the channel range into contiguous, disjoint blocks.

    Args:
        num_channels (int): Number of channels.
        num_workers (int): Maximum number of blocks.

    Returns:
        list[tuple[int, int]]: (start, end) of each non-empty block. Blocks
            differ in size by at most one channel.
    """
    if num_channels <= 0:
        return []
    num_blocks = min(max(num_workers, 1), num_channels)
    size, rest = divmod(num_channels, num_blocks)
    blocks, start = [], 0
    for i in range(num_blocks):
        end = start + size + (1 if i < rest else 0)
        blocks.append((start, end))
        start = end
    return blocks


def _pool_block(features: Tensor, plan: SamplingPlan, output: Tensor) -> None:
    """Pool a block of channels and write it into its output slice.

    Args:
        features (Tensor): Flattened features (c, height * width), float32.
        plan (SamplingPlan): Shared sampling plan.
        output (Tensor): Output slice (c, pooled_height, pooled_width).
    """
    num_channels = features.shape[0]
    weights = plan.weights
    samples = features[:, plan.indices]

    # fixed summation order: w1 * f1 + w2 * f2 + w3 * f3 + w4 * f4
    values = samples[..., 0] * weights[:, 0]
    values = values + samples[..., 1] * weights[:, 1]
    values = values + samples[..., 2] * weights[:, 2]
    values = values + samples[..., 3] * weights[:, 3]
    values = values.reshape(
        num_channels,
        plan.pooled_height * plan.pooled_width,
        plan.samples_per_bin,
    )

    # accumulate the samples of a bin in table order, bins without samples
    # stay 0
    output_val = values.new_zeros(values.shape[:-1])
    for i in range(plan.samples_per_bin):
        output_val = output_val + values[..., i]
    output_val = output_val / plan.count

    output.copy_(
        output_val.view(num_channels, plan.pooled_height, plan.pooled_width)
    )


def pool_channels(
    features: Tensor,
    plan: SamplingPlan,
    output: Tensor,
    num_threads: int = 1,
) -> Tensor:
    """Average the bilinear samples of every bin for all channels.

    Channels are independent, each worker pools a contiguous block of
    channels and writes only its own part of the output. The plan and the
    features are shared read-only.

    Args:
        features (Tensor): Feature map of shape (channels, height, width).
        plan (SamplingPlan): Sampling plan built for the feature map size.
        output (Tensor): Buffer of shape (channels, pooled_height,
            pooled_width) that is fully overwritten.
        num_threads (int, optional): Size of the worker pool. Values <= 1 run
            on the calling thread. Defaults to 1.

    Raises:
        ValueError: If the output buffer does not match the plan.

    Returns:
        Tensor: The output buffer.
    """
    num_channels = features.shape[0]
    expected = (num_channels, plan.pooled_height, plan.pooled_width)
    if tuple(output.shape) != expected:
        raise ValueError(
            f"Output buffer has shape {tuple(output.shape)}, "
            f"expected {expected}."
        )
    if num_channels == 0:
        return output

    flat = features.reshape(num_channels, -1).to(
        device=plan.weights.device, dtype=torch.float32
    )
    blocks = partition_channels(num_channels, num_threads)
    logger.debug(
        "Pooling %d channels in %d block(s) over %d samples.",
        num_channels,
        len(blocks),
        plan.num_samples,
    )

    if len(blocks) == 1:
        _pool_block(flat, plan, output)
        return output

    with ThreadPoolExecutor(max_workers=len(blocks)) as pool:
        futures = [
            pool.submit(_pool_block, flat[start:end], plan, output[start:end])
            for start, end in blocks
        ]
        for future in futures:
            future.result()
    return output
