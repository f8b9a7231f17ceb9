"""Pooling executor test file."""

import unittest

import torch

from roialign.op.roi_align import (
    SamplingPlan,
    build_sampling_plan,
    partition_channels,
    pool_channels,
)


def _plan(indices: list[list[int]], weights: list[list[float]], grid_w: int):
    """Single bin plan with grid_w samples along x."""
    return SamplingPlan(
        indices=torch.tensor(indices, dtype=torch.int64),
        weights=torch.tensor(weights, dtype=torch.float32),
        pooled_height=1,
        pooled_width=1,
        roi_bin_grid_h=1,
        roi_bin_grid_w=grid_w,
    )


class TestPoolChannels(unittest.TestCase):
    """Test cases for the channel parallel pooling pass."""

    def test_partition_channels(self) -> None:
        """Test splitting channels into disjoint blocks."""
        self.assertEqual(
            partition_channels(10, 3), [(0, 4), (4, 7), (7, 10)]
        )
        self.assertEqual(partition_channels(2, 8), [(0, 1), (1, 2)])
        self.assertEqual(partition_channels(5, 0), [(0, 5)])
        self.assertEqual(partition_channels(0, 4), [])

    def test_weighted_sample(self) -> None:
        """Test bilinear accumulation of a single sample."""
        features = torch.tensor([[[1.0, 2.0], [3.0, 4.0]]])
        plan = _plan([[0, 1, 2, 3]], [[0.25, 0.25, 0.25, 0.25]], 1)
        output = pool_channels(features, plan, torch.empty(1, 1, 1))
        self.assertEqual(output.tolist(), [[[2.5]]])

    def test_average_over_samples(self) -> None:
        """Test that samples of a bin are averaged, empty ones count."""
        features = torch.tensor([[[1.0, 2.0], [3.0, 4.0]]])
        plan = _plan(
            [[0, 0, 0, 0], [3, 3, 3, 3], [0, 0, 0, 0]],
            [[1.0, 0.0, 0.0, 0.0], [1.0, 0.0, 0.0, 0.0], [0.0] * 4],
            3,
        )
        output = pool_channels(features, plan, torch.empty(1, 1, 1))
        self.assertAlmostEqual(output.item(), 5.0 / 3.0, places=6)

    def test_bins_without_samples(self) -> None:
        """Test that an empty plan writes zeros to every bin."""
        features = torch.rand(2, 4, 4) + 1.0
        plan = build_sampling_plan(4, 4, 2, 2, 0, 0, 1.5, 1.5, 0.0, 0.0)
        output = pool_channels(
            features, plan, torch.full((2, 2, 2), 7.0), num_threads=2
        )
        self.assertTrue(torch.equal(output, torch.zeros(2, 2, 2)))

    def test_channels_are_independent(self) -> None:
        """Test that every channel is pooled with the shared plan."""
        features = torch.arange(3 * 4, dtype=torch.float32).view(3, 2, 2)
        plan = _plan([[0, 1, 2, 3]], [[0.25, 0.25, 0.25, 0.25]], 1)
        output = pool_channels(
            features, plan, torch.empty(3, 1, 1), num_threads=3
        )
        self.assertEqual(output.view(-1).tolist(), [1.5, 5.5, 9.5])

    def test_deterministic_across_workers(self) -> None:
        """Test bit identical results for any number of workers."""
        torch.manual_seed(0)
        features = torch.randn(17, 24, 31)
        plan = build_sampling_plan(24, 31, 7, 5, 3, 2, 1.3, -0.7, 2.9, 6.1)

        reference = pool_channels(features, plan, torch.empty(17, 7, 5))
        for num_threads in (2, 4, 17, 32):
            output = pool_channels(
                features, plan, torch.empty(17, 7, 5), num_threads
            )
            self.assertTrue(torch.equal(output, reference))

    def test_output_dtype(self) -> None:
        """Test that the output buffer dtype is kept."""
        features = torch.ones(2, 3, 3, dtype=torch.float64)
        plan = build_sampling_plan(3, 3, 2, 2, 1, 1, 0.0, 0.0, 1.0, 1.0)
        output = pool_channels(
            features, plan, torch.empty(2, 2, 2, dtype=torch.float64)
        )
        self.assertEqual(output.dtype, torch.float64)
        self.assertTrue(torch.equal(output, torch.ones_like(output)))

    def test_output_shape_mismatch(self) -> None:
        """Test that a wrong output buffer is rejected."""
        features = torch.ones(2, 3, 3)
        plan = build_sampling_plan(3, 3, 2, 2, 1, 1, 0.0, 0.0, 1.0, 1.0)
        with self.assertRaises(ValueError):
            pool_channels(features, plan, torch.empty(2, 3, 2))
