"""This module contains array utility functions."""

from __future__ import annotations

import numpy as np
import torch
from torch import Tensor

from roialign.common.typing import ArrayLikeFloat


def array_to_tensor(
    data: ArrayLikeFloat,
    dtype: torch.dtype | None = None,
) -> Tensor:
    """Converts a given array like object to a floating point torch tensor.

    Helper function to convert an array like object to a tensor. This
    function converts numpy arrays or Sequences to tensors. Tensors are
    returned as they are if no conversion is needed.

    Examples:
        >>> array_to_tensor([1, 2, 3])
        >>> # -> tensor([1., 2., 3.])
        >>> array_to_tensor(np.zeros((2, 3), dtype=np.float64)).dtype
        >>> # -> torch.float64

    Args:
        data (ArrayLikeFloat): ArrayLike object that should be converted to a
            tensor.
        dtype (torch.dtype | None, optional): Target dtype of the tensor. If
            None, floating point inputs keep their dtype and all other inputs
            are converted to torch.float32. Defaults to None.

    Returns:
        Tensor: The converted tensor.
    """
    if isinstance(data, Tensor):
        tensor = data.detach()
    elif isinstance(data, np.ndarray):
        tensor = torch.from_numpy(np.ascontiguousarray(data))
    else:
        tensor = torch.as_tensor(np.asarray(data))

    if dtype is None:
        dtype = (
            tensor.dtype if tensor.is_floating_point() else torch.float32
        )
    return tensor.to(dtype)
