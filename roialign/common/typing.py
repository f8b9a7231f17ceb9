"""Common type definitions.

Here we define commonly used types like specific numpy array and tensor types.
"""

from collections.abc import Callable
from typing import Any, Iterable, Optional, Tuple, Union

import numpy as np
import numpy.typing as npt
import torch
from torch import FloatTensor, Tensor  # pylint: disable=no-name-in-module

NDArrayF32 = npt.NDArray[np.float32]
NDArrayF64 = npt.NDArray[np.float64]

ArgsType = Any  # type: ignore

ArrayIterableFloat = Iterable[Union[float, "ArrayIterableFloat"]]
ArrayLikeFloat = Union[ArrayIterableFloat, NDArrayF32, NDArrayF64, FloatTensor]

# Supplies the backing storage of an output tensor. Returns None (or an empty
# tensor) when the memory cannot be provided.
Allocator = Callable[
    [Tuple[int, ...], torch.dtype, torch.device], Optional[Tensor]
]
