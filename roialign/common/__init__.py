"""Contains common functions and types that are used across modules."""

from .typing import (
    Allocator,
    ArgsType,
    ArrayLikeFloat,
    NDArrayF32,
    NDArrayF64,
)

__all__ = [
    "Allocator",
    "ArgsType",
    "ArrayLikeFloat",
    "NDArrayF32",
    "NDArrayF64",
]
