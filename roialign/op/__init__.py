"""Operators for region feature extraction.

The operators are native PyTorch modules and only have a forward member for
function invocations. They keep no internal state besides their options.
"""
