"""
NumPy-level matrix multiplication.
Thin facade over the orchestrator for callers that hold plain arrays.
"""

import numpy as np

from sgemm.matrix import MatrixView
from sgemm.runtime.executor import multiply

_default_device = None


def default_device():
    """Lazily open device 0."""
    global _default_device
    if _default_device is None:
        from sgemm.hal.cuda import CudaDevice
        _default_device = CudaDevice()
    return _default_device


def matmul(a, b, tiled=True, device=None):
    """Return a @ b as float32, computed on the accelerator."""
    a_view = MatrixView.from_array(a)
    b_view = MatrixView.from_array(b)
    c_view = MatrixView.zeros(a_view.height, b_view.width)
    multiply(device or default_device(), a_view, b_view, c_view, use_tiled=tiled)
    return c_view.to_array()


def reference_matmul(a, b):
    """Host-side float32 product for verification."""
    return np.matmul(np.asarray(a, dtype=np.float32), np.asarray(b, dtype=np.float32))


__all__ = ['matmul', 'reference_matmul', 'default_device']
