"""
Device-side matrix addressing.

Kernels see matrices as flat float32 device arrays plus (offset, stride).
These helpers do the stride arithmetic; they never copy and are safe to call
from any number of threads at once.
"""

from numba import cuda

# Edge of the square thread block and of the shared-memory tiles.
BLOCK_SIZE = 16


@cuda.jit(device=True)
def sub_matrix_offset(offset, stride, block_row, block_col):
    """Offset of element (0, 0) of tile (block_row, block_col)."""
    return offset + block_row * BLOCK_SIZE * stride + block_col * BLOCK_SIZE


@cuda.jit(device=True)
def get_element(data, offset, stride, row, col):
    return data[offset + row * stride + col]


@cuda.jit(device=True)
def set_element(data, offset, stride, row, col, value):
    data[offset + row * stride + col] = value
