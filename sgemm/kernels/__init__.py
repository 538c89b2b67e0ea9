"""
SIMT matrix multiplication kernels.

Both kernels take flat float32 device buffers plus row strides and are
launched over a 2-D grid of BLOCK_SIZE x BLOCK_SIZE thread blocks that
exactly tiles C.

Usage:
    from sgemm.kernels import matmul_tiled, BLOCK_SIZE

    grid = (c_width // BLOCK_SIZE, c_height // BLOCK_SIZE)
    matmul_tiled[grid, (BLOCK_SIZE, BLOCK_SIZE)](a, k, k, b, n, c, n)
"""

from sgemm.kernels.tile import BLOCK_SIZE, sub_matrix_offset, get_element, set_element
from sgemm.kernels.direct import matmul_direct
from sgemm.kernels.tiled import matmul_tiled

__all__ = [
    'BLOCK_SIZE',
    'sub_matrix_offset',
    'get_element',
    'set_element',
    'matmul_direct',
    'matmul_tiled',
]
