"""
Device-side addressing helpers, exercised from a small kernel.
"""

import numpy as np
from numba import cuda

from sgemm.kernels import BLOCK_SIZE, sub_matrix_offset, get_element, set_element


@cuda.jit
def copy_tile(src, src_stride, block_row, block_col, dst):
    row = cuda.threadIdx.y
    col = cuda.threadIdx.x
    tile = sub_matrix_offset(0, src_stride, block_row, block_col)
    set_element(dst, 0, BLOCK_SIZE, row, col, get_element(src, tile, src_stride, row, col))


class TestDeviceTileAccess:

    def test_copy_tile_matches_slice(self):
        n = 2 * BLOCK_SIZE
        host = np.arange(n * n, dtype=np.float32)
        src = cuda.to_device(host)
        dst = cuda.device_array(BLOCK_SIZE * BLOCK_SIZE, dtype=np.float32)

        copy_tile[(1, 1), (BLOCK_SIZE, BLOCK_SIZE)](src, n, 1, 0, dst)

        got = dst.copy_to_host().reshape(BLOCK_SIZE, BLOCK_SIZE)
        expected = host.reshape(n, n)[BLOCK_SIZE:, :BLOCK_SIZE]
        np.testing.assert_array_equal(got, expected)

