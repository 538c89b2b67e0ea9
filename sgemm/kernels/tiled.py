"""
Shared-memory tiled matrix multiplication kernel.

Each thread block computes one BLOCK_SIZE x BLOCK_SIZE tile Csub of C. The
contraction dimension is walked one tile at a time: the block cooperatively
stages Asub and Bsub into shared memory, then every thread reuses the staged
row/column BLOCK_SIZE times. Global memory traffic drops by a factor of
BLOCK_SIZE compared to matmul_direct.

Two barriers per step:
    1. after the loads   - no thread reads a shared element before it is written
    2. after the compute - no thread overwrites a tile another thread still reads
"""

from numba import cuda, float32

from sgemm.kernels.tile import BLOCK_SIZE, sub_matrix_offset, get_element, set_element


@cuda.jit
def matmul_tiled(a, a_width, a_stride, b, b_stride, c, c_stride):
    """
    Computes: C = A @ B

    Launch with grid (C.width // BLOCK_SIZE, C.height // BLOCK_SIZE) and
    block (BLOCK_SIZE, BLOCK_SIZE). Arguments as for matmul_direct.
    """
    block_row = cuda.blockIdx.y
    block_col = cuda.blockIdx.x
    row = cuda.threadIdx.y
    col = cuda.threadIdx.x

    c_sub = sub_matrix_offset(0, c_stride, block_row, block_col)

    value = float32(0.0)
    for m in range(a_width // BLOCK_SIZE):
        a_sub = sub_matrix_offset(0, a_stride, block_row, m)
        b_sub = sub_matrix_offset(0, b_stride, m, block_col)

        a_shared = cuda.shared.array(shape=(BLOCK_SIZE, BLOCK_SIZE), dtype=float32)
        b_shared = cuda.shared.array(shape=(BLOCK_SIZE, BLOCK_SIZE), dtype=float32)

        a_shared[row, col] = get_element(a, a_sub, a_stride, row, col)
        b_shared[row, col] = get_element(b, b_sub, b_stride, row, col)
        cuda.syncthreads()

        for e in range(BLOCK_SIZE):
            value += a_shared[row, e] * b_shared[e, col]
        cuda.syncthreads()

    set_element(c, c_sub, c_stride, row, col, value)
