"""
Direct matrix multiplication kernel.

One thread per element of C, no data reuse: every multiply-add re-reads both
operands from global memory. This is the baseline the tiled kernel is
measured against.
"""

from numba import cuda, float32

from sgemm.kernels.tile import get_element, set_element


@cuda.jit
def matmul_direct(a, a_width, a_stride, b, b_stride, c, c_stride):
    """
    Computes: C = A @ B

    Args:
        a: Flat device buffer of A
        a_width: Columns of A (the contraction dimension)
        a_stride: Row stride of A in elements
        b: Flat device buffer of B
        b_stride: Row stride of B in elements
        c: Flat device buffer of C, written once per element
        c_stride: Row stride of C in elements
    """
    row = cuda.blockIdx.y * cuda.blockDim.y + cuda.threadIdx.y
    col = cuda.blockIdx.x * cuda.blockDim.x + cuda.threadIdx.x

    value = float32(0.0)
    for e in range(a_width):
        value += get_element(a, 0, a_stride, row, e) * get_element(b, 0, b_stride, e, col)
    set_element(c, 0, c_stride, row, col, value)
