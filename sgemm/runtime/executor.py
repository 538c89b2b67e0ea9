"""
Host orchestrator - stages matrices on the device and runs one multiplication.

Lifecycle of multiply():
1. Allocate device buffers for A, B and C
2. Transfer A and B to the device
3. Launch the direct or tiled kernel over a grid that tiles C
4. Check the launch error
5. Transfer C back into the caller's buffer
6. Free all three buffers, on every exit path
"""

import logging
from contextlib import ExitStack
from typing import Tuple

from sgemm.kernels import BLOCK_SIZE, matmul_direct, matmul_tiled
from sgemm.matrix import MatrixView
from sgemm.runtime.device import AcceleratorDevice

logger = logging.getLogger(__name__)


def launch_config(a: MatrixView, b: MatrixView) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    Grid and block dimensions for C = A @ B.

    Grid x runs over block columns of C, grid y over block rows. Dimensions
    that are not block multiples are truncated, not padded.
    """
    grid = (b.width // BLOCK_SIZE, a.height // BLOCK_SIZE)
    block = (BLOCK_SIZE, BLOCK_SIZE)
    return grid, block


def _check_shapes(a: MatrixView, b: MatrixView, c: MatrixView):
    if a.width != b.height:
        raise ValueError(f"Contraction mismatch: A is {a.height}x{a.width}, B is {b.height}x{b.width}")
    if c.height != a.height or c.width != b.width:
        raise ValueError(
            f"Output is {c.height}x{c.width}, expected {a.height}x{b.width}"
        )
    for name, view in (("A", a), ("B", b), ("C", c)):
        if not view.is_full:
            raise ValueError(f"{name} must be a full matrix, not a strided sub-view")


def multiply(device: AcceleratorDevice, a: MatrixView, b: MatrixView, c: MatrixView,
             use_tiled: bool) -> MatrixView:
    """
    Compute C = A @ B on device.

    Args:
        device: Accelerator to stage on and launch with
        a: Left operand, read only
        b: Right operand, read only
        c: Output, every element overwritten
        use_tiled: Run matmul_tiled if True, else matmul_direct

    Returns:
        c, holding the product

    Raises:
        AllocationFailure, LaunchFailure, ExecutionFailure: propagated from
        the device after all device buffers have been released
    """
    _check_shapes(a, b, c)
    kernel = matmul_tiled if use_tiled else matmul_direct
    grid, block = launch_config(a, b)

    with ExitStack() as stack:
        d_a = stack.enter_context(device.buffer(a.nbytes))
        d_b = stack.enter_context(device.buffer(b.nbytes))
        d_c = stack.enter_context(device.buffer(c.nbytes))

        device.transfer_h2d(a.region(), d_a)
        device.transfer_h2d(b.region(), d_b)

        logger.debug("C[%dx%d] = A[%dx%d] @ B[%dx%d] using %s",
                     c.height, c.width, a.height, a.width, b.height, b.width,
                     "tiled" if use_tiled else "direct")
        device.launch(kernel, grid, block,
                      d_a, a.width, a.stride, d_b, b.stride, d_c, c.stride)
        error = device.last_error()
        if error is not None:
            raise error

        device.transfer_d2h(d_c, c.region())

    return c
