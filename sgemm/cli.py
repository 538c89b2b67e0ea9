#!/usr/bin/env python3
"""
Benchmark driver: times the direct and the tiled kernel on one device.

    python -m sgemm.cli --size 512
    NUMBA_ENABLE_CUDASIM=1 python -m sgemm.cli --size 32    # no GPU needed
"""

import argparse
import logging
import sys
import time

import numpy as np

from sgemm.errors import AcceleratorError
from sgemm.hal.cuda import CudaDevice
from sgemm.kernels import BLOCK_SIZE
from sgemm.matrix import MatrixView
from sgemm.ops import reference_matmul
from sgemm.runtime.executor import multiply


def timed_multiply(device, a, b, use_tiled):
    """Run one multiplication, returning (C, elapsed ns)."""
    c = MatrixView.zeros(a.height, b.width)
    device.sync()
    start = time.perf_counter_ns()
    multiply(device, a, b, c, use_tiled)
    device.sync()
    return c, time.perf_counter_ns() - start


def main(argv=None):
    parser = argparse.ArgumentParser(description="Direct vs. tiled SGEMM benchmark")
    parser.add_argument("--size", type=int, default=256,
                        help=f"Edge of the square matrices (multiple of {BLOCK_SIZE})")
    parser.add_argument("--device", type=int, default=0, help="CUDA device index")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for the inputs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log runtime activity")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.size <= 0 or args.size % BLOCK_SIZE:
        print(f"Error: --size must be a positive multiple of {BLOCK_SIZE}, got {args.size}")
        return 1

    rng = np.random.default_rng(args.seed)
    a = MatrixView.from_array(rng.random((args.size, args.size), dtype=np.float32))
    b = MatrixView.from_array(rng.random((args.size, args.size), dtype=np.float32))

    try:
        device = CudaDevice(device_id=args.device)
        c_direct, direct_ns = timed_multiply(device, a, b, use_tiled=False)
        c_tiled, tiled_ns = timed_multiply(device, a, b, use_tiled=True)
    except AcceleratorError as exc:
        print(f"Error: {type(exc).__name__}: {exc}")
        return 1

    print(f"{args.size}x{args.size} @ {args.size}x{args.size}, block {BLOCK_SIZE}")
    print(f"direct: {direct_ns} ns")
    print(f"tiled:  {tiled_ns} ns")

    result = c_tiled.to_array()
    if not np.array_equal(c_direct.to_array(), result):
        print("Error: direct and tiled results differ")
        return 1
    expected = reference_matmul(a.to_array(), b.to_array())
    if not np.allclose(result, expected, rtol=1e-4, atol=1e-4):
        print(f"Error: result deviates from NumPy by {np.abs(result - expected).max()}")
        return 1

    print("Results match")
    return 0


if __name__ == "__main__":
    sys.exit(main())
