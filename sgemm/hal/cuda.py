"""
CUDA HAL - numba.cuda backend.

Runs kernels on an NVIDIA GPU. With NUMBA_ENABLE_CUDASIM=1 set before numba
is imported, the same code runs on numba's CUDA simulator: one Python thread
per CUDA thread, real barrier semantics, synchronous launches.
"""

import itertools
import logging
from typing import Optional

import numpy as np
from numba import cuda
from numba.core.errors import NumbaError
from numba.cuda.cudadrv.driver import CudaAPIError

from sgemm.errors import AcceleratorError, AllocationFailure, LaunchFailure, ExecutionFailure
from sgemm.runtime.allocator import MemoryPool, DEFAULT_POOL_BYTES
from sgemm.runtime.device import AcceleratorDevice, DeviceBuffer, Dim3

logger = logging.getLogger(__name__)

# Launch limits shared by every CUDA compute capability since 2.0
MAX_THREADS_PER_BLOCK = 1024
MAX_BLOCK_DIMS = (1024, 1024, 64)
MAX_GRID_DIMS = (2**31 - 1, 65535, 65535)


def check_launch_config(grid: Dim3, block: Dim3) -> Optional[str]:
    """Return why (grid, block) is not launchable, or None if it is."""
    if not 1 <= len(grid) <= 3 or not 1 <= len(block) <= 3:
        return f"grid {grid} and block {block} must have 1 to 3 dimensions"
    for axis, (dim, limit) in enumerate(zip(grid, MAX_GRID_DIMS)):
        if not 0 < dim <= limit:
            return f"grid dimension {axis} is {dim}, must be in 1..{limit}"
    for axis, (dim, limit) in enumerate(zip(block, MAX_BLOCK_DIMS)):
        if not 0 < dim <= limit:
            return f"block dimension {axis} is {dim}, must be in 1..{limit}"
    threads = int(np.prod(block))
    if threads > MAX_THREADS_PER_BLOCK:
        return f"{threads} threads per block exceeds {MAX_THREADS_PER_BLOCK}"
    return None


class CudaDevice(AcceleratorDevice):
    """
    numba.cuda driver for a single GPU.

    Buffers are flat float32 device arrays. Every allocation is also booked in
    a MemoryPool so the device can enforce memory_size and report usage.
    """

    def __init__(self, device_id: int = 0, memory_size: int = DEFAULT_POOL_BYTES):
        self.device_id = device_id
        cuda.select_device(device_id)
        self.pool = MemoryPool(memory_size)
        self._ids = itertools.count()
        self._last_error: Optional[AcceleratorError] = None

    @property
    def memory_size(self) -> int:
        return self.pool.capacity

    def allocate(self, nbytes: int) -> DeviceBuffer:
        name = f"buf{next(self._ids)}"
        addr = self.pool.alloc(name, nbytes)
        try:
            handle = cuda.device_array(nbytes // np.dtype(np.float32).itemsize, dtype=np.float32)
        except CudaAPIError as exc:
            self.pool.free(name)
            raise AllocationFailure(f"Device allocation of {nbytes} bytes failed: {exc}") from exc
        logger.debug("allocated %s: %d bytes at %#x", name, nbytes, addr)
        return DeviceBuffer(name=name, addr=addr, size=nbytes, _handle=handle)

    def free(self, buf: DeviceBuffer) -> None:
        if self.pool.free(buf.name) is None:
            raise ValueError(f"Buffer '{buf.name}' is not allocated on this device")
        # numba returns the memory once the last reference to the array is gone
        buf._handle = None
        logger.debug("freed %s", buf.name)

    def transfer_h2d(self, data: np.ndarray, buf: DeviceBuffer) -> None:
        flat = np.ascontiguousarray(data, dtype=np.float32).reshape(-1)
        try:
            buf._handle.copy_to_device(flat)
        except CudaAPIError as exc:
            raise ExecutionFailure(f"Host to device copy into {buf.name} failed: {exc}") from exc
        logger.debug("h2d %s: %d bytes", buf.name, flat.nbytes)

    def transfer_d2h(self, buf: DeviceBuffer, out: np.ndarray) -> None:
        try:
            buf._handle.copy_to_host(out)
        except CudaAPIError as exc:
            raise ExecutionFailure(f"Device to host copy from {buf.name} failed: {exc}") from exc
        logger.debug("d2h %s: %d bytes", buf.name, out.nbytes)

    def launch(self, kernel, grid: Dim3, block: Dim3, *args) -> None:
        problem = check_launch_config(grid, block)
        if problem is not None:
            self._record(LaunchFailure(f"Invalid launch configuration: {problem}"))
            return

        kernel_args = [arg._handle if isinstance(arg, DeviceBuffer) else arg for arg in args]
        py_func = getattr(kernel, 'py_func', kernel)
        name = getattr(py_func, '__name__', repr(kernel))
        logger.debug("launch %s grid=%s block=%s", name, grid, block)
        try:
            kernel[grid, block](*kernel_args)
        except (CudaAPIError, NumbaError) as exc:
            self._record(LaunchFailure(f"Launch of {name} failed: {exc}"), exc)
        except Exception as exc:
            # The simulator runs kernels inline, so faults inside them land here
            self._record(ExecutionFailure(f"Kernel {name} faulted: {exc}"), exc)

    def _record(self, error: AcceleratorError, cause: Optional[BaseException] = None):
        error.__cause__ = cause
        logger.warning("%s", error)
        self._last_error = error

    def last_error(self) -> Optional[AcceleratorError]:
        error, self._last_error = self._last_error, None
        return error

    def sync(self) -> None:
        try:
            cuda.synchronize()
        except CudaAPIError as exc:
            raise ExecutionFailure(f"Kernel execution failed: {exc}") from exc

    def memory_in_use(self) -> int:
        return self.pool.used()
