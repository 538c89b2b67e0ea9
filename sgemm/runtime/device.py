"""
Accelerator Device - Abstract hardware interface (HAL boundary).

The host orchestrator only talks to this interface. Backends provide memory
management, transfers and kernel launch; launch failures follow the CUDA
model of being recorded and fetched later through last_error().
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple
import numpy as np

from sgemm.errors import AcceleratorError


Dim3 = Tuple[int, ...]


@dataclass
class DeviceBuffer:
    """Handle to an allocated buffer in device global memory."""
    name: str
    addr: int
    size: int
    _handle: Any = None  # Backend-specific handle


class AcceleratorDevice(ABC):
    """
    Abstract accelerator interface.

    All HAL implementations must provide these operations. Allocation is
    accounted per device so callers can check for leaks with memory_in_use().
    """

    @property
    @abstractmethod
    def memory_size(self) -> int:
        """Bytes of global memory this device may hand out."""
        pass

    @abstractmethod
    def allocate(self, nbytes: int) -> DeviceBuffer:
        """Allocate a buffer. Raises AllocationFailure when exhausted."""
        pass

    @abstractmethod
    def free(self, buf: DeviceBuffer) -> None:
        """Release a buffer obtained from allocate()."""
        pass

    @abstractmethod
    def transfer_h2d(self, data: np.ndarray, buf: DeviceBuffer) -> None:
        """Transfer data from host to device."""
        pass

    @abstractmethod
    def transfer_d2h(self, buf: DeviceBuffer, out: np.ndarray) -> None:
        """
        Transfer data from device into the host array out.

        Waits for outstanding kernels first; a fault in one of them is raised
        here as ExecutionFailure.
        """
        pass

    @abstractmethod
    def launch(self, kernel, grid: Dim3, block: Dim3, *args) -> None:
        """
        Enqueue kernel over grid x block threads.

        Returns immediately. A launch that cannot be scheduled does not raise;
        the error is recorded for last_error().
        """
        pass

    @abstractmethod
    def last_error(self) -> Optional[AcceleratorError]:
        """Return and clear the error recorded by the most recent failed launch."""
        pass

    @abstractmethod
    def sync(self) -> None:
        """Wait for all submitted work to complete."""
        pass

    @abstractmethod
    def memory_in_use(self) -> int:
        """Bytes currently allocated on the device through this handle."""
        pass

    @contextmanager
    def buffer(self, nbytes: int) -> Iterator[DeviceBuffer]:
        """Allocate a buffer for the duration of a with-block."""
        buf = self.allocate(nbytes)
        try:
            yield buf
        finally:
            self.free(buf)
