# Device interface, memory accounting and host orchestration

from sgemm.runtime.allocator import MemoryPool
from sgemm.runtime.device import AcceleratorDevice, DeviceBuffer
from sgemm.runtime.executor import multiply, launch_config

__all__ = [
    'MemoryPool',
    'AcceleratorDevice',
    'DeviceBuffer',
    'multiply',
    'launch_config',
]
