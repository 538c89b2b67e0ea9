"""
Accelerator error taxonomy.

Every failure the runtime can report derives from AcceleratorError so callers
can catch the whole family at once. The original driver exception, when there
is one, is chained as __cause__.
"""


class AcceleratorError(RuntimeError):
    """Base class for errors signalled by the accelerator runtime."""


class AllocationFailure(AcceleratorError, MemoryError):
    """Device memory exhausted while staging buffers."""


class LaunchFailure(AcceleratorError):
    """Kernel could not be scheduled (bad grid/block configuration, driver refused)."""


class ExecutionFailure(AcceleratorError):
    """A fault occurred while the kernel ran; seen only after a sync point."""


__all__ = [
    'AcceleratorError',
    'AllocationFailure',
    'LaunchFailure',
    'ExecutionFailure',
]
