# Hardware abstraction layer backends

from sgemm.hal.cuda import CudaDevice

__all__ = ['CudaDevice']
