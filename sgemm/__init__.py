# tiled-sgemm
# Dense float32 matrix multiplication on SIMT accelerators: direct vs. shared-memory tiled kernels

from sgemm.errors import AcceleratorError, AllocationFailure, LaunchFailure, ExecutionFailure
from sgemm.matrix import MatrixView, sub_matrix
from sgemm.kernels import BLOCK_SIZE, matmul_direct, matmul_tiled
from sgemm.runtime import multiply, launch_config
from sgemm.hal import CudaDevice

__all__ = [
    'AcceleratorError', 'AllocationFailure', 'LaunchFailure', 'ExecutionFailure',
    'MatrixView', 'sub_matrix',
    'BLOCK_SIZE', 'matmul_direct', 'matmul_tiled',
    'multiply', 'launch_config',
    'CudaDevice',
]
