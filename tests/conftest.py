import os

# Run kernels on numba's CUDA simulator unless the caller asked for hardware.
# Must happen before anything imports numba.
os.environ.setdefault("NUMBA_ENABLE_CUDASIM", "1")

import numpy as np
import pytest

from sgemm.hal.cuda import CudaDevice


@pytest.fixture
def device():
    return CudaDevice()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
