import numpy as np
import pytest

from sgemm.kernels import BLOCK_SIZE
from sgemm.ops import matmul, reference_matmul


@pytest.mark.parametrize("tiled", [False, True])
def test_matmul_matches_reference(device, rng, tiled):
    a = rng.random((BLOCK_SIZE, 2 * BLOCK_SIZE), dtype=np.float32)
    b = rng.random((2 * BLOCK_SIZE, BLOCK_SIZE), dtype=np.float32)
    c = matmul(a, b, tiled=tiled, device=device)
    assert c.shape == (BLOCK_SIZE, BLOCK_SIZE)
    assert c.dtype == np.float32
    np.testing.assert_allclose(c, reference_matmul(a, b), rtol=1e-5, atol=1e-5)


def test_matmul_accepts_lists_and_float64(device):
    a = np.eye(BLOCK_SIZE).tolist()
    b = np.arange(BLOCK_SIZE * BLOCK_SIZE, dtype=np.float64).reshape(BLOCK_SIZE, BLOCK_SIZE)
    np.testing.assert_array_equal(matmul(a, b, device=device), b.astype(np.float32))


def test_matmul_leaves_no_device_memory(device):
    a = np.ones((BLOCK_SIZE, BLOCK_SIZE), dtype=np.float32)
    matmul(a, a, device=device)
    assert device.memory_in_use() == 0
