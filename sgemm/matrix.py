"""
Dense row-major matrix descriptors.

A MatrixView describes a 2-D window onto a flat float32 buffer:

    element (r, c)  ->  data[offset + r * stride + c]

Full matrices own their buffer (width == stride, offset == 0). Tiles are
derived views that alias the parent's buffer and only differ in offset and
extent, so carving a matrix into blocks never copies element data.

Example:
    A = MatrixView.from_array(np.arange(1024, dtype=np.float32).reshape(32, 32))
    Asub = A.tile(1, 0)        # rows 16..31, cols 0..15
    Asub[0, 0] == A[16, 0]     # same storage
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from sgemm.kernels.tile import BLOCK_SIZE

FLOAT_BYTES = np.dtype(np.float32).itemsize


@dataclass
class MatrixView:
    """
    Strided view of a dense float32 matrix.

    Attributes:
        width: Number of columns
        height: Number of rows
        stride: Elements between the starts of consecutive rows (>= width)
        data: Flat float32 backing buffer, possibly shared with other views
        offset: Index of element (0, 0) inside data
    """
    width: int
    height: int
    stride: int
    data: np.ndarray
    offset: int = 0

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Negative extent {self.height}x{self.width}")
        if self.width > self.stride:
            raise ValueError(f"Width {self.width} exceeds stride {self.stride}")
        if self.offset < 0:
            raise ValueError(f"Negative offset {self.offset}")
        if self.data.ndim != 1 or self.data.dtype != np.float32:
            raise ValueError(
                f"Backing buffer must be 1-D float32, got {self.data.ndim}-D {self.data.dtype}"
            )
        if self.height and self.width:
            last = self.offset + (self.height - 1) * self.stride + self.width
            if last > self.data.size:
                raise ValueError(
                    f"View of {self.height}x{self.width} (stride {self.stride}, offset "
                    f"{self.offset}) overruns buffer of {self.data.size} elements"
                )

    @classmethod
    def from_array(cls, array) -> MatrixView:
        """Copy a 2-D array into a fresh, unpadded float32 matrix."""
        array = np.asarray(array, dtype=np.float32)
        if array.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got shape {array.shape}")
        height, width = array.shape
        data = np.ascontiguousarray(array).reshape(-1).copy()
        return cls(width=width, height=height, stride=width, data=data)

    @classmethod
    def zeros(cls, height: int, width: int) -> MatrixView:
        return cls(width=width, height=height, stride=width,
                   data=np.zeros(height * width, dtype=np.float32))

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

    @property
    def is_full(self) -> bool:
        """True for an unpadded matrix that starts at the head of its buffer."""
        return self.offset == 0 and self.width == self.stride

    @property
    def nbytes(self) -> int:
        """Bytes spanned by the view's rows, padding included."""
        return self.height * self.stride * FLOAT_BYTES

    def _index(self, key) -> int:
        row, col = key
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"({row}, {col}) outside {self.height}x{self.width} view")
        return self.offset + row * self.stride + col

    def __getitem__(self, key) -> np.float32:
        return self.data[self._index(key)]

    def __setitem__(self, key, value):
        self.data[self._index(key)] = value

    def region(self) -> np.ndarray:
        """Flat slice of data covering every row of the view (shares memory)."""
        return self.data[self.offset:self.offset + self.height * self.stride]

    def to_array(self) -> np.ndarray:
        """Return the view's elements as a new (height, width) array."""
        rows = self.region().reshape(self.height, self.stride)
        return rows[:, :self.width].copy()

    def tile(self, block_row: int, block_col: int, block_size: int = BLOCK_SIZE) -> MatrixView:
        return sub_matrix(self, block_row, block_col, block_size)


def sub_matrix(parent: MatrixView, block_row: int, block_col: int,
               block_size: int = BLOCK_SIZE) -> MatrixView:
    """
    Derive the block_size x block_size tile at block coordinates
    (block_row, block_col) of parent.

    The tile shares parent's buffer and stride. Block alignment against
    parent's extent is the caller's job; only a tile that would run past the
    end of the buffer itself is rejected (by MatrixView validation).
    """
    return MatrixView(
        width=block_size,
        height=block_size,
        stride=parent.stride,
        data=parent.data,
        offset=parent.offset + block_row * block_size * parent.stride + block_col * block_size,
    )


__all__ = ['MatrixView', 'sub_matrix', 'FLOAT_BYTES']
