"""
Dense row-major float matrix used by every HMM recurrence.

The matrix owns a single contiguous float64 numpy buffer and exposes
bounds-checked cell access, in-place traversals and lazy row/column
iterators. It carries no algorithm-specific logic.
"""

import math
import operator
from typing import Callable, Iterable, Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from ..exceptions import MatrixIndexError, MatrixShapeError

CellFunction = Callable[[int, int, float], float]


class FloatIterator:
    """
    Lazy, single-pass, forward-only sequence of floats.

    Once consumed it stays exhausted; ask the matrix for a new one to
    traverse the same row or column again.
    """

    def __init__(self, values: Iterable[float]):
        self._values = iter(values)

    def __iter__(self) -> Iterator[float]:
        return self

    def __next__(self) -> float:
        return float(next(self._values))

    def fold_left(self, initial, f):
        acc = initial
        for value in self:
            acc = f(acc, value)
        return acc

    def sum(self) -> float:
        return self.fold_left(0.0, operator.add)

    def max(self) -> float:
        return self.fold_left(-math.inf, max)

    def min(self) -> float:
        return self.fold_left(math.inf, min)

    def index_of(self, value: float) -> int:
        """Position of the first element equal to ``value``, or -1."""
        for index, current in enumerate(self):
            if current == value:
                return index
        return -1


class FloatMatrix:
    """
    Dense 2-D float64 matrix with row-major storage.

    Args:
        rows: Number of rows (> 0)
        cols: Number of columns (> 0)
        init: Constant fill value, or a callable ``(row, col) -> value``
            evaluated in row-major order
    """

    def __init__(self, rows: int, cols: int,
                 init: Union[float, Callable[[int, int], float]] = 0.0):
        if rows <= 0 or cols <= 0:
            raise MatrixShapeError(f"Matrix dimensions must be positive, got {rows}x{cols}")

        self.rows = int(rows)
        self.cols = int(cols)
        self._data = np.zeros((self.rows, self.cols), dtype=np.float64)

        if callable(init):
            self.foreach_update(lambda y, x, _: init(y, x))
        elif init:
            self._data.fill(float(init))

    @classmethod
    def from_rows(cls, values) -> 'FloatMatrix':
        """Build a matrix from a nested sequence, 2-D array or another matrix."""
        if isinstance(values, FloatMatrix):
            return values.copy()

        try:
            array = np.array(values, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise MatrixShapeError(f"Cannot build a float matrix from these rows: {e}")

        if array.ndim != 2 or array.size == 0:
            raise MatrixShapeError(f"Expected a non-empty 2-D table, got shape {array.shape}")

        matrix = cls(array.shape[0], array.shape[1])
        matrix._data[:, :] = array
        return matrix

    @classmethod
    def constant(cls, rows: int, cols: int, value: float) -> 'FloatMatrix':
        return cls(rows, cols, float(value))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def _check(self, row: int, col: int) -> None:
        if not 0 <= row < self.rows:
            raise MatrixIndexError(f"row {row}/{self.rows}")
        if not 0 <= col < self.cols:
            raise MatrixIndexError(f"col {col}/{self.cols}")

    def _resolve(self, span: Optional[Sequence[int]], size: int, axis: str) -> Sequence[int]:
        if span is None:
            return range(size)
        if len(span):
            low, high = min(span), max(span)
            if low < 0:
                raise MatrixIndexError(f"{axis} {low}/{size}")
            if high >= size:
                raise MatrixIndexError(f"{axis} {high}/{size}")
        return span

    def get(self, row: int, col: int) -> float:
        self._check(row, col)
        return float(self._data[row, col])

    def set(self, row: int, col: int, value: float) -> None:
        self._check(row, col)
        self._data[row, col] = value

    def __getitem__(self, key: Tuple[int, int]) -> float:
        row, col = key
        return self.get(row, col)

    def __setitem__(self, key: Tuple[int, int], value: float) -> None:
        row, col = key
        self.set(row, col, value)

    def map(self, f: CellFunction) -> 'FloatMatrix':
        """Return a new matrix whose cells are ``f(row, col, old)``."""
        result = FloatMatrix(self.rows, self.cols)
        data = self._data
        result.foreach_update(lambda y, x, _: f(y, x, float(data[y, x])))
        return result

    def foreach(self, f: Callable[[int, int, float], object],
                rows: Optional[Sequence[int]] = None,
                cols: Optional[Sequence[int]] = None) -> None:
        rows = self._resolve(rows, self.rows, 'row')
        cols = self._resolve(cols, self.cols, 'col')
        for y in rows:
            for x in cols:
                f(y, x, float(self._data[y, x]))

    def foreach_update(self, f: CellFunction,
                       rows: Optional[Sequence[int]] = None,
                       cols: Optional[Sequence[int]] = None) -> None:
        """
        Replace every cell of the (sub)range with ``f(row, col, old)`` in place.

        Cells are visited row-major in ascending order, so a cell may read
        values written earlier in the same pass.
        """
        rows = self._resolve(rows, self.rows, 'row')
        cols = self._resolve(cols, self.cols, 'col')
        data = self._data
        for y in rows:
            for x in cols:
                data[y, x] = f(y, x, float(data[y, x]))

    def fold_left(self, initial, f):
        acc = initial
        for y in range(self.rows):
            for x in range(self.cols):
                acc = f(acc, y, x, float(self._data[y, x]))
        return acc

    def row(self, y: int) -> FloatIterator:
        self._check(y, 0)
        return FloatIterator(self._data[y, x] for x in range(self.cols))

    def col(self, x: int) -> FloatIterator:
        self._check(0, x)
        return FloatIterator(self._data[y, x] for y in range(self.rows))

    def iter_rows(self) -> Iterator[FloatIterator]:
        for y in range(self.rows):
            yield self.row(y)

    def row_view(self, y: int) -> np.ndarray:
        """Read-only numpy view of row ``y``."""
        self._check(y, 0)
        view = self._data[y].view()
        view.flags.writeable = False
        return view

    def col_view(self, x: int) -> np.ndarray:
        """Read-only numpy view of column ``x``."""
        self._check(0, x)
        view = self._data[:, x].view()
        view.flags.writeable = False
        return view

    def sum(self) -> float:
        return float(self._data.sum())

    def copy(self) -> 'FloatMatrix':
        result = FloatMatrix(self.rows, self.cols)
        result._data[:, :] = self._data
        return result

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def to_list(self):
        return self._data.tolist()

    def __eq__(self, other) -> bool:
        if not isinstance(other, FloatMatrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"FloatMatrix(rows={self.rows}, cols={self.cols})"

    def __str__(self) -> str:
        lines = []
        for row in self.iter_rows():
            lines.append("| " + ", ".join(str(value) for value in row) + " |")
        return "\n".join(lines)
