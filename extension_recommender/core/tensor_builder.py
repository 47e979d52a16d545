# extension_recommender/core/tensor_builder.py
import queue
from contextlib import contextmanager
from typing import Iterator, Tuple

import numpy as np

from .encoding import EncodingTable
from .signals import SignalSet
from ..utils.logging import get_logger

logger = get_logger('core.tensor_builder')

TENSOR_DTYPE = np.uint8

# (signal row, assembled matrix)
ScratchBuffers = Tuple[np.ndarray, np.ndarray]


class ScratchPool:
    """
    Bounded pool of scratch buffers with exclusive checkout.

    Each in-flight call owns the buffers it checked out until it releases
    them. When the pool is empty a new pair is allocated; when it is full a
    released pair is dropped.
    """

    def __init__(self, entity_size: int, features_size: int, size: int = 4):
        self.entity_size = entity_size
        self.features_size = features_size
        self._pool: "queue.Queue[ScratchBuffers]" = queue.Queue(maxsize=max(1, size))

    def _allocate(self) -> ScratchBuffers:
        logger.debug(
            f"Allocating scratch buffers ({self.entity_size} x {self.features_size})"
        )
        return (
            np.zeros(self.features_size, dtype=TENSOR_DTYPE),
            np.zeros((self.entity_size, self.features_size), dtype=TENSOR_DTYPE),
        )

    def checkout(self) -> ScratchBuffers:
        try:
            return self._pool.get_nowait()
        except queue.Empty:
            return self._allocate()

    def release(self, buffers: ScratchBuffers):
        try:
            self._pool.put_nowait(buffers)
        except queue.Full:
            pass

    def available(self) -> int:
        """Number of idle buffer pairs"""
        return self._pool.qsize()


class TensorBuilder:
    """
    Builds the (entities x features) model input from a signal set.

    Every row is the same signal row, the one-hot encoding of the caller's
    context, plus a single marker bit at column i telling the model which
    candidate extension row i scores. One inference call therefore scores
    every candidate against the same context.
    """

    def __init__(self, table: EncodingTable, pool_size: int = 4):
        self.table = table
        self.pool = ScratchPool(table.entity_size, table.features_size, size=pool_size)
        self._diagonal = np.arange(table.entity_size)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.table.entity_size, self.table.features_size)

    def fill_signal_row(self, signals: SignalSet, signal_row: np.ndarray) -> int:
        """
        Zero the signal row and turn on the column of every known token

        Args:
            signals: Normalized caller signals
            signal_row: Buffer of width features_size, overwritten in place

        Returns:
            Number of columns set
        """
        signal_row.fill(0)
        matched = 0

        for category, encoding in self.table.feature_encodings.items():
            tokens = signals.get(category)
            if not tokens:
                continue

            for token in sorted(tokens):
                index = encoding.get(token)
                if index is None:
                    # Unknown tokens carry no signal
                    logger.warning(f"Invalid {category} {token}")
                    continue
                signal_row[index] = 1
                matched += 1

        return matched

    def fill_matrix(self, signal_row: np.ndarray, matrix: np.ndarray):
        """Broadcast the signal row into every row and set each row's marker bit"""
        matrix[:] = signal_row
        matrix[self._diagonal, self._diagonal] = 1

    @contextmanager
    def assemble(self, signals: SignalSet) -> Iterator[np.ndarray]:
        """
        Yield the assembled matrix backed by pooled scratch buffers.

        The yielded array is only valid inside the ``with`` block; its
        buffers go back to the pool on exit.
        """
        signal_row, matrix = self.pool.checkout()
        try:
            matched = self.fill_signal_row(signals, signal_row)
            self.fill_matrix(signal_row, matrix)
            logger.debug(
                f"Assembled matrix {matrix.shape} with {matched} active signal column(s)"
            )
            yield matrix
        finally:
            self.pool.release((signal_row, matrix))

    def build(self, signals: SignalSet) -> np.ndarray:
        """Return a freshly owned copy of the assembled matrix"""
        with self.assemble(signals) as matrix:
            return matrix.copy()
