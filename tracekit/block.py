"""Image blocks that accumulate filtered samples, and the block scheduler."""

from __future__ import annotations

import enum
import logging
import math
import threading

import numpy as np

from tracekit.bitmap import Bitmap
from tracekit.color import Color3
from tracekit.common import TracerError
from tracekit.vector import format_vector

logger = logging.getLogger(__name__)

FILTER_RESOLUTION = 32
"""Number of entries used to tabulate a reconstruction filter."""


class ImageBlock:
    """A weighted RGBA image tile with a border for the filter footprint.

    ``filter`` is any object with a ``radius`` attribute and an ``eval(x)``
    method giving the radially symmetric filter value at distance ``x``;
    it may be None for blocks that only hold finished pixels.
    """

    def __init__(self, size, filter=None) -> None:
        self.offset = (0, 0)
        self.size = (int(size[0]), int(size[1]))
        self.border_size = 0
        self.filter_radius = 0.0
        self._filter_table: np.ndarray | None = None
        self._lookup_factor = 0.0
        self._lock = threading.Lock()

        if filter is not None:
            radius = float(filter.radius)
            self.filter_radius = radius
            self.border_size = int(math.ceil(radius - 0.5))
            table = [
                float(filter.eval(radius * i / FILTER_RESOLUTION))
                for i in range(FILTER_RESOLUTION)
            ]
            table.append(0.0)
            self._filter_table = np.array(table)
            self._lookup_factor = FILTER_RESOLUTION / radius

        width, height = self.size
        self.data = np.zeros(
            (height + 2 * self.border_size, width + 2 * self.border_size, 4)
        )

    @property
    def rows(self) -> int:
        """Allocated height including the border."""
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        """Allocated width including the border."""
        return self.data.shape[1]

    @property
    def lock(self) -> threading.Lock:
        """Lock guarding merges into this block."""
        return self._lock

    def clear(self) -> None:
        """Reset all pixels and weights to zero."""
        self.data.fill(0.0)

    def to_bitmap(self) -> Bitmap:
        """Normalise by the filter weights and drop the border."""
        width, height = self.size
        b = self.border_size
        region = self.data[b : b + height, b : b + width]
        weights = region[..., 3:4]
        rgb = np.divide(
            region[..., :3],
            weights,
            out=np.zeros((height, width, 3)),
            where=weights != 0,
        )
        return Bitmap(width, height, rgb)

    def from_bitmap(self, bitmap: Bitmap) -> None:
        """Fill the block from a finished image, with unit weights."""
        if bitmap.cols != self.cols or bitmap.rows != self.rows:
            raise TracerError("Invalid bitmap dimensions!")
        width, height = self.size
        self.data[:height, :width, :3] = bitmap.data[:height, :width]
        self.data[:height, :width, 3] = 1.0

    def put(self, pos, value: Color3) -> None:
        """Splat a radiance sample at image position ``pos`` through the filter.

        Invalid values (negative, NaN or infinite) are reported and dropped.
        """
        if not value.is_valid():
            logger.error("Integrator: computed an invalid radiance value: %s", value)
            return
        if self._filter_table is None:
            raise TracerError("ImageBlock: no reconstruction filter to splat with")

        b = self.border_size
        px = float(pos[0]) - 0.5 - (self.offset[0] - b)
        py = float(pos[1]) - 0.5 - (self.offset[1] - b)
        radius = self.filter_radius

        x0 = max(math.ceil(px - radius), 0)
        y0 = max(math.ceil(py - radius), 0)
        x1 = min(math.floor(px + radius), self.cols - 1)
        y1 = min(math.floor(py + radius), self.rows - 1)
        if x0 > x1 or y0 > y1:
            return

        weights_x = self._weights(np.arange(x0, x1 + 1), px)
        weights_y = self._weights(np.arange(y0, y1 + 1), py)
        sample = np.array([value.r, value.g, value.b, 1.0])
        self.data[y0 : y1 + 1, x0 : x1 + 1] += (
            np.outer(weights_y, weights_x)[:, :, None] * sample
        )

    def _weights(self, coords: np.ndarray, center: float) -> np.ndarray:
        index = (np.abs(coords - center) * self._lookup_factor).astype(int)
        return self._filter_table[np.minimum(index, FILTER_RESOLUTION)]

    def put_block(self, block: ImageBlock) -> None:
        """Add another block, border included, at its offset into this one."""
        ox = block.offset[0] - self.offset[0] + self.border_size - block.border_size
        oy = block.offset[1] - self.offset[1] + self.border_size - block.border_size
        width = block.size[0] + 2 * block.border_size
        height = block.size[1] + 2 * block.border_size
        with self._lock:
            self.data[oy : oy + height, ox : ox + width] += block.data[:height, :width]

    def __str__(self) -> str:
        return (
            f"ImageBlock[offset={format_vector(np.array(self.offset))}, "
            f"size={format_vector(np.array(self.size))}]]"
        )


class _Direction(enum.IntEnum):
    RIGHT = 0
    DOWN = 1
    LEFT = 2
    UP = 3


class BlockGenerator:
    """Hands out image tiles in a spiral starting at the image centre.

    Safe to call from several threads at once.
    """

    def __init__(self, size, block_size: int) -> None:
        self.size = (int(size[0]), int(size[1]))
        self.block_size = int(block_size)
        self._num_blocks = (
            int(math.ceil(self.size[0] / float(self.block_size))),
            int(math.ceil(self.size[1] / float(self.block_size))),
        )
        self._blocks_left = self._num_blocks[0] * self._num_blocks[1]
        self._direction = _Direction.RIGHT
        self._block = [self._num_blocks[0] // 2, self._num_blocks[1] // 2]
        self._steps_left = 1
        self._num_steps = 1
        self._lock = threading.Lock()

    def block_count(self) -> int:
        """Number of blocks still to be handed out."""
        return self._blocks_left

    def next(self, block: ImageBlock) -> bool:
        """Set the offset and size of ``block`` to the next tile.

        Returns False once every tile has been handed out.
        """
        with self._lock:
            if self._blocks_left == 0:
                return False

            pos = (self._block[0] * self.block_size, self._block[1] * self.block_size)
            block.offset = pos
            block.size = (
                min(self.size[0] - pos[0], self.block_size),
                min(self.size[1] - pos[1], self.block_size),
            )

            self._blocks_left -= 1
            if self._blocks_left == 0:
                return True

            while True:
                self._step()
                if self._inside():
                    break
            return True

    def _step(self) -> None:
        if self._direction is _Direction.RIGHT:
            self._block[0] += 1
        elif self._direction is _Direction.DOWN:
            self._block[1] += 1
        elif self._direction is _Direction.LEFT:
            self._block[0] -= 1
        else:
            self._block[1] -= 1

        self._steps_left -= 1
        if self._steps_left == 0:
            self._direction = _Direction((self._direction + 1) % 4)
            if self._direction in (_Direction.LEFT, _Direction.RIGHT):
                self._num_steps += 1
            self._steps_left = self._num_steps

    def _inside(self) -> bool:
        x, y = self._block
        return 0 <= x < self._num_blocks[0] and 0 <= y < self._num_blocks[1]