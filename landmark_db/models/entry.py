"""
Entry and database models.

An entry is one annotated sample: a grayscale image, its landmark shape and
its bounding rectangle. Shapes and rectangles are ``(2, N)`` float32 arrays,
column ``i`` holding the (x, y) of point ``i``.
"""

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np


@dataclass
class Entry:
    """
    One (image, shape, rect) triple.

    Rect columns are the corners top-left, top-right, bottom-left,
    bottom-right.
    """
    image: np.ndarray
    shape: np.ndarray
    rect: np.ndarray

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    @property
    def num_landmarks(self) -> int:
        return self.shape.shape[1]


@dataclass
class Database:
    """
    Three index-aligned collections of imported samples.

    ``images[i]``, ``shapes[i]`` and ``rects[i]`` always describe the same
    sample. The lists can be handed directly to ``import_database``.
    """
    images: list = field(default_factory=list)
    shapes: list = field(default_factory=list)
    rects: list = field(default_factory=list)

    def append(self, entry: Entry) -> None:
        """Append all three parts of an entry."""
        append_entry(entry, self.images, self.shapes, self.rects)

    def __len__(self) -> int:
        return len(self.shapes)

    def __getitem__(self, index: int) -> Entry:
        return Entry(self.images[index], self.shapes[index], self.rects[index])

    def __iter__(self) -> Iterator[Entry]:
        for image, shape, rect in zip(self.images, self.shapes, self.rects):
            yield Entry(image, shape, rect)


def append_entry(entry: Entry, images: list, shapes: list, rects: list) -> None:
    """Append an entry to caller-owned collections, keeping them aligned."""
    images.append(entry.image)
    shapes.append(entry.shape)
    rects.append(entry.rect)
