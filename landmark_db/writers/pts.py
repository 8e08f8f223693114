"""
iBUG format database writer.

This module handles:
- ``.pts`` annotation file writing (1-based pixel coordinates)
- Exporting a whole imported database as a normalized iBUG directory:
  one image and one ``.pts`` file per entry plus a single rectangle file

Exported directories can be imported again with ``import_database``.

PTS format:
    version: 1
    n_points: N
    {
    x y
    ...
    }
"""

import os

from tqdm import tqdm

from ..core.constants import (
    EXPORT_IMAGE_EXTENSION,
    PTS_CLOSE_DELIMITER,
    PTS_COUNT_KEYWORD,
    PTS_OPEN_DELIMITER,
    PTS_ORIGIN_OFFSET,
    PTS_VERSION_LINE,
    RECTANGLES_FILE,
)
from ..core.logger import get_logger
from ..image import unicode_safe_imwrite
from ..io.rectangles import export_rectangles

logger = get_logger(__name__)


def write_pts_file(file_name, shape):
    """
    Write a (2, N) shape as a ``.pts`` file.

    Coordinates are shifted back to the 1-based origin used by the format.
    """
    num_points = shape.shape[1]
    with open(file_name, 'w', encoding='utf-8') as f:
        f.write(f"{PTS_VERSION_LINE}\n")
        f.write(f"{PTS_COUNT_KEYWORD} {num_points}\n")
        f.write(f"{PTS_OPEN_DELIMITER}\n")
        for i in range(num_points):
            x = float(shape[0, i]) + PTS_ORIGIN_OFFSET
            y = float(shape[1, i]) + PTS_ORIGIN_OFFSET
            f.write(f"{x:.6f} {y:.6f}\n")
        f.write(f"{PTS_CLOSE_DELIMITER}\n")


def export_database(output_dir, images, shapes, rects, prefix="entry", show_progress=True):
    """
    Export aligned collections as an iBUG style directory.

    Args:
        output_dir: Target directory, created if missing
        images, shapes, rects: Index-aligned collections
        prefix: File name prefix for entries
        show_progress: Show a progress bar

    Returns:
        (number_of_entries_written, rectangle_file_path)

    Raises:
        ValueError: If the collections differ in length
        OSError: If an image cannot be written
    """
    if not (len(images) == len(shapes) == len(rects)):
        raise ValueError(
            f"Collections differ in length: {len(images)} images, "
            f"{len(shapes)} shapes, {len(rects)} rects"
        )

    os.makedirs(output_dir, exist_ok=True)
    width = max(4, len(str(len(shapes))))

    for i, (image, shape) in enumerate(tqdm(list(zip(images, shapes)), desc="Exporting",
                                            unit="entry", leave=False,
                                            disable=not show_progress)):
        base_path = os.path.join(output_dir, f"{prefix}_{i:0{width}d}")
        success, _, _ = unicode_safe_imwrite(base_path + EXPORT_IMAGE_EXTENSION, image)
        if not success:
            raise OSError(f"Failed to write image {base_path + EXPORT_IMAGE_EXTENSION}")
        write_pts_file(base_path + ".pts", shape)

    rect_file = export_rectangles(os.path.join(output_dir, RECTANGLES_FILE), rects)
    logger.info(f"Exported {len(shapes)} entries to {output_dir}")
    return len(shapes), rect_file
