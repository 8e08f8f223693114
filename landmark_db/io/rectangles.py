"""
Rectangle file reading and writing.

File format::

    # optional comments
    3
    x y width height
    x y width height
    x y width height

The first data line holds the number of rectangles; each following line is
one axis-aligned box, listed in the same order as the annotation files the
boxes belong to.
"""

from pathlib import Path

from ..core.constants import RECT_FILE_VALUES_PER_LINE
from ..core.exceptions import RectangleFileError
from ..core.logger import get_logger
from ..geometry import create_rectangle, rect_to_xywh

logger = get_logger(__name__)


def _data_lines(path):
    with open(path, 'r', encoding='utf-8') as f:
        for line_number, raw_line in enumerate(f, start=1):
            line = raw_line.strip()
            if line and not line.startswith('#'):
                yield line_number, line


def import_rectangles(file_name):
    """
    Load an ordered list of rects.

    No check against the number of annotation files is done here.

    Args:
        file_name: Path to the rectangle file; None or empty means no
            rectangles

    Returns:
        List of 2x4 float32 rects (possibly empty)

    Raises:
        RectangleFileError: If the file exists but is malformed
    """
    if not file_name:
        return []

    path = Path(file_name)
    if not path.is_file():
        logger.warning(f"Rectangle file not found: {path}")
        return []

    rects = []
    declared = None
    try:
        for line_number, line in _data_lines(path):
            tokens = line.split()
            if declared is None:
                if len(tokens) != 1 or not tokens[0].isdigit():
                    raise RectangleFileError(f"{path}:{line_number}: expected rectangle count")
                declared = int(tokens[0])
                continue

            if len(tokens) != RECT_FILE_VALUES_PER_LINE:
                raise RectangleFileError(
                    f"{path}:{line_number}: expected {RECT_FILE_VALUES_PER_LINE} values, got {len(tokens)}"
                )
            try:
                x, y, w, h = (float(t) for t in tokens)
            except ValueError:
                raise RectangleFileError(f"{path}:{line_number}: invalid number") from None
            rects.append(create_rectangle((x, y), (x + w, y + h)))
    except (OSError, UnicodeDecodeError) as e:
        raise RectangleFileError(f"Cannot read rectangle file {path}: {e}") from e

    if declared is None:
        return []
    if declared != len(rects):
        raise RectangleFileError(
            f"{path}: declares {declared} rectangles but contains {len(rects)}"
        )

    logger.debug(f"Loaded {len(rects)} rectangles from {path}")
    return rects


def export_rectangles(file_name, rects):
    """
    Write rects in the format read by ``import_rectangles``.

    Args:
        file_name: Output path; parent directories are created
        rects: Iterable of 2xM rects, stored as their min/max extent
    """
    path = Path(file_name)
    path.parent.mkdir(parents=True, exist_ok=True)

    rects = list(rects)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(f"{len(rects)}\n")
        for rect in rects:
            x, y, w, h = rect_to_xywh(rect)
            f.write(f"{x:.6f} {y:.6f} {w:.6f} {h:.6f}\n")

    return str(path)
