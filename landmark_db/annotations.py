"""
Annotation file parsers.

This module handles the two supported landmark annotation dialects:
- IMM ``.asf`` files: commented, record-per-landmark, coordinates given as
  fractions of image width and height
- iBUG ``.pts`` files: fixed header followed by one ``x y`` pair per line,
  in 1-based pixel coordinates

Each parser is a plain function from a file path to a ``(2, N)`` float32
shape and raises ``AnnotationParseError`` when the file cannot be used.
"""

import numpy as np

from .core.constants import (
    ASF_COMMENT_MARKER,
    ASF_COUNT_LINE_MAX_LENGTH,
    ASF_MIN_RECORD_TOKENS,
    PTS_ORIGIN_OFFSET,
    SUPPORTED_IMAGE_FORMATS,
)
from .core.exceptions import AnnotationParseError


def _read_lines(file_name):
    """Read all lines of a text annotation file."""
    try:
        with open(file_name, 'r', encoding='utf-8') as f:
            return f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise AnnotationParseError(file_name, f"unreadable ({e})") from e


def _mentions_image_file(line):
    lowered = line.lower()
    return any(ext in lowered for ext in SUPPORTED_IMAGE_FORMATS)


def _parse_float(token, file_name, line_number):
    try:
        return float(token)
    except ValueError:
        raise AnnotationParseError(
            file_name, f"line {line_number}: invalid coordinate {token!r}"
        ) from None


def parse_asf_file(file_name):
    """
    Parse an IMM ``.asf`` annotation file.

    Blank lines and ``#`` comments are skipped, the host image line is
    ignored, a short numeric line declares the landmark count and every other
    line is a ``<path> <type> <x> <y> ...`` record. Coordinates are returned
    as read, i.e. still normalized to [0, 1].

    Args:
        file_name: Path to the .asf file

    Returns:
        float32 array of shape (2, N)

    Raises:
        AnnotationParseError: If the file is unreadable, declares no
            landmarks, or has a record count different from the declared one
    """
    shape = None
    landmark_count = 0

    for line_number, raw_line in enumerate(_read_lines(file_name), start=1):
        line = raw_line.strip()
        if not line or line.startswith(ASF_COMMENT_MARKER):
            continue

        if _mentions_image_file(line):
            # Host image file name, metadata only
            continue

        if len(line) < ASF_COUNT_LINE_MAX_LENGTH and line.isdigit():
            if shape is not None:
                raise AnnotationParseError(file_name, f"line {line_number}: duplicate landmark count")
            num_points = int(line)
            if num_points <= 0:
                raise AnnotationParseError(file_name, "landmark count must be positive")
            shape = np.zeros((2, num_points), dtype=np.float32)
            continue

        tokens = line.split()
        if len(tokens) < ASF_MIN_RECORD_TOKENS:
            raise AnnotationParseError(file_name, f"line {line_number}: malformed landmark record")
        if shape is None:
            raise AnnotationParseError(file_name, f"line {line_number}: landmark record before count")
        if landmark_count >= shape.shape[1]:
            raise AnnotationParseError(
                file_name, f"more than {shape.shape[1]} landmark records"
            )

        shape[0, landmark_count] = _parse_float(tokens[2], file_name, line_number)
        shape[1, landmark_count] = _parse_float(tokens[3], file_name, line_number)
        landmark_count += 1

    if shape is None:
        raise AnnotationParseError(file_name, "no landmark count found")
    if landmark_count < shape.shape[1]:
        raise AnnotationParseError(
            file_name, f"expected {shape.shape[1]} landmarks, found {landmark_count}"
        )

    return shape


def parse_pts_file(file_name):
    """
    Parse an iBUG ``.pts`` annotation file.

    Layout::

        version: 1
        n_points: 68
        {
        x y
        ...
        }

    The 1-based pixel coordinates are shifted to the 0-based convention.

    Args:
        file_name: Path to the .pts file

    Returns:
        float32 array of shape (2, N)

    Raises:
        AnnotationParseError: If the file is unreadable, the header is
            invalid, or the body holds fewer than N points
    """
    lines = _read_lines(file_name)
    if len(lines) < 3:
        raise AnnotationParseError(file_name, "truncated header")

    # lines[0] is the version marker, lines[2] the opening brace
    header = lines[1].split()
    if len(header) < 2:
        raise AnnotationParseError(file_name, "missing point count")
    try:
        num_points = int(header[1])
    except ValueError:
        raise AnnotationParseError(file_name, f"invalid point count {header[1]!r}") from None
    if num_points <= 0:
        raise AnnotationParseError(file_name, "point count must be positive")

    body = lines[3:]
    if len(body) < num_points:
        raise AnnotationParseError(
            file_name, f"truncated annotation: expected {num_points} points, found {len(body)} lines"
        )

    shape = np.zeros((2, num_points), dtype=np.float32)
    for i in range(num_points):
        line_number = i + 4
        tokens = body[i].split()
        if len(tokens) < 2:
            raise AnnotationParseError(file_name, f"line {line_number}: expected 'x y'")
        shape[0, i] = _parse_float(tokens[0], file_name, line_number) - PTS_ORIGIN_OFFSET
        shape[1, i] = _parse_float(tokens[1], file_name, line_number) - PTS_ORIGIN_OFFSET

    return shape
