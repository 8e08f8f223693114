"""
Visualization and verification utilities.

This module provides:
- Entry verification against image bounds
- Overlay rendering of landmarks and rectangle
- Batch overlay export
"""

import os

import cv2
import numpy as np

from .core.constants import (
    LANDMARK_RADIUS,
    RECT_COLOR,
    RECT_THICKNESS,
    SHAPE_COLOR,
)
from .core.logger import get_logger
from .image import unicode_safe_imwrite

logger = get_logger(__name__)


def verify_entry(image, shape, rect, name="entry"):
    """Check that an entry's landmarks lie inside its image.

    Rectangles are only checked for finite coordinates, since
    external face boxes may legitimately reach outside the image.

    Args:
        image: Grayscale image
        shape: (2, N) landmarks
        rect: (2, 4) rectangle
        name: Label used in issue messages

    Returns:
        List of issue strings, empty if the entry is consistent
    """
    image_height, image_width = image.shape[:2]
    issues = []

    xs, ys = shape[0], shape[1]
    outside = np.count_nonzero((xs < 0) | (xs >= image_width) | (ys < 0) | (ys >= image_height))
    if outside:
        issues.append(f"{name}: {outside} landmarks outside image bounds ({image_width}x{image_height})")

    if not np.all(np.isfinite(shape)):
        issues.append(f"{name}: non-finite landmark coordinates")

    if not np.all(np.isfinite(rect)):
        issues.append(f"{name}: invalid rectangle {rect.tolist()}")

    return issues


def verify_database(images, shapes, rects):
    """Verify every entry; returns the total number of issues found."""
    total_issues = 0
    for i, (image, shape, rect) in enumerate(zip(images, shapes, rects)):
        issues = verify_entry(image, shape, rect, name=f"entry {i}")
        for issue in issues[:5]:
            logger.warning(issue)
        total_issues += len(issues)
    return total_issues


def draw_entry(image, shape, rect):
    """Render landmarks and rectangle over a BGR copy of the image."""
    canvas = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR) if image.ndim == 2 else image.copy()

    corners = rect.T.astype(np.float32)
    x_min, y_min = corners.min(axis=0)
    x_max, y_max = corners.max(axis=0)
    cv2.rectangle(canvas, (int(round(x_min)), int(round(y_min))),
                  (int(round(x_max)), int(round(y_max))), RECT_COLOR, RECT_THICKNESS)

    for x, y in shape.T:
        cv2.circle(canvas, (int(round(x)), int(round(y))), LANDMARK_RADIUS, SHAPE_COLOR, -1)

    return canvas


def save_visualizations(output_dir, images, shapes, rects, max_count=None):
    """
    Save overlay images for the first ``max_count`` entries.

    Returns:
        Number of overlays written
    """
    os.makedirs(output_dir, exist_ok=True)
    count = len(shapes) if max_count is None else min(max_count, len(shapes))

    written = 0
    for i in range(count):
        canvas = draw_entry(images[i], shapes[i], rects[i])
        path = os.path.join(output_dir, f"overlay_{i:04d}.png")
        success, _, _ = unicode_safe_imwrite(path, canvas)
        if success:
            written += 1

    logger.info(f"Saved {written} overlays to {output_dir}")
    return written
