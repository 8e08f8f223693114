"""
Geometry utilities for landmark databases.

This module handles:
- Rectangle construction and tight bounds over a shape
- Rectangle reconciliation (external vs. synthesized)
- The scale-need decision and joint rescale of image, shape and rect
- Joint horizontal mirroring of image, shape and rect

Image, shape and rect are always transformed together with the same
parameters so that landmarks stay aligned with the pixels they annotate.
"""

import numpy as np

from .image import resize_image, flip_horizontal


def create_rectangle(min_corner, max_corner):
    """
    Build a 2x4 rect from its minimum and maximum corners.

    Columns are top-left, top-right, bottom-left, bottom-right.
    """
    x0, y0 = float(min_corner[0]), float(min_corner[1])
    x1, y1 = float(max_corner[0]), float(max_corner[1])
    return np.array([
        [x0, x1, x0, x1],
        [y0, y0, y1, y1],
    ], dtype=np.float32)


def shape_bounds(shape):
    """Tight axis-aligned rect over all columns of a shape."""
    return create_rectangle(shape.min(axis=1), shape.max(axis=1))


def rect_to_xywh(rect):
    """Convert a rect to [x, y, width, height] over its corner extent."""
    x_min, y_min = rect.min(axis=1)
    x_max, y_max = rect.max(axis=1)
    return [float(x_min), float(y_min), float(x_max - x_min), float(y_max - y_min)]


def resolve_rect(shape, loaded_rects, index):
    """
    Pick the rect stored for entry ``index``.

    Without loaded rects the tight bounds of the shape are used; otherwise
    the loaded rect at the same position is copied. Count validation happens
    once per import call, before any entry is processed.
    """
    if not loaded_rects:
        return shape_bounds(shape)
    return np.array(loaded_rects[index], dtype=np.float32, copy=True)


def image_needs_scaling(size, config):
    """
    Decide whether an image exceeds the configured maximum side length.

    Args:
        size: (width, height) of the decoded image
        config: ImportConfig; ``max_image_side_length`` of None is unbounded

    Returns:
        (needs_scaling, factor) where factor is cap / max(width, height)
        when scaling is needed and 1.0 otherwise
    """
    cap = config.max_image_side_length
    if cap is None:
        return False, 1.0

    max_len = max(size[0], size[1])
    if max_len > cap:
        return True, float(cap) / float(max_len)
    return False, 1.0


def scaled_image_size(size, factor):
    """(width, height) that a resize by ``factor`` produces, rounded like OpenCV."""
    return int(round(size[0] * factor)), int(round(size[1] * factor))


def scale_image_shape_and_rect(image, shape, rect, factor):
    """
    Scale image, shape and rect jointly by ``factor``.

    Returns:
        (scaled_image, scaled_shape, scaled_rect)
    """
    scaled_image = resize_image(image, factor)
    scaled_shape = (shape * factor).astype(np.float32)
    scaled_rect = (rect * factor).astype(np.float32)
    return scaled_image, scaled_shape, scaled_rect


def mirror_image_shape_and_rect(image, shape, rect):
    """
    Mirror image, shape and rect around the image's vertical axis.

    Every x becomes ``width - 1 - x``; y is unchanged. Columns keep their
    order, so left/right landmark labels are not swapped.

    Returns:
        (mirrored_image, mirrored_shape, mirrored_rect)
    """
    mirrored_image = flip_horizontal(image)
    last_col = float(image.shape[1] - 1)

    mirrored_shape = shape.astype(np.float32, copy=True)
    mirrored_shape[0, :] = last_col - shape[0, :]

    mirrored_rect = rect.astype(np.float32, copy=True)
    mirrored_rect[0, :] = last_col - rect[0, :]

    return mirrored_image, mirrored_shape, mirrored_rect
