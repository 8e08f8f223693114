"""
Image decoding and raster transform utilities.

This module provides:
- Unicode-safe grayscale decoding (Windows compatibility)
- Unicode-safe image writing
- Cubic resize by a uniform factor
- Horizontal flip
"""

import os

import cv2
import numpy as np

from .core.constants import SUPPORTED_IMAGE_FORMATS
from .core.logger import get_logger

logger = get_logger(__name__)


def load_grayscale_image(filepath):
    """
    Decode an image file as single-channel grayscale.

    Tries ``cv2.imread`` first and falls back to ``np.fromfile`` +
    ``cv2.imdecode`` for paths OpenCV cannot open directly (Unicode paths
    on Windows).

    Args:
        filepath: Path to the image

    Returns:
        uint8 array of shape (H, W), or None if the file is missing or
        cannot be decoded
    """
    filepath = str(filepath)
    if not os.path.isfile(filepath):
        return None

    img = cv2.imread(filepath, cv2.IMREAD_GRAYSCALE)
    if img is not None and img.size > 0:
        return img

    try:
        data = np.fromfile(filepath, dtype=np.uint8)
    except OSError as e:
        logger.debug(f"Failed to read image bytes {filepath}: {e}")
        return None

    if data.size == 0:
        return None

    img = cv2.imdecode(data, cv2.IMREAD_GRAYSCALE)
    if img is None or img.size == 0:
        return None
    return img


def find_image_for_base_path(base_path, extensions):
    """
    Return the first existing ``base_path + ext`` for the given extensions.

    Args:
        base_path: Annotation path with its extension stripped
        extensions: Candidate image extensions, tried in order

    Returns:
        Image path as string, or None
    """
    for ext in extensions:
        candidate = f"{base_path}{ext}"
        if os.path.isfile(candidate):
            return candidate
        upper = f"{base_path}{ext.upper()}"
        if os.path.isfile(upper):
            return upper
    return None


def resize_image(image, factor):
    """Resize an image by a uniform factor with cubic interpolation."""
    return cv2.resize(image, (0, 0), fx=factor, fy=factor, interpolation=cv2.INTER_CUBIC)


def flip_horizontal(image):
    """Mirror an image around its vertical axis."""
    return cv2.flip(image, 1)


def unicode_safe_imwrite(filepath, img):
    """
    Unicode-safe version of cv2.imwrite for Windows compatibility.
    Uses cv2.imencode + file writing to handle Unicode filenames.

    Args:
        filepath: Path to save image
        img: Image data (numpy array)

    Returns:
        (success, width, height) tuple
    """
    filepath = str(filepath)
    height, width = img.shape[:2]

    try:
        if cv2.imwrite(filepath, img):
            return (True, width, height)
    except (cv2.error, OSError):
        # Likely a Unicode path on Windows, retry through imencode below
        pass

    ext = os.path.splitext(filepath)[1].lower()
    if ext not in SUPPORTED_IMAGE_FORMATS:
        ext = '.png'

    try:
        success, encoded_img = cv2.imencode(ext, img)
        if success:
            with open(filepath, 'wb') as f:
                f.write(encoded_img.tobytes())
            return (True, width, height)
    except (cv2.error, OSError) as e:
        logger.error(f"Failed to save image {filepath}: {e}")

    return (False, 0, 0)
