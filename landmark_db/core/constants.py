"""
Constants and enumerations for the landmark database importer.

This module contains all magic strings, numbers, and enums used throughout
the application to ensure consistency and type safety.
"""

from enum import Enum
from typing import Final


# ============================================================================
# Enumerations
# ============================================================================

class DatabaseFormat(str, Enum):
    """Supported annotation database dialects."""
    IMM = "imm"
    IBUG = "ibug"


# ============================================================================
# File and Path Constants
# ============================================================================

DEFAULT_CONFIG_PATH: Final[str] = "configs/import_config.yaml"

# Annotation file extensions (without dot, as passed to file discovery)
ASF_EXTENSION: Final[str] = "asf"
PTS_EXTENSION: Final[str] = "pts"

# Image extensions tried, in order, when pairing an annotation with its image
DEFAULT_IMAGE_EXTENSIONS: Final[tuple] = ('.jpg', '.png')
SUPPORTED_IMAGE_FORMATS: Final[tuple] = ('.png', '.jpg', '.jpeg', '.bmp', '.tiff')

# Export layout
RECTANGLES_FILE: Final[str] = "rectangles.txt"
VISUALIZATIONS_DIR: Final[str] = "visualizations"
EXPORT_IMAGE_EXTENSION: Final[str] = ".png"


# ============================================================================
# Parsing Constants
# ============================================================================

ASF_COMMENT_MARKER: Final[str] = '#'
ASF_COUNT_LINE_MAX_LENGTH: Final[int] = 10
ASF_MIN_RECORD_TOKENS: Final[int] = 4

PTS_VERSION_LINE: Final[str] = "version: 1"
PTS_COUNT_KEYWORD: Final[str] = "n_points:"
PTS_OPEN_DELIMITER: Final[str] = "{"
PTS_CLOSE_DELIMITER: Final[str] = "}"
PTS_ORIGIN_OFFSET: Final[float] = 1.0

RECT_FILE_VALUES_PER_LINE: Final[int] = 4


# ============================================================================
# Visualization
# ============================================================================

SHAPE_COLOR: Final[tuple] = (0, 255, 0)
RECT_COLOR: Final[tuple] = (0, 0, 255)
LANDMARK_RADIUS: Final[int] = 2
RECT_THICKNESS: Final[int] = 1
DEFAULT_MAX_VISUALIZATIONS: Final[int] = 20


# ============================================================================
# Validation Messages
# ============================================================================

class ValidationMessages:
    """Standard validation error messages."""
    FILE_NOT_FOUND = "File not found: {path}"
    DIRECTORY_NOT_FOUND = "Directory not found: {path}"
    INVALID_SIDE_LENGTH = "max_image_side_length must be positive, got: {size}"
    EMPTY_IMAGE_EXTENSIONS = "image_extensions cannot be empty"
    INVALID_MAX_VISUALIZATIONS = "max_visualizations must be non-negative, got: {count}"
    MISSING_REQUIRED_KEY = "Required configuration key missing: {key}"


# ============================================================================
# Logging Configuration
# ============================================================================

LOG_FORMAT: Final[str] = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: Final[str] = '%Y-%m-%d %H:%M:%S'
DEFAULT_LOG_LEVEL: Final[str] = 'INFO'
DEFAULT_LOGGER_NAME: Final[str] = 'landmark_db'
