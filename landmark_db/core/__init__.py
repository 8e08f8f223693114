"""
Core utilities for the landmark database importer.

This package contains fundamental components like constants, configuration,
exceptions and logging that are used throughout the application.
"""

from .constants import (
    DatabaseFormat,
    ASF_EXTENSION,
    PTS_EXTENSION,
    DEFAULT_IMAGE_EXTENSIONS,
    SUPPORTED_IMAGE_FORMATS,
    DEFAULT_CONFIG_PATH,
)
from .exceptions import (
    LandmarkDatabaseError,
    AnnotationParseError,
    RectangleFileError,
    ConfigurationError,
    DatabaseImportError,
)
from .config import Config, ImportConfig, OutputConfig, load_config
from .logger import setup_logger, get_logger

__all__ = [
    # Enums
    "DatabaseFormat",
    # Constants
    "ASF_EXTENSION",
    "PTS_EXTENSION",
    "DEFAULT_IMAGE_EXTENSIONS",
    "SUPPORTED_IMAGE_FORMATS",
    "DEFAULT_CONFIG_PATH",
    # Exceptions
    "LandmarkDatabaseError",
    "AnnotationParseError",
    "RectangleFileError",
    "ConfigurationError",
    "DatabaseImportError",
    # Config
    "Config",
    "ImportConfig",
    "OutputConfig",
    "load_config",
    # Logging
    "setup_logger",
    "get_logger",
]
