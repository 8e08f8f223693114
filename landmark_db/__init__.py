"""
Face landmark database importer.

Reads IMM (``.asf``) and iBUG (``.pts``) annotated face databases into
index-aligned image, shape and rectangle collections for model training.

Modules:
- annotations: .asf / .pts parsers
- geometry: rectangle bounds, joint scaling and mirroring
- image: grayscale decoding and raster transforms
- pipeline: dialect detection and importers
- visualization: entry verification and overlays
- writers: export to a normalized iBUG directory
"""

from .core import (
    DatabaseFormat,
    Config,
    ImportConfig,
    OutputConfig,
    load_config,
    setup_logger,
    get_logger,
    LandmarkDatabaseError,
    AnnotationParseError,
    RectangleFileError,
    ConfigurationError,
    DatabaseImportError,
)
from .models import Entry, Database
from .annotations import parse_asf_file, parse_pts_file
from .geometry import (
    create_rectangle,
    shape_bounds,
    resolve_rect,
    image_needs_scaling,
    scale_image_shape_and_rect,
    mirror_image_shape_and_rect,
)
from .pipeline import (
    detect_database_format,
    import_database,
    import_imm_face_database,
    import_ibug_face_database,
    load_database,
)

__version__ = "1.0.0"

__all__ = [
    "DatabaseFormat",
    "Config",
    "ImportConfig",
    "OutputConfig",
    "load_config",
    "setup_logger",
    "get_logger",
    "LandmarkDatabaseError",
    "AnnotationParseError",
    "RectangleFileError",
    "ConfigurationError",
    "DatabaseImportError",
    "Entry",
    "Database",
    "parse_asf_file",
    "parse_pts_file",
    "create_rectangle",
    "shape_bounds",
    "resolve_rect",
    "image_needs_scaling",
    "scale_image_shape_and_rect",
    "mirror_image_shape_and_rect",
    "detect_database_format",
    "import_database",
    "import_imm_face_database",
    "import_ibug_face_database",
    "load_database",
]
