"""
Database import pipeline.

This is the main processing module that turns an annotated face database
directory into three index-aligned collections (images, shapes, rects):

1. Dialect detection - IMM (``.asf``) or iBUG (``.pts``)
2. Rectangle loading and count validation
3. Per candidate: annotation parsing, grayscale image decoding,
   rectangle reconciliation, optional downscaling and mirroring

A bad annotation or image only skips its own candidate. Structural problems
(unknown dialect, rectangle count mismatch, unreadable rectangle file) abort
the call before anything is appended.
"""

import os

from tqdm import tqdm

from .annotations import parse_asf_file, parse_pts_file
from .core.config import ImportConfig
from .core.constants import ASF_EXTENSION, PTS_EXTENSION, DatabaseFormat
from .core.exceptions import AnnotationParseError, DatabaseImportError, RectangleFileError
from .core.logger import get_logger
from .geometry import (
    image_needs_scaling,
    mirror_image_shape_and_rect,
    resolve_rect,
    scale_image_shape_and_rect,
    scaled_image_size,
)
from .image import find_image_for_base_path, load_grayscale_image
from .io.files import find_files_in_dir
from .io.rectangles import import_rectangles
from .models.entry import Database, Entry, append_entry

logger = get_logger(__name__)


# =============================================================================
# Helper Functions
# =============================================================================

def detect_database_format(directory, config=None):
    """
    Detect which annotation dialect a directory holds.

    IMM takes priority when both extensions are present; with
    ``config.reject_ambiguous_format`` such a directory is rejected instead.

    Args:
        directory: Database root, searched recursively
        config: Optional ImportConfig

    Returns:
        DatabaseFormat, or None if the format is unknown or rejected
    """
    config = config or ImportConfig()
    has_asf = len(find_files_in_dir(directory, ASF_EXTENSION, True)) > 0
    has_pts = len(find_files_in_dir(directory, PTS_EXTENSION, True)) > 0

    if has_asf and has_pts:
        if config.reject_ambiguous_format:
            logger.error(f"Directory {directory} contains both .asf and .pts annotations")
            return None
        logger.warning(f"Directory {directory} contains both .asf and .pts annotations, using IMM")

    if has_asf:
        return DatabaseFormat.IMM
    if has_pts:
        return DatabaseFormat.IBUG
    return None


def _load_rectangles(rectangle_file, num_candidates):
    """
    Load external rects and check them against the candidate count.

    Returns:
        List of rects (empty means synthesize tight bounds), or None if the
        import must be aborted
    """
    try:
        loaded_rects = import_rectangles(rectangle_file)
    except RectangleFileError as e:
        logger.error(f"Failed to load rectangles: {e}")
        return None

    if not loaded_rects:
        logger.info("No rectangles found, using tight axis aligned bounds.")
    elif len(loaded_rects) != num_candidates:
        logger.error(
            f"Mismatch between number of shapes in database ({num_candidates}) "
            f"and rectangles found ({len(loaded_rects)})."
        )
        return None

    return loaded_rects


def _load_candidate(annotation_file, parser, config):
    """
    Parse one candidate's annotation and decode its image.

    Returns:
        (shape, image) or None if the candidate must be skipped
    """
    base_path = os.path.splitext(annotation_file)[0]
    try:
        shape = parser(annotation_file)
    except AnnotationParseError as e:
        logger.debug(f"Skipping {annotation_file}: {e.reason}")
        return None

    image_file = find_image_for_base_path(base_path, config.image_extensions)
    if image_file is None:
        logger.debug(f"Skipping {base_path}: no image with extensions {config.image_extensions}")
        return None

    image = load_grayscale_image(image_file)
    if image is None:
        logger.debug(f"Skipping {base_path}: failed to decode {image_file}")
        return None

    return shape, image


def _build_entries(image, shape, rect, config):
    """
    Apply the scale policy and optional mirroring to one sample.

    Returns:
        List of entries to append, empty if the sample cannot be scaled
    """
    height, width = image.shape[:2]
    needs_scaling, factor = image_needs_scaling((width, height), config)
    if needs_scaling:
        scaled_width, scaled_height = scaled_image_size((width, height), factor)
        if scaled_width < 1 or scaled_height < 1:
            logger.debug(f"Skipping {width}x{height} image: scales to {scaled_width}x{scaled_height}")
            return []
        image, shape, rect = scale_image_shape_and_rect(image, shape, rect, factor)

    entries = [Entry(image, shape, rect)]

    if config.generate_vertically_mirrored:
        entries.append(Entry(*mirror_image_shape_and_rect(image, shape, rect)))

    return entries


def _import_face_database(directory, rectangle_file, images, shapes, rects, config,
                          database_name, annotation_ext, parser, denormalize):
    config = config or ImportConfig()

    paths = find_files_in_dir(directory, annotation_ext, True, strip_extension=False)
    logger.info(f"Loading {database_name} database. Found {len(paths)} candidate entries.")

    loaded_rects = _load_rectangles(rectangle_file, len(paths))
    if loaded_rects is None:
        return False

    imported = 0
    pbar = tqdm(paths, desc=f"Importing {database_name}", unit="entry",
                leave=False, disable=not config.show_progress)
    for i, annotation_file in enumerate(pbar):
        candidate = _load_candidate(annotation_file, parser, config)
        if candidate is None:
            continue
        shape, image = candidate

        if denormalize:
            shape[0, :] *= float(image.shape[1])
            shape[1, :] *= float(image.shape[0])

        rect = resolve_rect(shape, loaded_rects, i)

        for entry in _build_entries(image, shape, rect, config):
            append_entry(entry, images, shapes, rects)
            imported += 1

    logger.info(f"Successfully loaded {imported} entries from database.")
    return imported > 0


# =============================================================================
# Main Import Functions
# =============================================================================

def import_imm_face_database(directory, rectangle_file, images, shapes, rects, config=None):
    """
    Import an IMM face database (``.asf`` annotations next to ``.jpg`` images).

    ASF coordinates are fractions of the image size and are multiplied by the
    decoded image's width and height.

    Args:
        directory: Database root, searched recursively
        rectangle_file: Optional rectangle file, one rect per annotation file
        images, shapes, rects: Lists the imported entries are appended to
        config: Optional ImportConfig

    Returns:
        True if at least one entry was appended
    """
    return _import_face_database(
        directory, rectangle_file, images, shapes, rects, config,
        database_name="IMM", annotation_ext=ASF_EXTENSION,
        parser=parse_asf_file, denormalize=True,
    )


def import_ibug_face_database(directory, rectangle_file, images, shapes, rects, config=None):
    """
    Import an iBUG annotated face database (``.pts`` annotations).

    PTS coordinates are already in pixels; the parser shifts them to a 0-based
    origin.

    Args:
        directory: Database root, searched recursively
        rectangle_file: Optional rectangle file, one rect per annotation file
        images, shapes, rects: Lists the imported entries are appended to
        config: Optional ImportConfig

    Returns:
        True if at least one entry was appended
    """
    return _import_face_database(
        directory, rectangle_file, images, shapes, rects, config,
        database_name="iBUG", annotation_ext=PTS_EXTENSION,
        parser=parse_pts_file, denormalize=False,
    )


_IMPORTERS = {
    DatabaseFormat.IMM: import_imm_face_database,
    DatabaseFormat.IBUG: import_ibug_face_database,
}


def import_database(directory, rectangle_file, images, shapes, rects, config=None):
    """
    Detect the database dialect of a directory and import it.

    Args:
        directory: Database root, searched recursively
        rectangle_file: Optional rectangle file (None or "" for tight bounds)
        images, shapes, rects: Lists the imported entries are appended to
        config: Optional ImportConfig

    Returns:
        True if a dialect was detected and at least one entry was imported
    """
    config = config or ImportConfig()
    database_format = detect_database_format(directory, config)

    if database_format is None:
        logger.error(f"Unknown database format in {directory}.")
        return False

    return _IMPORTERS[database_format](directory, rectangle_file, images, shapes, rects, config)


def load_database(directory, rectangle_file=None, config=None):
    """
    Import a directory into a fresh Database.

    Raises:
        DatabaseImportError: If nothing could be imported
    """
    database = Database()
    ok = import_database(directory, rectangle_file, database.images,
                         database.shapes, database.rects, config)
    if not ok:
        raise DatabaseImportError(f"Failed to import database from {directory}")
    return database
