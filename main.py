#!/usr/bin/env python3
"""
Face Landmark Database Importer - Main Entry Point

Imports an IMM (.asf) or iBUG (.pts) annotated face database into aligned
image / shape / rectangle collections, verifies them and optionally exports
a normalized copy.

Usage:
    python main.py [--config path/to/config.yaml] [--database-dir DIR] [--verbose]

Features:
    - Automatic dialect detection
    - External face rectangles or tight landmark bounds
    - Downscaling to a maximum side length
    - Mirrored augmentation
    - Export to a normalized iBUG directory with overlays
"""

import sys
import argparse
from pathlib import Path
from typing import Any, Optional

from landmark_db.core import (
    Config,
    load_config,
    setup_logger,
    DEFAULT_CONFIG_PATH,
    LandmarkDatabaseError,
)
from landmark_db.core.constants import VISUALIZATIONS_DIR
from landmark_db.models import Database
from landmark_db.pipeline import import_database
from landmark_db.visualization import verify_database, save_visualizations
from landmark_db.writers import export_database
from landmark_db import __version__


class DatabaseImporter:
    """
    Main import orchestrator.

    Handles the end-to-end process of loading an annotated face database,
    verifying the result and writing optional outputs.
    """

    def __init__(self, config_path: Optional[Path] = None, verbose: bool = False,
                 overrides: Optional[dict[str, Any]] = None):
        """
        Initialize the importer.

        Args:
            config_path: Path to configuration file
            verbose: Enable verbose logging
            overrides: Configuration values given on the command line
        """
        self.config_path = config_path or Path(DEFAULT_CONFIG_PATH)
        self.verbose = verbose

        log_level = "DEBUG" if verbose else "INFO"
        self.logger = setup_logger(level=log_level, console=True)

        self.config = self._load_configuration(overrides or {})

        self.logger = setup_logger(
            level=log_level if verbose else self.config.log_level,
            log_file=Path(self.config.log_file) if self.config.log_file else None,
            console=True
        )

        self.database = Database()

    def _load_configuration(self, overrides: dict[str, Any]) -> Config:
        """Load the YAML configuration, or build one from overrides alone."""
        if self.config_path.exists():
            self.logger.info(f"Loading configuration from: {self.config_path}")
            return load_config(str(self.config_path), overrides=overrides)

        if 'database_dir' not in overrides:
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path} "
                f"(pass --database-dir to run without one)"
            )

        self.logger.info("No configuration file, using command line options")
        return Config.from_dict(overrides)

    def import_database(self) -> bool:
        """Run the import into this importer's database."""
        self.logger.info("=" * 70)
        self.logger.info("IMPORT")
        self.logger.info("=" * 70)

        return import_database(
            self.config.database_dir,
            self.config.rectangle_file,
            self.database.images,
            self.database.shapes,
            self.database.rects,
            self.config.import_options
        )

    def verify_output(self) -> int:
        """
        Verify imported entries for consistency.

        Returns:
            Number of issues found
        """
        self.logger.info("=" * 70)
        self.logger.info("VERIFICATION")
        self.logger.info("=" * 70)

        issues = verify_database(self.database.images, self.database.shapes, self.database.rects)
        if issues == 0:
            self.logger.info("[OK] All landmarks lie inside their images")
        else:
            self.logger.warning(f"Found {issues} issues")
        return issues

    def write_outputs(self):
        """Export the database and overlays if configured."""
        output = self.config.output
        if not (output.export or output.save_visualizations):
            return

        output_dir = Path(output.output_dir)
        self.logger.info(f"Output directory: {output_dir}")

        if output.export:
            count, rect_file = export_database(
                str(output_dir),
                self.database.images,
                self.database.shapes,
                self.database.rects,
                show_progress=self.config.import_options.show_progress
            )
            self.logger.info(f"  - Entries: {count}")
            self.logger.info(f"  - Rectangles: {rect_file}")

        if output.save_visualizations:
            save_visualizations(
                str(output_dir / VISUALIZATIONS_DIR),
                self.database.images,
                self.database.shapes,
                self.database.rects,
                max_count=output.max_visualizations
            )

    def print_summary(self):
        """Print final import summary."""
        self.logger.info("=" * 70)
        self.logger.info("FINAL SUMMARY")
        self.logger.info("=" * 70)

        options = self.config.import_options
        self.logger.info(f"Database: {self.config.database_dir}")
        self.logger.info(f"Rectangles: {self.config.rectangle_file or 'tight landmark bounds'}")
        self.logger.info(f"Total entries: {len(self.database)}")
        if len(self.database):
            counts = sorted({shape.shape[1] for shape in self.database.shapes})
            self.logger.info(f"Landmarks per entry: {', '.join(str(c) for c in counts)}")
        self.logger.info(f"Max image side: {options.max_image_side_length or 'unbounded'}")
        self.logger.info(f"Mirrored augmentation: {options.generate_vertically_mirrored}")

    def run(self) -> int:
        """
        Run the complete import.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            self.logger.info("Starting Face Landmark Database Importer")

            if not self.import_database():
                self.logger.error("[FAILED] No entries imported")
                return 1

            self.verify_output()
            self.write_outputs()
            self.print_summary()

            self.logger.info("=" * 70)
            self.logger.info("[SUCCESS] Import completed successfully!")
            return 0

        except KeyboardInterrupt:
            self.logger.warning("Process interrupted by user (Ctrl+C)")
            return 130
        except (LandmarkDatabaseError, OSError, ValueError) as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            return 1


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Face Landmark Database Importer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use default configuration
  python main.py

  # Import a directory without a configuration file
  python main.py --database-dir data/ibug --max-side 640 --mirror

  # Use external face rectangles and export the result
  python main.py -c configs/import_config.yaml --rectangles rects.txt --output-dir out
        """
    )

    parser.add_argument(
        '--config', '-c',
        type=Path,
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument('--database-dir', '-d', default=None, help="Database directory")
    parser.add_argument('--rectangles', '-r', default=None, help="Rectangle file")
    parser.add_argument('--max-side', type=int, default=None, help="Maximum image side length")
    parser.add_argument('--mirror', action='store_true', help="Add mirrored entries")
    parser.add_argument('--output-dir', '-o', default=None,
                        help="Export the imported database and overlays here")

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help="Enable verbose (DEBUG level) logging"
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Face Landmark Database Importer v{__version__}'
    )

    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate command line options into configuration overrides."""
    overrides: dict[str, Any] = {}
    import_options: dict[str, Any] = {}

    if args.database_dir:
        overrides['database_dir'] = args.database_dir
    if args.rectangles:
        overrides['rectangle_file'] = args.rectangles
    if args.max_side is not None:
        import_options['max_image_side_length'] = args.max_side
    if args.mirror:
        import_options['generate_vertically_mirrored'] = True
    if args.output_dir:
        overrides['output'] = {
            'output_dir': args.output_dir,
            'export': True,
            'save_visualizations': True,
        }

    if import_options:
        overrides['import'] = import_options
    return overrides


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        importer = DatabaseImporter(
            config_path=args.config,
            verbose=args.verbose,
            overrides=build_overrides(args)
        )
    except (LandmarkDatabaseError, OSError, ValueError) as e:
        setup_logger().error(f"Configuration error: {e}")
        return 1

    return importer.run()


if __name__ == "__main__":
    sys.exit(main())
