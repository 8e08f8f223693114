"""
Configuration management with validation.

Loads and validates YAML configuration files, providing type-safe
access to configuration parameters.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import yaml

from .constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_IMAGE_EXTENSIONS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_VISUALIZATIONS,
    ValidationMessages,
)
from .exceptions import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith('.') else '.' + ext


@dataclass
class ImportConfig:
    """
    Options controlling a single import call.

    ``max_image_side_length`` of ``None`` means images are never downscaled.
    """
    max_image_side_length: Optional[int] = None
    generate_vertically_mirrored: bool = False
    image_extensions: tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    reject_ambiguous_format: bool = False
    show_progress: bool = True

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_image_side_length is not None and self.max_image_side_length <= 0:
            raise ConfigurationError(
                ValidationMessages.INVALID_SIDE_LENGTH.format(size=self.max_image_side_length)
            )
        if not self.image_extensions:
            raise ConfigurationError(ValidationMessages.EMPTY_IMAGE_EXTENSIONS)
        self.image_extensions = tuple(_normalize_extension(e) for e in self.image_extensions)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ImportConfig':
        """Create from dictionary."""
        return cls(
            max_image_side_length=data.get('max_image_side_length'),
            generate_vertically_mirrored=data.get('generate_vertically_mirrored', False),
            image_extensions=tuple(data.get('image_extensions', DEFAULT_IMAGE_EXTENSIONS)),
            reject_ambiguous_format=data.get('reject_ambiguous_format', False),
            show_progress=data.get('show_progress', True)
        )


@dataclass
class OutputConfig:
    """Output configuration for the command line tool."""
    output_dir: Optional[str] = None
    export: bool = False
    save_visualizations: bool = False
    max_visualizations: int = DEFAULT_MAX_VISUALIZATIONS

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'OutputConfig':
        """Create from dictionary."""
        max_visualizations = data.get('max_visualizations', DEFAULT_MAX_VISUALIZATIONS)
        if max_visualizations < 0:
            raise ConfigurationError(
                ValidationMessages.INVALID_MAX_VISUALIZATIONS.format(count=max_visualizations)
            )
        return cls(
            output_dir=data.get('output_dir'),
            export=data.get('export', False),
            save_visualizations=data.get('save_visualizations', False),
            max_visualizations=max_visualizations
        )


@dataclass
class Config:
    """Main configuration class."""
    # Required fields
    database_dir: str

    # Optional fields with defaults
    rectangle_file: Optional[str] = None
    import_options: ImportConfig = field(default_factory=ImportConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None

    def validate(self) -> None:
        """Validate configuration."""
        database_dir = Path(self.database_dir)
        if not database_dir.is_dir():
            raise FileNotFoundError(
                ValidationMessages.DIRECTORY_NOT_FOUND.format(path=self.database_dir)
            )

        if (self.output.export or self.output.save_visualizations) and not self.output.output_dir:
            raise ConfigurationError(
                ValidationMessages.MISSING_REQUIRED_KEY.format(key='output.output_dir')
            )

        logger.info("Configuration validated successfully")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Config':
        """Create Config from dictionary."""
        if 'database_dir' not in data:
            raise ConfigurationError(
                ValidationMessages.MISSING_REQUIRED_KEY.format(key='database_dir')
            )

        config = cls(
            database_dir=data['database_dir'],
            rectangle_file=data.get('rectangle_file'),
            import_options=ImportConfig.from_dict(data.get('import', {}) or {}),
            output=OutputConfig.from_dict(data.get('output', {}) or {}),
            log_level=data.get('log_level', DEFAULT_LOG_LEVEL),
            log_file=data.get('log_file')
        )

        config.validate()
        return config


def load_config(config_path: str = DEFAULT_CONFIG_PATH, overrides: Optional[dict[str, Any]] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file
        overrides: Optional top-level keys merged over the file contents
            (``import`` and ``output`` sections are merged key by key)

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If configuration is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(
            ValidationMessages.FILE_NOT_FOUND.format(path=config_path)
        )

    logger.info(f"Loading configuration from: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    for key, value in (overrides or {}).items():
        if isinstance(value, dict):
            data[key] = {**(data.get(key) or {}), **value}
        else:
            data[key] = value

    config = Config.from_dict(data)
    logger.info(f"Configuration loaded: database {config.database_dir}, "
                f"max side {config.import_options.max_image_side_length}, "
                f"mirrored {config.import_options.generate_vertically_mirrored}")

    return config
