"""Exception hierarchy for the landmark database importer."""


class LandmarkDatabaseError(Exception):
    """Base exception for all importer errors."""
    pass


class AnnotationParseError(LandmarkDatabaseError):
    """An annotation file is unreadable, malformed or truncated."""

    def __init__(self, path, reason):
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason


class RectangleFileError(LandmarkDatabaseError):
    """A rectangle file exists but cannot be parsed."""
    pass


class ConfigurationError(LandmarkDatabaseError, ValueError):
    """Invalid configuration values."""
    pass


class DatabaseImportError(LandmarkDatabaseError):
    """An import call produced no entries or was aborted."""
    pass
