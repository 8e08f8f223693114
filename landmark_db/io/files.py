"""File discovery helpers."""

from pathlib import Path


def find_files_in_dir(directory, extension, recursive=True, strip_extension=True):
    """
    Find files with the given extension below a directory.

    Args:
        directory: Root directory to search
        extension: Extension with or without the leading dot, matched
            case-insensitively
        recursive: Descend into subdirectories
        strip_extension: Return base paths instead of the files' own paths

    Returns:
        Matching paths sorted by base path. With ``strip_extension`` the
        extension is removed; otherwise each path keeps its real suffix
        (``face.PTS`` stays ``face.PTS``).
    """
    root = Path(directory)
    if not root.is_dir():
        return []

    suffix = extension.lower() if extension.startswith('.') else '.' + extension.lower()
    candidates = root.rglob('*') if recursive else root.glob('*')

    matches = sorted(
        (str(p.with_suffix('')), str(p))
        for p in candidates
        if p.is_file() and p.suffix.lower() == suffix
    )
    if strip_extension:
        return [base_path for base_path, _ in matches]
    return [path for _, path in matches]
