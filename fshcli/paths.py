"""Path resolution against the session's current directory"""

import os


def normalize_path(path: str) -> str:
    """Normalize a path by resolving . and .. components"""
    normalized = os.path.normpath(path)
    # normpath keeps a leading '//' on POSIX, collapse it like any other run
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def resolve_path(base: str, path: str) -> str:
    """
    Resolve a relative or absolute path to an absolute path

    Args:
        base: Absolute directory that relative paths are joined onto
        path: Path to resolve (can be relative or absolute)

    Returns:
        Normalized absolute path. The result does not need to exist.
    """
    if not path:
        return normalize_path(base)

    if os.path.isabs(path):
        return normalize_path(path)

    return normalize_path(os.path.join(base, path))
