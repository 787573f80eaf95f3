"""Expands the configured include list into concrete skeleton file paths."""

from pathlib import Path

IGNORED_DIRECTORY_NAMES = frozenset({".git"})


def get_all_filenames(filename: str, root: Path) -> list[str]:
    """Recursively expand a file or directory into file paths relative to root.

    Paths are returned in POSIX form, sorted per directory, with any trailing
    slash on the configured entry removed so 'ci/' expands to 'ci/build.sh'.

    Raises:
        FileNotFoundError: If the entry does not exist under root.
    """
    normalized = filename.rstrip("/") or filename
    full_path = root / normalized
    if not full_path.exists():
        raise FileNotFoundError(f"Included path not found: {full_path}")

    if not full_path.is_dir():
        return [normalized]

    output: list[str] = []
    for entry in sorted(full_path.iterdir(), key=lambda p: p.name):
        if entry.name in IGNORED_DIRECTORY_NAMES:
            continue
        location = f"{normalized}/{entry.name}"
        if entry.is_dir():
            output.extend(get_all_filenames(location, root))
        else:
            output.append(location)
    return output


def is_excluded(filename: str, excluded: list[str]) -> bool:
    """Return whether a file path exactly matches an entry of the exclude list."""
    return filename in excluded
