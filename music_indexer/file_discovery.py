"""File discovery and release resolution for the music indexer."""

import os
from pathlib import Path
from typing import Iterator


def resolve_release_dir(scan_root, file_path, depth: int) -> Path:
    """Map an audio file to the release directory that owns it.

    The release directory is the first `depth` path components of the file's
    parent, relative to the scan root. Supports layouts like:
        root/<release>/track.flac               => depth=1
        root/YYYY-MM-DD/<release>/CD1/track.mp3 => depth=2

    Args:
        scan_root: Root directory the file was found under
        file_path: Path to the audio file
        depth: Number of directory levels below the root that define a release

    Returns:
        Path to the release directory

    Raises:
        ValueError: If depth is less than 1
    """
    if depth < 1:
        raise ValueError(f"Release depth must be at least 1, got {depth}")

    root_path = Path(scan_root)
    file_path = Path(file_path)

    relative_parent = file_path.relative_to(root_path).parent
    if not relative_parent.parts:
        # File sits directly under the scan root
        return file_path.parent

    return root_path.joinpath(*relative_parent.parts[:depth])


def has_extension(file_path, extension: str) -> bool:
    """Check a file's extension case-insensitively (extension includes the dot)."""
    return Path(file_path).suffix.lower() == extension.lower()


def iter_audio_files(
    root_path, extension: str, follow_symlinks: bool = False
) -> Iterator[Path]:
    """Walk a scan root and yield regular files with the given extension.

    Directories that cannot be read are skipped silently. When following
    directory symlinks, a directory already visited (by real path) is not
    entered again.

    Args:
        root_path: Root directory to search from
        extension: File extension to match, e.g. ".mp3"
        follow_symlinks: Whether to descend into symlinked directories

    Yields:
        Path objects (under root_path) for matching files, in sorted order
    """
    visited = set()

    for dirpath, dirnames, filenames in os.walk(root_path, followlinks=follow_symlinks):
        if follow_symlinks:
            real_dir = os.path.realpath(dirpath)
            if real_dir in visited:
                dirnames[:] = []
                continue
            visited.add(real_dir)

        dirnames.sort()
        directory = Path(dirpath)

        for filename in sorted(filenames):
            file_path = directory / filename
            if not has_extension(file_path, extension):
                continue
            if not os.path.isfile(file_path):
                continue
            yield file_path
