"""Symlink index construction: facet directories, link creation and cleanup."""

import os
import shutil
from pathlib import Path
from typing import Dict, Iterable


class IndexWriteError(RuntimeError):
    """Raised when the index tree cannot be modified.

    Attributes:
        operation: One of "mkdir", "remove", "symlink" or "clean"
        path: Path the failed operation was acting on
    """

    def __init__(self, operation: str, path, message: str):
        super().__init__(message)
        self.operation = operation
        self.path = Path(path)


def facet_dir(index_root, media_type, facet) -> Path:
    """Return index_root/<type>/<facet>."""
    return Path(index_root) / media_type.value / facet.value


def ensure_dir(directory, dry_run: bool = False) -> None:
    if dry_run:
        return
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise IndexWriteError(
            "mkdir", directory, f"Cannot create directory: {directory} ({e})"
        ) from e


def link_target(target_abs, link_path, relative: bool) -> str:
    """Compute the symlink target, relative to the link's parent when requested.

    Both ends are resolved first, so a symlinked index root still yields a
    link that reaches the release. Falls back to the absolute target if no
    relative path can be computed.
    """
    target_abs = str(target_abs)
    if not relative:
        return target_abs
    link_parent = os.path.dirname(os.fspath(link_path))
    try:
        return os.path.relpath(
            os.path.realpath(target_abs), os.path.realpath(link_parent)
        )
    except ValueError:
        return target_abs


def remove_entry(path) -> None:
    """Remove a symlink, file or empty directory."""
    if os.path.islink(path) or not os.path.isdir(path):
        os.unlink(path)
    else:
        os.rmdir(path)


def create_or_replace_symlink(
    target_abs, link_path, relative=False, force=False, dry_run=False
) -> str:
    """Create a symlink at link_path, replacing an existing entry only with force.

    Args:
        target_abs: Absolute path the link should point at
        link_path: Where the link is created
        relative: Whether to write a relative link target
        force: Whether to replace an existing entry at link_path
        dry_run: Whether to skip all filesystem changes

    Returns:
        "created", "replaced" or "skipped"

    Raises:
        IndexWriteError: If the existing entry cannot be removed or the
            symlink cannot be created
    """
    target = link_target(target_abs, link_path, relative)
    action = "created"

    if os.path.lexists(link_path):
        if not force:
            return "skipped"
        action = "replaced"
        if not dry_run:
            try:
                remove_entry(link_path)
            except OSError as e:
                raise IndexWriteError(
                    "remove",
                    link_path,
                    f"Cannot remove existing link: {link_path} ({e})",
                ) from e

    if dry_run:
        return action

    try:
        os.symlink(target, link_path)
    except OSError as e:
        raise IndexWriteError(
            "symlink", link_path, f"symlink failed: {link_path} -> {target} ({e})"
        ) from e

    return action


def index_release(
    media_type, info, config, facets: Iterable, force=False, dry_run=False
) -> Dict[str, int]:
    """Link a release into every requested facet of the index.

    Args:
        media_type: MediaType the release was found for
        info: ReleaseInfo describing the release
        config: Config supplying the index root and symlink style
        facets: Facets to link the release under
        force: Whether to replace existing links
        dry_run: Whether to skip all filesystem changes

    Returns:
        Dict counting "created", "replaced" and "skipped" links
    """
    counts = {"created": 0, "replaced": 0, "skipped": 0}
    target = os.path.abspath(info.release_dir)

    for facet in facets:
        base = facet_dir(config.index_root, media_type, facet) / facet.bucket_for(info)
        ensure_dir(base, dry_run)

        link = base / info.release_name
        action = create_or_replace_symlink(
            target, link, config.relative_symlinks, force, dry_run
        )
        counts[action] += 1

    return counts


def clean_index_tree(base, dry_run: bool = False) -> None:
    """Remove everything below a facet directory, keeping the directory itself.

    Raises:
        IndexWriteError: If any child cannot be removed
    """
    if dry_run or not os.path.isdir(base):
        return

    try:
        with os.scandir(base) as entries:
            for entry in list(entries):
                if entry.is_dir(follow_symlinks=False):
                    shutil.rmtree(entry.path)
                else:
                    os.unlink(entry.path)
    except OSError as e:
        raise IndexWriteError(
            "clean", base, f"Failed to clean index tree: {base} ({e})"
        ) from e
