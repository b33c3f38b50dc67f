"""Scan driver: walks scan roots, deduplicates releases and indexes them."""

import os
from typing import Any, Dict, List, Optional

from .config import Config, Facet, MediaType
from .file_discovery import iter_audio_files, resolve_release_dir
from .index_writer import clean_index_tree, facet_dir, index_release
from .metadata_handler import build_release_info


def run_for_type(
    media_type: MediaType,
    config: Config,
    facets: Optional[List[Facet]] = None,
    force: bool = False,
    clean: bool = False,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """Scan every root for one media type and link each release into the index.

    Each release directory is indexed at most once per call: the first file
    in it whose tags can be read decides its facets, later files are skipped.

    Args:
        media_type: Which media type to scan for
        config: Run configuration
        facets: Facets to build, defaults to the configured ones for the type
        force: Whether to replace existing links
        clean: Whether to empty the targeted facet directories first
        dry_run: Whether to skip all filesystem changes

    Returns:
        Dict with scan statistics and warnings

    Raises:
        IndexWriteError: If the index tree cannot be modified
    """
    if facets is None:
        facets = config.indexes(media_type)

    if clean:
        for facet in dict.fromkeys(facets):
            clean_index_tree(facet_dir(config.index_root, media_type, facet), dry_run)

    seen_release_dirs = set()
    result = {
        "files_scanned": 0,
        "releases_indexed": 0,
        "links_created": 0,
        "links_replaced": 0,
        "links_skipped": 0,
        "warnings": [],
    }

    release_depth = config.release_depth(media_type)

    for root in config.scan_roots(media_type):
        if not os.path.exists(root):
            result["warnings"].append(f"scan root does not exist: {root}")
            continue

        for audio_file in iter_audio_files(
            root, media_type.extension, follow_symlinks=config.follow_symlinks
        ):
            result["files_scanned"] += 1

            release_dir = resolve_release_dir(root, audio_file, release_depth)
            release_key = os.path.realpath(release_dir)
            if release_key in seen_release_dirs:
                continue

            info = build_release_info(audio_file, release_dir)
            if info is None:
                continue

            seen_release_dirs.add(release_key)

            counts = index_release(
                media_type, info, config, facets, force=force, dry_run=dry_run
            )
            result["releases_indexed"] += 1
            result["links_created"] += counts["created"]
            result["links_replaced"] += counts["replaced"]
            result["links_skipped"] += counts["skipped"]

    return result
