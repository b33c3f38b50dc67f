"""Metadata reading for indexed audio files using mutagen."""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import mutagen

from .sanitizer import UNKNOWN, sanitize_component

YEAR_PATTERN = re.compile(r"^\s*(\d+)")


@dataclass
class TagData:
    """Raw tag values read from a single audio file."""

    artist: str = ""
    album: str = ""
    genre: str = ""
    year: int = 0


@dataclass
class ReleaseInfo:
    """Index-ready description of one release directory."""

    release_dir: Path
    release_name: str
    artist: str
    album: str
    genre: str
    year: str
    group: str
    alpha: str


def read_tags(file_path) -> Optional[TagData]:
    """Read artist, album, genre and year from an audio file.

    Args:
        file_path: Path to the audio file

    Returns:
        TagData, or None if the file cannot be read or carries no tags
    """
    try:
        audio_file = mutagen.File(file_path, easy=True)
    except (mutagen.MutagenError, OSError):
        return None

    if audio_file is None or audio_file.tags is None:
        return None

    tags = audio_file.tags
    return TagData(
        artist=_first_value(tags, "artist"),
        album=_first_value(tags, "album"),
        genre=_first_value(tags, "genre"),
        year=parse_year(_first_value(tags, "date") or _first_value(tags, "year")),
    )


def _first_value(tags: Any, key: str) -> str:
    """Return the first text value for an easy-tag key, or an empty string."""
    try:
        values = tags.get(key)
    except (KeyError, ValueError):
        return ""

    if not values:
        return ""
    if isinstance(values, list):
        values = values[0]
    return str(values)


def parse_year(value: str) -> int:
    """Parse the leading digits of a date tag, e.g. "2024-01-01" -> 2024."""
    match = YEAR_PATTERN.match(value or "")
    if not match:
        return 0
    return int(match.group(1))


def release_group(release_name: str) -> str:
    """Return the sanitized text after the last '-' in a release name."""
    pos = release_name.rfind("-")
    if pos != -1 and pos + 1 < len(release_name):
        return sanitize_component(release_name[pos + 1 :])
    return UNKNOWN


def alpha_bucket(release_name: str) -> str:
    """Return the uppercase first character of a release name, or '#'."""
    if not release_name:
        return "#"
    first = release_name[0].upper()
    if first.isascii() and first.isalnum():
        return first
    return "#"


def build_release_info(audio_file, release_dir) -> Optional[ReleaseInfo]:
    """Build the ReleaseInfo for a release directory from one of its tracks.

    Args:
        audio_file: Path to an audio file inside the release
        release_dir: Path to the release directory

    Returns:
        ReleaseInfo, or None if the file's tags could not be read
    """
    tags = read_tags(audio_file)
    if tags is None:
        return None

    release_dir = Path(os.path.abspath(release_dir))
    release_name = release_dir.name

    return ReleaseInfo(
        release_dir=release_dir,
        release_name=release_name,
        artist=sanitize_component(tags.artist),
        album=sanitize_component(tags.album),
        genre=sanitize_component(tags.genre),
        year=str(tags.year) if tags.year > 0 else UNKNOWN,
        group=release_group(release_name),
        alpha=alpha_bucket(release_name),
    )
