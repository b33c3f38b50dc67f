"""Configuration model and config-file parsing for the music indexer."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class ConfigError(ValueError):
    """Raised when the configuration file is unreadable or invalid."""


class MediaType(Enum):
    """Media types the indexer knows how to scan."""

    MP3 = "mp3"
    FLAC = "flac"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @classmethod
    def from_name(cls, name: str) -> Optional["MediaType"]:
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


class Facet(Enum):
    """Index dimensions a release can be linked under."""

    ALPHA = "alpha"
    GENRE = "genre"
    YEAR = "year"
    ARTIST = "artist"
    ALBUM = "album"
    GROUPS = "groups"

    @classmethod
    def from_name(cls, name: str) -> Optional["Facet"]:
        """Look up a facet by its configured name, accepting 'group' for 'groups'.

        Returns:
            The matching Facet, or None for unknown names
        """
        name = name.strip().lower()
        if name == "group":
            name = "groups"
        try:
            return cls(name)
        except ValueError:
            return None

    def bucket_for(self, info) -> str:
        """Return the bucket directory name for a release under this facet."""
        return getattr(info, _FACET_FIELDS[self])


_FACET_FIELDS = {
    Facet.ALPHA: "alpha",
    Facet.GENRE: "genre",
    Facet.YEAR: "year",
    Facet.ARTIST: "artist",
    Facet.ALBUM: "album",
    Facet.GROUPS: "group",
}

DEFAULT_TYPES = [MediaType.MP3, MediaType.FLAC]
DEFAULT_MP3_INDEXES = [Facet.ALPHA, Facet.GENRE, Facet.YEAR, Facet.GROUPS]
DEFAULT_FLAC_INDEXES = [Facet.ALPHA, Facet.GENRE, Facet.GROUPS, Facet.YEAR]

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Config:
    """Typed settings for one indexer run."""

    index_root: Path
    music_dirs: List[Path] = field(default_factory=list)
    mp3_dirs: List[Path] = field(default_factory=list)
    flac_dirs: List[Path] = field(default_factory=list)
    relative_symlinks: bool = False
    clean_on_start: bool = False
    follow_symlinks: bool = False
    enable_types: List[MediaType] = field(default_factory=lambda: list(DEFAULT_TYPES))
    mp3_indexes: List[Facet] = field(
        default_factory=lambda: list(DEFAULT_MP3_INDEXES)
    )
    flac_indexes: List[Facet] = field(
        default_factory=lambda: list(DEFAULT_FLAC_INDEXES)
    )
    mp3_release_depth: int = 1
    flac_release_depth: int = 1

    def __post_init__(self):
        if not (self.music_dirs or self.mp3_dirs or self.flac_dirs):
            raise ConfigError(
                "at least one MUSIC_DIR=... or MP3_DIR=... or FLAC_DIR=... is required"
            )
        if self.mp3_release_depth < 1 or self.flac_release_depth < 1:
            raise ConfigError("release depth must be at least 1")

    def scan_roots(self, media_type: MediaType) -> List[Path]:
        """Type-specific scan roots, falling back to the shared MUSIC_DIR list."""
        if media_type is MediaType.MP3:
            return self.mp3_dirs or self.music_dirs
        return self.flac_dirs or self.music_dirs

    def indexes(self, media_type: MediaType) -> List[Facet]:
        if media_type is MediaType.MP3:
            return self.mp3_indexes
        return self.flac_indexes

    def release_depth(self, media_type: MediaType) -> int:
        if media_type is MediaType.MP3:
            return self.mp3_release_depth
        return self.flac_release_depth


def parse_bool(value: str, default: bool = False) -> bool:
    value = value.strip().lower()
    if not value:
        return default
    return value in TRUE_VALUES


def parse_depth(value: str, default: int) -> int:
    """Parse a positive release depth, keeping the default for anything else."""
    try:
        depth = int(value.strip())
    except ValueError:
        return default
    return depth if depth > 0 else default


def split_csv(value: str) -> List[str]:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


def parse_facets(value: str) -> List[Facet]:
    facets = []
    for name in split_csv(value):
        facet = Facet.from_name(name)
        if facet is not None and facet not in facets:
            facets.append(facet)
    return facets


def parse_media_types(value: str) -> List[MediaType]:
    types = []
    for name in split_csv(value):
        media_type = MediaType.from_name(name)
        if media_type is not None and media_type not in types:
            types.append(media_type)
    return types


def parse_config_lines(content: str) -> Dict[str, List[str]]:
    """Collect KEY=value pairs from config file content.

    Args:
        content: String content of the config file

    Returns:
        Dict mapping lower-cased keys to every value given for them, in order
    """
    values: Dict[str, List[str]] = {}

    for line in content.split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip().lower()
        if not key:
            continue
        values.setdefault(key, []).append(value.strip())

    return values


def _paths(values: Dict[str, List[str]], key: str) -> List[Path]:
    return [Path(v).expanduser() for v in values.get(key, []) if v.strip()]


def _last(values: Dict[str, List[str]], key: str) -> Optional[str]:
    found = values.get(key)
    return found[-1] if found else None


def parse_config(content: str) -> Config:
    """Build a Config from config file content.

    Raises:
        ConfigError: If no scan root or no INDEX_ROOT is configured
    """
    values = parse_config_lines(content)

    index_root = _last(values, "index_root")
    if not index_root:
        raise ConfigError("INDEX_ROOT=... is required")

    options = {}

    for key in ("relative_symlinks", "clean_on_start", "follow_symlinks"):
        value = _last(values, key)
        if value is not None:
            options[key] = parse_bool(value)

    value = _last(values, "enable_types")
    if value is not None:
        options["enable_types"] = parse_media_types(value)

    for key in ("mp3_indexes", "flac_indexes"):
        value = _last(values, key)
        if value is not None:
            options[key] = parse_facets(value)

    for key in ("mp3_release_depth", "flac_release_depth"):
        value = _last(values, key)
        if value is not None:
            options[key] = parse_depth(value, 1)

    return Config(
        index_root=Path(index_root).expanduser(),
        music_dirs=_paths(values, "music_dir"),
        mp3_dirs=_paths(values, "mp3_dir"),
        flac_dirs=_paths(values, "flac_dir"),
        **options,
    )


def load_config(config_path) -> Config:
    """Read and parse a config file.

    Args:
        config_path: Path to the KEY=value config file

    Returns:
        Parsed Config

    Raises:
        ConfigError: If the file cannot be read or is invalid
    """
    # Paths are bytes on disk; undecodable bytes round-trip to the same path
    try:
        with open(config_path, "r", encoding="utf-8", errors="surrogateescape") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"Cannot open config file: {config_path} ({e})") from e

    return parse_config(content)
