"""
Source Libretro Thumbnails : correspondance par nom de fichier.

- LibretroAdapter : Implementation de IArtworkAdapter
- LibretroManifestCache : Cache des catalogues (GitHub, repli CDN)
- title_matcher : Correspondance floue en trois phases
"""

from romart.adapters.libretro.adapter import LibretroAdapter, LibretroOptions
from romart.adapters.libretro.manifest import (
    FolderManifest,
    LibretroManifestCache,
    SystemManifest,
)
from romart.adapters.libretro.title_matcher import MatchResult, find_match

__all__ = [
    "FolderManifest",
    "LibretroAdapter",
    "LibretroManifestCache",
    "LibretroOptions",
    "MatchResult",
    "SystemManifest",
    "find_match",
]
