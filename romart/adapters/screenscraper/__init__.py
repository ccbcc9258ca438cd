"""
Source ScreenScraper : identification par CRC32.

- ScreenScraperAdapter : Implementation de IArtworkAdapter
- systems : Definitions des systemes (IDs, extensions de ROM)
"""

from romart.adapters.screenscraper.adapter import (
    ScreenScraperAdapter,
    ScreenScraperOptions,
)
from romart.adapters.screenscraper.systems import (
    SYSTEMS,
    SystemDefinition,
    get_extensions_for_system,
    get_system_by_id,
    get_system_by_name,
    is_valid_extension,
)

__all__ = [
    "SYSTEMS",
    "ScreenScraperAdapter",
    "ScreenScraperOptions",
    "SystemDefinition",
    "get_extensions_for_system",
    "get_system_by_id",
    "get_system_by_name",
    "is_valid_extension",
]
