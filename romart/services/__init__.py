"""
Services applicatifs : orchestration du scraping.

- AdapterRegistry : Sources de jaquettes et chaine de repli par priorite
- RomScannerService : Scan des repertoires de ROMs
- ImageDownloader : Telechargement atomique des images
- ScraperService : Orchestrateur d'un run
"""

from romart.services.adapter_registry import (
    AdapterRegistry,
    FallbackResult,
    create_default_registry,
)
from romart.services.image_downloader import DownloadOutcome, ImageDownloader
from romart.services.scanner import RomScannerService
from romart.services.scraper import (
    ScrapeOptions,
    ScrapeRun,
    ScraperService,
    build_source_configs,
)

__all__ = [
    "AdapterRegistry",
    "DownloadOutcome",
    "FallbackResult",
    "ImageDownloader",
    "RomScannerService",
    "ScrapeOptions",
    "ScrapeRun",
    "ScraperService",
    "build_source_configs",
    "create_default_registry",
]
