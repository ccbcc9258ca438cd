"""
Orchestrateur du scraping de jaquettes.

Enchaine, pour un repertoire de ROMs d'une plateforme :
validation de la configuration, initialisation et prechargement des sources,
scan, filtrage (limite, images existantes), puis pour chaque ROM :
hash CRC32 (seulement si une source active en a besoin), recherche via la
chaine de repli du registre, et telechargement de l'image.
"""

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

from loguru import logger

from romart.config import Settings
from romart.core.entities import ScrapeResult, ScrapeStatus, ScrapeSummary
from romart.core.exceptions import ConfigurationError
from romart.core.ports.artwork_adapter import AdapterSourceConfig, LookupRequest
from romart.core.value_objects import RomFile
from romart.infrastructure.hash_service import compute_crc32
from romart.services.adapter_registry import AdapterRegistry
from romart.services.image_downloader import ImageDownloader
from romart.services.scanner import RomScannerService

ProgressCallback = Callable[[ScrapeResult, int, int], None]


def build_source_configs(
    settings: Settings, source_override: Optional[str] = None
) -> list[AdapterSourceConfig]:
    """
    Construit les configurations de sources pour un run.

    Une source imposee (option --source) est la seule utilisee, en priorite 1.
    Sinon : Libretro si active, ScreenScraper si active ET configure.

    Returns:
        Configurations triees par priorite croissante
    """
    if source_override:
        return [
            AdapterSourceConfig(
                id=source_override,
                enabled=True,
                priority=1,
                options=_adapter_options(source_override, settings),
            )
        ]

    sources = []
    if settings.libretro.enabled:
        sources.append(
            AdapterSourceConfig(
                id="libretro",
                priority=settings.libretro.priority,
                options=_adapter_options("libretro", settings),
            )
        )
    if settings.screenscraper_enabled:
        sources.append(
            AdapterSourceConfig(
                id="screenscraper",
                priority=settings.screenscraper.priority,
                options=_adapter_options("screenscraper", settings),
            )
        )
    return sorted(sources, key=lambda s: s.priority)


def _adapter_options(adapter_id: str, settings: Settings) -> dict:
    """Options propres a chaque source, validees par l'adaptateur."""
    if adapter_id == "screenscraper":
        credentials = settings.screenscraper.credentials
        return {
            "credentials": credentials.model_dump() if credentials else None,
            "rate_limit_ms": settings.screenscraper.rate_limit_ms,
            "user_agent": settings.user_agent,
            "request_timeout_ms": settings.request_timeout_ms,
        }
    if adapter_id == "libretro":
        return {
            "user_agent": settings.user_agent,
            "request_timeout_ms": settings.request_timeout_ms,
        }
    return {}


@dataclass(frozen=True)
class ScrapeOptions:
    """
    Surcharges de la configuration pour un run.

    Attributs:
        system_id: ID de plateforme (sinon Settings.system_id)
        download_dir: Repertoire des ROMs (sinon Settings.download_dir)
        media_type: Type de media (sinon Settings.media_type)
        region_priority: Regions preferees (sinon Settings.region_priority)
        source: Source unique imposee
        limit: Nombre maximal de ROMs traitees
        force: Retelecharger meme si une image existe
        dry_run: Simulation, aucun hash ni requete
    """

    system_id: Optional[int] = None
    download_dir: Optional[Path] = None
    media_type: Optional[str] = None
    region_priority: Optional[tuple[str, ...]] = None
    source: Optional[str] = None
    limit: Optional[int] = None
    force: bool = False
    dry_run: bool = False


@dataclass
class ScrapeRun:
    """Resultat complet d'un run."""

    results: list[ScrapeResult]
    summary: ScrapeSummary
    sources: list[str] = field(default_factory=list)
    roms_found: int = 0
    imgs_dir: Optional[Path] = None


class ScraperService:
    """
    Service orchestrant le scraping.

    Coordonne:
    - Le registre de sources (AdapterRegistry) pour la chaine de repli
    - Le scanner (RomScannerService) pour lister les ROMs
    - Le telechargeur (ImageDownloader) pour enregistrer les images
    """

    def __init__(
        self,
        settings: Settings,
        registry: AdapterRegistry,
        scanner: RomScannerService,
        downloader: ImageDownloader,
        hasher: Callable[[Path], str] = compute_crc32,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._scanner = scanner
        self._downloader = downloader
        self._hasher = hasher
        self._clock = clock

    async def run(
        self,
        options: Optional[ScrapeOptions] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ScrapeRun:
        """
        Execute un run de scraping.

        Raises:
            ConfigurationError: Plateforme absente, aucune source active ou initialisable
            CatalogUnavailableError: Prechargement d'un catalogue en echec
            AuthenticationError: Identifiants refuses par une source
            ScanError: Repertoire de ROMs introuvable ou illisible
        """
        options = options or ScrapeOptions()
        settings = self._settings
        start = self._clock()

        system_id = options.system_id if options.system_id is not None else settings.system_id
        if system_id is None:
            raise ConfigurationError(
                "System ID not configured. Set ROMART_SYSTEM_ID or pass --system."
            )

        media_type = options.media_type or settings.media_type
        region_priority = tuple(options.region_priority or settings.region_priority)
        skip_existing = settings.skip_existing and not options.force

        configs = build_source_configs(settings, options.source)
        if not configs:
            raise ConfigurationError(
                "No artwork sources enabled. Enable libretro or configure "
                "screenscraper with credentials."
            )

        try:
            sources = await self._registry.initialize_all(configs)
            if not sources:
                raise ConfigurationError(
                    "No artwork sources could be initialized. Check your configuration."
                )
            logger.info(f"Sources: {', '.join(s.id for s in sources)}")

            await self._registry.prefetch_all(sources, system_id)

            download_dir = options.download_dir or settings.download_dir
            imgs_dir = self._scanner.imgs_directory(download_dir)
            roms = self._scanner.scan_for_system(download_dir, system_id)
            roms_found = len(roms)

            if options.limit is not None and 0 < options.limit < len(roms):
                roms = roms[: options.limit]

            results = await self._process_all(
                roms,
                sources,
                system_id,
                media_type,
                region_priority,
                imgs_dir,
                skip_existing,
                options.dry_run,
                on_progress,
            )
        finally:
            await self._registry.dispose_all()
            await self._downloader.close()

        summary = ScrapeSummary.from_results(results, self._clock() - start)
        return ScrapeRun(
            results=results,
            summary=summary,
            sources=[s.id for s in sources],
            roms_found=roms_found,
            imgs_dir=imgs_dir,
        )

    async def _process_all(
        self,
        roms: Sequence[RomFile],
        sources: Sequence[AdapterSourceConfig],
        system_id: int,
        media_type: str,
        region_priority: tuple[str, ...],
        imgs_dir: Path,
        skip_existing: bool,
        dry_run: bool,
        on_progress: Optional[ProgressCallback],
    ) -> list[ScrapeResult]:
        results: list[ScrapeResult] = []
        total = len(roms)
        calculate_hashes = not dry_run and self._registry.needs_hash(sources)

        for index, rom in enumerate(roms):
            existing = (
                self._scanner.find_existing_image(rom.stem, imgs_dir)
                if skip_existing
                else None
            )
            if existing is not None:
                result = ScrapeResult(rom=rom, status=ScrapeStatus.SKIPPED, image_path=existing)
            elif dry_run:
                result = ScrapeResult(rom=rom, status=ScrapeStatus.PLANNED)
            else:
                result = await self._process_rom(
                    rom,
                    sources,
                    system_id,
                    media_type,
                    region_priority,
                    imgs_dir,
                    calculate_hashes,
                )

            results.append(result)
            if on_progress is not None:
                on_progress(result, index, total)

        return results

    async def _process_rom(
        self,
        rom: RomFile,
        sources: Sequence[AdapterSourceConfig],
        system_id: int,
        media_type: str,
        region_priority: tuple[str, ...],
        imgs_dir: Path,
        calculate_hashes: bool,
    ) -> ScrapeResult:
        """Hash (si necessaire), recherche, telechargement d'une ROM."""
        crc: Optional[str] = None
        if calculate_hashes:
            try:
                crc = await asyncio.to_thread(self._hasher, rom.path)
            except OSError as e:
                logger.warning(f"Hash de {rom.filename} impossible: {e}")
                return ScrapeResult(rom=rom, status=ScrapeStatus.FAILED, error=str(e))

        request = LookupRequest(
            rom=rom,
            platform_id=system_id,
            media_type=media_type,
            region_priority=region_priority,
            content_hash=crc,
        )

        fallback = await self._registry.lookup_with_fallback(request, sources)

        if fallback is None:
            return ScrapeResult(rom=rom, status=ScrapeStatus.NOT_FOUND, content_hash=crc)

        found = fallback.result
        if found.media_url is None:
            return ScrapeResult(
                rom=rom,
                status=ScrapeStatus.NOT_FOUND,
                content_hash=crc,
                game_name=found.display_name,
                source=fallback.adapter_id,
                error=f"No {media_type} media available",
            )

        outcome = await self._downloader.download(found.media_url, imgs_dir, rom.stem)
        if not outcome.success:
            return ScrapeResult(
                rom=rom,
                status=ScrapeStatus.FAILED,
                content_hash=crc,
                game_name=found.display_name,
                source=fallback.adapter_id,
                error=outcome.error,
            )

        return ScrapeResult(
            rom=rom,
            status=ScrapeStatus.DOWNLOADED,
            image_path=outcome.path,
            image_size=outcome.size,
            content_hash=crc,
            game_name=found.display_name,
            source=fallback.adapter_id,
            best_effort=found.best_effort,
        )
