"""
Container d'injection de dependances via dependency-injector.

Construit une seule fois par run les objets partages : configuration,
cache du catalogue Libretro (passe explicitement aux adaptateurs) et
registre des sources.
"""

from dependency_injector import containers, providers

from .adapters.libretro.manifest import LibretroManifestCache
from .config import Settings
from .services.adapter_registry import create_default_registry
from .services.image_downloader import ImageDownloader
from .services.scanner import RomScannerService
from .services.scraper import ScraperService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        service = container.scraper_service()
        run = await service.run(ScrapeOptions(system_id=3))
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Cache du catalogue Libretro - un seul par processus
    manifest_cache = providers.Singleton(
        LibretroManifestCache,
        user_agent=config.provided.user_agent,
        timeout=config.provided.request_timeout,
    )

    # Registre des sources
    adapter_registry = providers.Singleton(
        create_default_registry,
        manifest_cache=manifest_cache,
    )

    rom_scanner = providers.Singleton(RomScannerService)
    image_downloader = providers.Singleton(
        ImageDownloader,
        user_agent=config.provided.user_agent,
        timeout=config.provided.request_timeout,
    )

    # Services
    scraper_service = providers.Factory(
        ScraperService,
        settings=config,
        registry=adapter_registry,
        scanner=rom_scanner,
        downloader=image_downloader,
    )
