"""
Registre des sources de jaquettes.

Associe un identifiant de source a une fabrique d'adaptateur, construit une
instance par source configuree, puis execute la chaine de repli : les
sources sont essayees par priorite croissante jusqu'a ce que l'une d'elles
identifie la ROM.

Usage:
    registry = create_default_registry(manifest_cache)
    retained = await registry.initialize_all(configs)
    await registry.prefetch_all(retained, platform_id=3)
    fallback = await registry.lookup_with_fallback(request, retained)
    await registry.dispose_all()
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from loguru import logger

from romart.adapters.libretro import LibretroAdapter, LibretroManifestCache
from romart.adapters.screenscraper import ScreenScraperAdapter
from romart.core.exceptions import AuthenticationError
from romart.core.ports.artwork_adapter import (
    AdapterFactory,
    AdapterSourceConfig,
    IArtworkAdapter,
    LookupRequest,
    LookupResult,
)


@dataclass(frozen=True)
class FallbackResult:
    """Resultat positif de la chaine de repli et source qui l'a fourni."""

    result: LookupResult
    adapter_id: str


class AdapterRegistry:
    """
    Fabriques d'adaptateurs et instances construites pour le run.

    Une instance est creee au premier get() d'un identifiant puis
    reutilisee jusqu'a dispose_all().
    """

    def __init__(self) -> None:
        self._factories: dict[str, AdapterFactory] = {}
        self._instances: dict[str, IArtworkAdapter] = {}

    def register(self, adapter_id: str, factory: AdapterFactory) -> None:
        """Enregistre (ou remplace) la fabrique d'une source."""
        self._factories[adapter_id] = factory

    def has(self, adapter_id: str) -> bool:
        return adapter_id in self._factories

    def registered_ids(self) -> list[str]:
        """Identifiants enregistres, dans l'ordre d'enregistrement."""
        return list(self._factories)

    def get(
        self, adapter_id: str, options: Optional[dict] = None
    ) -> Optional[IArtworkAdapter]:
        """
        Retourne l'instance d'une source, en la creant si necessaire.

        Returns:
            L'adaptateur, ou None si la source est inconnue ou si sa
            fabrique a echoue
        """
        instance = self._instances.get(adapter_id)
        if instance is not None:
            return instance

        factory = self._factories.get(adapter_id)
        if factory is None:
            logger.warning(f"Source inconnue: {adapter_id}")
            return None

        try:
            instance = factory(options or {})
        except Exception as e:
            logger.warning(f"Impossible de construire la source {adapter_id}: {e}")
            return None

        self._instances[adapter_id] = instance
        return instance

    def _sorted_sources(
        self, configs: Sequence[AdapterSourceConfig]
    ) -> list[AdapterSourceConfig]:
        """Sources actives par priorite croissante (tri stable)."""
        return sorted((c for c in configs if c.enabled), key=lambda c: c.priority)

    def enabled_adapters(
        self, configs: Sequence[AdapterSourceConfig]
    ) -> list[IArtworkAdapter]:
        """Adaptateurs des sources actives, par priorite croissante."""
        adapters = []
        for config in self._sorted_sources(configs):
            adapter = self.get(config.id, dict(config.options))
            if adapter is not None:
                adapters.append(adapter)
        return adapters

    async def initialize_all(
        self, configs: Sequence[AdapterSourceConfig]
    ) -> list[AdapterSourceConfig]:
        """
        Initialise toutes les sources actives.

        Returns:
            Configurations des sources initialisees avec succes, par priorite
        """
        retained = []
        for config in self._sorted_sources(configs):
            adapter = self.get(config.id, dict(config.options))
            if adapter is None:
                continue
            try:
                ok = await adapter.initialize()
            except Exception as e:
                logger.warning(f"Initialisation de {config.id} en echec: {e}")
                ok = False
            if ok:
                retained.append(config)
            else:
                logger.warning(f"Source {config.id} ignoree (initialisation refusee)")
        return retained

    def needs_hash(self, configs: Sequence[AdapterSourceConfig]) -> bool:
        """True si une source active identifie les ROMs par hash."""
        return any(
            adapter.capabilities.hash_lookup
            for adapter in self.enabled_adapters(configs)
        )

    async def prefetch_all(
        self, configs: Sequence[AdapterSourceConfig], platform_id: int
    ) -> None:
        """
        Precharge les donnees de chaque source qui le supporte.

        Les erreurs sont propagees : le run echoue avant tout traitement.
        """
        for adapter in self.enabled_adapters(configs):
            if adapter.supports_prefetch and adapter.supports_system(platform_id):
                await adapter.prefetch(platform_id)

    async def lookup_with_fallback(
        self,
        request: LookupRequest,
        configs: Sequence[AdapterSourceConfig],
    ) -> Optional[FallbackResult]:
        """
        Essaie les sources par priorite croissante.

        Le premier resultat found=True avec une URL de media interrompt la
        chaine. Un resultat identifie sans media est garde en reserve et la
        chaine continue ; il est retourne si aucune autre source ne fournit
        d'image. Un adaptateur qui retourne None ou leve une exception est
        traite comme un echec de cette source et la chaine continue, sauf
        AuthenticationError qui est fatale.

        Returns:
            FallbackResult, ou None si aucune source n'a identifie la ROM
        """
        without_media: Optional[FallbackResult] = None
        for adapter in self.enabled_adapters(configs):
            if not adapter.supports_system(request.platform_id):
                logger.debug(f"{adapter.id}: plateforme {request.platform_id} non supportee")
                continue

            try:
                result = await adapter.lookup(request)
            except AuthenticationError:
                raise
            except Exception as e:
                logger.warning(f"{adapter.id}: erreur sur {request.rom.filename}: {e}")
                continue

            if result is None:
                logger.warning(f"{adapter.id}: echec interne sur {request.rom.filename}")
                continue
            if result.found and result.media_url is not None:
                return FallbackResult(result=result, adapter_id=adapter.id)
            if result.found:
                logger.debug(f"{adapter.id}: {request.rom.filename} identifie sans media")
                if without_media is None:
                    without_media = FallbackResult(result=result, adapter_id=adapter.id)
                continue

            logger.debug(f"{adapter.id}: aucun resultat pour {request.rom.filename}")

        return without_media

    async def dispose_all(self) -> None:
        """Libere toutes les instances construites."""
        for adapter_id, adapter in self._instances.items():
            try:
                await adapter.dispose()
            except Exception as e:
                logger.warning(f"Liberation de {adapter_id} en echec: {e}")
        self._instances.clear()


def create_default_registry(
    manifest_cache: Optional[LibretroManifestCache] = None,
) -> AdapterRegistry:
    """
    Registre avec les sources livrees (libretro, screenscraper).

    Args:
        manifest_cache: Cache de catalogue Libretro partage pour le run
    """
    registry = AdapterRegistry()
    registry.register(
        "libretro",
        lambda options: LibretroAdapter(options, manifest_cache=manifest_cache),
    )
    registry.register("screenscraper", lambda options: ScreenScraperAdapter(options))
    return registry
