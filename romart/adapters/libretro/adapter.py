"""
Adaptateur Libretro Thumbnails : correspondance par nom de fichier.

Le catalogue de la plateforme est recupere une fois (GitHub, ou CDN en
repli), puis chaque ROM est cherchee localement :

1. Correspondance exacte
2. Correspondance apres suppression des tags de variante (region conservee)
3. Correspondance sur le titre seul, departagee par la region

Seul le telechargement de l'image fait une requete par ROM.
"""

from typing import Any, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from romart.adapters.libretro.manifest import DEFAULT_USER_AGENT, LibretroManifestCache
from romart.adapters.libretro.sanitizer import sanitize_filename
from romart.adapters.libretro.systems import SUPPORTED_SYSTEM_IDS, is_system_supported
from romart.core.ports.artwork_adapter import (
    AdapterCapabilities,
    IArtworkAdapter,
    LookupRequest,
    LookupResult,
)

LIBRETRO_MEDIA_TYPES = ("box-2D", "boxart", "ss", "snap", "screenshot", "sstitle", "title")


class LibretroOptions(BaseModel):
    """Options de l'adaptateur, validees a initialize()."""

    user_agent: str = DEFAULT_USER_AGENT
    request_timeout_ms: int = Field(default=30000, ge=1000, le=300000)


class LibretroAdapter(IArtworkAdapter):
    """
    Source Libretro Thumbnails (filename_lookup=True, sans hash).

    Le cache de catalogue est partage quand il est fourni par le conteneur ;
    sinon l'adaptateur construit le sien a l'initialisation.
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        manifest_cache: Optional[LibretroManifestCache] = None,
    ) -> None:
        """
        Args:
            options: Options brutes (user_agent, request_timeout_ms)
            manifest_cache: Cache de catalogue partage
        """
        self._raw_options = dict(options or {})
        self._manifest = manifest_cache
        self._owns_manifest = manifest_cache is None
        self._initialized = False

    @property
    def id(self) -> str:
        return "libretro"

    @property
    def name(self) -> str:
        return "Libretro Thumbnails"

    @property
    def capabilities(self) -> AdapterCapabilities:
        return AdapterCapabilities(
            hash_lookup=False,
            filename_lookup=True,
            media_types=LIBRETRO_MEDIA_TYPES,
            platforms=SUPPORTED_SYSTEM_IDS,
        )

    async def initialize(self) -> bool:
        try:
            options = LibretroOptions.model_validate(self._raw_options)
        except ValidationError as e:
            logger.warning(f"Libretro: options invalides: {e}")
            return False

        if self._manifest is None:
            self._manifest = LibretroManifestCache(
                user_agent=options.user_agent,
                timeout=options.request_timeout_ms / 1000.0,
            )
        self._initialized = True
        return True

    async def prefetch(self, platform_id: int) -> None:
        """Recupere le catalogue avant le traitement (leve en cas d'erreur)."""
        if self._manifest is None:
            return
        await self._manifest.prefetch(platform_id)

    def supports_system(self, platform_id: int) -> bool:
        return is_system_supported(platform_id)

    async def lookup(self, request: LookupRequest) -> Optional[LookupResult]:
        if not self._initialized or self._manifest is None:
            return None

        folder = await self._manifest.get_manifest(
            request.platform_id, request.media_type
        )
        if folder is None:
            return LookupResult(found=False)

        stem = sanitize_filename(request.rom.stem)
        match = self._manifest.find_match(folder, stem)
        if match is None:
            return LookupResult(found=False)

        media_url = self._manifest.build_url(
            request.platform_id, request.media_type, match.match
        )
        if media_url is None:
            return LookupResult(found=False)

        if match.best_effort:
            logger.debug(f"Libretro: {request.rom.stem} -> {match.match} (approximatif)")

        return LookupResult(
            found=True,
            matched_id=match.match,
            display_name=match.match,
            media_url=media_url,
            best_effort=match.best_effort,
            original_name=request.rom.stem if match.best_effort else None,
        )

    async def dispose(self) -> None:
        if self._manifest is not None:
            await self._manifest.close()
            if self._owns_manifest:
                self._manifest.clear_cache()
        self._initialized = False
