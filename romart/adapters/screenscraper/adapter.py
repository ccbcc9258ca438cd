"""
Adaptateur ScreenScraper : identification exacte par CRC32.

Valide ses options a l'initialisation (identifiants obligatoires), puis
delegue chaque recherche au ScreenScraperClient et choisit l'URL du media
demande selon la priorite de regions.
"""

from typing import Any, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from romart.adapters.api.screenscraper_client import (
    DEFAULT_USER_AGENT,
    ScreenScraperClient,
    ScreenScraperCredentials,
    available_media_types,
    select_media_url,
)
from romart.adapters.screenscraper.systems import get_system_by_id
from romart.core.ports.artwork_adapter import (
    AdapterCapabilities,
    IArtworkAdapter,
    LookupRequest,
    LookupResult,
)

SCREENSCRAPER_MEDIA_TYPES = (
    "box-2D",
    "box-3D",
    "ss",
    "sstitle",
    "mixrbv1",
    "mixrbv2",
    "wheel",
    "marquee",
    "fanart",
    "video",
)


class ScreenScraperOptions(BaseModel):
    """Options de l'adaptateur, validees a initialize()."""

    credentials: ScreenScraperCredentials
    rate_limit_ms: int = Field(default=1000, ge=100, le=10000)
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout_ms: int = Field(default=30000, ge=1000, le=300000)


class ScreenScraperAdapter(IArtworkAdapter):
    """
    Source ScreenScraper (hash_lookup=True).

    Sans CRC32 dans la requete, lookup retourne None (echec interne) :
    l'orchestrateur calcule le hash des qu'un adaptateur actif le demande.
    Les AuthenticationError du client ne sont pas interceptees.
    """

    def __init__(
        self,
        options: Mapping[str, Any],
        client: Optional[ScreenScraperClient] = None,
    ) -> None:
        """
        Args:
            options: Options brutes (credentials, rate_limit_ms, user_agent...)
            client: Client a utiliser (construit depuis les options sinon)
        """
        self._raw_options = dict(options)
        self._client = client
        self._initialized = False

    @property
    def id(self) -> str:
        return "screenscraper"

    @property
    def name(self) -> str:
        return "ScreenScraper"

    @property
    def capabilities(self) -> AdapterCapabilities:
        return AdapterCapabilities(
            hash_lookup=True,
            filename_lookup=True,
            media_types=SCREENSCRAPER_MEDIA_TYPES,
            platforms="all",
        )

    async def initialize(self) -> bool:
        try:
            options = ScreenScraperOptions.model_validate(self._raw_options)
        except ValidationError as e:
            logger.warning(f"ScreenScraper: options invalides ({e.error_count()} erreur(s)): {e}")
            return False

        if self._client is None:
            self._client = ScreenScraperClient(
                credentials=options.credentials,
                rate_limit_ms=options.rate_limit_ms,
                user_agent=options.user_agent,
                timeout=options.request_timeout_ms / 1000.0,
            )
        self._initialized = True
        return True

    def supports_system(self, platform_id: int) -> bool:
        return get_system_by_id(platform_id) is not None

    async def lookup(self, request: LookupRequest) -> Optional[LookupResult]:
        if not self._initialized or self._client is None:
            return None
        if not request.content_hash:
            logger.debug(f"ScreenScraper: pas de CRC32 pour {request.rom.filename}")
            return None

        game = await self._client.lookup_game(
            crc=request.content_hash,
            system_id=request.platform_id,
            rom_name=request.rom.filename,
            rom_size=request.rom.size,
        )
        if game is None:
            return LookupResult(found=False)

        media_url = select_media_url(
            game.medias, request.media_type, request.region_priority
        )
        return LookupResult(
            found=True,
            matched_id=game.game_id,
            display_name=game.game_name,
            media_url=media_url,
            extra_metadata={
                "medias": [
                    {"type": m.type, "region": m.region, "url": m.url}
                    for m in game.medias
                ],
                "available_media_types": available_media_types(game.medias),
            },
        )

    async def dispose(self) -> None:
        if self._client is not None:
            await self._client.close()
        self._initialized = False
