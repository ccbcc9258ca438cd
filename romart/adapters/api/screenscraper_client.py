"""
Client ScreenScraper pour l'identification de jeux par empreinte CRC32.

Interroge l'endpoint jeuInfos.php avec le CRC32, le nom et la taille de la
ROM. Chaque requete passe par le limiteur de debit, et les erreurs
transitoires sont relancees avec backoff exponentiel (voir retry.py).

Usage:
    credentials = ScreenScraperCredentials(
        dev_id="dev", dev_password="pwd", user_id="user", user_password="pwd"
    )
    client = ScreenScraperClient(credentials, rate_limit_ms=1000)
    game = await client.lookup_game("D445F698", 3, "Super Mario Bros. (World).nes", 40976)
    url = select_media_url(game.medias, "box-2D", ["us", "wor"])
    await client.close()
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from romart.adapters.api.rate_limiter import AsyncRateLimiter
from romart.adapters.api.retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    SleepFn,
    rate_limit_retrying,
    transient_retrying,
)
from romart.core.exceptions import (
    AuthenticationError,
    RateLimitError,
    TransientNetworkError,
)

DEFAULT_USER_AGENT = "Wget/1.21.2"


class ScreenScraperCredentials(BaseModel):
    """Identifiants developpeur et utilisateur ScreenScraper."""

    model_config = ConfigDict(frozen=True)

    dev_id: str = Field(min_length=1)
    dev_password: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    user_password: str = Field(min_length=1)


@dataclass(frozen=True)
class SSMedia:
    """Un media reference par ScreenScraper pour un jeu."""

    type: str
    url: str = ""
    region: Optional[str] = None
    format: Optional[str] = None

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "SSMedia":
        return cls(
            type=str(item.get("type", "")),
            url=str(item.get("url") or ""),
            region=item.get("region"),
            format=item.get("format"),
        )


@dataclass(frozen=True)
class GameLookupResult:
    """
    Jeu identifie par ScreenScraper.

    Attributes:
        game_id: Identifiant ScreenScraper du jeu
        game_name: Nom prefere (region us, puis wor, puis le premier)
        medias: Medias disponibles, toutes regions confondues
    """

    game_id: str
    game_name: str
    medias: tuple[SSMedia, ...] = field(default_factory=tuple)


def _preferred_name(names: Sequence[dict[str, Any]], fallback: str) -> str:
    """Choisit le nom du jeu : region us, puis wor, puis le premier."""
    for region in ("us", "wor"):
        for entry in names:
            if entry.get("region") == region and entry.get("text"):
                return str(entry["text"])
    for entry in names:
        if entry.get("text"):
            return str(entry["text"])
    return fallback


def parse_game_response(data: Any) -> Optional[GameLookupResult]:
    """
    Convertit la reponse JSON de jeuInfos.php en GameLookupResult.

    Returns:
        GameLookupResult, ou None si la reponse ne decrit aucun jeu
    """
    if not isinstance(data, dict):
        return None
    response = data.get("response")
    if not isinstance(response, dict):
        return None
    game = response.get("jeu")
    if not isinstance(game, dict) or not game:
        return None

    game_id = str(game.get("id", ""))
    names = [n for n in game.get("noms") or [] if isinstance(n, dict)]
    medias = tuple(
        SSMedia.from_api(m) for m in game.get("medias") or [] if isinstance(m, dict)
    )
    return GameLookupResult(
        game_id=game_id,
        game_name=_preferred_name(names, game_id),
        medias=medias,
    )


def select_media_url(
    medias: Sequence[SSMedia],
    media_type: str,
    region_priority: Sequence[str],
) -> Optional[str]:
    """
    Selectionne l'URL du media demande selon la priorite de regions.

    Parcourt les regions dans l'ordre ; a defaut, retourne le premier media
    du type demande qui possede une URL.

    Returns:
        URL du media, ou None si aucun media du type n'a d'URL
    """
    candidates = [m for m in medias if m.type == media_type]
    if not candidates:
        return None

    for region in region_priority:
        for media in candidates:
            if media.region == region and media.url:
                return media.url

    for media in candidates:
        if media.url:
            return media.url
    return None


def available_media_types(medias: Sequence[SSMedia]) -> list[str]:
    """Liste triee des types de media distincts."""
    return sorted({media.type for media in medias if media.type})


class ScreenScraperClient:
    """
    Client de l'API ScreenScraper (jeuInfos.php).

    - Une requete au plus toutes les rate_limit_ms millisecondes
    - 404 : jeu inconnu, retourne None
    - 429 : relance avec un delai plus long, sans consommer le budget transitoire
    - 401/403 : AuthenticationError, jamais relancee
    - Timeout, erreur de connexion, 5xx, JSON illisible : TransientNetworkError,
      relancee avec backoff exponentiel

    Attributes:
        API_BASE_URL: URL de base de l'API v2
        SOFTWARE_NAME: Nom du logiciel transmis a l'API (softname)
    """

    API_BASE_URL = "https://api.screenscraper.fr/api2"
    SOFTWARE_NAME = "romart"

    def __init__(
        self,
        credentials: ScreenScraperCredentials,
        rate_limit_ms: int = 1000,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        rate_limiter: Optional[AsyncRateLimiter] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """
        Initialise le client ScreenScraper.

        Args:
            credentials: Identifiants developpeur et utilisateur
            rate_limit_ms: Intervalle minimal entre deux requetes (ms)
            user_agent: User-Agent des requetes HTTP
            timeout: Timeout de chaque requete en secondes
            retry_policy: Parametres de backoff
            rate_limiter: Limiteur a utiliser (cree depuis rate_limit_ms sinon)
            sleep: Fonction d'attente des retries (injectable pour les tests)
        """
        self._credentials = credentials
        self._user_agent = user_agent
        self._timeout = timeout
        self._retry_policy = retry_policy
        self._sleep = sleep
        self._rate_limiter = rate_limiter or AsyncRateLimiter(rate_limit_ms / 1000.0)
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.API_BASE_URL,
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
            )
        return self._client

    def _build_params(
        self, crc: str, system_id: int, rom_name: str, rom_size: int
    ) -> dict[str, str]:
        creds = self._credentials
        return {
            "devid": creds.dev_id,
            "devpassword": creds.dev_password,
            "softname": self.SOFTWARE_NAME,
            "ssid": creds.user_id,
            "sspassword": creds.user_password,
            "output": "json",
            "crc": crc,
            "systemeid": str(system_id),
            "romtype": "rom",
            "romnom": rom_name,
            "romtaille": str(rom_size),
        }

    async def lookup_game(
        self,
        crc: str,
        system_id: int,
        rom_name: str,
        rom_size: int,
    ) -> Optional[GameLookupResult]:
        """
        Identifie un jeu par son CRC32.

        Args:
            crc: CRC32 en hexadecimal majuscule (8 caracteres)
            system_id: Identifiant de plateforme ScreenScraper
            rom_name: Nom du fichier ROM
            rom_size: Taille du fichier en octets

        Returns:
            GameLookupResult, ou None si le jeu est inconnu (404 ou reponse vide)

        Raises:
            AuthenticationError: Identifiants refuses (401/403)
            RateLimitError: 429 persistant malgre les relances
            TransientNetworkError: Erreur transitoire apres epuisement des relances
        """
        params = self._build_params(crc, system_id, rom_name, rom_size)
        result: Optional[GameLookupResult] = None

        try:
            async for attempt in transient_retrying(self._retry_policy, self._sleep):
                with attempt:
                    attempt_index = attempt.retry_state.attempt_number - 1
                    result = await self._attempt(params, attempt_index)
        except TransientNetworkError as e:
            attempts = self._retry_policy.max_retries + 1
            raise TransientNetworkError(
                f"ScreenScraper injoignable apres {attempts} tentatives: {e}",
                status_code=e.status_code,
            ) from e

        return result

    async def _attempt(
        self, params: dict[str, str], attempt_index: int
    ) -> Optional[GameLookupResult]:
        """Une tentative, relancee tant que l'API repond 429."""
        result: Optional[GameLookupResult] = None
        async for rl_attempt in rate_limit_retrying(
            self._retry_policy, attempt_index, self._sleep
        ):
            with rl_attempt:
                result = await self._send(params)
        return result

    async def _send(self, params: dict[str, str]) -> Optional[GameLookupResult]:
        """Envoie une requete et traduit le statut HTTP."""
        await self._rate_limiter.wait()
        client = self._get_client()

        try:
            response = await client.get("/jeuInfos.php", params=params)
        except httpx.TransportError as e:
            raise TransientNetworkError(f"Erreur reseau ScreenScraper: {e}") from e

        status = response.status_code
        if status == 404:
            logger.debug(f"ScreenScraper: jeu inconnu (crc={params['crc']})")
            return None
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
            )
        if status in (401, 403):
            raise AuthenticationError(status)
        if not response.is_success:
            raise TransientNetworkError(
                f"ScreenScraper API error: {status} {response.reason_phrase}",
                status_code=status,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TransientNetworkError(f"Reponse ScreenScraper illisible: {e}") from e

        return parse_game_response(data)

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
