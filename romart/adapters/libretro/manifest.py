"""
Cache du catalogue Libretro Thumbnails.

Recupere une fois par plateforme la liste des vignettes disponibles, puis
sert toutes les recherches localement (aucune requete par ROM).

Chemin principal : API Git Trees de GitHub (une seule requete, recursive).
Repli : si GitHub signale une limite de debit (403 ou 429), les listings HTML du CDN
sont parses pour les dossiers Named_Boxarts, Named_Snaps et Named_Titles.

Le cache est un objet explicite, construit une fois par run par le
conteneur et partage avec les adaptateurs qui en ont besoin.

Usage:
    cache = LibretroManifestCache(user_agent="romart/0.1")
    await cache.prefetch(3)
    folder = await cache.get_manifest(3, "box-2D")
    match = cache.find_match(folder, "Super Mario Bros. (World)")
    url = cache.build_url(3, "box-2D", match.match)
    await cache.close()
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from romart.adapters.libretro.cdn_parser import parse_cdn_directory
from romart.adapters.libretro.systems import (
    CDN_TARGET_FOLDERS,
    folder_for_media_type,
    get_libretro_system_name,
)
from romart.adapters.libretro.title_matcher import (
    MatchResult,
    exact_match,
    find_match,
)
from romart.core.exceptions import CatalogUnavailableError, PlatformNotFoundError

GITHUB_TREE_API = "https://api.github.com/repos/libretro-thumbnails"
LIBRETRO_CDN_BASE = "https://thumbnails.libretro.com"
DEFAULT_USER_AGENT = "romart/0.1"

# Limite primaire (403) ou secondaire (429) de l'API GitHub
RATE_LIMIT_STATUSES = (403, 429)

# Caracteres laisses tels quels par l'encodage des composants d'URL
_URL_SAFE_CHARS = "!~*'()"


def encode_url_component(value: str) -> str:
    """Percent-encode un segment de chemin (espaces, virgules, slashs...)."""
    return quote(value, safe=_URL_SAFE_CHARS)


@dataclass
class FolderManifest:
    """
    Vignettes d'un dossier (type de media) pour une plateforme.

    Attributes:
        filenames: Noms canoniques, sans extension .png
        lowercase_map: Nom en minuscules -> nom canonique
    """

    filenames: set[str] = field(default_factory=set)
    lowercase_map: dict[str, str] = field(default_factory=dict)

    def add(self, filename: str) -> None:
        self.filenames.add(filename)
        self.lowercase_map[filename.lower()] = filename

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "FolderManifest":
        manifest = cls()
        for name in names:
            manifest.add(name)
        return manifest

    def __len__(self) -> int:
        return len(self.filenames)


@dataclass
class SystemManifest:
    """
    Catalogue complet d'une plateforme, tous dossiers confondus.

    Attributes:
        folders: Dossier (Named_Boxarts...) -> FolderManifest
        fetched_at: Horodatage de la recuperation
        failed: Recuperation en echec, mise en cache pour ne pas reessayer
        published: False si la plateforme n'existe pas dans le catalogue (404)
    """

    folders: dict[str, FolderManifest] = field(default_factory=dict)
    fetched_at: float = field(default_factory=time.time)
    failed: bool = False
    published: bool = True


class _GitHubRateLimited(Exception):
    """GitHub a repondu 403 ou 429 : bascule sur le CDN."""


def process_tree_entries(entries: Iterable[Any]) -> dict[str, FolderManifest]:
    """
    Classe les entrees de l'API Git Trees par dossier.

    Seuls les blobs .png situes dans un dossier sont retenus :
    "Named_Boxarts/Game (USA).png" -> dossier "Named_Boxarts", nom "Game (USA)".
    """
    folders: dict[str, FolderManifest] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        path = entry.get("path")
        if entry.get("type") != "blob" or not isinstance(path, str):
            continue
        if not path.endswith(".png") or "/" not in path:
            continue

        folder, rest = path.split("/", 1)
        folders.setdefault(folder, FolderManifest()).add(rest[:-4])
    return folders


class LibretroManifestCache:
    """
    Cache en memoire, par processus, des catalogues Libretro.

    - Au plus une recuperation reussie par plateforme
    - Une seule recuperation en cours par plateforme (verrou asyncio)
    - Un echec est mis en cache : get_manifest ne refait aucune requete
      jusqu'a clear_cache()
    - Un 404 GitHub est un resultat negatif legitime (plateforme non
      publiee), mis en cache sans repli CDN
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            user_agent: User-Agent des requetes HTTP
            timeout: Timeout de chaque requete en secondes
            clock: Horloge des horodatages (injectable pour les tests)
        """
        self._user_agent = user_agent
        self._timeout = timeout
        self._clock = clock
        self._cache: dict[int, SystemManifest] = {}
        self._locks: dict[int, asyncio.Lock] = {}
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
                follow_redirects=True,
            )
        return self._client

    def _lock_for(self, platform_id: int) -> asyncio.Lock:
        lock = self._locks.get(platform_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[platform_id] = lock
        return lock

    def cached(self, platform_id: int) -> Optional[SystemManifest]:
        """Catalogue en cache pour une plateforme, sans requete."""
        return self._cache.get(platform_id)

    async def get_manifest(
        self, platform_id: int, media_type: str
    ) -> Optional[FolderManifest]:
        """
        Retourne le catalogue d'un dossier, en le recuperant si necessaire.

        Args:
            platform_id: ID de plateforme
            media_type: Type de media (box-2D, ss, sstitle...)

        Returns:
            FolderManifest, ou None si la plateforme est inconnue, non
            publiee, en echec, ou si le dossier n'existe pas
        """
        system_name = get_libretro_system_name(platform_id)
        if system_name is None:
            return None

        folder = folder_for_media_type(media_type)
        manifest = self._cache.get(platform_id)

        if manifest is None:
            async with self._lock_for(platform_id):
                manifest = self._cache.get(platform_id)
                if manifest is None:
                    try:
                        manifest = await self._fetch_system_manifest(system_name)
                    except CatalogUnavailableError as e:
                        logger.warning(f"Catalogue Libretro indisponible: {e}")
                        manifest = SystemManifest(failed=True, fetched_at=self._clock())
                    self._cache[platform_id] = manifest
        elif manifest.failed:
            logger.debug(f"Catalogue {system_name} en echec (cache), pas de nouvel essai")

        if manifest.failed or not manifest.published:
            return None
        return manifest.folders.get(folder)

    async def prefetch(self, platform_id: int) -> None:
        """
        Recupere le catalogue d'une plateforme avant le traitement.

        Contrairement a get_manifest, les erreurs sont levees et ne sont pas
        mises en cache. Un catalogue deja en echec est recupere a nouveau.

        Raises:
            PlatformNotFoundError: Plateforme inconnue ou non publiee (404)
            CatalogUnavailableError: Erreur reseau, ou limite GitHub avec repli CDN en echec
        """
        system_name = get_libretro_system_name(platform_id)
        if system_name is None:
            raise PlatformNotFoundError(f"Unsupported system ID: {platform_id}")

        async with self._lock_for(platform_id):
            manifest = self._cache.get(platform_id)
            if manifest is None or manifest.failed:
                manifest = await self._fetch_system_manifest(system_name)
                self._cache[platform_id] = manifest

        if not manifest.published:
            raise PlatformNotFoundError(f"System not found on Libretro: {system_name}")

    async def _fetch_system_manifest(self, system_name: str) -> SystemManifest:
        """GitHub d'abord, CDN si GitHub limite le debit."""
        try:
            return await self._fetch_from_github(system_name)
        except _GitHubRateLimited:
            logger.warning(
                f"GitHub API rate limit exceeded for {system_name}, trying CDN fallback..."
            )

        manifest = await self._fetch_from_cdn(system_name)
        if manifest is None:
            raise CatalogUnavailableError(
                "GitHub API rate limit exceeded and CDN fallback failed. "
                "Try again later or check your network connection."
            )
        return manifest

    async def _fetch_from_github(self, system_name: str) -> SystemManifest:
        repo_name = encode_url_component(system_name.replace(" ", "_"))
        url = f"{GITHUB_TREE_API}/{repo_name}/git/trees/master"
        logger.info(f"Recuperation du catalogue Libretro: {system_name}")

        try:
            response = await self._get_client().get(
                url,
                params={"recursive": "1"},
                headers={"Accept": "application/vnd.github.v3+json"},
            )
        except httpx.HTTPError as e:
            raise CatalogUnavailableError(
                f"Failed to fetch manifest for {system_name}: {e}"
            ) from e

        if response.status_code == 404:
            logger.info(f"Plateforme non publiee sur Libretro: {system_name}")
            return SystemManifest(published=False, fetched_at=self._clock())
        if response.status_code in RATE_LIMIT_STATUSES:
            raise _GitHubRateLimited()
        if not response.is_success:
            raise CatalogUnavailableError(
                f"Failed to fetch manifest for {system_name}: "
                f"GitHub API error: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogUnavailableError(
                f"Failed to fetch manifest for {system_name}: {e}"
            ) from e

        tree = data.get("tree") if isinstance(data, dict) else None
        folders = process_tree_entries(tree or [])
        total = sum(len(f) for f in folders.values())
        logger.info(f"Catalogue {system_name}: {total} vignette(s) dans {len(folders)} dossier(s)")
        return SystemManifest(folders=folders, fetched_at=self._clock())

    async def _fetch_from_cdn(self, system_name: str) -> Optional[SystemManifest]:
        """Au moins un dossier doit repondre avec des entrees."""
        folders: dict[str, FolderManifest] = {}
        for folder in CDN_TARGET_FOLDERS:
            folder_manifest = await self._fetch_folder_from_cdn(system_name, folder)
            if folder_manifest is not None:
                folders[folder] = folder_manifest

        if not folders:
            return None
        logger.info(f"Catalogue {system_name} recupere depuis le CDN ({len(folders)} dossier(s))")
        return SystemManifest(folders=folders, fetched_at=self._clock())

    async def _fetch_folder_from_cdn(
        self, system_name: str, folder: str
    ) -> Optional[FolderManifest]:
        url = f"{LIBRETRO_CDN_BASE}/{encode_url_component(system_name)}/{folder}/"
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            logger.debug(f"CDN {folder} inaccessible pour {system_name}: {e}")
            return None

        if not response.is_success:
            logger.debug(f"CDN {folder}: HTTP {response.status_code} pour {system_name}")
            return None

        filenames = parse_cdn_directory(response.text)
        if not filenames:
            return None
        return FolderManifest.from_names(filenames)

    def exact_match(self, manifest: FolderManifest, filename: str) -> Optional[str]:
        return exact_match(manifest, filename)

    def find_match(
        self, manifest: FolderManifest, filename: str
    ) -> Optional[MatchResult]:
        return find_match(manifest, filename)

    def build_url(
        self, platform_id: int, media_type: str, filename: str
    ) -> Optional[str]:
        """
        URL CDN d'une vignette.

        Example:
            build_url(3, "box-2D", "Super Mario Bros. (World)")
            # https://thumbnails.libretro.com/Nintendo%20-%20Nintendo%20Entertainment%20System/
            #     Named_Boxarts/Super%20Mario%20Bros.%20(World).png
        """
        system_name = get_libretro_system_name(platform_id)
        if system_name is None:
            return None

        folder = folder_for_media_type(media_type)
        return (
            f"{LIBRETRO_CDN_BASE}/{encode_url_component(system_name)}/"
            f"{folder}/{encode_url_component(filename)}.png"
        )

    def clear_cache(self) -> None:
        """Oublie tous les catalogues, y compris les echecs."""
        self._cache.clear()
        self._locks.clear()

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
