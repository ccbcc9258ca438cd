"""
Interface port pour les sources de jaquettes.

Interface abstraite (port) définissant le contrat commun aux sources
d'illustrations : le catalogue Libretro (matching par nom de fichier) et
l'API ScreenScraper (identification par hash). Le registre d'adaptateurs
ne connait que ce contrat.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

from romart.core.value_objects import RomFile


@dataclass(frozen=True)
class AdapterCapabilities:
    """
    Capacités déclarées par un adaptateur.

    Attributs :
        hash_lookup : Supporte l'identification par hash (CRC32)
        filename_lookup : Supporte la recherche par nom de fichier
        media_types : Types de média disponibles (identifiants de la source)
        platforms : IDs de plateforme supportés, ou "all"
    """

    hash_lookup: bool
    filename_lookup: bool
    media_types: tuple[str, ...] = ()
    platforms: Union[frozenset[int], str] = "all"


@dataclass(frozen=True)
class LookupRequest:
    """
    Requête de recherche de jaquette pour une ROM.

    Attributs :
        rom : Fichier ROM local
        content_hash : CRC32 du fichier, calculé uniquement si un adaptateur
                       actif en a besoin
        platform_id : ID de plateforme
        media_type : Type de média souhaité (box-2D, ss, sstitle...)
        region_priority : Régions par ordre de préférence
    """

    rom: RomFile
    platform_id: int
    media_type: str
    region_priority: tuple[str, ...] = ()
    content_hash: Optional[str] = None


@dataclass
class LookupResult:
    """
    Résultat d'une recherche de jaquette.

    found=False signifie "aucun candidat identifié" ; found=True avec
    media_url à None signifie "identifié mais aucun média du type demandé".

    Attributs :
        found : Un jeu a été identifié
        matched_id : Identifiant du jeu dans la source
        display_name : Nom du jeu dans la source
        media_url : URL directe du média
        best_effort : Correspondance approximative (non exacte)
        extra_metadata : Métadonnées propres à la source
        original_name : Nom d'origine de la ROM pour les correspondances approximatives
    """

    found: bool
    matched_id: Optional[str] = None
    display_name: Optional[str] = None
    media_url: Optional[str] = None
    best_effort: bool = False
    extra_metadata: Optional[dict[str, Any]] = None
    original_name: Optional[str] = None


@dataclass(frozen=True)
class AdapterSourceConfig:
    """
    Configuration d'une source pour un run.

    Attributs :
        id : Identifiant de l'adaptateur (ex: "libretro", "screenscraper")
        enabled : Source active
        priority : Priorité (plus petit = essayé en premier)
        options : Options propres à l'adaptateur, validées à l'initialisation
    """

    id: str
    enabled: bool = True
    priority: int = 1
    options: Mapping[str, Any] = field(default_factory=dict)


class IArtworkAdapter(ABC):
    """
    Interface de base pour les sources de jaquettes.

    Cycle de vie : initialize() une fois, prefetch() optionnel avant le
    traitement, lookup() par ROM, dispose() en fin de run.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Identifiant unique de l'adaptateur."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Nom lisible de la source."""
        ...

    @property
    @abstractmethod
    def capabilities(self) -> AdapterCapabilities:
        """Capacités déclarées par la source."""
        ...

    @abstractmethod
    async def initialize(self) -> bool:
        """
        Valide la configuration (options, identifiants) et prépare l'adaptateur.

        Retourne :
            True si l'adaptateur est utilisable
        """
        ...

    @abstractmethod
    async def lookup(self, request: LookupRequest) -> Optional[LookupResult]:
        """
        Recherche la jaquette d'une ROM.

        Retourne :
            LookupResult (found=True ou False), ou None en cas d'échec interne
        """
        ...

    @abstractmethod
    def supports_system(self, platform_id: int) -> bool:
        """Vérifie si la source peut servir cette plateforme."""
        ...

    async def prefetch(self, platform_id: int) -> None:
        """
        Précharge les données d'une plateforme (no-op par défaut).

        Lève une exception en cas d'erreur pour échouer avant le traitement.
        """
        return None

    async def dispose(self) -> None:
        """Libère les ressources de l'adaptateur (no-op par défaut)."""
        return None

    @property
    def supports_prefetch(self) -> bool:
        """True si l'adaptateur surcharge prefetch()."""
        return type(self).prefetch is not IArtworkAdapter.prefetch


AdapterFactory = Callable[[Mapping[str, Any]], IArtworkAdapter]
