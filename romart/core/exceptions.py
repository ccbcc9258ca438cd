"""
Taxonomie des erreurs du moteur de recherche de jaquettes.

Les absences (plateforme non publiee, jeu inconnu) ne sont PAS des exceptions :
elles sont representees par None ou LookupResult(found=False). Seul prefetch
leve une erreur pour une plateforme absente, afin d'echouer avant le traitement.
"""

from typing import Optional


class RomArtError(Exception):
    """Classe de base de toutes les erreurs RomArt."""


class ConfigurationError(RomArtError):
    """Configuration invalide ou incomplete (fatale, jamais relancee)."""


class ScanError(RomArtError):
    """Repertoire de ROMs introuvable ou illisible."""


class CatalogUnavailableError(RomArtError):
    """Le catalogue distant n'a pas pu etre recupere (prefetch uniquement)."""


class PlatformNotFoundError(CatalogUnavailableError):
    """La plateforme n'est pas connue ou pas publiee dans le catalogue."""


class TransientNetworkError(RomArtError):
    """
    Erreur reseau transitoire (timeout, connexion, 5xx, reponse illisible).

    Relancee avec backoff exponentiel jusqu'a epuisement du budget de retry.

    Attributes:
        status_code: Code HTTP a l'origine de l'erreur, None pour une erreur de transport
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(RomArtError):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Distincte de TransientNetworkError : un 429 ne consomme pas le budget
    de retry des erreurs transitoires.

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        self.status_code = 429
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


class AuthenticationError(RomArtError):
    """Identifiants refuses par l'API (401/403) : jamais relance."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Identifiants ScreenScraper invalides (HTTP {status_code})")
