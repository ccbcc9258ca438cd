"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe ROMART_,
et peut optionnellement être fournie via un fichier .env. Les sections imbriquées
utilisent le délimiteur "__" (ex: ROMART_SCREENSCRAPER__ENABLED=true).

ScreenScraper est désactivé par défaut et n'est utilisé que si des identifiants sont fournis.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from romart.adapters.api.screenscraper_client import ScreenScraperCredentials

# Trouver le fichier .env à la racine du projet (parent de romart/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class LibretroSourceSettings(BaseModel):
    """Source Libretro Thumbnails (active par défaut)."""

    enabled: bool = True
    priority: int = Field(default=1, ge=1, le=100)


class ScreenScraperSourceSettings(BaseModel):
    """Source ScreenScraper (inactive par défaut, identifiants requis)."""

    enabled: bool = False
    priority: int = Field(default=2, ge=1, le=100)
    credentials: Optional[ScreenScraperCredentials] = None
    rate_limit_ms: int = Field(default=1000, ge=100, le=10000)


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe ROMART_.
    Exemple : ROMART_SYSTEM_ID=3, ROMART_LOG_LEVEL=DEBUG

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="ROMART_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    # Répertoire des ROMs (les jaquettes vont dans <download_dir>/Imgs)
    download_dir: Path = Field(default=Path("."))

    # Scraping
    system_id: Optional[int] = Field(default=None)
    media_type: str = Field(default="box-2D")
    region_priority: list[str] = Field(default_factory=lambda: ["us", "wor", "eu", "jp"])
    skip_existing: bool = Field(default=True)

    # HTTP
    user_agent: str = Field(default="Wget/1.21.2")
    request_timeout_ms: int = Field(default=30000, ge=1000, le=300000)

    # Sources
    libretro: LibretroSourceSettings = Field(default_factory=LibretroSourceSettings)
    screenscraper: ScreenScraperSourceSettings = Field(
        default_factory=ScreenScraperSourceSettings
    )

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/romart.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("download_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def screenscraper_enabled(self) -> bool:
        """Vérifie si ScreenScraper est activé et configuré."""
        return self.screenscraper.enabled and self.screenscraper.credentials is not None

    @property
    def request_timeout(self) -> float:
        """Timeout des requêtes HTTP en secondes."""
        return self.request_timeout_ms / 1000.0
