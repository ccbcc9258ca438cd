"""
Entités de résultat de scraping.

Représentent l'issue du traitement de chaque ROM et le bilan d'un run,
consommés par le rendu CLI.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from romart.core.value_objects import RomFile


class ScrapeStatus(Enum):
    """Statut du traitement d'une ROM.

    Valeurs:
        DOWNLOADED: Jaquette téléchargée
        SKIPPED: Image déjà présente
        NOT_FOUND: Aucune source n'a identifié la ROM (ou média absent)
        FAILED: Erreur pendant le hash, la recherche ou le téléchargement
        PLANNED: Mode simulation, la ROM serait traitée
    """

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    PLANNED = "planned"


@dataclass
class ScrapeResult:
    """
    Résultat du traitement d'une ROM.

    Attributs :
        rom : Fichier ROM traité
        status : Issue du traitement
        image_path : Chemin de l'image téléchargée ou existante
        image_size : Taille de l'image téléchargée en octets
        content_hash : CRC32 calculé pour la ROM
        game_name : Nom du jeu dans la source
        source : Identifiant de l'adaptateur ayant fourni la jaquette
        best_effort : Correspondance approximative
        error : Message d'erreur
    """

    rom: RomFile
    status: ScrapeStatus
    image_path: Optional[Path] = None
    image_size: Optional[int] = None
    content_hash: Optional[str] = None
    game_name: Optional[str] = None
    source: Optional[str] = None
    best_effort: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class ScrapeSummary:
    """Statistiques d'un run de scraping."""

    total_roms: int
    downloaded: int
    skipped: int
    not_found: int
    failed: int
    best_effort: int
    elapsed_seconds: float

    @classmethod
    def from_results(
        cls, results: list[ScrapeResult], elapsed_seconds: float
    ) -> "ScrapeSummary":
        """Calcule le bilan à partir des résultats individuels."""

        def count(status: ScrapeStatus) -> int:
            return sum(1 for r in results if r.status is status)

        return cls(
            total_roms=len(results),
            downloaded=count(ScrapeStatus.DOWNLOADED),
            skipped=count(ScrapeStatus.SKIPPED),
            not_found=count(ScrapeStatus.NOT_FOUND),
            failed=count(ScrapeStatus.FAILED),
            best_effort=sum(
                1
                for r in results
                if r.status is ScrapeStatus.DOWNLOADED and r.best_effort
            ),
            elapsed_seconds=elapsed_seconds,
        )
