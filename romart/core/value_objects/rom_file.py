"""
Objet valeur pour un fichier ROM decouvert lors du scan.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RomFile:
    """
    Fichier ROM sur disque, candidat a l'identification.

    Immutable une fois scanne : le moteur le consomme en lecture seule.

    Attributs:
        path: Chemin absolu du fichier
        filename: Nom de fichier avec extension
        stem: Nom de fichier sans extension
        extension: Extension en minuscules, point inclus (ex: ".zip")
        size: Taille en octets
    """

    path: Path
    filename: str
    stem: str
    extension: str
    size: int

    @classmethod
    def from_path(cls, path: Path) -> "RomFile":
        """Construit un RomFile depuis un fichier existant."""
        absolute = path.resolve()
        return cls(
            path=absolute,
            filename=absolute.name,
            stem=absolute.stem,
            extension=absolute.suffix.lower(),
            size=absolute.stat().st_size,
        )
