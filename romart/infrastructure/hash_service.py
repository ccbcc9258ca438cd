"""
Service de calcul de hash CRC32 en streaming.

Le CRC32 est l'empreinte attendue par l'API d'identification ScreenScraper.

Algorithme :
    1. Lit le fichier par blocs de CHUNK_SIZE octets
    2. Chaque bloc est accumule dans le CRC courant (zlib.crc32 avec la
       valeur precedente comme graine), le premier bloc partant de 0
    3. Le resultat est rendu en 8 caracteres hexadecimaux MAJUSCULES

La lecture par blocs permet de hasher des fichiers plus gros que la memoire
disponible (images CD, ISO).
"""

import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from loguru import logger

# Taille des blocs de lecture : 64 Ko
CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class HashOutcome:
    """
    Resultat du hash d'un fichier dans un lot.

    Attributs:
        digest: CRC32 en hexadecimal, None si le calcul a echoue
        error: Message d'erreur si le calcul a echoue
    """

    digest: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True si le hash a ete calcule."""
        return self.digest is not None


def compute_crc32(file_path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """
    Calcule le CRC32 d'un fichier en streaming.

    Args :
        file_path : Chemin vers le fichier a hasher
        chunk_size : Taille de chaque bloc de lecture en octets (defaut 64 Ko)

    Retourne :
        CRC32 hexadecimal de 8 caracteres, majuscules, complete par des zeros

    Raises :
        OSError : Si le fichier ne peut pas etre ouvert ou si une lecture echoue
    """
    crc = 0
    with open(file_path, "rb") as f:
        while chunk := f.read(chunk_size):
            crc = zlib.crc32(chunk, crc)

    return f"{crc & 0xFFFFFFFF:08X}"


def compute_crc32_batch(
    file_paths: Iterable[Path],
    on_progress: Optional[Callable[[int, int, Optional[Path]], None]] = None,
    chunk_size: int = CHUNK_SIZE,
) -> list[tuple[Path, HashOutcome]]:
    """
    Calcule le CRC32 de plusieurs fichiers, sequentiellement.

    Un fichier illisible n'interrompt pas le lot : son HashOutcome porte
    l'erreur et un digest None, distinct de tout digest reel.

    Args :
        file_paths : Chemins des fichiers
        on_progress : Callback (termines, total, fichier courant) appele avant
                      chaque fichier, puis une derniere fois avec None
        chunk_size : Taille des blocs de lecture

    Retourne :
        Paires (chemin, HashOutcome) dans l'ordre d'entree, une par chemin
        fourni (un chemin repete apparait plusieurs fois)
    """
    paths = list(file_paths)
    total = len(paths)
    results: list[tuple[Path, HashOutcome]] = []

    for index, path in enumerate(paths):
        if on_progress is not None:
            on_progress(index, total, path)
        try:
            outcome = HashOutcome(digest=compute_crc32(path, chunk_size))
        except OSError as e:
            logger.warning(f"Echec du calcul CRC32 pour {path}: {e}")
            outcome = HashOutcome(error=str(e))
        results.append((path, outcome))

    if on_progress is not None:
        on_progress(total, total, None)
    return results
