"""
Journalisation de RomArt via loguru.

Deux sorties, construites depuis Settings :
- Console (stderr) : colorée, au niveau ROMART_LOG_LEVEL
- Fichier : JSON avec rotation, toujours en DEBUG (détail de la chaîne de repli)

Pendant l'affichage Rich d'un scraping, quiet_console() coupe sur la console
les messages du package romart ; le fichier continue de tout recevoir.
"""

import sys
from contextlib import contextmanager
from typing import Iterator

from loguru import logger

from romart.config import Settings

LOGGER_NAMESPACE = "romart"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | "
    "<level>{message}</level>"
)


class _ConsoleFilter:
    """Filtre de la sortie console, masquable pendant un rendu Rich."""

    def __init__(self) -> None:
        self.muted = False

    def __call__(self, record) -> bool:
        if not self.muted:
            return True
        name = record["name"] or ""
        return not (name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."))


_console_filter = _ConsoleFilter()


def configure_logging(settings: Settings) -> None:
    """Remplace le handler par défaut par les sorties console et fichier.

    Les échecs de recherche par source (absence ou erreur interne) ne sont
    distingués que dans ces logs : le résultat d'une recherche ne porte que
    "trouvé" ou "non trouvé".
    """
    logger.remove()
    _console_filter.muted = False

    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=CONSOLE_FORMAT,
        filter=_console_filter,
        colorize=True,
    )

    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        settings.log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=settings.log_rotation_size,
        retention=settings.log_retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug(
        "Logging configuré",
        log_file=str(settings.log_file),
        system_id=settings.system_id,
    )


@contextmanager
def quiet_console(verbose: bool = False) -> Iterator[None]:
    """
    Masque sur la console les logs du package pendant un affichage Rich.

    Args:
        verbose: Si True (option --verbose), la console reste inchangée

    Usage:
        with quiet_console(verbose):
            await service.run(...)
    """
    if verbose:
        yield
        return

    previous = _console_filter.muted
    _console_filter.muted = True
    try:
        yield
    finally:
        _console_filter.muted = previous
