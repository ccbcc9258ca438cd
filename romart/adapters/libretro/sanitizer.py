"""
Normalisation des noms de fichiers selon la convention libretro-thumbnails.

Les caracteres & * / : < > ? \\ | " sont remplaces par "_" dans les noms
des vignettes du catalogue.
"""

import re

INVALID_CHARS = re.compile(r'[&*/:<>?\\|"]')


def sanitize_filename(stem: str) -> str:
    """
    Remplace les caracteres interdits par "_".

    Example:
        sanitize_filename("Q*Bert's Qubes (USA)")  # "Q_Bert's Qubes (USA)"
        sanitize_filename("What's My Name?")       # "What's My Name_"
    """
    return INVALID_CHARS.sub("_", stem)


def has_invalid_chars(stem: str) -> bool:
    """Indique si la normalisation modifierait le nom."""
    return INVALID_CHARS.search(stem) is not None
