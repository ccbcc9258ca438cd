"""
Noms des plateformes dans le catalogue Libretro Thumbnails.

Associe les IDs de plateforme (IDs de systeme ScreenScraper) aux noms des
depots libretro-thumbnails, et les types de media aux dossiers du catalogue.
"""

from typing import Optional

LIBRETRO_SYSTEMS: dict[int, str] = {
    # Sega
    1: "Sega - Mega Drive - Genesis",
    2: "Sega - Master System - Mark III",
    5: "Sega - Game Gear",
    19: "Sega - 32X",
    20: "Sega - Mega-CD - Sega CD",
    22: "Sega - Saturn",
    23: "Sega - Dreamcast",
    # Nintendo
    3: "Nintendo - Nintendo Entertainment System",
    4: "Nintendo - Super Nintendo Entertainment System",
    9: "Nintendo - Game Boy",
    10: "Nintendo - Game Boy Color",
    11: "Nintendo - Virtual Boy",
    12: "Nintendo - Game Boy Advance",
    14: "Nintendo - Nintendo 64",
    106: "Nintendo - Nintendo DS",
    # Sony
    57: "Sony - PlayStation",
    58: "Sony - PlayStation Portable",
    # Atari
    26: "Atari - 2600",
    27: "Atari - 7800",
    43: "Atari - Lynx",
    # NEC
    31: "NEC - PC Engine - TurboGrafx 16",
    114: "NEC - PC Engine CD - TurboGrafx-CD",
    # SNK
    82: "SNK - Neo Geo Pocket Color",
    142: "SNK - Neo Geo",
    # Autres
    48: "Coleco - ColecoVision",
    66: "Commodore - 64",
    75: "MAME",
    115: "Mattel - Intellivision",
    45: "Bandai - WonderSwan",
    46: "Bandai - WonderSwan Color",
}

SUPPORTED_SYSTEM_IDS: frozenset[int] = frozenset(LIBRETRO_SYSTEMS)

DEFAULT_FOLDER = "Named_Boxarts"

MEDIA_TYPE_FOLDERS: dict[str, str] = {
    "box-2D": "Named_Boxarts",
    "boxart": "Named_Boxarts",
    "ss": "Named_Snaps",
    "snap": "Named_Snaps",
    "screenshot": "Named_Snaps",
    "sstitle": "Named_Titles",
    "title": "Named_Titles",
}

# Dossiers parcourus par le repli CDN, une requete chacun
CDN_TARGET_FOLDERS: tuple[str, ...] = ("Named_Boxarts", "Named_Snaps", "Named_Titles")


def get_libretro_system_name(system_id: int) -> Optional[str]:
    """Nom du depot Libretro pour un ID de plateforme, None si non supporte."""
    return LIBRETRO_SYSTEMS.get(system_id)


def is_system_supported(system_id: int) -> bool:
    return system_id in LIBRETRO_SYSTEMS


def folder_for_media_type(media_type: str) -> str:
    """Dossier du catalogue pour un type de media (Named_Boxarts par defaut)."""
    return MEDIA_TYPE_FOLDERS.get(media_type, DEFAULT_FOLDER)
